"""Assemble rounded calculation results from raw calculator figures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from smartrate.backend.models import (
    CalculationRegime,
    CalculationResult,
    ContributionAmount,
    ContributionBreakdown,
    Installments,
    VatRegime,
)

from .utils import round_currency, round_rate


def build_contribution_breakdown(amount: ContributionAmount) -> ContributionBreakdown:
    return ContributionBreakdown(
        regime=amount.regime,
        base_amount=round_currency(amount.base_amount),
        calculated_amount=round_currency(amount.calculated_amount),
        rate=round_rate(amount.rate),
        minimum_contribution=round_currency(amount.minimum_contribution),
        maximum_contribution=round_currency(amount.maximum_contribution),
        integrative=round_currency(amount.integrative),
        maternity=round_currency(amount.maternity),
        reduction_factor=round_rate(amount.reduction_factor),
    )


def assemble_result(
    *,
    regime: CalculationRegime,
    year: int,
    locale: str,
    revenue: float,
    taxable_income: float,
    gross_tax: float,
    net_tax: float,
    effective_rate: float,
    contribution: ContributionAmount,
    total_taxes: float,
    total_contributions: float,
    installments: tuple[float, float],
    advances_paid: float,
    current_balance: float | None,
    vat_amount: float = 0.0,
    vat_regime: VatRegime = VatRegime.QUARTERLY,
    defer_balance: bool = False,
    tax_rate: float | None = None,
    details: Mapping[str, float] | None = None,
    warnings: Sequence[str] = (),
) -> CalculationResult:
    """Round every figure and derive the totals shared by all regimes.

    ``balance_due`` is the portion of this year's taxes not already covered by
    advances; ``total_due`` adds contributions and VAT to the taxes.
    """

    total_due = total_taxes + total_contributions + vat_amount
    balance_due = max(0.0, total_taxes - advances_paid)
    first, second = installments

    return CalculationResult(
        regime=regime,
        year=year,
        locale=locale,
        revenue=round_currency(revenue),
        taxable_income=round_currency(max(0.0, taxable_income)),
        gross_tax=round_currency(gross_tax),
        net_tax=round_currency(net_tax),
        effective_rate=round_rate(effective_rate),
        tax_rate=round_rate(tax_rate) if tax_rate is not None else None,
        contribution=build_contribution_breakdown(contribution),
        vat_amount=round_currency(vat_amount),
        vat_quarterly=round_currency(vat_amount / 4),
        vat_regime=vat_regime,
        installments=Installments(
            first=round_currency(first),
            second=round_currency(second),
        ),
        balance_due=round_currency(balance_due),
        total_taxes=round_currency(total_taxes),
        total_contributions=round_currency(total_contributions),
        total_due=round_currency(total_due),
        monthly_accrual=round_currency(total_due / 12),
        current_balance=round_currency(current_balance or 0.0),
        defer_balance=defer_balance,
        details={key: round_currency(value) for key, value in (details or {}).items()},
        warnings=tuple(warnings),
    )


__all__ = ["assemble_result", "build_contribution_breakdown"]
