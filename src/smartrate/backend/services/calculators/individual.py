"""Calculator for the ordinary individual regime (progressive income tax)."""

from __future__ import annotations

import logging

from smartrate.backend.config.schema import YearConfiguration
from smartrate.backend.models import (
    CalculationRegime,
    CalculationResult,
    ContributionFlags,
    OrdinaryIndividualRequest,
)

from .contributions import ContributionRegime, calculate_contribution
from .result import assemble_result
from .utils import calculate_progressive_tax, split_advances

_LOGGER = logging.getLogger(__name__)


def calculate_vat_balance(
    revenue: float,
    expenses: float,
    vat_rate: float,
    *,
    vat_on_sales: float | None = None,
    vat_on_purchases: float | None = None,
    vat_debt: float = 0.0,
) -> float:
    """Return VAT payable for the year.

    Output and input VAT default to ``vat_rate`` applied to revenue and
    expenses when not declared explicitly; carried-over debt is added on top.
    """

    sales = vat_on_sales if vat_on_sales is not None else revenue * vat_rate
    purchases = vat_on_purchases if vat_on_purchases is not None else expenses * vat_rate
    return max(0.0, sales - purchases) + max(0.0, vat_debt)


def calculate_individual(
    request: OrdinaryIndividualRequest, config: YearConfiguration
) -> CalculationResult:
    """Compute income tax, surcharges, contributions and VAT for an individual."""

    warnings: list[str] = []
    individual = config.individual

    business_income = max(0.0, request.revenue - request.documented_expenses)
    taxable_income = business_income + request.other_income + request.employment_income

    progressive = calculate_progressive_tax(taxable_income, individual.brackets)
    net_tax = max(0.0, progressive.gross_tax - request.withholdings)

    regional_surcharge = taxable_income * individual.regional_surcharge_rate
    municipal_surcharge = taxable_income * individual.municipal_surcharge_rate

    selection = request.contribution
    if ContributionRegime.resolve(selection.regime) is None:
        _LOGGER.info("Unknown contribution regime %r; contribution set to zero", selection.regime)
        warnings.append("unknown_contribution_regime")
    contribution = calculate_contribution(
        business_income,
        selection.regime,
        ContributionFlags.from_input(selection),
        config.contributions,
    )

    vat_amount = calculate_vat_balance(
        request.revenue,
        request.documented_expenses,
        individual.vat_rate,
        vat_on_sales=request.vat_on_sales,
        vat_on_purchases=request.vat_on_purchases,
        vat_debt=request.vat_debt if request.has_vat_debt else 0.0,
    )

    if request.previous_year_tax is not None:
        advance_base = request.previous_year_tax
    else:
        advance_base = net_tax * individual.estimated_liability_share

    total_taxes = net_tax + regional_surcharge + municipal_surcharge

    return assemble_result(
        regime=CalculationRegime.ORDINARY_INDIVIDUAL,
        year=request.year,
        locale=request.locale,
        revenue=request.revenue,
        taxable_income=taxable_income,
        gross_tax=progressive.gross_tax,
        net_tax=net_tax,
        effective_rate=progressive.effective_rate,
        contribution=contribution,
        total_taxes=total_taxes,
        total_contributions=contribution.total(),
        installments=split_advances(advance_base, config.advances),
        advances_paid=request.advances_paid,
        current_balance=request.current_balance,
        defer_balance=request.defer_balance,
        vat_amount=vat_amount,
        vat_regime=request.vat_regime,
        details={
            "business_income": business_income,
            "regional_surcharge": regional_surcharge,
            "municipal_surcharge": municipal_surcharge,
            "withholdings": request.withholdings,
        },
        warnings=warnings,
    )


__all__ = ["calculate_individual", "calculate_vat_balance"]
