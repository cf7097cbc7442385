"""Calculator for limited companies (SRL): corporate and regional production tax."""

from __future__ import annotations

import logging

from smartrate.backend.config.schema import CorporateConfig, YearConfiguration
from smartrate.backend.models import (
    CalculationRegime,
    CalculationResult,
    ContributionAmount,
    CorporateRequest,
)

from .individual import calculate_vat_balance
from .result import assemble_result
from .utils import split_advances

_LOGGER = logging.getLogger(__name__)


def resolve_regional_rate(
    region: str | None, config: CorporateConfig, warnings: list[str]
) -> float:
    """Return the regional production tax rate for ``region``."""

    rate = config.regional_rate_for(region)
    if rate is None:
        _LOGGER.info(
            "Unknown region %r; using default regional rate %s",
            region,
            config.default_regional_rate,
        )
        warnings.append("unknown_region")
        return config.default_regional_rate
    return rate


def calculate_administrator_contribution(compensation: float, config: CorporateConfig) -> float:
    """Return contributions due on administrator compensation, clamped to the base limits."""

    if compensation <= 0:
        return 0.0
    limits = config.administrator
    base = min(max(compensation, limits.minimum_base), limits.maximum_base)
    return base * limits.rate


def calculate_employee_contribution(
    employee_count: int, employee_costs: float, config: CorporateConfig
) -> float:
    if employee_count <= 0 or employee_costs <= 0:
        return 0.0
    return employee_costs * config.employee_contribution_rate


def _administrator_breakdown(
    compensation: float, amount: float, config: CorporateConfig
) -> ContributionAmount:
    """Describe the administrator contribution; employee costs are reported in details."""

    if compensation <= 0:
        return ContributionAmount()
    limits = config.administrator
    return ContributionAmount(
        base_amount=min(max(compensation, limits.minimum_base), limits.maximum_base),
        calculated_amount=amount,
        rate=limits.rate,
        minimum_contribution=limits.minimum_base * limits.rate,
        maximum_contribution=limits.maximum_base * limits.rate,
    )


def calculate_corporate(
    request: CorporateRequest, config: YearConfiguration
) -> CalculationResult:
    """Compute corporate tax, regional tax, contributions and VAT for a company."""

    warnings: list[str] = []
    corporate = config.corporate

    gross_profit = request.revenue - request.operating_costs - request.employee_costs
    taxable_income = max(0.0, gross_profit - request.administrator_compensation)
    corporate_tax = taxable_income * corporate.corporate_tax_rate

    regional_rate = resolve_regional_rate(request.region, corporate, warnings)
    regional_base = max(
        0.0, request.revenue - (request.operating_costs - request.employee_costs)
    )
    regional_tax = regional_base * regional_rate

    administrator_contribution = calculate_administrator_contribution(
        request.administrator_compensation, corporate
    )
    employee_contribution = calculate_employee_contribution(
        request.employee_count, request.employee_costs, corporate
    )
    total_contributions = administrator_contribution + employee_contribution

    vat_amount = calculate_vat_balance(
        request.revenue,
        request.operating_costs,
        corporate.vat_rate,
        vat_debt=request.vat_debt if request.has_vat_debt else 0.0,
    )

    corporate_base = (
        request.previous_year_corporate_tax
        if request.previous_year_corporate_tax is not None
        else corporate_tax
    )
    regional_advance_base = (
        request.previous_year_regional_tax
        if request.previous_year_regional_tax is not None
        else regional_tax
    )
    corporate_first, corporate_second = split_advances(corporate_base, config.advances)
    regional_first, regional_second = split_advances(regional_advance_base, config.advances)

    total_taxes = corporate_tax + regional_tax
    effective_rate = corporate_tax / taxable_income if taxable_income > 0 else 0.0

    return assemble_result(
        regime=CalculationRegime.CORPORATE,
        year=request.year,
        locale=request.locale,
        revenue=request.revenue,
        taxable_income=taxable_income,
        gross_tax=corporate_tax,
        net_tax=corporate_tax,
        effective_rate=effective_rate,
        tax_rate=corporate.corporate_tax_rate,
        contribution=_administrator_breakdown(
            request.administrator_compensation, administrator_contribution, corporate
        ),
        total_taxes=total_taxes,
        total_contributions=total_contributions,
        installments=(
            corporate_first + regional_first,
            corporate_second + regional_second,
        ),
        advances_paid=request.advances_paid,
        current_balance=request.current_balance,
        defer_balance=request.defer_balance,
        vat_amount=vat_amount,
        vat_regime=request.vat_regime,
        details={
            "gross_profit": gross_profit,
            "corporate_tax": corporate_tax,
            "regional_tax": regional_tax,
            "regional_base": regional_base,
            "administrator_contribution": administrator_contribution,
            "employee_contribution": employee_contribution,
            "corporate_first_advance": corporate_first,
            "corporate_second_advance": corporate_second,
            "regional_first_advance": regional_first,
            "regional_second_advance": regional_second,
        },
        warnings=warnings,
    )


__all__ = [
    "calculate_administrator_contribution",
    "calculate_corporate",
    "calculate_employee_contribution",
    "resolve_regional_rate",
]
