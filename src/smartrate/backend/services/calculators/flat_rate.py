"""Calculator for the flat-rate (forfettario) regime."""

from __future__ import annotations

import logging

from smartrate.backend.config.schema import FlatRateConfig, YearConfiguration
from smartrate.backend.models import (
    CalculationRegime,
    CalculationResult,
    ContributionFlags,
    FlatRateRequest,
)

from .contributions import ContributionRegime, calculate_contribution
from .result import assemble_result
from .utils import split_advances

_LOGGER = logging.getLogger(__name__)


def resolve_coefficient(
    request: FlatRateRequest, config: FlatRateConfig, warnings: list[str]
) -> float:
    """Return the profitability coefficient for the declared activity."""

    if request.coefficient is not None:
        return request.coefficient

    coefficient = config.coefficient_for(request.category)
    if coefficient is None:
        _LOGGER.info(
            "Unknown activity category %r; using default coefficient %s",
            request.category,
            config.default_coefficient,
        )
        warnings.append("unknown_category")
        return config.default_coefficient
    return coefficient


def resolve_tax_rate(request: FlatRateRequest, config: FlatRateConfig) -> float:
    """Return the substitute tax rate, honouring the start-up reduction."""

    if not request.is_startup:
        return config.standard_rate

    start_year = request.start_year if request.start_year is not None else request.year
    years_active = request.year - start_year
    if years_active <= config.startup_years_limit:
        return config.startup_rate
    return config.standard_rate


def calculate_flat_rate(
    request: FlatRateRequest, config: YearConfiguration
) -> CalculationResult:
    """Compute substitute tax and contributions for a flat-rate taxpayer."""

    warnings: list[str] = []
    flat_rate = config.flat_rate

    coefficient = resolve_coefficient(request, flat_rate, warnings)
    rate = resolve_tax_rate(request, flat_rate)

    taxable_income = max(0.0, request.revenue * coefficient)
    tax = taxable_income * rate

    selection = request.contribution
    if ContributionRegime.resolve(selection.regime) is None:
        _LOGGER.info("Unknown contribution regime %r; contribution set to zero", selection.regime)
        warnings.append("unknown_contribution_regime")
    contribution = calculate_contribution(
        taxable_income,
        selection.regime,
        ContributionFlags.from_input(selection),
        config.contributions,
    )

    advance_base = request.previous_year_tax if request.previous_year_tax is not None else tax

    return assemble_result(
        regime=CalculationRegime.FLAT_RATE,
        year=request.year,
        locale=request.locale,
        revenue=request.revenue,
        taxable_income=taxable_income,
        gross_tax=tax,
        net_tax=tax,
        effective_rate=rate if taxable_income > 0 else 0.0,
        tax_rate=rate,
        contribution=contribution,
        total_taxes=tax,
        total_contributions=contribution.total(),
        installments=split_advances(advance_base, config.advances),
        advances_paid=request.advances_paid,
        current_balance=request.current_balance,
        defer_balance=request.defer_balance,
        details={"substitute_tax": tax},
        warnings=warnings,
    )


__all__ = ["calculate_flat_rate", "resolve_coefficient", "resolve_tax_rate"]
