"""Typed request/result models shared across the calculation services.

Inputs and outputs are Pydantic models (see :mod:`.api`); intermediate values
produced by the calculators are lightweight dataclasses defined here so the
arithmetic modules do not depend on serialisation concerns.
"""

from __future__ import annotations

from dataclasses import dataclass

from .api import (
    CALCULATION_REQUEST_ADAPTER,
    REGIME_KEYS,
    CalculationRegime,
    CalculationRequest,
    CalculationResult,
    ContributionBreakdown,
    ContributionInput,
    CorporateRequest,
    EventCategory,
    FlatRateRequest,
    Installments,
    OrdinaryIndividualRequest,
    SavingsPlan,
    ScheduleEvent,
    ScheduleRow,
    ScheduleSummary,
    VatRegime,
    format_validation_error,
    validation_issues,
)

__all__ = [
    "CALCULATION_REQUEST_ADAPTER",
    "REGIME_KEYS",
    "CalculationRegime",
    "CalculationRequest",
    "CalculationResult",
    "ContributionAmount",
    "ContributionBreakdown",
    "ContributionFlags",
    "ContributionInput",
    "CorporateRequest",
    "EventCategory",
    "FlatRateRequest",
    "Installments",
    "OrdinaryIndividualRequest",
    "ProgressiveTax",
    "SavingsPlan",
    "ScheduleEvent",
    "ScheduleRow",
    "ScheduleSummary",
    "VatRegime",
    "format_validation_error",
    "validation_issues",
]


@dataclass(slots=True, frozen=True)
class ProgressiveTax:
    """Outcome of applying a bracket table to a taxable amount."""

    gross_tax: float
    effective_rate: float


@dataclass(slots=True, frozen=True)
class ContributionFlags:
    """Circumstances that alter the contribution computation."""

    reduction: str = "none"
    has_other_coverage: bool = False
    is_pensioner: bool = False
    reverse_charge_uplift: bool = False

    @classmethod
    def from_input(cls, selection: ContributionInput) -> ContributionFlags:
        return cls(
            reduction=selection.reduction,
            has_other_coverage=selection.has_other_coverage,
            is_pensioner=selection.is_pensioner,
            reverse_charge_uplift=selection.reverse_charge_uplift,
        )


@dataclass(slots=True)
class ContributionAmount:
    """Social contribution amounts before rounding."""

    regime: str | None = None
    base_amount: float = 0.0
    calculated_amount: float = 0.0
    rate: float = 0.0
    minimum_contribution: float = 0.0
    maximum_contribution: float = 0.0
    integrative: float = 0.0
    maternity: float = 0.0
    reduction_factor: float = 1.0

    def total(self) -> float:
        return self.calculated_amount + self.integrative + self.maternity
