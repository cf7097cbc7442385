"""Pydantic models describing the engine's public input and output surface."""

from __future__ import annotations

import datetime as dt
from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    TypeAdapter,
    ValidationError,
    field_validator,
)

__all__ = [
    "REGIME_KEYS",
    "CalculationRegime",
    "VatRegime",
    "ContributionInput",
    "FlatRateRequest",
    "OrdinaryIndividualRequest",
    "CorporateRequest",
    "CalculationRequest",
    "CALCULATION_REQUEST_ADAPTER",
    "ContributionBreakdown",
    "Installments",
    "CalculationResult",
    "EventCategory",
    "ScheduleEvent",
    "ScheduleRow",
    "ScheduleSummary",
    "SavingsPlan",
    "format_validation_error",
    "validation_issues",
]


class CalculationRegime(str, Enum):
    """Fiscal regimes handled by the engine."""

    FLAT_RATE = "flat_rate"
    ORDINARY_INDIVIDUAL = "ordinary_individual"
    CORPORATE = "corporate"


REGIME_KEYS = tuple(regime.value for regime in CalculationRegime)


class VatRegime(str, Enum):
    """How often VAT is settled with the tax authority."""

    MONTHLY = "monthly"
    QUARTERLY = "quarterly"


def _normalise_key(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _vat_regime_key(value: Any) -> Any:
    if isinstance(value, VatRegime):
        return value
    key = _normalise_key(value)
    return key.lower() if key else VatRegime.QUARTERLY.value


class ContributionInput(BaseModel):
    """Social contribution selection for self-employed regimes."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    regime: str | None = None
    reduction: str = "none"
    has_other_coverage: bool = False
    is_pensioner: bool = False
    reverse_charge_uplift: bool = False

    @field_validator("regime", mode="before")
    @classmethod
    def _normalise_regime(cls, value: Any) -> str | None:
        key = _normalise_key(value)
        return key.lower() if key else None

    @field_validator("reduction", mode="before")
    @classmethod
    def _normalise_reduction(cls, value: Any) -> str:
        key = _normalise_key(value)
        return key.lower() if key else "none"


class _RequestBase(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    year: int = Field(..., ge=2000, le=2100)
    locale: str = "en"
    revenue: float = Field(default=0.0, ge=0)
    advances_paid: float = Field(default=0.0, ge=0)
    current_balance: float | None = Field(default=None, ge=0)
    defer_balance: bool = False

    @field_validator("locale", mode="before")
    @classmethod
    def _normalise_locale(cls, value: Any) -> str:
        return _normalise_key(value) or "en"


class FlatRateRequest(_RequestBase):
    """Input for the flat-rate (forfettario) regime."""

    regime: Literal["flat_rate"]
    category: str | None = None
    coefficient: float | None = Field(default=None, gt=0, le=1)
    is_startup: bool = False
    start_year: int | None = Field(default=None, ge=1900, le=2100)
    contribution: ContributionInput = Field(default_factory=ContributionInput)
    previous_year_tax: float | None = Field(default=None, ge=0)

    @field_validator("category", mode="before")
    @classmethod
    def _normalise_category(cls, value: Any) -> str | None:
        key = _normalise_key(value)
        return key.upper() if key else None


class OrdinaryIndividualRequest(_RequestBase):
    """Input for the ordinary individual regime."""

    regime: Literal["ordinary_individual"]
    documented_expenses: float = Field(default=0.0, ge=0)
    other_income: float = Field(default=0.0, ge=0)
    employment_income: float = Field(default=0.0, ge=0)
    withholdings: float = Field(default=0.0, ge=0)
    contribution: ContributionInput = Field(default_factory=ContributionInput)
    vat_on_sales: float | None = Field(default=None, ge=0)
    vat_on_purchases: float | None = Field(default=None, ge=0)
    has_vat_debt: bool = False
    vat_debt: float = Field(default=0.0, ge=0)
    vat_regime: VatRegime = VatRegime.QUARTERLY
    previous_year_tax: float | None = Field(default=None, ge=0)

    @field_validator("vat_regime", mode="before")
    @classmethod
    def _normalise_vat_regime(cls, value: Any) -> Any:
        return _vat_regime_key(value)


class CorporateRequest(_RequestBase):
    """Input for the corporate (SRL) regime."""

    regime: Literal["corporate"]
    operating_costs: float = Field(default=0.0, ge=0)
    employee_count: int = Field(default=0, ge=0)
    employee_costs: float = Field(default=0.0, ge=0)
    administrator_compensation: float = Field(default=0.0, ge=0)
    region: str | None = None
    has_vat_debt: bool = False
    vat_debt: float = Field(default=0.0, ge=0)
    previous_year_corporate_tax: float | None = Field(default=None, ge=0)
    previous_year_regional_tax: float | None = Field(default=None, ge=0)
    vat_regime: VatRegime = VatRegime.QUARTERLY

    @field_validator("region", mode="before")
    @classmethod
    def _normalise_region(cls, value: Any) -> str | None:
        return _normalise_key(value)

    @field_validator("vat_regime", mode="before")
    @classmethod
    def _normalise_vat_regime(cls, value: Any) -> Any:
        return _vat_regime_key(value)


CalculationRequest = Annotated[
    Union[FlatRateRequest, OrdinaryIndividualRequest, CorporateRequest],
    Field(discriminator="regime"),
]

CALCULATION_REQUEST_ADAPTER: TypeAdapter[
    FlatRateRequest | OrdinaryIndividualRequest | CorporateRequest
] = TypeAdapter(CalculationRequest)


class _ResultModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class ContributionBreakdown(_ResultModel):
    """Social contribution amounts computed for the selected regime."""

    regime: str | None = None
    base_amount: float = 0.0
    calculated_amount: float = 0.0
    rate: float = 0.0
    minimum_contribution: float = 0.0
    maximum_contribution: float = 0.0
    integrative: float = 0.0
    maternity: float = 0.0
    reduction_factor: float = 1.0


class Installments(_ResultModel):
    """Advance installments due on the two statutory dates."""

    first: float = 0.0
    second: float = 0.0


class CalculationResult(_ResultModel):
    """Full result of a regime calculation."""

    regime: CalculationRegime
    year: int
    locale: str = "en"
    revenue: float
    taxable_income: float
    gross_tax: float
    net_tax: float
    effective_rate: float
    tax_rate: float | None = None
    contribution: ContributionBreakdown
    vat_amount: float = 0.0
    vat_quarterly: float = 0.0
    vat_regime: VatRegime = VatRegime.QUARTERLY
    installments: Installments
    balance_due: float
    total_taxes: float
    total_contributions: float
    total_due: float
    monthly_accrual: float
    current_balance: float = 0.0
    defer_balance: bool = False
    details: Mapping[str, float] = Field(default_factory=dict)
    warnings: tuple[str, ...] = ()


class EventCategory(str, Enum):
    """Classification of schedule events."""

    TAX = "tax"
    CONTRIBUTION = "contribution"
    VAT = "vat"
    ACCRUAL = "accrual"


class ScheduleEvent(_ResultModel):
    """A dated cash movement: a statutory payment or a monthly set-aside."""

    date: dt.date
    amount: float
    category: EventCategory
    code: str
    description: str
    is_income: bool = False


class ScheduleRow(_ResultModel):
    """One simulated step of the running balance."""

    date: dt.date
    amount: float
    category: EventCategory
    code: str
    description: str
    previous_balance: float
    new_balance: float
    deficit: float
    required_payment: float
    is_income: bool


class ScheduleSummary(_ResultModel):
    """Aggregate view of a simulated schedule."""

    opening_balance: float
    closing_balance: float
    total_payments: float
    total_accruals: float
    total_required_payment: float
    shortfall_count: int
    max_required_payment: float


class SavingsPlan(_ResultModel):
    """Monthly set-aside needed to cover an outstanding liability."""

    covered: bool
    deficit: float
    monthly_amount: float


def validation_issues(error: ValidationError) -> list[tuple[str, str]]:
    """Return ``(field, message)`` pairs for each validation issue.

    Discriminated-union errors carry the regime tag as the first location
    element; it is dropped so fields read the same for every regime.
    """

    issues: list[tuple[str, str]] = []
    for issue in error.errors():
        parts = [str(part) for part in issue.get("loc", ())]
        if parts and parts[0] in REGIME_KEYS:
            parts = parts[1:]
        message = issue.get("msg", "Invalid value")
        if "greater than or equal to 0" in message.lower():
            message = "value cannot be negative"
        issues.append((".".join(parts), message))
    return issues


def format_validation_error(error: ValidationError) -> str:
    """Return a concise human-readable description of validation issues."""

    messages = [
        f"{location}: {message}" if location else message
        for location, message in validation_issues(error)
    ]
    details = "; ".join(messages) if messages else str(error)
    return f"Invalid calculation payload: {details}"
