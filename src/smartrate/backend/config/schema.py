"""Pydantic models describing the fiscal year configuration schema."""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Sequence

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    computed_field,
    field_validator,
    model_validator,
)
from typing_extensions import Self


class ConfigurationError(ValueError):
    """Raised when configuration values violate schema expectations."""


class ImmutableModel(BaseModel):
    """Base class that freezes instances and rejects unknown fields."""

    model_config = ConfigDict(frozen=True, extra="forbid", populate_by_name=True)


def _require_rate(value: float, label: str) -> None:
    if value < 0 or value > 1:
        raise ConfigurationError(f"{label} must be between 0 and 1")


def _coerce_rate_mapping(value: Any, label: str) -> Mapping[str, float]:
    if not isinstance(value, Mapping):
        raise ConfigurationError(f"'{label}' must be a mapping")
    return {str(key).strip().upper(): float(rate) for key, rate in value.items()}


class TaxBracket(ImmutableModel):
    """Represents a single progressive tax bracket."""

    lower_bound: float = Field(default=0.0, alias="lower")
    upper_bound: float | None = Field(default=None, alias="upper")
    rate: float

    @model_validator(mode="after")
    def _validate_values(self) -> TaxBracket:
        if self.rate < 0:
            raise ConfigurationError("Tax rates must be non-negative")
        if self.lower_bound < 0:
            raise ConfigurationError("Lower bounds must be non-negative")
        if self.upper_bound is not None and self.upper_bound <= self.lower_bound:
            raise ConfigurationError("Upper bounds must exceed the lower bound")
        return self


class FlatRateConfig(ImmutableModel):
    """Settings for the flat-rate (forfettario) regime."""

    coefficients: Mapping[str, float]
    default_coefficient: float
    standard_rate: float
    startup_rate: float
    startup_years_limit: int
    revenue_ceiling: float

    @field_validator("coefficients", mode="before")
    @classmethod
    def _coerce_coefficients(cls, value: Any) -> Mapping[str, float]:
        return _coerce_rate_mapping(value, "coefficients")

    @model_validator(mode="after")
    def _validate_config(self) -> FlatRateConfig:
        if not self.coefficients:
            raise ConfigurationError("Flat-rate configuration requires coefficients")
        _require_rate(self.default_coefficient, "'default_coefficient'")
        _require_rate(self.standard_rate, "'standard_rate'")
        _require_rate(self.startup_rate, "'startup_rate'")
        if self.startup_years_limit < 0:
            raise ConfigurationError("'startup_years_limit' must be non-negative")
        if self.revenue_ceiling <= 0:
            raise ConfigurationError("'revenue_ceiling' must be positive")
        return self

    def coefficient_for(self, category: str | None) -> float | None:
        """Return the coefficient for ``category`` or ``None`` when unknown."""

        if not category:
            return None
        return self.coefficients.get(category.strip().upper())


class AdvanceConfig(ImmutableModel):
    """Split of advance installments between the two statutory dates."""

    first_share: float = 0.40
    second_share: float = 0.60

    @model_validator(mode="after")
    def _validate_shares(self) -> AdvanceConfig:
        _require_rate(self.first_share, "'first_share'")
        _require_rate(self.second_share, "'second_share'")
        return self


class IndividualConfig(ImmutableModel):
    """Settings for the ordinary individual regime."""

    brackets: Sequence[TaxBracket] = Field(alias="tax_brackets")
    regional_surcharge_rate: float
    municipal_surcharge_rate: float
    vat_rate: float
    estimated_liability_share: float = 1.0

    @model_validator(mode="after")
    def _validate_config(self) -> IndividualConfig:
        if not self.brackets:
            raise ConfigurationError("Individual configuration must include 'tax_brackets'")
        _require_rate(self.regional_surcharge_rate, "'regional_surcharge_rate'")
        _require_rate(self.municipal_surcharge_rate, "'municipal_surcharge_rate'")
        _require_rate(self.vat_rate, "'vat_rate'")
        _require_rate(self.estimated_liability_share, "'estimated_liability_share'")
        return self


class AdministratorContributionConfig(ImmutableModel):
    """Contribution base limits for company administrators."""

    minimum_base: float
    maximum_base: float
    rate: float

    @model_validator(mode="after")
    def _validate_limits(self) -> AdministratorContributionConfig:
        if self.minimum_base < 0:
            raise ConfigurationError("'minimum_base' must be non-negative")
        if self.maximum_base < self.minimum_base:
            raise ConfigurationError("'maximum_base' cannot be below 'minimum_base'")
        _require_rate(self.rate, "Administrator contribution rate")
        return self


class CorporateConfig(ImmutableModel):
    """Settings for the corporate (SRL) regime."""

    corporate_tax_rate: float
    regional_rates: Mapping[str, float]
    default_regional_rate: float
    administrator: AdministratorContributionConfig
    employee_contribution_rate: float
    vat_rate: float

    @field_validator("regional_rates", mode="before")
    @classmethod
    def _coerce_regional_rates(cls, value: Any) -> Mapping[str, float]:
        return _coerce_rate_mapping(value, "regional_rates")

    @model_validator(mode="after")
    def _validate_config(self) -> CorporateConfig:
        _require_rate(self.corporate_tax_rate, "'corporate_tax_rate'")
        _require_rate(self.default_regional_rate, "'default_regional_rate'")
        _require_rate(self.employee_contribution_rate, "'employee_contribution_rate'")
        _require_rate(self.vat_rate, "'vat_rate'")
        return self

    def regional_rate_for(self, region: str | None) -> float | None:
        """Return the regional rate for ``region`` or ``None`` when unknown."""

        if not region:
            return None
        key = region.strip().upper().replace(" ", "_").replace("-", "_")
        return self.regional_rates.get(key)


class GestioneSeparataConfig(ImmutableModel):
    """Separate management scheme for professionals without a fund."""

    full_rate: float
    reduced_rate: float
    maximum_base: float
    reverse_charge_uplift: float = 0.04


class CassaForenseConfig(ImmutableModel):
    """Lawyers' fund: two-tier subjective rate plus integrative contribution."""

    subjective_rate: float
    subjective_rate_high: float
    subjective_threshold: float
    integrative_rate: float
    minimum_subjective: float
    minimum_integrative: float


class InarcassaConfig(ImmutableModel):
    """Engineers' and architects' fund."""

    subjective_rate: float
    maximum_subjective_base: float
    integrative_rate: float
    minimum_integrative: float
    maternity: float


class IVSConfig(ImmutableModel):
    """Artisans'/traders' scheme with a fixed minimum and two-tier excess."""

    minimum_income: float
    fixed_contribution: float
    rate: float
    rate_high: float
    threshold: float
    surcharge_rate: float = 0.0

    @model_validator(mode="after")
    def _validate_threshold(self) -> IVSConfig:
        if self.threshold <= self.minimum_income:
            raise ConfigurationError("IVS 'threshold' must exceed 'minimum_income'")
        return self


class ContributionsConfig(ImmutableModel):
    """Per-regime social contribution constants."""

    gestione_separata: GestioneSeparataConfig
    cassa_forense: CassaForenseConfig
    inarcassa: InarcassaConfig
    ivs_artigiani: IVSConfig
    ivs_commercianti: IVSConfig
    reductions: Mapping[str, float] = Field(
        default_factory=lambda: {"none": 1.0, "reduction_35": 0.65, "reduction_50": 0.50}
    )

    @field_validator("reductions", mode="before")
    @classmethod
    def _coerce_reductions(cls, value: Any) -> Mapping[str, float]:
        if not isinstance(value, Mapping):
            raise ConfigurationError("'reductions' must be a mapping")
        return {str(key).strip().lower(): float(factor) for key, factor in value.items()}


class DeadlineDate(ImmutableModel):
    """Calendar day of a statutory deadline relative to the fiscal year."""

    month: int = Field(ge=1, le=12)
    day: int = Field(ge=1, le=31)
    year_offset: int = Field(default=0, ge=0, le=1)

    @model_validator(mode="after")
    def _validate_day(self) -> DeadlineDate:
        try:
            date(2024, self.month, self.day)
        except ValueError as exc:
            raise ConfigurationError(
                f"Invalid deadline {self.month:02d}-{self.day:02d}"
            ) from exc
        return self

    def resolve(self, fiscal_year: int) -> date:
        return date(fiscal_year + self.year_offset, self.month, self.day)


class DeadlineConfig(ImmutableModel):
    """Statutory payment calendar."""

    tax_balance_first_advance: DeadlineDate
    tax_balance_deferred: DeadlineDate
    deferral_surcharge: float = 0.004
    tax_second_advance: DeadlineDate
    contributions: Sequence[DeadlineDate]
    vat: Sequence[DeadlineDate]
    vat_monthly: Sequence[DeadlineDate]

    @model_validator(mode="after")
    def _validate_periods(self) -> DeadlineConfig:
        if len(self.contributions) != 4:
            raise ConfigurationError("Contribution deadlines must list four quarters")
        if len(self.vat) != 4:
            raise ConfigurationError("VAT deadlines must list four quarters")
        if len(self.vat_monthly) != 12:
            raise ConfigurationError("Monthly VAT deadlines must list twelve months")
        _require_rate(self.deferral_surcharge, "'deferral_surcharge'")
        return self


class ScheduleConfig(ImmutableModel):
    """Defaults used when building payment schedules."""

    safety_multiplier: float = 1.10

    @model_validator(mode="after")
    def _validate_multiplier(self) -> ScheduleConfig:
        if self.safety_multiplier <= 0:
            raise ConfigurationError("'safety_multiplier' must be positive")
        return self


class YearConfiguration(ImmutableModel):
    """Structured representation of a fiscal year configuration."""

    year: int
    meta: Mapping[str, Any] = Field(default_factory=dict)
    flat_rate: FlatRateConfig
    individual: IndividualConfig
    corporate: CorporateConfig
    contributions: ContributionsConfig
    advances: AdvanceConfig = Field(default_factory=AdvanceConfig)
    deadlines: DeadlineConfig
    schedule: ScheduleConfig = Field(default_factory=ScheduleConfig)

    @model_validator(mode="before")
    @classmethod
    def _prepare_sections(cls, data: Any) -> Mapping[str, Any]:
        if not isinstance(data, Mapping):
            raise ConfigurationError("Configuration file must define a mapping at the top level")

        prepared = dict(data)
        meta = prepared.get("meta")
        if meta is None:
            prepared["meta"] = {}
        elif not isinstance(meta, Mapping):
            raise ConfigurationError("'meta' section must be a mapping if provided")

        for section in ("flat_rate", "individual", "corporate", "contributions", "deadlines"):
            if not isinstance(prepared.get(section), Mapping):
                raise ConfigurationError(f"Configuration requires a '{section}' section")

        if prepared.get("advances") is None:
            prepared["advances"] = {}
        if prepared.get("schedule") is None:
            prepared["schedule"] = {}

        return prepared

    @model_validator(mode="after")
    def _validate_year(self) -> YearConfiguration:
        self._validate_bracket_sequence(self.individual.brackets)
        return self

    @staticmethod
    def _validate_bracket_sequence(brackets: Sequence[TaxBracket]) -> None:
        if not brackets:
            raise ConfigurationError("At least one tax bracket must be defined")
        if brackets[0].lower_bound != 0:
            raise ConfigurationError("The first tax bracket must start at zero")
        for previous, current in zip(brackets, brackets[1:]):
            if previous.upper_bound is None:
                raise ConfigurationError("Only the final tax bracket may be open-ended")
            if current.lower_bound != previous.upper_bound:
                raise ConfigurationError("Tax brackets must be contiguous and ascending")
        if brackets[-1].upper_bound is not None:
            raise ConfigurationError("Final tax bracket must have an open upper bound")


class TaxYearManifestEntry(ImmutableModel):
    """Entry describing a supported fiscal year in the manifest."""

    year: int
    filename: str | None = None
    status: str = "active"
    notes_url: str | None = None

    @computed_field
    @property
    def resolved_filename(self) -> str:
        return self.filename or f"{self.year}.yaml"


class TaxYearManifest(ImmutableModel):
    """Manifest describing the available fiscal year configuration files."""

    years: Sequence[TaxYearManifestEntry]

    @model_validator(mode="after")
    def _validate_years(self) -> Self:
        seen: set[int] = set()
        for entry in self.years:
            if entry.year in seen:
                raise ConfigurationError(
                    f"Duplicate year {entry.year} declared in the configuration manifest"
                )
            seen.add(entry.year)
        return self

    def get_entry(self, year: int) -> TaxYearManifestEntry:
        for entry in self.years:
            if entry.year == year:
                return entry
        raise KeyError(year)

    @computed_field
    @property
    def supported_years(self) -> tuple[int, ...]:
        return tuple(sorted(entry.year for entry in self.years))


__all__ = [
    "AdministratorContributionConfig",
    "AdvanceConfig",
    "CassaForenseConfig",
    "ConfigurationError",
    "ContributionsConfig",
    "CorporateConfig",
    "DeadlineConfig",
    "DeadlineDate",
    "FlatRateConfig",
    "GestioneSeparataConfig",
    "IVSConfig",
    "ImmutableModel",
    "InarcassaConfig",
    "IndividualConfig",
    "ScheduleConfig",
    "TaxBracket",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationError",
    "YearConfiguration",
]
