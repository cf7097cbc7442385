"""Social contribution rules for the five supported pension schemes."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from types import MappingProxyType
from typing import Mapping

from smartrate.backend.config.schema import (
    CassaForenseConfig,
    ContributionsConfig,
    GestioneSeparataConfig,
    InarcassaConfig,
    IVSConfig,
)
from smartrate.backend.models import ContributionAmount, ContributionFlags

_LOGGER = logging.getLogger(__name__)


class ContributionRegime(str, Enum):
    """Pension schemes a self-employed taxpayer can be enrolled in."""

    GESTIONE_SEPARATA = "inps_gestione_separata"
    CASSA_FORENSE = "cassa_forense"
    INARCASSA = "inarcassa"
    IVS_ARTIGIANI = "inps_artigiani"
    IVS_COMMERCIANTI = "inps_commercianti"

    @classmethod
    def resolve(cls, value: str | ContributionRegime | None) -> ContributionRegime | None:
        """Return the enum member for ``value`` or ``None`` when unknown."""

        if value is None or isinstance(value, cls):
            return value
        key = value.strip().lower()
        for member in cls:
            if key in {member.value, member.name.lower()}:
                return member
        return None


class ContributionReduction(str, Enum):
    """Reduction schemes available to IVS enrolees."""

    NONE = "none"
    REDUCTION_35 = "reduction_35"
    REDUCTION_50 = "reduction_50"


class ContributionRule(ABC):
    """Computes the contribution owed under a single scheme."""

    regime: ContributionRegime

    @abstractmethod
    def calculate(
        self,
        income: float,
        flags: ContributionFlags,
        config: ContributionsConfig,
    ) -> ContributionAmount:
        """Return the contribution amounts for ``income``."""


class GestioneSeparataRule(ContributionRule):
    """Percentage of income up to a ceiling; reduced rate with other coverage."""

    regime = ContributionRegime.GESTIONE_SEPARATA

    def calculate(
        self,
        income: float,
        flags: ContributionFlags,
        config: ContributionsConfig,
    ) -> ContributionAmount:
        rates: GestioneSeparataConfig = config.gestione_separata
        covered_elsewhere = flags.has_other_coverage or flags.is_pensioner
        rate = rates.reduced_rate if covered_elsewhere else rates.full_rate

        base = income
        if flags.reverse_charge_uplift:
            base = income * (1 + rates.reverse_charge_uplift)
        capped = min(base, rates.maximum_base)

        return ContributionAmount(
            regime=self.regime.value,
            base_amount=capped,
            calculated_amount=capped * rate,
            rate=rate,
            maximum_contribution=rates.maximum_base * rate,
        )


class CassaForenseRule(ContributionRule):
    """Two-tier subjective contribution plus an integrative share, both floored."""

    regime = ContributionRegime.CASSA_FORENSE

    def calculate(
        self,
        income: float,
        flags: ContributionFlags,
        config: ContributionsConfig,
    ) -> ContributionAmount:
        rates: CassaForenseConfig = config.cassa_forense
        within = min(income, rates.subjective_threshold)
        above = max(0.0, income - rates.subjective_threshold)
        subjective = within * rates.subjective_rate + above * rates.subjective_rate_high
        integrative = income * rates.integrative_rate

        return ContributionAmount(
            regime=self.regime.value,
            base_amount=income,
            calculated_amount=max(subjective, rates.minimum_subjective),
            rate=rates.subjective_rate,
            minimum_contribution=rates.minimum_subjective,
            integrative=max(integrative, rates.minimum_integrative),
        )


class InarcassaRule(ContributionRule):
    """Capped subjective contribution, integrative share and maternity add-on."""

    regime = ContributionRegime.INARCASSA

    def calculate(
        self,
        income: float,
        flags: ContributionFlags,
        config: ContributionsConfig,
    ) -> ContributionAmount:
        rates: InarcassaConfig = config.inarcassa
        subjective = min(income, rates.maximum_subjective_base) * rates.subjective_rate
        integrative = max(income * rates.integrative_rate, rates.minimum_integrative)

        return ContributionAmount(
            regime=self.regime.value,
            base_amount=income,
            calculated_amount=subjective,
            rate=rates.subjective_rate,
            maximum_contribution=rates.maximum_subjective_base * rates.subjective_rate,
            integrative=integrative,
            maternity=rates.maternity,
        )


class _IVSRule(ContributionRule):
    """Fixed contribution up to the minimum income, two-tier rate on the excess."""

    @abstractmethod
    def _rates(self, config: ContributionsConfig) -> IVSConfig:
        """Return the constants for this scheme."""

    def calculate(
        self,
        income: float,
        flags: ContributionFlags,
        config: ContributionsConfig,
    ) -> ContributionAmount:
        rates = self._rates(config)
        factor = _reduction_factor(flags.reduction, config.reductions)
        rate = rates.rate + rates.surcharge_rate
        rate_high = rates.rate_high + rates.surcharge_rate

        amount = rates.fixed_contribution
        if income > rates.minimum_income:
            excess = income - rates.minimum_income
            within = min(excess, rates.threshold - rates.minimum_income)
            beyond = max(0.0, excess - within)
            amount += within * rate + beyond * rate_high

        return ContributionAmount(
            regime=self.regime.value,
            base_amount=income,
            calculated_amount=amount * factor,
            rate=rate if income > rates.minimum_income else 0.0,
            minimum_contribution=rates.fixed_contribution * factor,
            reduction_factor=factor,
        )


class IVSArtigianiRule(_IVSRule):
    regime = ContributionRegime.IVS_ARTIGIANI

    def _rates(self, config: ContributionsConfig) -> IVSConfig:
        return config.ivs_artigiani


class IVSCommerciantiRule(_IVSRule):
    regime = ContributionRegime.IVS_COMMERCIANTI

    def _rates(self, config: ContributionsConfig) -> IVSConfig:
        return config.ivs_commercianti


CONTRIBUTION_RULES: Mapping[ContributionRegime, ContributionRule] = MappingProxyType(
    {
        rule.regime: rule
        for rule in (
            GestioneSeparataRule(),
            CassaForenseRule(),
            InarcassaRule(),
            IVSArtigianiRule(),
            IVSCommerciantiRule(),
        )
    }
)


def _reduction_factor(reduction: str, reductions: Mapping[str, float]) -> float:
    factor = reductions.get(reduction)
    if factor is None:
        _LOGGER.info("Unknown contribution reduction %r; applying none", reduction)
        return reductions.get(ContributionReduction.NONE.value, 1.0)
    return factor


def calculate_contribution(
    income: float,
    regime: str | ContributionRegime | None,
    flags: ContributionFlags,
    config: ContributionsConfig,
) -> ContributionAmount:
    """Return the contribution owed on ``income`` under ``regime``.

    A missing or unrecognised regime yields a zero contribution.
    """

    resolved = ContributionRegime.resolve(regime)
    if resolved is None:
        return zero_contribution()
    return CONTRIBUTION_RULES[resolved].calculate(max(0.0, income), flags, config)


def zero_contribution(regime: str | None = None) -> ContributionAmount:
    """Return the empty contribution used when no scheme applies."""

    return ContributionAmount(regime=regime)


__all__ = [
    "CONTRIBUTION_RULES",
    "CassaForenseRule",
    "ContributionReduction",
    "ContributionRegime",
    "ContributionRule",
    "GestioneSeparataRule",
    "IVSArtigianiRule",
    "IVSCommerciantiRule",
    "InarcassaRule",
    "calculate_contribution",
    "zero_contribution",
]
