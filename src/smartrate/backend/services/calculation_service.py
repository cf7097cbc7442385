"""Orchestrate request validation, configuration lookup and regime calculators.

The calculation service coordinates the request models, translation layer and
year-based configuration so that each regime module can focus on its own
arithmetic. Profiling hooks and input checks live here to give callers a
simple ``calculate`` entry point.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Mapping
from contextlib import contextmanager
from time import perf_counter
from typing import Any, Union

from pydantic import ValidationError

from smartrate.backend.config.schema import YearConfiguration
from smartrate.backend.config.year_config import available_years, load_year_configuration
from smartrate.backend.localization import Translator, get_translator
from smartrate.backend.models import (
    CALCULATION_REQUEST_ADAPTER,
    REGIME_KEYS,
    CalculationRegime,
    CalculationResult,
    CorporateRequest,
    FlatRateRequest,
    OrdinaryIndividualRequest,
    format_validation_error,
    validation_issues,
)

from .calculators import calculate_corporate, calculate_flat_rate, calculate_individual

_LOGGER = logging.getLogger(__name__)

RequestModel = Union[FlatRateRequest, OrdinaryIndividualRequest, CorporateRequest]

_CALCULATORS: Mapping[CalculationRegime, Callable[[Any, YearConfiguration], CalculationResult]] = {
    CalculationRegime.FLAT_RATE: calculate_flat_rate,
    CalculationRegime.ORDINARY_INDIVIDUAL: calculate_individual,
    CalculationRegime.CORPORATE: calculate_corporate,
}


def _profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("SMARTRATE_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def _profile_section(name: str, store: dict[str, float] | None):
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


def parse_request(payload: Mapping[str, Any] | RequestModel) -> RequestModel:
    """Validate ``payload`` into one of the regime request models."""

    if isinstance(payload, (FlatRateRequest, OrdinaryIndividualRequest, CorporateRequest)):
        return payload

    if not isinstance(payload, Mapping):
        raise ValueError("Payload must be a mapping")
    if "regime" not in payload:
        raise ValueError("Payload must include a fiscal regime")
    if "year" not in payload:
        raise ValueError("Payload must include a tax year")

    try:
        return CALCULATION_REQUEST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ValueError(format_validation_error(exc)) from exc


def calculate(payload: Mapping[str, Any] | RequestModel) -> CalculationResult:
    """Compute taxes, contributions and installments for the provided payload."""

    timings: dict[str, float] | None = {} if _profiling_enabled() else None
    overall_start = perf_counter() if timings is not None else None

    with _profile_section("parse_request", timings):
        request = parse_request(payload)

    with _profile_section("load_configuration", timings):
        config = load_year_configuration(request.year)

    regime = CalculationRegime(request.regime)
    with _profile_section(regime.value, timings):
        result = _CALCULATORS[regime](request, config)

    if result.warnings:
        _LOGGER.info(
            "Calculation for %s/%s applied defaults: %s",
            regime.value,
            request.year,
            ", ".join(result.warnings),
        )

    if timings is not None and overall_start is not None:
        timings["total"] = perf_counter() - overall_start
        _LOGGER.debug(
            "calculate timings (ms): %s",
            {name: round(duration * 1000, 3) for name, duration in timings.items()},
        )

    return result


def _flat_rate_messages(
    request: FlatRateRequest, translator: Translator
) -> list[str]:
    messages: list[str] = []
    if request.category is None and request.coefficient is None:
        messages.append(translator("validation.category_required"))
    if request.contribution.regime is None:
        messages.append(translator("validation.contribution_regime_required"))

    ceiling = load_year_configuration(request.year).flat_rate.revenue_ceiling
    if request.revenue > ceiling:
        messages.append(translator("validation.revenue_ceiling", ceiling=f"{ceiling:,.0f}"))
    return messages


def validate_input(payload: Any, locale: str | None = None) -> list[str]:
    """Return localised messages describing problems with ``payload``.

    An empty list means the payload can be passed to :func:`calculate`. This
    function never raises for malformed input.
    """

    if not isinstance(payload, Mapping):
        translator = get_translator(locale)
        return [
            translator(
                "validation.invalid_field",
                field="payload",
                message="Payload must be a mapping",
            )
        ]

    requested_locale = locale or payload.get("locale")
    translator = get_translator(requested_locale if isinstance(requested_locale, str) else None)

    regime = payload.get("regime")
    if regime is None or (isinstance(regime, str) and not regime.strip()):
        return [translator("validation.regime_required")]
    if regime not in REGIME_KEYS:
        return [translator("validation.regime_unknown", regime=regime)]

    try:
        request = CALCULATION_REQUEST_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        return [
            translator("validation.invalid_field", field=field or "payload", message=message)
            for field, message in validation_issues(exc)
        ]

    if request.year not in available_years():
        return [translator("validation.year_unsupported", year=request.year)]

    messages: list[str] = []
    if request.revenue <= 0:
        messages.append(translator("validation.revenue_positive"))

    if isinstance(request, FlatRateRequest):
        messages.extend(_flat_rate_messages(request, translator))

    return messages


__all__ = ["calculate", "parse_request", "validate_input"]
