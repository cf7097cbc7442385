"""Build the forward-looking payment schedule for a calculation result."""

from __future__ import annotations

import logging
from datetime import date

from smartrate.backend.config.year_config import load_year_configuration
from smartrate.backend.models import CalculationResult, ScheduleRow

from .calculators import generate_deadlines, simulate_payment_schedule

_LOGGER = logging.getLogger(__name__)


def conservative_multiplier(year: int) -> float:
    """Return the configured safety margin applied to monthly set-asides."""

    return load_year_configuration(year).schedule.safety_multiplier


def build_schedule(
    result: CalculationResult,
    initial_balance: float | None = None,
    accrual_multiplier: float = 1.0,
    *,
    today: date | None = None,
    locale: str | None = None,
) -> list[ScheduleRow]:
    """Generate deadlines for ``result`` and simulate the running balance.

    ``initial_balance`` defaults to the balance declared in the calculation and
    the monthly set-aside is ``monthly_accrual * accrual_multiplier``. Every
    call recomputes the full schedule.
    """

    if accrual_multiplier <= 0:
        raise ValueError("accrual_multiplier must be positive")

    config = load_year_configuration(result.year)
    locale = locale or result.locale
    events = generate_deadlines(result, result.regime, result.year, locale=locale, config=config)

    opening = result.current_balance if initial_balance is None else initial_balance
    monthly = result.monthly_accrual * accrual_multiplier

    _LOGGER.debug(
        "Building %s schedule for %s with %d deadline(s), opening balance %.2f",
        result.regime.value,
        result.year,
        len(events),
        opening,
    )

    return simulate_payment_schedule(
        events,
        opening,
        monthly,
        result.year,
        today=today,
        locale=locale,
    )


__all__ = ["build_schedule", "conservative_multiplier"]
