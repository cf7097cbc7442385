"""Turn a calculation result into dated statutory payment events."""

from __future__ import annotations

from collections.abc import Sequence

from smartrate.backend.config.schema import DeadlineConfig, DeadlineDate, YearConfiguration
from smartrate.backend.config.year_config import load_year_configuration
from smartrate.backend.localization import Translator, get_translator
from smartrate.backend.models import (
    CalculationRegime,
    CalculationResult,
    EventCategory,
    ScheduleEvent,
    VatRegime,
)

from .utils import round_currency


def _periodic_events(
    dates: Sequence[DeadlineDate],
    total: float,
    fiscal_year: int,
    category: EventCategory,
    code_template: str,
    message_key: str,
    translator: Translator,
) -> list[ScheduleEvent]:
    """Spread ``total`` evenly over ``dates``; ``code_template`` receives ``period``."""

    amount = round_currency(total / len(dates)) if dates else 0.0
    if amount <= 0:
        return []
    return [
        ScheduleEvent(
            date=entry.resolve(fiscal_year),
            amount=amount,
            category=category,
            code=code_template.format(period=period),
            description=translator(message_key, period=period),
        )
        for period, entry in enumerate(dates, start=1)
    ]


def _tax_events(
    result: CalculationResult,
    regime_key: str,
    fiscal_year: int,
    deadlines: DeadlineConfig,
    translator: Translator,
) -> list[ScheduleEvent]:
    balance_code = "tax_balance_first_advance"
    balance_date = deadlines.tax_balance_first_advance
    balance_amount = round_currency(result.balance_due + result.installments.first)
    if result.defer_balance:
        balance_code = "tax_balance_first_advance_deferred"
        balance_date = deadlines.tax_balance_deferred
        balance_amount = round_currency(balance_amount * (1 + deadlines.deferral_surcharge))

    surcharge = f"{deadlines.deferral_surcharge * 100:.2f}"
    schedule = (
        (balance_code, balance_date, balance_amount),
        (
            "tax_second_advance",
            deadlines.tax_second_advance,
            round_currency(result.installments.second),
        ),
    )
    return [
        ScheduleEvent(
            date=deadline.resolve(fiscal_year),
            amount=amount,
            category=EventCategory.TAX,
            code=code,
            description=translator(f"deadlines.{regime_key}.{code}", surcharge=surcharge),
        )
        for code, deadline, amount in schedule
        if amount > 0
    ]


def generate_deadlines(
    result: CalculationResult,
    regime: CalculationRegime | str | None = None,
    fiscal_year: int | None = None,
    *,
    locale: str | None = None,
    config: YearConfiguration | None = None,
) -> list[ScheduleEvent]:
    """Return the payment events owed for ``result`` in date order.

    ``regime`` and ``fiscal_year`` default to the values carried by the result;
    the calendar comes from the configuration of the result's tax year. VAT
    follows the monthly or quarterly calendar selected on the result, and a
    deferred balance moves to the later date with the configured surcharge.
    """

    regime_key = CalculationRegime(regime or result.regime).value
    year = fiscal_year if fiscal_year is not None else result.year
    translator = get_translator(locale or result.locale)
    deadlines = (config or load_year_configuration(result.year)).deadlines

    events = _tax_events(result, regime_key, year, deadlines, translator)
    events.extend(
        _periodic_events(
            deadlines.contributions,
            result.total_contributions,
            year,
            EventCategory.CONTRIBUTION,
            "contribution_q{period}",
            "deadlines.contribution_quarter",
            translator,
        )
    )
    if result.vat_regime is VatRegime.MONTHLY:
        vat_dates, vat_code = deadlines.vat_monthly, "vat_m{period:02d}"
        vat_key = "deadlines.vat_month"
    else:
        vat_dates, vat_code = deadlines.vat, "vat_q{period}"
        vat_key = "deadlines.vat_quarter"
    events.extend(
        _periodic_events(
            vat_dates,
            result.vat_amount,
            year,
            EventCategory.VAT,
            vat_code,
            vat_key,
            translator,
        )
    )

    return sorted(events, key=lambda event: event.date)


__all__ = ["generate_deadlines"]
