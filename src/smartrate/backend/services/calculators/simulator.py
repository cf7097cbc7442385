"""Running-balance simulation of a year's payment calendar."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from smartrate.backend.localization import get_translator
from smartrate.backend.models import (
    EventCategory,
    SavingsPlan,
    ScheduleEvent,
    ScheduleRow,
    ScheduleSummary,
)

from .utils import round_currency, round_currency_up

_LOGGER = logging.getLogger(__name__)


def build_accrual_events(
    monthly_accrual: float,
    fiscal_year: int,
    *,
    today: date,
    locale: str | None = None,
) -> list[ScheduleEvent]:
    """Return one set-aside on the first of every remaining month of the year."""

    amount = round_currency(monthly_accrual)
    if amount <= 0:
        return []

    translator = get_translator(locale)
    events: list[ScheduleEvent] = []
    for month in range(1, 13):
        when = date(fiscal_year, month, 1)
        if when < today:
            continue
        events.append(
            ScheduleEvent(
                date=when,
                amount=amount,
                category=EventCategory.ACCRUAL,
                code=f"accrual_{month:02d}",
                description=translator("schedule.accrual", month=f"{month:02d}/{fiscal_year}"),
                is_income=True,
            )
        )
    return events


def _order_events(events: Iterable[ScheduleEvent]) -> list[ScheduleEvent]:
    # Set-asides land before payments falling on the same day.
    return sorted(events, key=lambda event: (event.date, not event.is_income))


def simulate_payment_schedule(
    events: Sequence[ScheduleEvent],
    initial_balance: float,
    monthly_accrual: float,
    fiscal_year: int,
    *,
    today: date | None = None,
    locale: str | None = None,
) -> list[ScheduleRow]:
    """Walk the payment calendar and track the running balance.

    Income rows raise the balance. Payment rows lower it; when a payment would
    overdraw the account the shortfall is reported as ``required_payment`` and
    ``deficit`` and the balance is floored at zero.
    """

    today = today or date.today()
    pending = [event for event in events if event.date >= today]
    skipped = len(events) - len(pending)
    if skipped:
        _LOGGER.debug("Skipping %d event(s) dated before %s", skipped, today.isoformat())

    accruals = build_accrual_events(monthly_accrual, fiscal_year, today=today, locale=locale)
    ordered = _order_events([*accruals, *pending])

    balance = round_currency(max(0.0, initial_balance))
    rows: list[ScheduleRow] = []

    for event in ordered:
        amount = round_currency(event.amount)
        previous = balance

        if event.is_income:
            balance = round_currency(previous + amount)
            deficit = 0.0
            required = amount
        else:
            tentative = round_currency(previous - amount)
            if tentative < 0:
                deficit = required = -tentative
                balance = 0.0
            else:
                deficit = required = 0.0
                balance = tentative

        rows.append(
            ScheduleRow(
                date=event.date,
                amount=amount,
                category=event.category,
                code=event.code,
                description=event.description,
                previous_balance=previous,
                new_balance=balance,
                deficit=deficit,
                required_payment=required,
                is_income=event.is_income,
            )
        )

    return rows


def summarise_schedule(rows: Sequence[ScheduleRow]) -> ScheduleSummary:
    """Aggregate a simulated schedule into headline figures."""

    payments = [row for row in rows if not row.is_income]
    accruals = [row for row in rows if row.is_income]

    return ScheduleSummary(
        opening_balance=rows[0].previous_balance if rows else 0.0,
        closing_balance=rows[-1].new_balance if rows else 0.0,
        total_payments=round_currency(sum(row.amount for row in payments)),
        total_accruals=round_currency(sum(row.amount for row in accruals)),
        total_required_payment=round_currency(sum(row.required_payment for row in payments)),
        shortfall_count=sum(1 for row in payments if row.deficit > 0),
        max_required_payment=max((row.required_payment for row in payments), default=0.0),
    )


def plan_savings(total_due: float, current_balance: float, months: int) -> SavingsPlan:
    """Return the monthly set-aside that closes the gap before the deadline.

    The monthly amount is rounded up to the cent; fewer than one month left is
    treated as a single month.
    """

    deficit = round_currency(total_due - max(0.0, current_balance))
    if deficit <= 0:
        return SavingsPlan(covered=True, deficit=0.0, monthly_amount=0.0)

    return SavingsPlan(
        covered=False,
        deficit=deficit,
        monthly_amount=round_currency_up(deficit / max(1, months)),
    )


__all__ = [
    "build_accrual_events",
    "plan_savings",
    "simulate_payment_schedule",
    "summarise_schedule",
]
