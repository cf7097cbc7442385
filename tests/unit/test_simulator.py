"""Unit tests for the running-balance payment simulator."""

from __future__ import annotations

from datetime import date

import pytest

from smartrate.backend.models import EventCategory, ScheduleEvent
from smartrate.backend.services.calculators.simulator import (
    plan_savings,
    simulate_payment_schedule,
    summarise_schedule,
)


def _payment(when: date, amount: float, code: str = "tax") -> ScheduleEvent:
    return ScheduleEvent(
        date=when,
        amount=amount,
        category=EventCategory.TAX,
        code=code,
        description=code,
    )


def test_shortfall_is_reported_and_balance_floored() -> None:
    rows = simulate_payment_schedule(
        [_payment(date(2025, 3, 10), 500)],
        initial_balance=0,
        monthly_accrual=100,
        fiscal_year=2025,
        today=date(2025, 1, 1),
    )

    assert len(rows) == 13
    payment = next(row for row in rows if not row.is_income)
    assert payment.previous_balance == 300.00
    assert payment.new_balance == 0.0
    assert payment.required_payment == 200.00
    assert payment.deficit == 200.00
    assert rows[-1].new_balance == 900.00


def test_covered_payment_has_no_deficit() -> None:
    rows = simulate_payment_schedule(
        [_payment(date(2025, 3, 10), 250)],
        initial_balance=1_000,
        monthly_accrual=0,
        fiscal_year=2025,
        today=date(2025, 1, 1),
    )

    assert len(rows) == 1
    assert rows[0].new_balance == 750.00
    assert rows[0].required_payment == 0.0
    assert rows[0].deficit == 0.0


def test_income_rows_require_their_own_amount() -> None:
    rows = simulate_payment_schedule(
        [], initial_balance=0, monthly_accrual=120.555, fiscal_year=2025, today=date(2025, 1, 1)
    )

    assert all(row.is_income for row in rows)
    assert rows[0].amount == 120.56
    assert rows[0].required_payment == 120.56
    assert rows[0].deficit == 0.0
    assert rows[0].description == "Monthly set-aside for month 01/2025"


def test_past_events_and_months_are_dropped() -> None:
    rows = simulate_payment_schedule(
        [_payment(date(2025, 3, 10), 500), _payment(date(2025, 11, 30), 50, "late")],
        initial_balance=0,
        monthly_accrual=100,
        fiscal_year=2025,
        today=date(2025, 7, 15),
    )

    accrual_dates = [row.date for row in rows if row.is_income]
    assert accrual_dates == [date(2025, month, 1) for month in range(8, 13)]
    assert [row.code for row in rows if not row.is_income] == ["late"]


def test_accrual_precedes_payment_on_same_day() -> None:
    rows = simulate_payment_schedule(
        [_payment(date(2025, 6, 1), 50)],
        initial_balance=0,
        monthly_accrual=100,
        fiscal_year=2025,
        today=date(2025, 6, 1),
    )

    assert rows[0].is_income
    assert rows[1].code == "tax"
    assert rows[1].new_balance == 50.00
    assert rows[1].required_payment == 0.0


def test_rows_are_chronological_and_never_negative() -> None:
    events = [
        _payment(date(2025, 11, 30), 4_000, "second"),
        _payment(date(2025, 6, 30), 7_000, "first"),
        _payment(date(2026, 2, 16), 900, "q4"),
    ]

    rows = simulate_payment_schedule(
        events, initial_balance=250, monthly_accrual=800, fiscal_year=2025, today=date(2025, 1, 1)
    )

    dates = [row.date for row in rows]
    assert dates == sorted(dates)
    assert all(row.new_balance >= 0 for row in rows)
    assert rows[0].previous_balance == 250.00


def test_simulation_is_deterministic() -> None:
    events = [_payment(date(2025, 6, 30), 7_000)]
    kwargs = {"today": date(2025, 1, 1)}

    first = simulate_payment_schedule(events, 0, 500, 2025, **kwargs)
    second = simulate_payment_schedule(events, 0, 500, 2025, **kwargs)

    assert first == second


def test_summary_aggregates_rows() -> None:
    rows = simulate_payment_schedule(
        [_payment(date(2025, 3, 10), 500)],
        initial_balance=0,
        monthly_accrual=100,
        fiscal_year=2025,
        today=date(2025, 1, 1),
    )

    summary = summarise_schedule(rows)

    assert summary.opening_balance == 0.0
    assert summary.closing_balance == 900.00
    assert summary.total_payments == 500.00
    assert summary.total_accruals == 1_200.00
    assert summary.total_required_payment == 200.00
    assert summary.shortfall_count == 1
    assert summary.max_required_payment == 200.00


def test_summary_of_empty_schedule() -> None:
    summary = summarise_schedule([])

    assert summary.closing_balance == 0.0
    assert summary.shortfall_count == 0


@pytest.mark.parametrize(
    ("total_due", "balance", "months", "covered", "deficit", "monthly"),
    [
        (1_000, 1_500, 3, True, 0.0, 0.0),
        (1_000, 400, 3, False, 600.0, 200.0),
        (100, 0, 3, False, 100.0, 33.34),
        (100, 0, 0, False, 100.0, 100.0),
    ],
)
def test_plan_savings(total_due, balance, months, covered, deficit, monthly) -> None:
    plan = plan_savings(total_due, balance, months)

    assert plan.covered is covered
    assert plan.deficit == deficit
    assert plan.monthly_amount == monthly
