"""Unit tests for the statutory deadline generator."""

from __future__ import annotations

from datetime import date

import pytest

from smartrate.backend.models import EventCategory
from smartrate.backend.services.calculation_service import calculate
from smartrate.backend.services.calculators.deadlines import generate_deadlines


def test_flat_rate_deadlines_are_sorted_and_complete(flat_rate_payload) -> None:
    result = calculate(flat_rate_payload)

    events = generate_deadlines(result, result.regime, 2025)

    assert [event.date for event in events] == [
        date(2025, 5, 16),
        date(2025, 6, 30),
        date(2025, 8, 20),
        date(2025, 11, 16),
        date(2025, 11, 30),
        date(2026, 2, 16),
    ]
    assert [event.code for event in events] == [
        "contribution_q1",
        "tax_balance_first_advance",
        "contribution_q2",
        "contribution_q3",
        "tax_second_advance",
        "contribution_q4",
    ]
    assert not any(event.is_income for event in events)


def test_tax_events_carry_balance_and_advances(flat_rate_payload) -> None:
    result = calculate(flat_rate_payload)

    events = {event.code: event for event in generate_deadlines(result)}

    assert events["tax_balance_first_advance"].amount == 5_265.00 + 2_106.00
    assert events["tax_second_advance"].amount == 3_159.00
    assert events["contribution_q1"].amount == 2_287.64
    assert events["contribution_q1"].category is EventCategory.CONTRIBUTION


def test_vat_deadlines_for_individual_regime() -> None:
    result = calculate(
        {
            "regime": "ordinary_individual",
            "year": 2025,
            "revenue": 60_000,
            "documented_expenses": 20_000,
        }
    )

    events = generate_deadlines(result, "ordinary_individual", 2025)
    vat_events = [event for event in events if event.category is EventCategory.VAT]

    assert [event.date for event in vat_events] == [
        date(2025, 4, 16),
        date(2025, 7, 16),
        date(2025, 10, 16),
        date(2026, 1, 16),
    ]
    assert all(event.amount == 2_200.00 for event in vat_events)
    # No contribution regime was declared so no contribution events are due.
    assert not any(event.category is EventCategory.CONTRIBUTION for event in events)


def test_zero_amounts_are_skipped() -> None:
    result = calculate(
        {
            "regime": "flat_rate",
            "year": 2025,
            "revenue": 0,
            "category": "PROFESSIONAL",
        }
    )

    assert generate_deadlines(result) == []


def test_descriptions_are_localised(flat_rate_payload) -> None:
    result = calculate(flat_rate_payload)

    english = {event.code: event.description for event in generate_deadlines(result)}
    italian = {
        event.code: event.description
        for event in generate_deadlines(result, locale="it")
    }

    assert english["tax_second_advance"] == "Substitute tax second advance"
    assert italian["tax_second_advance"] == "Secondo acconto imposta sostitutiva"
    assert english["contribution_q3"] == "Social contributions, quarter 3"


def test_corporate_descriptions_name_both_taxes() -> None:
    result = calculate(
        {
            "regime": "corporate",
            "year": 2025,
            "revenue": 100_000,
            "operating_costs": 40_000,
        }
    )

    events = {event.code: event for event in generate_deadlines(result)}

    assert events["tax_balance_first_advance"].description.startswith("IRES and IRAP")


def _individual_payload(**overrides) -> dict[str, object]:
    return {
        "regime": "ordinary_individual",
        "year": 2025,
        "revenue": 60_000,
        "documented_expenses": 20_000,
        **overrides,
    }


def test_monthly_vat_follows_monthly_calendar() -> None:
    result = calculate(_individual_payload(vat_regime="monthly"))

    vat_events = [
        event for event in generate_deadlines(result) if event.category is EventCategory.VAT
    ]

    assert result.vat_amount == 8_800.00
    assert len(vat_events) == 12
    assert [event.code for event in vat_events][:2] == ["vat_m01", "vat_m02"]
    assert vat_events[0].date == date(2025, 2, 16)
    assert vat_events[6].date == date(2025, 8, 20)
    assert vat_events[-1].date == date(2026, 1, 16)
    assert all(event.amount == 733.33 for event in vat_events)
    assert vat_events[2].description == "VAT settlement, month 3"


def test_vat_regime_defaults_to_quarterly() -> None:
    result = calculate(_individual_payload())

    codes = [event.code for event in generate_deadlines(result) if event.code.startswith("vat")]

    assert result.vat_regime.value == "quarterly"
    assert codes == ["vat_q1", "vat_q2", "vat_q3", "vat_q4"]


def test_monthly_vat_for_corporate_regime() -> None:
    result = calculate(
        {
            "regime": "corporate",
            "year": 2025,
            "revenue": 500_000,
            "operating_costs": 200_000,
            "vat_regime": " MONTHLY ",
        }
    )

    vat_events = [
        event for event in generate_deadlines(result) if event.category is EventCategory.VAT
    ]

    assert len(vat_events) == 12
    assert vat_events[0].amount == 5_500.00


def test_unknown_vat_regime_is_rejected() -> None:
    with pytest.raises(ValueError, match="vat_regime"):
        calculate(_individual_payload(vat_regime="weekly"))


def test_deferred_balance_moves_to_july_with_surcharge(flat_rate_payload) -> None:
    result = calculate({**flat_rate_payload, "defer_balance": True})

    events = {event.code: event for event in generate_deadlines(result)}

    assert "tax_balance_first_advance" not in events
    deferred = events["tax_balance_first_advance_deferred"]
    assert deferred.date == date(2025, 7, 30)
    assert deferred.amount == 7_400.48
    assert deferred.description == (
        "Substitute tax balance and first advance, deferred (+0.40%)"
    )
    assert events["tax_second_advance"].amount == 3_159.00


def test_deferral_leaves_totals_unchanged(flat_rate_payload) -> None:
    on_time = calculate(flat_rate_payload)
    deferred = calculate({**flat_rate_payload, "defer_balance": True})

    assert deferred.total_due == on_time.total_due
    assert deferred.installments == on_time.installments
