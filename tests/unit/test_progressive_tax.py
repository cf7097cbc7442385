"""Unit tests for the bracket tax helper and rounding utilities."""

from __future__ import annotations

import pytest

from smartrate.backend.services.calculators.utils import (
    calculate_progressive_tax,
    round_currency,
    round_currency_up,
    round_rate,
)


@pytest.mark.parametrize(
    ("income", "expected"),
    [
        (28_000, 6_440.0),
        (40_000, 10_640.0),
        (50_000, 14_140.0),
        (60_000, 18_440.0),
    ],
)
def test_progressive_tax_walks_individual_brackets(config_2025, income, expected) -> None:
    result = calculate_progressive_tax(income, config_2025.individual.brackets)

    assert result.gross_tax == pytest.approx(expected)


def test_effective_rate_matches_tax_over_income(config_2025) -> None:
    for income in (1_000, 28_000, 33_333.33, 75_000, 250_000):
        result = calculate_progressive_tax(income, config_2025.individual.brackets)
        assert result.effective_rate == pytest.approx(result.gross_tax / income)


def test_progressive_tax_is_monotonic(config_2025) -> None:
    incomes = [0, 5_000, 27_999, 28_000, 28_001, 49_999, 50_000, 55_000, 90_000]
    taxes = [
        calculate_progressive_tax(income, config_2025.individual.brackets).gross_tax
        for income in incomes
    ]

    assert taxes == sorted(taxes)


@pytest.mark.parametrize("income", [0, -1_500])
def test_progressive_tax_handles_zero_and_negative_income(config_2025, income) -> None:
    result = calculate_progressive_tax(income, config_2025.individual.brackets)

    assert result.gross_tax == 0.0
    assert result.effective_rate == 0.0


def test_duplicated_top_rate_bracket_is_preserved(config_2025) -> None:
    rates = [bracket.rate for bracket in config_2025.individual.brackets]

    assert rates == [0.23, 0.35, 0.43, 0.43]
    assert config_2025.individual.brackets[-1].upper_bound is None


def test_round_currency_rounds_half_up() -> None:
    assert round_currency(2.675) == 2.68
    assert round_currency(0.125) == 0.13
    assert round_currency(-1.005) == -1.01
    assert round_currency(10) == 10.0


def test_round_currency_up_and_rate_helpers() -> None:
    assert round_currency_up(33.331) == 33.34
    assert round_currency_up(33.33) == 33.33
    assert round_rate(0.266_666) == 0.2667
