"""Utility helpers for calculator modules."""

from __future__ import annotations

from collections.abc import Sequence
from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal

from smartrate.backend.config.schema import AdvanceConfig, TaxBracket
from smartrate.backend.models import ProgressiveTax

_CENT = Decimal("0.01")
_RATE_STEP = Decimal("0.0001")


def calculate_progressive_tax(
    amount: float, brackets: Sequence[TaxBracket]
) -> ProgressiveTax:
    """Calculate progressive tax for ``amount`` using ``brackets``.

    Each bracket taxes the slice of income inside ``[lower, upper)``; the walk
    stops as soon as the income is exhausted.
    """

    if amount <= 0:
        return ProgressiveTax(gross_tax=0.0, effective_rate=0.0)

    total = 0.0
    lower_bound = 0.0

    for bracket in brackets:
        upper = bracket.upper_bound
        if upper is None or amount < upper:
            total += (amount - lower_bound) * bracket.rate
            break

        total += (upper - lower_bound) * bracket.rate
        lower_bound = upper

    return ProgressiveTax(gross_tax=total, effective_rate=total / amount)


def split_advances(amount: float, advances: AdvanceConfig) -> tuple[float, float]:
    """Return the first and second advance installments owed on ``amount``."""

    if amount <= 0:
        return 0.0, 0.0
    return amount * advances.first_share, amount * advances.second_share


def round_currency(value: float) -> float:
    """Round monetary amounts to two decimals, halves away from zero."""

    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_HALF_UP))


def round_currency_up(value: float) -> float:
    """Round monetary amounts up to the next cent."""

    return float(Decimal(str(value)).quantize(_CENT, rounding=ROUND_CEILING))


def round_rate(value: float) -> float:
    """Round rate values to four decimals."""

    return float(Decimal(str(value)).quantize(_RATE_STEP, rounding=ROUND_HALF_UP))


__all__ = [
    "calculate_progressive_tax",
    "round_currency",
    "round_currency_up",
    "round_rate",
    "split_advances",
]
