"""Domain-specific calculation helpers."""

from .contributions import ContributionRegime, calculate_contribution
from .corporate import calculate_corporate
from .deadlines import generate_deadlines
from .flat_rate import calculate_flat_rate
from .individual import calculate_individual
from .simulator import plan_savings, simulate_payment_schedule, summarise_schedule
from .utils import calculate_progressive_tax, round_currency, round_rate

__all__ = [
    "ContributionRegime",
    "calculate_contribution",
    "calculate_corporate",
    "calculate_flat_rate",
    "calculate_individual",
    "calculate_progressive_tax",
    "generate_deadlines",
    "plan_savings",
    "round_currency",
    "round_rate",
    "simulate_payment_schedule",
    "summarise_schedule",
]
