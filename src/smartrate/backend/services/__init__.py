"""Service-layer entry points for the SmartRate engine."""

from .calculation_service import calculate, validate_input
from .schedule_service import build_schedule, conservative_multiplier

__all__ = [
    "build_schedule",
    "calculate",
    "conservative_multiplier",
    "validate_input",
]
