"""Test configuration utilities and shared fixtures."""

import sys
from pathlib import Path

# Ensure the ``src`` directory is importable when tests are executed without an
# editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

import pytest  # noqa: E402

from smartrate.backend.config.schema import YearConfiguration  # noqa: E402
from smartrate.backend.config.year_config import load_year_configuration  # noqa: E402


@pytest.fixture()
def config_2025() -> YearConfiguration:
    """Return the bundled 2025 configuration."""

    return load_year_configuration(2025)


@pytest.fixture()
def flat_rate_payload() -> dict[str, object]:
    """Return a valid flat-rate payload for a professional."""

    return {
        "regime": "flat_rate",
        "year": 2025,
        "revenue": 45_000,
        "category": "PROFESSIONAL",
        "contribution": {"regime": "inps_gestione_separata"},
    }
