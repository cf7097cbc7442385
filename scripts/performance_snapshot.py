#!/usr/bin/env python3
"""Collect baseline timings for the calculation and schedule entry points."""

from __future__ import annotations

import json
import os
import sys
from datetime import date
from pathlib import Path
from time import perf_counter

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from smartrate.backend.services import build_schedule, calculate  # noqa: E402

SAMPLE_PAYLOADS = {
    "flat_rate": {
        "regime": "flat_rate",
        "year": 2025,
        "revenue": 45000,
        "category": "PROFESSIONAL",
        "contribution": {"regime": "inps_gestione_separata"},
    },
    "ordinary_individual": {
        "regime": "ordinary_individual",
        "year": 2025,
        "revenue": 60000,
        "documented_expenses": 20000,
        "contribution": {"regime": "inps_artigiani", "reduction": "reduction_35"},
    },
    "corporate": {
        "regime": "corporate",
        "year": 2025,
        "revenue": 500000,
        "operating_costs": 200000,
        "employee_costs": 100000,
        "employee_count": 3,
        "administrator_compensation": 50000,
        "region": "LOMBARDIA",
    },
}


def measure(name: str, iterations: int) -> dict[str, float]:
    """Return timing statistics for repeated calculations plus schedules."""

    payload = SAMPLE_PAYLOADS[name]
    today = date(2025, 1, 1)
    build_schedule(calculate(payload), today=today)  # Warm cache
    start = perf_counter()
    for _ in range(iterations):
        build_schedule(calculate(payload), today=today)
    elapsed = perf_counter() - start
    return {
        "iterations": iterations,
        "total_ms": elapsed * 1000,
        "average_ms": (elapsed / iterations) * 1000,
    }


def main() -> None:
    iterations = int(os.getenv("SMARTRATE_PROFILE_ITERATIONS", "75"))
    report = {name: measure(name, iterations) for name in SAMPLE_PAYLOADS}
    print(json.dumps(report, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()
