"""Load fiscal year rates and calendars from the bundled YAML files."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    ConfigurationError,
    TaxYearManifest,
    TaxYearManifestEntry,
    YearConfiguration,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _read_mapping(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        payload = yaml.safe_load(handle) or {}
    if not isinstance(payload, dict):
        raise ConfigurationError(f"{path.name} must contain a mapping at the top level")
    return payload


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Return the manifest of supported fiscal years."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    try:
        return TaxYearManifest.model_validate(_read_mapping(MANIFEST_FILE))
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    return load_manifest().years


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Return the validated configuration for ``year``.

    Raises ``FileNotFoundError`` when the year is not declared or its file is
    absent, and ``ConfigurationError`` when the file fails validation.
    """

    try:
        entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Configuration for year {year} not declared in manifest") from exc

    path = CONFIG_DIRECTORY / entry.resolved_filename
    if not path.exists():
        raise FileNotFoundError(f"Configuration file for year {year} missing: {path.name}")

    payload = _read_mapping(path)
    declared_year = payload.setdefault("year", year)
    if declared_year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {declared_year}"
        )

    try:
        return YearConfiguration.model_validate(payload)
    except ValidationError as error:
        raise ConfigurationError(f"Configuration validation failed for {year}: {error}") from error


def available_years() -> Sequence[int]:
    """Return the fiscal years declared in the manifest, ascending."""

    return load_manifest().supported_years


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "MANIFEST_FILE",
    "available_years",
    "load_manifest",
    "load_year_configuration",
    "manifest_entries",
]
