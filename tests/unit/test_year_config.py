"""Unit coverage for year configuration discovery and parsing utilities."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from shutil import copy2

import pytest
import yaml

from smartrate.backend.config import year_config


@pytest.fixture()
def isolated_config_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary configuration directory patched into ``year_config``."""

    original_directory = year_config.CONFIG_DIRECTORY
    copy2(original_directory / "2025.yaml", tmp_path / "2025.yaml")

    manifest_path = tmp_path / "manifest.yaml"
    copy2(original_directory / "manifest.yaml", manifest_path)

    monkeypatch.setattr(year_config, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(year_config, "MANIFEST_FILE", manifest_path)
    year_config.load_year_configuration.cache_clear()
    year_config.load_manifest.cache_clear()

    yield tmp_path

    year_config.load_year_configuration.cache_clear()
    year_config.load_manifest.cache_clear()


def _register_year(directory: Path, year: int, payload: dict) -> None:
    (directory / f"{year}.yaml").write_text(
        yaml.safe_dump(payload, sort_keys=False, allow_unicode=True)
    )
    manifest_path = directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text())
    manifest.setdefault("years", []).append({"year": year})
    manifest_path.write_text(yaml.safe_dump(manifest, sort_keys=False))
    year_config.load_manifest.cache_clear()


def test_available_years_follows_manifest(isolated_config_directory: Path) -> None:
    payload = yaml.safe_load((isolated_config_directory / "2025.yaml").read_text())
    _register_year(isolated_config_directory, 2030, payload)

    assert year_config.available_years() == (2025, 2030)
    assert year_config.load_year_configuration(2030).year == 2030


def test_undeclared_year_raises_file_not_found(isolated_config_directory: Path) -> None:
    with pytest.raises(FileNotFoundError):
        year_config.load_year_configuration(2024)


def test_non_contiguous_brackets_are_rejected(isolated_config_directory: Path) -> None:
    payload = yaml.safe_load((isolated_config_directory / "2025.yaml").read_text())
    payload["individual"]["tax_brackets"][1]["lower"] = 30_000
    _register_year(isolated_config_directory, 2031, payload)

    with pytest.raises(year_config.ConfigurationError, match="contiguous"):
        year_config.load_year_configuration(2031)


def test_unknown_sections_are_rejected(isolated_config_directory: Path) -> None:
    payload = yaml.safe_load((isolated_config_directory / "2025.yaml").read_text())
    payload["surprise"] = {"value": 1}
    _register_year(isolated_config_directory, 2032, payload)

    with pytest.raises(year_config.ConfigurationError):
        year_config.load_year_configuration(2032)


def test_configuration_models_are_frozen() -> None:
    config = year_config.load_year_configuration(2025)

    with pytest.raises(Exception):
        config.flat_rate.standard_rate = 0.5  # type: ignore[misc]


def test_lookup_helpers_normalise_keys() -> None:
    config = year_config.load_year_configuration(2025)

    assert config.flat_rate.coefficient_for("professional") == 0.78
    assert config.flat_rate.coefficient_for("unknown") is None
    assert config.corporate.regional_rate_for("Emilia Romagna") == 0.0465
    assert len(config.corporate.regional_rates) == 20


def test_deadlines_resolve_into_following_year() -> None:
    deadlines = year_config.load_year_configuration(2025).deadlines

    assert deadlines.tax_balance_first_advance.resolve(2025) == date(2025, 6, 30)
    assert deadlines.contributions[-1].resolve(2025) == date(2026, 2, 16)
    assert deadlines.vat[-1].resolve(2025) == date(2026, 1, 16)
    assert deadlines.vat_monthly[-1].resolve(2025) == date(2026, 1, 16)
    assert deadlines.tax_balance_deferred.resolve(2025) == date(2025, 7, 30)


def test_incomplete_monthly_vat_calendar_is_rejected(isolated_config_directory: Path) -> None:
    payload = yaml.safe_load((isolated_config_directory / "2025.yaml").read_text())
    payload["deadlines"]["vat_monthly"] = payload["deadlines"]["vat_monthly"][:11]
    _register_year(isolated_config_directory, 2033, payload)

    with pytest.raises(year_config.ConfigurationError, match="twelve months"):
        year_config.load_year_configuration(2033)
