"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from typing import Mapping, Sequence

from .schema import (
    ContributionsConfig,
    CorporateConfig,
    DeadlineConfig,
    FlatRateConfig,
    IndividualConfig,
    YearConfiguration,
)
from .year_config import available_years, load_year_configuration


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_rate_table(scope: str, rates: Mapping[str, float]) -> list[str]:
    errors: list[str] = []
    for key, rate in rates.items():
        if rate < 0 or rate > 1:
            errors.append(
                _format_scope(scope, f"rate for '{key}' must be between 0 and 1")
            )
    return errors


def _validate_flat_rate(config: FlatRateConfig) -> list[str]:
    errors = _validate_rate_table("flat_rate.coefficients", config.coefficients)

    if config.startup_rate > config.standard_rate:
        errors.append(
            _format_scope(
                "flat_rate",
                "startup rate cannot exceed the standard rate",
            )
        )

    if config.default_coefficient not in config.coefficients.values():
        errors.append(
            _format_scope(
                "flat_rate",
                (
                    "default coefficient "
                    f"{config.default_coefficient} does not match any category"
                ),
            )
        )

    return errors


def _validate_individual(config: IndividualConfig) -> list[str]:
    errors: list[str] = []

    previous_rate: float | None = None
    for index, bracket in enumerate(config.brackets):
        if previous_rate is not None and bracket.rate < previous_rate:
            errors.append(
                _format_scope(
                    f"individual.tax_brackets[{index}]",
                    "marginal rates must not decrease",
                )
            )
        previous_rate = bracket.rate

    return errors


def _validate_corporate(config: CorporateConfig) -> list[str]:
    errors = _validate_rate_table("corporate.regional_rates", config.regional_rates)

    administrator = config.administrator
    if administrator.maximum_base <= administrator.minimum_base:
        errors.append(
            _format_scope(
                "corporate.administrator",
                "maximum base must exceed the minimum base",
            )
        )

    return errors


def _validate_contributions(config: ContributionsConfig) -> list[str]:
    errors: list[str] = []

    separata = config.gestione_separata
    for label, value in {
        "full": separata.full_rate,
        "reduced": separata.reduced_rate,
        "reverse charge uplift": separata.reverse_charge_uplift,
    }.items():
        if value < 0 or value > 1:
            errors.append(
                _format_scope(
                    "contributions.gestione_separata",
                    f"{label} rate {value} must be between 0 and 1",
                )
            )
    if separata.reduced_rate > separata.full_rate:
        errors.append(
            _format_scope(
                "contributions.gestione_separata",
                "reduced rate cannot exceed the full rate",
            )
        )

    forense = config.cassa_forense
    if forense.subjective_rate_high > forense.subjective_rate:
        errors.append(
            _format_scope(
                "contributions.cassa_forense",
                "rate above the threshold should not exceed the base rate",
            )
        )
    if forense.minimum_subjective < 0 or forense.minimum_integrative < 0:
        errors.append(
            _format_scope("contributions.cassa_forense", "minimums must be non-negative")
        )

    inarcassa = config.inarcassa
    if inarcassa.maternity < 0 or inarcassa.minimum_integrative < 0:
        errors.append(
            _format_scope(
                "contributions.inarcassa",
                "fixed amounts must be non-negative",
            )
        )

    for scope, ivs in (
        ("contributions.ivs_artigiani", config.ivs_artigiani),
        ("contributions.ivs_commercianti", config.ivs_commercianti),
    ):
        if ivs.fixed_contribution < 0:
            errors.append(_format_scope(scope, "fixed contribution must be non-negative"))
        if ivs.rate_high < ivs.rate:
            errors.append(
                _format_scope(scope, "rate above the threshold should not be lower")
            )
        for label, value in {
            "rate": ivs.rate,
            "rate_high": ivs.rate_high,
            "surcharge_rate": ivs.surcharge_rate,
        }.items():
            if value < 0 or value > 1:
                errors.append(
                    _format_scope(scope, f"{label} {value} must be between 0 and 1")
                )

    if "none" not in config.reductions:
        errors.append(
            _format_scope("contributions.reductions", "a 'none' reduction must be declared")
        )
    for key, factor in config.reductions.items():
        if factor <= 0 or factor > 1:
            errors.append(
                _format_scope(
                    "contributions.reductions",
                    f"factor for '{key}' must be in the (0, 1] range",
                )
            )

    return errors


def _validate_deadlines(config: DeadlineConfig, year: int) -> list[str]:
    errors: list[str] = []

    for scope, dates in (
        ("deadlines.contributions", config.contributions),
        ("deadlines.vat", config.vat),
        ("deadlines.vat_monthly", config.vat_monthly),
    ):
        resolved = [entry.resolve(year) for entry in dates]
        if resolved != sorted(resolved):
            errors.append(_format_scope(scope, "settlement dates should be chronological"))

    first = config.tax_balance_first_advance.resolve(year)
    deferred = config.tax_balance_deferred.resolve(year)
    second = config.tax_second_advance.resolve(year)
    if second <= first:
        errors.append(
            _format_scope(
                "deadlines",
                "second advance must fall after the balance and first advance",
            )
        )
    if not first < deferred < second:
        errors.append(
            _format_scope(
                "deadlines.tax_balance_deferred",
                "deferred balance must fall between the first and second advance",
            )
        )

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues for the provided configuration."""

    errors: list[str] = []

    errors.extend(_validate_flat_rate(config.flat_rate))
    errors.extend(_validate_individual(config.individual))
    errors.extend(_validate_corporate(config.corporate))
    errors.extend(_validate_contributions(config.contributions))
    errors.extend(_validate_deadlines(config.deadlines, config.year))

    shares = config.advances.first_share + config.advances.second_share
    if abs(shares - 1.0) > 1e-9:
        errors.append(
            _format_scope("advances", f"installment shares must sum to 1 (found {shares})")
        )

    return errors


def validate_all_years(years: Sequence[int] | None = None) -> dict[int, list[str]]:
    """Validate all configured years and return issues keyed by year."""

    targets = years or available_years()
    results: dict[int, list[str]] = {}

    for year in targets:
        config = load_year_configuration(year)
        results[int(year)] = validate_year_configuration(config)

    return results


def _build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Validate configured fiscal years and report issues helpful to contributors."
        )
    )
    parser.add_argument(
        "years",
        nargs="*",
        type=int,
        help="Specific years to validate (defaults to all configured years)",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point for running validations from the command line."""

    parser = _build_argument_parser()
    args = parser.parse_args(argv)
    years = args.years or available_years()

    if not years:
        parser.print_help()
        return 1

    exit_code = 0

    for year in years:
        try:
            config = load_year_configuration(year)
        except FileNotFoundError as error:
            print(f"[{year}] failed to load configuration: {error}")
            exit_code = 1
            continue

        issues = validate_year_configuration(config)
        if issues:
            exit_code = 1
            print(f"[{year}] {len(issues)} issue(s) detected:")
            for issue in issues:
                print(f"  - {issue}")
        else:
            print(f"[{year}] OK")

    return exit_code


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    raise SystemExit(main())
