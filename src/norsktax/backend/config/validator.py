"""Utilities for validating year configuration data and surfacing issues."""

from __future__ import annotations

import argparse
from collections import Counter
from decimal import Decimal
from typing import Mapping, Sequence

from .schema import PERCENT_CEILING, PLANNING_BAND_NAMES
from .year_config import (
    ConfigurationError,
    MunicipalConfig,
    PlanningConfig,
    SalaryStrategyConfig,
    SocialContributionConfig,
    VatConfig,
    YearConfiguration,
    available_years,
    load_year_configuration,
)


def _format_scope(scope: str, message: str) -> str:
    return f"{scope}: {message}"


def _validate_percentages(scope: str, rates: Mapping[str, Decimal]) -> list[str]:
    errors: list[str] = []

    for label, value in rates.items():
        if value < 0 or value > PERCENT_CEILING:
            errors.append(
                _format_scope(
                    scope,
                    f"{label} {value} must be a percentage between 0 and 100",
                )
            )

    return errors


def _validate_social_contribution(config: SocialContributionConfig) -> list[str]:
    scope = "social_contribution"
    errors = _validate_percentages(
        scope,
        {
            "employee_rate": config.employee_rate,
            "self_employed_rate": config.self_employed_rate,
            "pensioner_rate": config.pensioner_rate,
        },
    )

    if config.lower_bound >= config.upper_bound:
        errors.append(_format_scope(scope, "lower bound must be below the upper bound"))

    if config.adjustment_factor <= 0:
        errors.append(_format_scope(scope, "adjustment factor must be positive"))

    if config.pensioner_rate > config.employee_rate:
        errors.append(
            _format_scope(scope, "pensioner rate should not exceed the employee rate")
        )

    return errors


def _validate_vat(config: VatConfig) -> list[str]:
    errors = _validate_percentages("vat", config.rates_by_category())

    standard = config.standard_rate
    for category, rate in config.rates_by_category().items():
        if rate > standard:
            errors.append(
                _format_scope(
                    "vat",
                    f"{category} rate {rate} exceeds the standard rate {standard}",
                )
            )

    return errors


def _validate_municipal(config: MunicipalConfig) -> list[str]:
    scope = "municipal"
    errors = _validate_percentages(
        scope, {"standard_rate": config.standard_rate, **config.rates}
    )

    for code in config.rates:
        if len(code) != 4 or not code.isdigit():
            errors.append(
                _format_scope(scope, f"municipality code '{code}' must be four digits")
            )

    return errors


def _validate_salary_strategy(
    strategy: SalaryStrategyConfig, contribution: SocialContributionConfig
) -> list[str]:
    scope = "salary_strategy"
    errors: list[str] = []

    if strategy.min_salary_percent > strategy.max_salary_percent:
        errors.append(
            _format_scope(scope, "min_salary_percent cannot exceed max_salary_percent")
        )

    if strategy.medium_income_salary > strategy.high_income_salary:
        errors.append(
            _format_scope(scope, "medium income salary cannot exceed the high income salary")
        )

    if strategy.minimum_salary_for_benefits != contribution.lower_bound:
        errors.append(
            _format_scope(
                scope,
                (
                    "minimum salary for benefits "
                    f"{strategy.minimum_salary_for_benefits} differs from the social "
                    f"contribution lower bound {contribution.lower_bound}"
                ),
            )
        )

    return errors


def _validate_planning(config: PlanningConfig) -> list[str]:
    scope = "planning"
    errors: list[str] = []

    for name in PLANNING_BAND_NAMES:
        band = config.bands.get(name)
        if band is None:
            errors.append(_format_scope(scope, f"band '{name}' is not configured"))
            continue
        duplicates = [
            key for key, count in Counter(band.strategy_keys).items() if count > 1
        ]
        if duplicates:
            errors.append(
                _format_scope(
                    f"{scope}.bands.{name}",
                    f"duplicate strategies detected: {sorted(duplicates)}",
                )
            )

    extra = sorted(set(config.bands) - set(PLANNING_BAND_NAMES))
    if extra:
        errors.append(_format_scope(scope, f"unknown bands configured: {extra}"))

    if len(set(config.priority_labels)) != len(config.priority_labels):
        errors.append(_format_scope(scope, "priority labels must be unique"))

    return errors


def validate_year_configuration(config: YearConfiguration) -> list[str]:
    """Return a list of validation issues detected for ``config``."""

    errors: list[str] = []

    errors.extend(_validate_social_contribution(config.social_contribution))
    errors.extend(_validate_vat(config.vat))
    errors.extend(_validate_municipal(config.municipal))
    errors.extend(
        _validate_salary_strategy(config.salary_strategy, config.social_contribution)
    )
    errors.extend(_validate_planning(config.planning))

    bands = config.income_bands
    if config.standard_deduction.income_threshold > bands.medium:
        errors.append(
            _format_scope(
                "standard_deduction",
                "income threshold should not exceed the medium income band",
            )
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
        description="Validate configured tax years and report inconsistent rates."
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
        except (FileNotFoundError, ConfigurationError) as error:
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
