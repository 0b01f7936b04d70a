"""Configuration loader wrapping the shared schema models."""

from __future__ import annotations

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping, Sequence

import yaml
from pydantic import ValidationError

from .schema import (
    ConfigurationError,
    ConfigurationMissingError,
    EnterpriseConfig,
    ExpenseCapConfig,
    IncomeBands,
    MunicipalConfig,
    PlanningBand,
    PlanningConfig,
    SalaryStrategyConfig,
    SocialContributionConfig,
    StandardDeductionConfig,
    TaxYearManifest,
    TaxYearManifestEntry,
    ValidationBounds,
    VatConfig,
    YearConfiguration,
)

CONFIG_DIRECTORY = Path(__file__).resolve().parent / "data"
MANIFEST_FILE = CONFIG_DIRECTORY / "manifest.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ConfigurationError("Configuration file must define a mapping at the top level")
    return data


@lru_cache(maxsize=1)
def load_manifest() -> TaxYearManifest:
    """Load and cache the configuration manifest."""

    if not MANIFEST_FILE.exists():
        raise FileNotFoundError("Configuration manifest not found")

    raw_manifest = _load_yaml(MANIFEST_FILE)

    try:
        return TaxYearManifest.model_validate(raw_manifest)
    except ValidationError as error:
        raise ConfigurationError(f"Manifest validation failed: {error}") from error


def manifest_entries() -> Sequence[TaxYearManifestEntry]:
    """Expose the configured manifest entries."""

    return load_manifest().years


def build_year_configuration(raw_config: Mapping[str, Any]) -> YearConfiguration:
    """Validate a raw mapping into a :class:`YearConfiguration`."""

    try:
        return YearConfiguration.model_validate(raw_config)
    except ValidationError as error:
        # Validators raise ConfigurationError; pydantic wraps it, unwrap the
        # missing-section case so callers can tell it apart.
        for detail in error.errors():
            cause = (detail.get("ctx") or {}).get("error")
            if isinstance(cause, ConfigurationMissingError):
                raise ConfigurationMissingError(str(cause)) from error
        year = raw_config.get("year", "?") if isinstance(raw_config, Mapping) else "?"
        raise ConfigurationError(
            f"Configuration validation failed for {year}: {error}"
        ) from error


@lru_cache(maxsize=8)
def load_year_configuration(year: int) -> YearConfiguration:
    """Load configuration for the specified tax year from disk."""

    try:
        manifest_entry = load_manifest().get_entry(year)
    except KeyError as exc:
        raise FileNotFoundError(f"Configuration for year {year} not declared in manifest") from exc

    config_file = CONFIG_DIRECTORY / manifest_entry.resolved_filename
    if not config_file.exists():
        raise FileNotFoundError(
            f"Configuration file for year {year} missing: {config_file.name}"
        )

    raw_config = _load_yaml(config_file)
    raw_config.setdefault("year", year)

    configuration = build_year_configuration(raw_config)

    if configuration.year != year:
        raise ConfigurationError(
            f"Configuration year mismatch: expected {year}, found {configuration.year}"
        )

    return configuration


def available_years() -> Sequence[int]:
    """Return the tax years declared in the manifest."""

    return load_manifest().supported_years


def default_year() -> int:
    """Return the most recent supported tax year."""

    years = available_years()
    if not years:
        raise ConfigurationMissingError("No tax years are declared in the manifest")
    return years[-1]


def _is_unset(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float, Decimal)):
        return value <= 0
    return False


def apply_overrides(
    config: YearConfiguration, overrides: Mapping[str, Mapping[str, Any]] | None
) -> YearConfiguration:
    """Return ``config`` with caller supplied values merged over the defaults.

    Numeric overrides that are missing, ``None`` or not strictly positive keep
    the configured default, so callers can send partially filled forms.
    Unknown sections or keys are rejected.
    """

    if not overrides:
        return config

    data = config.model_dump()
    changed = False

    for section, values in overrides.items():
        if section in {"year", "meta"} or section not in data:
            raise ConfigurationError(f"Unknown configuration section '{section}'")
        if not isinstance(values, Mapping):
            raise ConfigurationError(f"Overrides for '{section}' must be a mapping")

        target = data[section]
        for key, value in values.items():
            if key not in target:
                raise ConfigurationError(f"Unknown configuration key '{section}.{key}'")
            if _is_unset(value):
                continue
            current = target[key]
            if isinstance(current, Mapping) and isinstance(value, Mapping):
                merged = dict(current)
                merged.update({k: v for k, v in value.items() if not _is_unset(v)})
                target[key] = merged
            else:
                target[key] = value
            changed = True

    if not changed:
        return config
    return build_year_configuration(data)


__all__ = [
    "CONFIG_DIRECTORY",
    "ConfigurationError",
    "ConfigurationMissingError",
    "EnterpriseConfig",
    "ExpenseCapConfig",
    "IncomeBands",
    "MANIFEST_FILE",
    "MunicipalConfig",
    "PlanningBand",
    "PlanningConfig",
    "SalaryStrategyConfig",
    "SocialContributionConfig",
    "StandardDeductionConfig",
    "TaxYearManifest",
    "TaxYearManifestEntry",
    "ValidationBounds",
    "VatConfig",
    "YearConfiguration",
    "apply_overrides",
    "available_years",
    "build_year_configuration",
    "default_year",
    "load_manifest",
    "load_year_configuration",
    "manifest_entries",
]
