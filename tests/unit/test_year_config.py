"""Unit coverage for year configuration loading and caller overrides."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from shutil import copy2

import pytest
import yaml
from pydantic import ValidationError

from norsktax.backend.config import year_config
from norsktax.backend.config.year_config import (
    ConfigurationError,
    ConfigurationMissingError,
    apply_overrides,
    build_year_configuration,
)


@pytest.fixture()
def isolated_config_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Return a temporary configuration directory patched into ``year_config``."""

    original_directory = year_config.CONFIG_DIRECTORY
    copy2(original_directory / "2024.yaml", tmp_path / "2024.yaml")

    manifest_path = tmp_path / "manifest.yaml"
    copy2(original_directory / "manifest.yaml", manifest_path)

    monkeypatch.setattr(year_config, "CONFIG_DIRECTORY", tmp_path)
    monkeypatch.setattr(year_config, "MANIFEST_FILE", manifest_path)
    year_config.load_year_configuration.cache_clear()
    year_config.load_manifest.cache_clear()

    yield tmp_path

    year_config.load_year_configuration.cache_clear()
    year_config.load_manifest.cache_clear()


def _raw_2024() -> dict:
    path = year_config.CONFIG_DIRECTORY / "2024.yaml"
    return yaml.safe_load(path.read_text(encoding="utf-8"))


def test_loads_2024_defaults() -> None:
    config = year_config.load_year_configuration(2024)

    assert config.social_contribution.self_employed_rate == Decimal("11.4")
    assert config.social_contribution.employee_rate == Decimal("8.2")
    assert config.standard_deduction.cap == Decimal("86000")
    assert config.vat.rate_for("food") == Decimal("15")
    assert config.municipal.rate_for("0301") == Decimal("22")
    assert config.expense_caps.car_allowance_per_km == Decimal("3.70")


def test_configuration_is_frozen() -> None:
    config = year_config.load_year_configuration(2024)

    with pytest.raises(ValidationError):
        config.social_contribution.employee_rate = Decimal("1")  # type: ignore[misc]


def test_default_year_is_latest_supported() -> None:
    assert year_config.default_year() == max(year_config.available_years())


def test_unknown_year_raises_file_not_found() -> None:
    with pytest.raises(FileNotFoundError):
        year_config.load_year_configuration(1999)


def test_new_manifest_entry_is_discovered(isolated_config_directory: Path) -> None:
    (isolated_config_directory / "2025.yaml").write_text(
        (isolated_config_directory / "2024.yaml").read_text(encoding="utf-8").replace(
            "year: 2024", "year: 2025"
        ),
        encoding="utf-8",
    )
    manifest_path = isolated_config_directory / "manifest.yaml"
    manifest = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    manifest["years"].append({"year": 2025})
    manifest_path.write_text(yaml.safe_dump(manifest, sort_keys=False), encoding="utf-8")
    year_config.load_manifest.cache_clear()

    assert year_config.available_years() == (2024, 2025)
    assert year_config.load_year_configuration(2025).year == 2025


def test_missing_file_for_declared_year(isolated_config_directory: Path) -> None:
    (isolated_config_directory / "2024.yaml").unlink()

    with pytest.raises(FileNotFoundError):
        year_config.load_year_configuration(2024)


def test_year_mismatch_is_rejected(isolated_config_directory: Path) -> None:
    path = isolated_config_directory / "2024.yaml"
    path.write_text(
        path.read_text(encoding="utf-8").replace("year: 2024", "year: 2023"),
        encoding="utf-8",
    )

    with pytest.raises(ConfigurationError, match="mismatch"):
        year_config.load_year_configuration(2024)


def test_missing_section_raises_configuration_missing() -> None:
    raw = _raw_2024()
    del raw["vat"]

    with pytest.raises(ConfigurationMissingError, match="vat"):
        build_year_configuration(raw)


def test_missing_planning_band_raises_configuration_missing() -> None:
    raw = _raw_2024()
    del raw["planning"]["bands"]["high"]

    with pytest.raises(ConfigurationMissingError):
        build_year_configuration(raw)


def test_inverted_contribution_band_is_rejected() -> None:
    raw = _raw_2024()
    raw["social_contribution"]["lower_bound"] = 900000

    with pytest.raises(ConfigurationError):
        build_year_configuration(raw)


def test_unknown_field_is_rejected() -> None:
    raw = _raw_2024()
    raw["vat"]["super_rate"] = 50

    with pytest.raises(ConfigurationError):
        build_year_configuration(raw)


def test_legacy_rounding_names_are_normalised() -> None:
    raw = _raw_2024()
    raw["vat"]["rounding"] = "Bankers"

    config = build_year_configuration(raw)

    assert config.vat.rounding == "half_even"


def test_overrides_replace_positive_values() -> None:
    config = year_config.load_year_configuration(2024)

    updated = apply_overrides(
        config, {"social_contribution": {"self_employed_rate": 10, "employee_rate": 0}}
    )

    assert updated.social_contribution.self_employed_rate == Decimal("10")
    assert updated.social_contribution.employee_rate == Decimal("8.2")
    assert config.social_contribution.self_employed_rate == Decimal("11.4")


def test_unset_overrides_return_same_configuration() -> None:
    config = year_config.load_year_configuration(2024)

    assert apply_overrides(config, None) is config
    assert apply_overrides(config, {"vat": {"standard_rate": None}}) is config


def test_overrides_merge_nested_mappings() -> None:
    config = year_config.load_year_configuration(2024)

    updated = apply_overrides(config, {"municipal": {"rates": {"3201": 21.5}}})

    assert updated.municipal.rate_for("3201") == Decimal("21.5")
    assert updated.municipal.rate_for("0301") == Decimal("22")


@pytest.mark.parametrize(
    "overrides",
    [
        {"unknown": {"value": 1}},
        {"vat": {"unknown_rate": 1}},
        {"year": {"value": 2030}},
    ],
)
def test_invalid_overrides_are_rejected(overrides) -> None:
    config = year_config.load_year_configuration(2024)

    with pytest.raises(ConfigurationError):
        apply_overrides(config, overrides)
