from decimal import Decimal

from norsktax.backend.config.validator import (
    main,
    validate_all_years,
    validate_year_configuration,
)
from norsktax.backend.config.year_config import load_year_configuration


def test_current_configurations_are_valid() -> None:
    results = validate_all_years()
    assert all(not issues for issues in results.values()), results


def test_validator_flags_contribution_rate_out_of_range() -> None:
    config = load_year_configuration(2024)
    contribution = config.social_contribution.model_copy(
        update={"self_employed_rate": Decimal("140")}
    )
    broken = config.model_copy(update={"social_contribution": contribution})

    errors = validate_year_configuration(broken)

    assert any(
        "social_contribution" in error and "between 0 and 100" in error for error in errors
    )


def test_validator_flags_vat_rate_above_standard() -> None:
    config = load_year_configuration(2024)
    vat = config.vat.model_copy(update={"food_rate": Decimal("30")})
    broken = config.model_copy(update={"vat": vat})

    errors = validate_year_configuration(broken)

    assert any("food rate" in error for error in errors)


def test_validator_flags_malformed_municipality_code() -> None:
    config = load_year_configuration(2024)
    municipal = config.municipal.model_copy(
        update={"rates": {**config.municipal.rates, "30": Decimal("22")}}
    )
    broken = config.model_copy(update={"municipal": municipal})

    errors = validate_year_configuration(broken)

    assert any("'30'" in error for error in errors)


def test_validator_flags_benefit_salary_mismatch() -> None:
    config = load_year_configuration(2024)
    strategy = config.salary_strategy.model_copy(
        update={"minimum_salary_for_benefits": Decimal("60000")}
    )
    broken = config.model_copy(update={"salary_strategy": strategy})

    errors = validate_year_configuration(broken)

    assert any(error.startswith("salary_strategy") for error in errors)


def test_validator_flags_duplicate_planning_strategies() -> None:
    config = load_year_configuration(2024)
    low = config.planning.bands["low"]
    duplicated = low.model_copy(update={"strategy_keys": (*low.strategy_keys, low.strategy_keys[0])})
    planning = config.planning.model_copy(
        update={"bands": {**config.planning.bands, "low": duplicated}}
    )
    broken = config.model_copy(update={"planning": planning})

    errors = validate_year_configuration(broken)

    assert any("planning.bands.low" in error for error in errors)


def test_cli_reports_success(capsys) -> None:
    assert main(["2024"]) == 0
    assert "[2024] OK" in capsys.readouterr().out


def test_cli_reports_unknown_year(capsys) -> None:
    assert main(["1999"]) == 1
    assert "failed to load configuration" in capsys.readouterr().out
