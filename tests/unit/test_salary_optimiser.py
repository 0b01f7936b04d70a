"""Unit tests for the salary/dividend optimiser."""

from __future__ import annotations

from decimal import Decimal

import pytest

from norsktax.backend.app.services.calculators import classify_risk, recommend_salary


@pytest.mark.parametrize(
    ("business_result", "salary", "dividend", "risk"),
    [
        ("150000", "90000", "60000", "low"),
        ("314000", "200000", "114000", "medium"),
        ("800000", "300000", "500000", "high"),
    ],
)
def test_salary_split_by_band(
    config_2024, translator, business_result: str, salary: str, dividend: str, risk: str
) -> None:
    recommendation = recommend_salary(Decimal(business_result), config_2024, translator)

    assert recommendation.proposed_salary == Decimal(salary)
    assert recommendation.proposed_dividend == Decimal(dividend)
    assert recommendation.risk_rating == risk


def test_low_band_boundary_uses_percentage(config_2024, translator) -> None:
    recommendation = recommend_salary(Decimal("200000"), config_2024, translator)

    assert recommendation.proposed_salary == Decimal("120000")
    assert recommendation.risk_rating == "medium"


def test_negative_result_proposes_nothing(config_2024, translator) -> None:
    recommendation = recommend_salary(Decimal("-10000"), config_2024, translator)

    assert recommendation.proposed_salary == Decimal("0")
    assert recommendation.proposed_dividend == Decimal("0")
    assert recommendation.risk_rating == "low"


def test_small_result_recommends_salary_and_minimum(config_2024, translator) -> None:
    recommendation = recommend_salary(Decimal("80000"), config_2024, translator)

    assert recommendation.recommendations[0] == translator("salary.take_most_as_salary")
    assert any("69 900" in message for message in recommendation.recommendations)


def test_large_result_suggests_limited_company(config_2024, translator) -> None:
    recommendation = recommend_salary(Decimal("800000"), config_2024, translator)

    assert translator("salary.consider_limited_company") in recommendation.recommendations


@pytest.mark.parametrize("business_result", ["50000", "314000", "900000"])
def test_recommendations_end_with_accountant(
    config_2024, translator, business_result: str
) -> None:
    recommendation = recommend_salary(Decimal(business_result), config_2024, translator)

    assert recommendation.recommendations[-1] == translator("salary.consult_accountant")


def test_classify_risk_boundaries(config_2024) -> None:
    bands = config_2024.income_bands

    assert classify_risk(Decimal("199999"), bands) == "low"
    assert classify_risk(Decimal("500000"), bands) == "medium"
    assert classify_risk(Decimal("500001"), bands) == "high"
