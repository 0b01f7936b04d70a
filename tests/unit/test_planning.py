"""Unit tests for planning strategies and prepayment estimates."""

from __future__ import annotations

from decimal import Decimal

import pytest

from norsktax.backend.app.models import BusinessCalculationRequest
from norsktax.backend.app.services.calculators import (
    build_planning_strategy,
    estimate_prepayment,
    planning_band,
)


def _request(**fields) -> BusinessCalculationRequest:
    return BusinessCalculationRequest.model_validate(fields)


@pytest.mark.parametrize(
    ("income", "band"),
    [("150000", "low"), ("200000", "medium"), ("500000", "medium"), ("600000", "high")],
)
def test_planning_band(config_2024, income: str, band: str) -> None:
    assert planning_band(Decimal(income), config_2024.income_bands) == band


def test_medium_band_strategy(config_2024, translator) -> None:
    result = build_planning_strategy(_request(business_income=500000), config_2024, translator)

    assert result.band == "medium"
    assert result.estimated_savings == Decimal("22500")
    assert result.timeframe == translator("planning.timeframe.monthly")
    assert result.strategies[0] == translator("planning.strategy.invest_equipment")
    assert result.risk_rating == "medium"
    assert result.investment_requirement == Decimal("0")


def test_priorities_follow_strategy_order(config_2024, translator) -> None:
    result = build_planning_strategy(_request(business_income=900000), config_2024, translator)

    assert list(result.priorities.values()) == ["high", "medium", "low"]
    assert list(result.priorities) == result.strategies


def test_prepayment_estimate(config_2024) -> None:
    amount = estimate_prepayment(_request(business_income=500000), config_2024.planning)

    assert amount == Decimal("75000")


def test_prior_loss_lowers_prepayment(config_2024) -> None:
    amount = estimate_prepayment(
        _request(business_income=500000, prior_year_loss=100000), config_2024.planning
    )

    assert amount == Decimal("67500")


def test_prepayment_never_negative(config_2024) -> None:
    amount = estimate_prepayment(
        _request(business_income=10000, prior_year_loss=100000), config_2024.planning
    )

    assert amount == Decimal("0")
