"""Unit tests for the ENK business result and minifradrag."""

from __future__ import annotations

from decimal import Decimal

import pytest

from norsktax.backend.app.models import BusinessCalculationRequest
from norsktax.backend.app.services.calculators import (
    compute_business_result,
    compute_standard_deduction,
)


def _request(**fields) -> BusinessCalculationRequest:
    return BusinessCalculationRequest.model_validate(fields)


def test_business_result_subtracts_expenses_and_capped_deduction(config_2024) -> None:
    breakdown = compute_business_result(
        _request(business_income=500000, general_expenses=100000), config_2024
    )

    assert breakdown.total_expenses == Decimal("100000")
    assert breakdown.standard_deduction == Decimal("86000")
    assert breakdown.business_result == Decimal("314000")
    assert breakdown.taxable_income == breakdown.business_result


def test_itemised_expenses_are_summed(config_2024) -> None:
    breakdown = compute_business_result(
        _request(
            business_income=400000,
            general_expenses=1000,
            payroll_costs=2000,
            depreciation=3000,
            office_expenses=4000,
            travel_expenses=5000,
            equipment_expenses=6000,
            other_expenses=7000,
        ),
        config_2024,
    )

    assert breakdown.total_expenses == Decimal("28000")


@pytest.mark.parametrize(
    ("income", "expected"),
    [
        ("100000", "43000"),
        ("200000", "86000"),
        ("200001", "86000"),
        ("0", "0"),
    ],
)
def test_standard_deduction(config_2024, income: str, expected: str) -> None:
    deduction = compute_standard_deduction(Decimal(income), config_2024.standard_deduction)

    assert deduction == Decimal(expected)


def test_prior_loss_reduces_result(config_2024) -> None:
    breakdown = compute_business_result(
        _request(business_income=500000, general_expenses=100000, prior_year_loss=50000),
        config_2024,
    )

    assert breakdown.result_before_loss == Decimal("314000")
    assert breakdown.loss_carried_forward == Decimal("50000")
    assert breakdown.business_result == Decimal("264000")


def test_large_prior_loss_floors_result_at_zero(config_2024) -> None:
    breakdown = compute_business_result(
        _request(business_income=500000, general_expenses=100000, prior_year_loss=400000),
        config_2024,
    )

    assert breakdown.business_result == Decimal("0")
    assert breakdown.loss_carried_forward == Decimal("314000")


def test_negative_result_without_prior_loss_is_reported(config_2024) -> None:
    breakdown = compute_business_result(
        _request(business_income=50000, general_expenses=100000), config_2024
    )

    assert breakdown.standard_deduction == Decimal("21500")
    assert breakdown.business_result == Decimal("-71500")


def test_loss_carry_forward_can_be_disabled(config_2024) -> None:
    disabled = config_2024.model_copy(
        update={
            "enterprise": config_2024.enterprise.model_copy(
                update={"allow_loss_carry_forward": False}
            )
        }
    )

    breakdown = compute_business_result(
        _request(business_income=500000, general_expenses=100000, prior_year_loss=50000),
        disabled,
    )

    assert breakdown.business_result == Decimal("314000")
    assert breakdown.loss_carried_forward == Decimal("0")


def test_loss_carry_forward_percent_scales_offset(config_2024) -> None:
    halved = config_2024.model_copy(
        update={
            "enterprise": config_2024.enterprise.model_copy(
                update={"loss_carry_forward_percent": Decimal("0.5")}
            )
        }
    )

    breakdown = compute_business_result(
        _request(business_income=500000, general_expenses=100000, prior_year_loss=50000),
        halved,
    )

    assert breakdown.business_result == Decimal("289000")
