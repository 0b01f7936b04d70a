"""Fail-fast checks applied before any calculation step runs."""

from __future__ import annotations

from decimal import Decimal
from typing import Mapping

from norsktax.backend.app.models import (
    BusinessCalculationRequest,
    InvalidArgumentError,
    TaxCalculationRequest,
)
from norsktax.backend.config.year_config import ValidationBounds


def _require_non_negative(values: Mapping[str, Decimal]) -> None:
    for label, value in values.items():
        if value < 0:
            raise InvalidArgumentError(f"Field '{label}' cannot be negative")


def ensure_income(income: Decimal, bounds: ValidationBounds, label: str = "income") -> None:
    """Reject negative incomes and incomes above the configured maximum."""

    _require_non_negative({label: income})
    if income < bounds.min_income:
        raise InvalidArgumentError(
            f"Field '{label}' must be at least {bounds.min_income}"
        )
    if income > bounds.max_income:
        raise InvalidArgumentError(
            f"Field '{label}' exceeds the maximum allowed income of {bounds.max_income}"
        )


def ensure_tax_request(
    request: TaxCalculationRequest | None, bounds: ValidationBounds
) -> TaxCalculationRequest:
    """Validate a personal tax request and return it."""

    if request is None:
        raise InvalidArgumentError("A calculation request is required")

    ensure_income(request.income, bounds)

    if request.age is not None and not (bounds.min_age <= request.age <= bounds.max_age):
        raise InvalidArgumentError(
            f"Field 'age' must be between {bounds.min_age} and {bounds.max_age}"
        )

    return request


def ensure_business_request(
    request: BusinessCalculationRequest | None, bounds: ValidationBounds
) -> BusinessCalculationRequest:
    """Validate an ENK request and return it."""

    if request is None:
        raise InvalidArgumentError("A calculation request is required")

    ensure_tax_request(request, bounds)
    ensure_income(request.business_income, bounds, "business_income")

    expenses = request.expense_fields
    _require_non_negative(expenses)
    for label, value in expenses.items():
        if value > bounds.max_expense:
            raise InvalidArgumentError(
                f"Field '{label}' exceeds the maximum allowed expense of {bounds.max_expense}"
            )

    withdrawals = {
        "salary_withdrawn": request.salary_withdrawn,
        "prior_year_loss": request.prior_year_loss,
    }
    _require_non_negative(withdrawals)
    for label, value in withdrawals.items():
        if value > bounds.max_income:
            raise InvalidArgumentError(
                f"Field '{label}' exceeds the maximum allowed income of {bounds.max_income}"
            )
    if request.business_result is not None and abs(request.business_result) > bounds.max_income:
        raise InvalidArgumentError(
            f"Field 'business_result' must be within {bounds.max_income} of zero"
        )

    if request.business_kilometres < 0:
        raise InvalidArgumentError("Field 'business_kilometres' cannot be negative")
    if request.business_kilometres > bounds.max_kilometres:
        raise InvalidArgumentError(
            f"Field 'business_kilometres' exceeds the maximum of {bounds.max_kilometres}"
        )

    if request.employee_count < 0:
        raise InvalidArgumentError("Field 'employee_count' cannot be negative")
    if request.employee_count > bounds.max_employees:
        raise InvalidArgumentError(
            f"Field 'employee_count' exceeds the maximum of {bounds.max_employees}"
        )

    return request


def ensure_amount(amount: Decimal, bounds: ValidationBounds, label: str = "amount") -> None:
    """Reject negative amounts and amounts above ``bounds.max_amount``."""

    _require_non_negative({label: amount})
    if amount > bounds.max_amount:
        raise InvalidArgumentError(
            f"Field '{label}' exceeds the maximum allowed amount of {bounds.max_amount}"
        )


__all__ = ["ensure_amount", "ensure_business_request", "ensure_income", "ensure_tax_request"]
