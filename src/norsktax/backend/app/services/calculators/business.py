"""ENK business result: income less expenses, minifradrag and prior loss."""

from __future__ import annotations

from decimal import Decimal

from norsktax.backend.app.models import BusinessCalculationRequest, BusinessResultBreakdown
from norsktax.backend.config.year_config import (
    EnterpriseConfig,
    StandardDeductionConfig,
    YearConfiguration,
)

from .utils import ZERO, round_currency


def compute_standard_deduction(
    business_income: Decimal, config: StandardDeductionConfig
) -> Decimal:
    """Return the minifradrag for ``business_income``.

    Up to the income threshold the deduction is a share of income limited by
    the cap; above it the flat cap applies.
    """

    if business_income <= config.income_threshold:
        return round_currency(min(business_income * config.rate, config.cap))
    return config.cap


def _loss_offset(prior_loss: Decimal, config: EnterpriseConfig) -> Decimal:
    if prior_loss <= 0 or not config.allow_loss_carry_forward:
        return ZERO
    return round_currency(prior_loss * config.loss_carry_forward_percent)


def compute_business_result(
    request: BusinessCalculationRequest, config: YearConfiguration
) -> BusinessResultBreakdown:
    """Compute the taxable ENK result for ``request``."""

    total_expenses = sum(request.expense_fields.values(), ZERO)
    deduction = compute_standard_deduction(request.business_income, config.standard_deduction)
    result = request.business_income - total_expenses - deduction

    consumed = ZERO
    offset = _loss_offset(request.prior_year_loss, config.enterprise)
    if offset > 0:
        # The loss is consumed in full this year; a negative result floors at zero.
        consumed = min(offset, max(result, ZERO))
        adjusted = max(ZERO, result - offset)
    else:
        adjusted = result

    return BusinessResultBreakdown(
        total_expenses=total_expenses,
        standard_deduction=deduction,
        result_before_loss=result,
        loss_carried_forward=consumed,
        business_result=adjusted,
    )


__all__ = ["compute_business_result", "compute_standard_deduction"]
