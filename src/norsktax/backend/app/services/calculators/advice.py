"""Advisory bundle attached to ENK results."""

from __future__ import annotations

from decimal import Decimal

from norsktax.backend.app.localization import Translator
from norsktax.backend.app.models import (
    BusinessCalculationRequest,
    SalaryRecommendation,
    TaxAdvice,
)
from norsktax.backend.config.year_config import YearConfiguration

from .planning import estimate_savings, planning_band
from .salary import classify_risk
from .utils import format_amount, round_currency


def _recommended_actions(
    business_result: Decimal, config: YearConfiguration, translator: Translator
) -> list[str]:
    bands = config.income_bands
    actions: list[str] = []

    if business_result < bands.low:
        actions.append(translator("advice.grow_revenue"))
        actions.append(translator("advice.document_expenses"))
    elif business_result > bands.medium:
        actions.append(translator("advice.invest_equipment"))
        actions.append(translator("advice.plan_salary_dividend"))

    actions.append(translator("advice.consult_authorised_accountant"))
    return actions


def _potential_deductions(
    request: BusinessCalculationRequest, config: YearConfiguration, translator: Translator
) -> list[str]:
    caps = config.expense_caps
    hints: list[str] = []

    if request.office_expenses <= 0:
        hints.append(
            translator.format("advice.deduction.home_office", cap=format_amount(caps.home_office))
        )

    if request.business_kilometres > 0 and request.travel_expenses <= 0:
        allowance = round_currency(Decimal(request.business_kilometres) * caps.car_allowance_per_km)
        hints.append(
            translator.format(
                "advice.deduction.mileage",
                kilometres=format_amount(Decimal(request.business_kilometres)),
                amount=format_amount(allowance),
            )
        )

    return hints


def build_tax_advice(
    request: BusinessCalculationRequest,
    business_result: Decimal,
    salary: SalaryRecommendation,
    config: YearConfiguration,
    translator: Translator,
) -> TaxAdvice:
    """Assemble recommended actions, risk rating and planning estimates."""

    band = config.planning.bands[planning_band(request.business_income, config.income_bands)]

    return TaxAdvice(
        recommended_actions=_recommended_actions(business_result, config, translator),
        potential_deductions=_potential_deductions(request, config, translator),
        estimated_optimal_salary=salary.proposed_salary,
        risk_rating=classify_risk(business_result, config.income_bands),
        estimated_savings=estimate_savings(request.business_income, config.planning),
        recommended_timeframe=translator(band.timeframe_key),
    )


__all__ = ["build_tax_advice"]
