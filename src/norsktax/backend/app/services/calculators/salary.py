"""Salary/dividend split heuristics for ENK owners."""

from __future__ import annotations

from decimal import Decimal

from norsktax.backend.app.localization import Translator
from norsktax.backend.app.models import SalaryRecommendation
from norsktax.backend.config.year_config import IncomeBands, YearConfiguration

from .utils import ZERO, format_amount, round_currency

RISK_LOW = "low"
RISK_MEDIUM = "medium"
RISK_HIGH = "high"


def classify_risk(business_result: Decimal, bands: IncomeBands) -> str:
    """Discretise ``business_result`` into a qualitative risk rating."""

    if business_result < bands.low:
        return RISK_LOW
    if business_result <= bands.medium:
        return RISK_MEDIUM
    return RISK_HIGH


def propose_salary(business_result: Decimal, config: YearConfiguration) -> Decimal:
    """Return the salary figure suggested for ``business_result``."""

    bands = config.income_bands
    strategy = config.salary_strategy

    if business_result <= bands.low:
        salary = business_result * strategy.low_income_salary_percent
    elif business_result <= bands.medium:
        salary = strategy.medium_income_salary
    else:
        salary = strategy.high_income_salary

    return round_currency(max(salary, ZERO))


def _recommendations(
    business_result: Decimal,
    salary: Decimal,
    config: YearConfiguration,
    translator: Translator,
) -> list[str]:
    bands = config.income_bands
    minimum = config.salary_strategy.minimum_salary_for_benefits
    messages: list[str] = []

    if business_result < bands.low / 2:
        messages.append(translator("salary.take_most_as_salary"))
    elif business_result > bands.medium:
        messages.append(translator("salary.consider_limited_company"))
        messages.append(translator("salary.maximise_salary_to_cap"))

    if salary < minimum:
        messages.append(
            translator.format("salary.raise_to_minimum", amount=format_amount(minimum))
        )

    messages.append(translator("salary.consult_accountant"))
    return messages


def recommend_salary(
    business_result: Decimal, config: YearConfiguration, translator: Translator
) -> SalaryRecommendation:
    """Propose a salary/dividend split for ``business_result``."""

    salary = propose_salary(business_result, config)
    dividend = max(ZERO, business_result - salary)

    return SalaryRecommendation(
        business_result=business_result,
        proposed_salary=salary,
        proposed_dividend=dividend,
        recommendations=_recommendations(business_result, salary, config, translator),
        risk_rating=classify_risk(business_result, config.income_bands),
    )


__all__ = [
    "RISK_HIGH",
    "RISK_LOW",
    "RISK_MEDIUM",
    "classify_risk",
    "propose_salary",
    "recommend_salary",
]
