"""Planning strategies and prepayment estimates by income band."""

from __future__ import annotations

from decimal import Decimal

from norsktax.backend.app.localization import Translator
from norsktax.backend.app.models import BusinessCalculationRequest, PlanningResult
from norsktax.backend.config.year_config import IncomeBands, PlanningConfig, YearConfiguration

from .utils import ZERO, round_currency


def planning_band(business_income: Decimal, bands: IncomeBands) -> str:
    """Return the planning band name for ``business_income``.

    Evaluated independently of the salary optimiser's bands.
    """

    if business_income < bands.low:
        return "low"
    if business_income <= bands.medium:
        return "medium"
    return "high"


def estimate_savings(business_income: Decimal, config: PlanningConfig) -> Decimal:
    """Coarse savings heuristic: baseline effective rate times improvement factor."""

    return round_currency(
        business_income * config.baseline_effective_rate * config.improvement_factor
    )


def build_planning_strategy(
    request: BusinessCalculationRequest,
    config: YearConfiguration,
    translator: Translator,
) -> PlanningResult:
    """Select the strategy bundle for the request's business income."""

    planning = config.planning
    band_name = planning_band(request.business_income, config.income_bands)
    band = planning.bands[band_name]

    strategies = [translator(key) for key in band.strategy_keys]
    labels = list(planning.priority_labels)
    priorities = {
        strategy: labels[min(index, len(labels) - 1)]
        for index, strategy in enumerate(strategies)
    }

    return PlanningResult(
        strategies=strategies,
        timeframe=translator(band.timeframe_key),
        estimated_savings=estimate_savings(request.business_income, planning),
        risk_rating=band.risk,
        investment_requirement=ZERO,
        payback_period=ZERO,
        priorities=priorities,
        band=band_name,
    )


def estimate_prepayment(
    request: BusinessCalculationRequest, config: PlanningConfig
) -> Decimal:
    """Estimate the forskuddsskatt instalment for the coming year."""

    income = request.business_income
    if request.prior_year_loss > 0:
        income = max(ZERO, income - request.prior_year_loss * config.prior_loss_weight)

    estimated_tax = income * config.baseline_effective_rate
    return round_currency(estimated_tax * config.prepayment_share)


__all__ = [
    "build_planning_strategy",
    "estimate_prepayment",
    "estimate_savings",
    "planning_band",
]
