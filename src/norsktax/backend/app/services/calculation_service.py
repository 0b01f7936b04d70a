"""Entry points for every calculation the engine offers.

Each function accepts either a request model or a raw mapping, validates it
into the matching Pydantic model, resolves the year configuration (with any
caller overrides applied once) and delegates the arithmetic to the calculator
modules. Errors surface as ``InvalidArgumentError`` for bad input,
``FileNotFoundError`` for unknown years and ``ConfigurationError`` for invalid
overrides.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from norsktax.backend.app.localization import Translator, get_translator
from norsktax.backend.app.models import (
    BusinessCalculationRequest,
    BusinessComputationResult,
    ComputationResult,
    ExpenseValidationResult,
    InvalidArgumentError,
    PlanningResult,
    SocialContributionRequest,
    SocialContributionResult,
    TaxAdvice,
    TaxCalculationRequest,
    VatCalculationRequest,
    VatResult,
    format_validation_error,
)
from norsktax.backend.config.year_config import (
    YearConfiguration,
    apply_overrides,
    default_year,
    load_year_configuration,
)

from .calculators import (
    build_planning_strategy,
    compute_business_result,
    compute_personal_tax,
    compute_social_contribution,
    compute_vat,
    ensure_amount,
    ensure_business_request,
    ensure_income,
    ensure_tax_request,
    estimate_prepayment,
    recommend_salary,
    validate_expense_categories,
)
from .events import CalculationEvent, CalculationEvents, CalculationNotice
from .orchestrator import Clock, EnterpriseTaxOrchestrator

_LOGGER = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _coerce_request(model: type[RequestT], payload: Any) -> RequestT:
    if payload is None:
        raise InvalidArgumentError("A calculation request is required")
    if isinstance(payload, model):
        return payload
    if isinstance(payload, BaseModel):
        payload = payload.model_dump(mode="python")
    if not isinstance(payload, Mapping):
        raise InvalidArgumentError("Payload must be a mapping")
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise InvalidArgumentError(format_validation_error(exc)) from exc


def resolve_configuration(
    year: int | None,
    overrides: Mapping[str, Mapping[str, Any]] | None = None,
    *,
    config: YearConfiguration | None = None,
) -> YearConfiguration:
    """Return the effective configuration for a request.

    ``config`` takes precedence over loading ``year`` from disk; caller
    overrides are merged on top in a single step.
    """

    base = config
    if base is None:
        base = load_year_configuration(year if year is not None else default_year())
    return apply_overrides(base, overrides)


def _context(request: Any, config: YearConfiguration | None) -> tuple[YearConfiguration, Translator]:
    configuration = resolve_configuration(request.year, request.overrides, config=config)
    return configuration, get_translator(request.locale)


def calculate_personal_tax(
    payload: Mapping[str, Any] | TaxCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
    events: CalculationEvents | None = None,
    clock: Clock | None = None,
) -> ComputationResult:
    """Compute personal tax (contribution plus municipal tax) for ``payload``."""

    request = _coerce_request(TaxCalculationRequest, payload)
    configuration, translator = _context(request, config)
    registry = events if events is not None else CalculationEvents()
    now = clock or _utcnow

    try:
        ensure_tax_request(request, configuration.validation)
        result = ComputationResult()
        registry.publish(
            CalculationNotice(
                event=CalculationEvent.BEFORE_CALCULATION,
                calculation_type="personal",
                request=request,
                result=result,
            )
        )
        result.populate_from(
            compute_personal_tax(
                request.income,
                configuration,
                translator,
                municipality=request.municipality,
                pensioner=request.pensioner,
                calculated_at=now(),
            )
        )
    except Exception as error:
        registry.publish(
            CalculationNotice(
                event=CalculationEvent.CALCULATION_FAILED,
                calculation_type="personal",
                request=request,
                error=error,
                operation="calculate_personal_tax",
                context={"income": request.income, "municipality": request.municipality},
            )
        )
        _LOGGER.error(
            "Personal tax calculation failed for income %s", request.income, exc_info=True
        )
        raise

    registry.publish(
        CalculationNotice(
            event=CalculationEvent.AFTER_CALCULATION,
            calculation_type="personal",
            request=request,
            result=result,
        )
    )
    return result


def calculate_social_contribution(
    payload: Mapping[str, Any] | SocialContributionRequest | None,
    *,
    config: YearConfiguration | None = None,
) -> SocialContributionResult:
    """Compute trygdeavgift with its base, rate and band bounds."""

    request = _coerce_request(SocialContributionRequest, payload)
    configuration, _ = _context(request, config)
    ensure_income(request.income, configuration.validation)

    return compute_social_contribution(
        request.income,
        configuration.social_contribution,
        self_employed=request.self_employed,
        pensioner=request.pensioner,
    )


def calculate_vat(
    payload: Mapping[str, Any] | VatCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
) -> VatResult:
    """Convert between gross and net amounts for a VAT category."""

    request = _coerce_request(VatCalculationRequest, payload)
    configuration, _ = _context(request, config)
    ensure_amount(request.amount, configuration.validation)

    return compute_vat(
        request.amount,
        request.category,
        request.includes_vat,
        configuration.vat,
        description=request.description,
    )


def calculate_enterprise_tax(
    payload: Mapping[str, Any] | BusinessCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
    events: CalculationEvents | None = None,
    clock: Clock | None = None,
) -> BusinessComputationResult:
    """Run the full ENK pipeline for ``payload``."""

    request = _coerce_request(BusinessCalculationRequest, payload)
    configuration, translator = _context(request, config)
    orchestrator = EnterpriseTaxOrchestrator(
        configuration, translator, events=events, clock=clock
    )
    return orchestrator.run(request)


def optimise_salary(
    payload: Mapping[str, Any] | BusinessCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
    clock: Clock | None = None,
) -> BusinessComputationResult:
    """Propose a salary/dividend split.

    Uses ``business_result`` from the request when supplied, otherwise derives
    it from the itemised income and expenses.
    """

    request = _coerce_request(BusinessCalculationRequest, payload)
    configuration, translator = _context(request, config)
    ensure_business_request(request, configuration.validation)

    business_result = request.business_result
    if business_result is None:
        business_result = compute_business_result(request, configuration).business_result

    salary = recommend_salary(business_result, configuration, translator)
    now = clock or _utcnow

    return BusinessComputationResult(
        business_result=business_result,
        proposed_salary=salary.proposed_salary,
        proposed_dividend=salary.proposed_dividend,
        advice=TaxAdvice(
            recommended_actions=salary.recommendations,
            estimated_optimal_salary=salary.proposed_salary,
            risk_rating=salary.risk_rating,
        ),
        success=True,
        message=translator("messages.salary_completed"),
        calculated_at=now(),
    )


def validate_expenses(
    payload: Mapping[str, Any] | BusinessCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
    events: CalculationEvents | None = None,
) -> ExpenseValidationResult:
    """Check itemised expenses against the configured caps."""

    request = _coerce_request(BusinessCalculationRequest, payload)
    configuration, translator = _context(request, config)
    ensure_business_request(request, configuration.validation)

    return validate_expense_categories(
        request, configuration.expense_caps, translator, events=events
    )


def get_max_deduction_limits(
    industry: str | None,
    year: int | None = None,
    *,
    config: YearConfiguration | None = None,
) -> dict[str, Decimal]:
    """Return deduction limits for ``year``, including industry-specific rates."""

    configuration = resolve_configuration(year, config=config)
    caps = configuration.expense_caps

    limits: dict[str, Decimal] = {
        "home_office": caps.home_office,
        "car_per_km": caps.car_allowance_per_km,
        "representation": caps.representation,
        "gifts_per_employee": caps.gifts_per_employee,
        "courses": caps.courses,
        "supplies": caps.supplies,
        "subscriptions": caps.subscriptions,
        "travel_advisory_threshold": caps.travel,
    }

    industry_rates = configuration.enterprise.industry_rates
    if industry and industry in industry_rates:
        limits["industry_specific"] = industry_rates[industry]

    return limits


def propose_tax_planning_strategy(
    payload: Mapping[str, Any] | BusinessCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
) -> PlanningResult:
    """Return the strategy bundle for the request's income band."""

    request = _coerce_request(BusinessCalculationRequest, payload)
    configuration, translator = _context(request, config)
    ensure_business_request(request, configuration.validation)

    return build_planning_strategy(request, configuration, translator)


def estimate_prepayment_tax(
    payload: Mapping[str, Any] | BusinessCalculationRequest | None,
    *,
    config: YearConfiguration | None = None,
) -> Decimal:
    """Estimate the prepayment instalment for the request's business income."""

    request = _coerce_request(BusinessCalculationRequest, payload)
    configuration, _ = _context(request, config)
    ensure_business_request(request, configuration.validation)

    return estimate_prepayment(request, configuration.planning)


__all__ = [
    "calculate_enterprise_tax",
    "calculate_personal_tax",
    "calculate_social_contribution",
    "calculate_vat",
    "estimate_prepayment_tax",
    "get_max_deduction_limits",
    "optimise_salary",
    "propose_tax_planning_strategy",
    "resolve_configuration",
    "validate_expenses",
]
