"""Sequence the ENK calculation steps and notify observers.

A run moves strictly through ``validating``, ``computing_business_result``,
``computing_contribution``, ``computing_personal_tax`` and
``generating_advice`` to ``done``. Any exception moves the run to ``failed``,
publishes a ``calculation_failed`` notice and propagates unchanged; the
``after_calculation`` notice is only sent for completed runs.

The ``before_calculation`` and ``after_calculation`` notices carry the same
result instance. It is empty when the first notice goes out and is filled in
place once the run completes.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from time import perf_counter
from typing import Any, Callable, Iterator

from norsktax.backend.app.localization import Translator
from norsktax.backend.app.models import (
    BusinessCalculationRequest,
    BusinessComputationResult,
    BusinessResultBreakdown,
    ComputationResult,
    ExpenseCategoryEntry,
    InvalidArgumentError,
    SalaryRecommendation,
    SocialContributionResult,
    TaxAdvice,
)
from norsktax.backend.config.year_config import YearConfiguration

from .calculators import (
    build_expense_entries,
    build_tax_advice,
    compute_business_result,
    compute_personal_tax,
    compute_social_contribution,
    ensure_business_request,
    recommend_salary,
)
from .calculators.utils import HUNDRED, ZERO, round_rate
from .events import CalculationEvent, CalculationEvents, CalculationNotice

_LOGGER = logging.getLogger(__name__)

SELF_EMPLOYED_CONTRIBUTION_KEY = "self_employed_contribution"

Clock = Callable[[], datetime]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def profiling_enabled() -> bool:
    """Return ``True`` when calculation profiling should be captured."""

    flag = os.getenv("NORSKTAX_PROFILE_CALCULATIONS", "")
    return flag.strip().lower() in {"1", "true", "yes", "on"}


@contextmanager
def profile_section(name: str, store: dict[str, float] | None) -> Iterator[None]:
    """Capture the duration of a named section when profiling is enabled."""

    if store is None:
        yield
        return

    start = perf_counter()
    try:
        yield
    finally:
        store[name] = perf_counter() - start


class CalculationStage(str, Enum):
    VALIDATING = "validating"
    COMPUTING_BUSINESS_RESULT = "computing_business_result"
    COMPUTING_CONTRIBUTION = "computing_contribution"
    COMPUTING_PERSONAL_TAX = "computing_personal_tax"
    GENERATING_ADVICE = "generating_advice"
    DONE = "done"
    FAILED = "failed"


class EnterpriseTaxOrchestrator:
    """Run the ENK pipeline against one frozen configuration.

    The orchestrator holds no per-run state, so one instance may serve
    concurrent calculations.
    """

    calculation_type = "enterprise"

    def __init__(
        self,
        config: YearConfiguration,
        translator: Translator,
        *,
        events: CalculationEvents | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._config = config
        self._translator = translator
        self._events = events if events is not None else CalculationEvents()
        self._clock = clock or _utcnow

    @property
    def events(self) -> CalculationEvents:
        return self._events

    def validate(self, request: BusinessCalculationRequest | None) -> BusinessCalculationRequest:
        return ensure_business_request(request, self._config.validation)

    def compute_business_result(
        self, request: BusinessCalculationRequest
    ) -> BusinessResultBreakdown:
        return compute_business_result(request, self._config)

    def compute_contribution(self, taxable_income: Decimal) -> SocialContributionResult:
        return compute_social_contribution(
            max(taxable_income, ZERO), self._config.social_contribution, self_employed=True
        )

    def compute_personal_tax(
        self, request: BusinessCalculationRequest, breakdown: BusinessResultBreakdown
    ) -> ComputationResult:
        income = max(breakdown.taxable_income + request.salary_withdrawn, ZERO)
        return compute_personal_tax(
            income,
            self._config,
            self._translator,
            municipality=request.municipality,
            pensioner=request.pensioner,
        )

    def generate_advice(
        self, request: BusinessCalculationRequest, breakdown: BusinessResultBreakdown
    ) -> tuple[SalaryRecommendation, TaxAdvice]:
        salary = recommend_salary(breakdown.business_result, self._config, self._translator)
        advice = build_tax_advice(
            request, breakdown.business_result, salary, self._config, self._translator
        )
        return salary, advice

    def _notify(
        self,
        event: CalculationEvent,
        request: BusinessCalculationRequest | None,
        result: BusinessComputationResult | None = None,
        **extra: Any,
    ) -> None:
        self._events.publish(
            CalculationNotice(
                event=event,
                calculation_type=self.calculation_type,
                request=request,
                result=result,
                **extra,
            )
        )

    def run(self, request: BusinessCalculationRequest | None) -> BusinessComputationResult:
        """Execute every stage and return the assembled result."""

        timings: dict[str, float] | None = {} if profiling_enabled() else None
        stage = CalculationStage.VALIDATING

        try:
            if request is None:
                raise InvalidArgumentError("A calculation request is required")
            with profile_section(stage.value, timings):
                request = self.validate(request)

            result = BusinessComputationResult()
            self._notify(CalculationEvent.BEFORE_CALCULATION, request, result)

            stage = CalculationStage.COMPUTING_BUSINESS_RESULT
            with profile_section(stage.value, timings):
                breakdown = self.compute_business_result(request)

            stage = CalculationStage.COMPUTING_CONTRIBUTION
            with profile_section(stage.value, timings):
                contribution = self.compute_contribution(breakdown.taxable_income)

            stage = CalculationStage.COMPUTING_PERSONAL_TAX
            with profile_section(stage.value, timings):
                personal = self.compute_personal_tax(request, breakdown)

            stage = CalculationStage.GENERATING_ADVICE
            with profile_section(stage.value, timings):
                salary, advice = self.generate_advice(request, breakdown)
                entries, _, _ = build_expense_entries(
                    request, self._config.expense_caps, self._translator
                )

            result.populate_from(
                self._assemble(breakdown, contribution, personal, salary, advice, entries)
            )
            stage = CalculationStage.DONE
        except Exception as error:
            failed_at = stage
            stage = CalculationStage.FAILED
            self._notify(
                CalculationEvent.CALCULATION_FAILED,
                request,
                error=error,
                operation="calculate_enterprise_tax",
                stage=failed_at.value,
                context={"business_income": getattr(request, "business_income", None)},
            )
            _LOGGER.error(
                "ENK calculation failed during %s for business income %s",
                failed_at.value,
                getattr(request, "business_income", None),
                exc_info=True,
            )
            raise

        if timings is not None:
            _LOGGER.debug(
                "calculate_enterprise_tax timings (ms): %s",
                {name: round(duration * 1000, 3) for name, duration in timings.items()},
            )

        self._notify(CalculationEvent.AFTER_CALCULATION, request, result, stage=stage.value)
        return result

    def _assemble(
        self,
        breakdown: BusinessResultBreakdown,
        contribution: SocialContributionResult,
        personal: ComputationResult,
        salary: SalaryRecommendation,
        advice: TaxAdvice,
        entries: list[ExpenseCategoryEntry],
    ) -> BusinessComputationResult:
        taxable = breakdown.taxable_income
        total_tax = personal.total_tax + contribution.amount
        effective_rate = round_rate(total_tax / taxable * HUNDRED) if taxable > 0 else ZERO

        tax_breakdown = dict(personal.breakdown)
        tax_breakdown[SELF_EMPLOYED_CONTRIBUTION_KEY] = contribution.amount

        return BusinessComputationResult(
            gross_income=personal.gross_income,
            net_income=taxable - total_tax,
            total_tax=total_tax,
            effective_rate=effective_rate,
            breakdown=tax_breakdown,
            success=True,
            message=self._translator("messages.enterprise_completed"),
            calculated_at=self._clock(),
            business_result=breakdown.business_result,
            total_expenses=breakdown.total_expenses,
            taxable_business_income=taxable,
            social_contribution=contribution.amount,
            self_employed_tax=contribution.amount,
            proposed_salary=salary.proposed_salary,
            proposed_dividend=salary.proposed_dividend,
            expense_breakdown=entries,
            advice=advice,
            standard_deduction_applied=breakdown.standard_deduction,
            loss_carried_forward=breakdown.loss_carried_forward,
        )


__all__ = [
    "CalculationStage",
    "Clock",
    "EnterpriseTaxOrchestrator",
    "SELF_EMPLOYED_CONTRIBUTION_KEY",
    "profile_section",
    "profiling_enabled",
]
