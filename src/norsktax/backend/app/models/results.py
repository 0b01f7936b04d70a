"""Dataclasses carrying derived calculation results."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal

__all__ = [
    "BusinessComputationResult",
    "BusinessResultBreakdown",
    "ComputationResult",
    "ExpenseCategoryEntry",
    "ExpenseValidationResult",
    "PlanningResult",
    "SalaryRecommendation",
    "SocialContributionResult",
    "TaxAdvice",
    "VatResult",
]

ZERO = Decimal("0")


@dataclass(slots=True)
class SocialContributionResult:
    """Trygdeavgift together with the clamped base it was computed on."""

    income: Decimal
    base: Decimal
    rate: Decimal
    amount: Decimal
    lower_bound: Decimal
    upper_bound: Decimal
    self_employed: bool = False
    pensioner: bool = False


@dataclass(slots=True)
class VatResult:
    net: Decimal
    vat: Decimal
    gross: Decimal
    rate_used: Decimal
    category: str
    includes_vat: bool
    description: str | None = None


@dataclass(slots=True)
class ComputationResult:
    """Personal tax outcome with a per-component breakdown."""

    gross_income: Decimal = ZERO
    net_income: Decimal = ZERO
    total_tax: Decimal = ZERO
    effective_rate: Decimal = ZERO
    breakdown: dict[str, Decimal] = field(default_factory=dict)
    success: bool = False
    message: str = ""
    calculated_at: datetime | None = None

    def populate_from(self, other: ComputationResult) -> None:
        """Copy every field of ``other`` onto this instance."""

        for item in fields(other):
            setattr(self, item.name, getattr(other, item.name))


@dataclass(slots=True)
class ExpenseCategoryEntry:
    category: str
    label: str
    amount: Decimal
    cap: Decimal
    within_cap: bool
    percent_of_cap: Decimal
    warning: str | None = None

    @property
    def flagged(self) -> bool:
        return bool(self.warning) or not self.within_cap


@dataclass(slots=True)
class TaxAdvice:
    """Advisory bundle attached to an ENK result."""

    recommended_actions: list[str] = field(default_factory=list)
    potential_deductions: list[str] = field(default_factory=list)
    estimated_optimal_salary: Decimal = ZERO
    risk_rating: str = "low"
    estimated_savings: Decimal = ZERO
    recommended_timeframe: str = ""


@dataclass(slots=True)
class BusinessComputationResult(ComputationResult):
    """ENK outcome: business result, contributions and proposals."""

    business_result: Decimal = ZERO
    total_expenses: Decimal = ZERO
    taxable_business_income: Decimal = ZERO
    social_contribution: Decimal = ZERO
    self_employed_tax: Decimal = ZERO
    proposed_salary: Decimal = ZERO
    proposed_dividend: Decimal = ZERO
    expense_breakdown: list[ExpenseCategoryEntry] = field(default_factory=list)
    advice: TaxAdvice | None = None
    standard_deduction_applied: Decimal = ZERO
    loss_carried_forward: Decimal = ZERO


@dataclass(slots=True)
class BusinessResultBreakdown:
    """Intermediate figures from the business result step."""

    total_expenses: Decimal
    standard_deduction: Decimal
    result_before_loss: Decimal
    loss_carried_forward: Decimal
    business_result: Decimal

    @property
    def taxable_income(self) -> Decimal:
        return self.business_result


@dataclass(slots=True)
class SalaryRecommendation:
    business_result: Decimal
    proposed_salary: Decimal
    proposed_dividend: Decimal
    recommendations: list[str]
    risk_rating: str


@dataclass(slots=True)
class ExpenseValidationResult:
    is_valid: bool
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    categories: list[ExpenseCategoryEntry] = field(default_factory=list)
    total_expenses: Decimal = ZERO
    category_count: int = 0
    flagged_count: int = 0


@dataclass(slots=True)
class PlanningResult:
    """Strategy bundle for one income band."""

    strategies: list[str]
    timeframe: str
    estimated_savings: Decimal
    risk_rating: str
    investment_requirement: Decimal = ZERO
    payback_period: Decimal = ZERO
    priorities: dict[str, str] = field(default_factory=dict)
    band: str = "low"
