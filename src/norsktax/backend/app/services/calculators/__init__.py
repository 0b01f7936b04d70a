"""Domain-specific calculation helpers."""

from .advice import build_tax_advice
from .business import compute_business_result, compute_standard_deduction
from .expenses import build_expense_entries, validate_expense_categories
from .guards import (
    ensure_amount,
    ensure_business_request,
    ensure_income,
    ensure_tax_request,
)
from .personal import MUNICIPAL_TAX_KEY, SOCIAL_CONTRIBUTION_KEY, compute_personal_tax
from .planning import build_planning_strategy, estimate_prepayment, estimate_savings, planning_band
from .salary import classify_risk, propose_salary, recommend_salary
from .social_contribution import compute_social_contribution, contribution_base
from .utils import format_amount, round_currency, round_rate
from .vat import compute_vat

__all__ = [
    "MUNICIPAL_TAX_KEY",
    "SOCIAL_CONTRIBUTION_KEY",
    "build_expense_entries",
    "build_planning_strategy",
    "build_tax_advice",
    "classify_risk",
    "compute_business_result",
    "compute_personal_tax",
    "compute_social_contribution",
    "compute_standard_deduction",
    "compute_vat",
    "contribution_base",
    "ensure_amount",
    "ensure_business_request",
    "ensure_income",
    "ensure_tax_request",
    "estimate_prepayment",
    "estimate_savings",
    "format_amount",
    "planning_band",
    "propose_salary",
    "recommend_salary",
    "round_currency",
    "round_rate",
    "validate_expense_categories",
]
