"""Typed request/response models shared across the calculation services.

Requests are Pydantic models so that validation and normalisation happen once
at the edge; derived results are lightweight dataclasses holding ``Decimal``
amounts. ``serialise_result`` turns either into JSON-ready structures for the
HTTP layer.
"""

from .api import (
    BusinessCalculationRequest,
    InvalidArgumentError,
    Money,
    OpaqueExtension,
    PrivateUseExtension,
    RequestExtension,
    SocialContributionRequest,
    TaxCalculationRequest,
    VatCalculationRequest,
    VatCategory,
    format_validation_error,
)
from .results import (
    BusinessComputationResult,
    BusinessResultBreakdown,
    ComputationResult,
    ExpenseCategoryEntry,
    ExpenseValidationResult,
    PlanningResult,
    SalaryRecommendation,
    SocialContributionResult,
    TaxAdvice,
    VatResult,
)
from .serialisation import serialise_result

__all__ = [
    "BusinessCalculationRequest",
    "BusinessComputationResult",
    "BusinessResultBreakdown",
    "ComputationResult",
    "ExpenseCategoryEntry",
    "ExpenseValidationResult",
    "InvalidArgumentError",
    "Money",
    "OpaqueExtension",
    "PlanningResult",
    "PrivateUseExtension",
    "RequestExtension",
    "SalaryRecommendation",
    "SocialContributionRequest",
    "SocialContributionResult",
    "TaxAdvice",
    "TaxCalculationRequest",
    "VatCalculationRequest",
    "VatCategory",
    "VatResult",
    "format_validation_error",
    "serialise_result",
]
