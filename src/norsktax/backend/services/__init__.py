"""Service-layer helpers for the NorskTax backend."""

from norsktax.backend.app.services.calculation_service import (
    calculate_enterprise_tax,
    calculate_personal_tax,
    calculate_social_contribution,
    calculate_vat,
    estimate_prepayment_tax,
    get_max_deduction_limits,
    optimise_salary,
    propose_tax_planning_strategy,
    resolve_configuration,
    validate_expenses,
)

from .request_parser import parse_calculation_payload
from .response_builder import build_calculation_response

__all__ = [
    "build_calculation_response",
    "calculate_enterprise_tax",
    "calculate_personal_tax",
    "calculate_social_contribution",
    "calculate_vat",
    "estimate_prepayment_tax",
    "get_max_deduction_limits",
    "optimise_salary",
    "parse_calculation_payload",
    "propose_tax_planning_strategy",
    "resolve_configuration",
    "validate_expenses",
]
