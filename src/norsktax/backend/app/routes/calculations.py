"""REST endpoints for tax calculations."""

from __future__ import annotations

from typing import Any

from flask import Blueprint, current_app, request

from norsktax.backend.app.services.events import CalculationEvents
from norsktax.backend.services import (
    build_calculation_response,
    calculate_enterprise_tax,
    calculate_personal_tax,
    calculate_social_contribution,
    calculate_vat,
    estimate_prepayment_tax,
    optimise_salary,
    parse_calculation_payload,
    propose_tax_planning_strategy,
    validate_expenses,
)

EVENTS_EXTENSION = "norsktax.events"

blueprint = Blueprint("calculations", __name__, url_prefix="/api/v1/calculations")


def _events() -> CalculationEvents | None:
    return current_app.extensions.get(EVENTS_EXTENSION)


@blueprint.post("/personal")
def create_personal_calculation() -> tuple[Any, int]:
    """Compute personal tax for the submitted income and municipality."""

    payload = parse_calculation_payload(request)
    result = calculate_personal_tax(payload, events=_events())
    return build_calculation_response(result)


@blueprint.post("/social-contribution")
def create_social_contribution_calculation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_social_contribution(payload))


@blueprint.post("/vat")
def create_vat_calculation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    return build_calculation_response(calculate_vat(payload))


@blueprint.post("/enterprise")
def create_enterprise_calculation() -> tuple[Any, int]:
    """Run the full ENK calculation including advice."""

    payload = parse_calculation_payload(request)
    result = calculate_enterprise_tax(payload, events=_events())
    return build_calculation_response(result)


@blueprint.post("/enterprise/salary")
def create_salary_optimisation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    return build_calculation_response(optimise_salary(payload))


@blueprint.post("/enterprise/expenses")
def create_expense_validation() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    result = validate_expenses(payload, events=_events())
    return build_calculation_response(result)


@blueprint.post("/enterprise/planning")
def create_planning_strategy() -> tuple[Any, int]:
    payload = parse_calculation_payload(request)
    return build_calculation_response(propose_tax_planning_strategy(payload))


@blueprint.post("/enterprise/prepayment")
def create_prepayment_estimate() -> tuple[Any, int]:
    """Estimate the prepayment instalment for the coming year."""

    payload = parse_calculation_payload(request)
    amount = estimate_prepayment_tax(payload)
    return build_calculation_response({"estimated_prepayment": amount})
