"""Expense category validation against configured deduction caps."""

from __future__ import annotations

from norsktax.backend.app.localization import Translator
from norsktax.backend.app.models import (
    BusinessCalculationRequest,
    ExpenseCategoryEntry,
    ExpenseValidationResult,
)
from norsktax.backend.app.services.events import (
    CalculationEvent,
    CalculationEvents,
    CalculationNotice,
)
from norsktax.backend.config.schema import UNLIMITED
from norsktax.backend.config.year_config import ExpenseCapConfig

from .utils import ZERO, format_amount, percent_of


def build_expense_entries(
    request: BusinessCalculationRequest,
    caps: ExpenseCapConfig,
    translator: Translator,
) -> tuple[list[ExpenseCategoryEntry], list[str], list[str]]:
    """Return category entries with the warnings and recommendations they raise.

    Only populated categories produce an entry. Travel and other expenses have
    no fixed cap; travel above the advisory threshold still raises a warning.
    """

    entries: list[ExpenseCategoryEntry] = []
    warnings: list[str] = []
    recommendations: list[str] = []

    office = request.office_expenses
    if office > 0:
        within_cap = office <= caps.home_office
        warning = None
        if not within_cap:
            warning = translator.format(
                "expenses.home_office_over_cap", cap=format_amount(caps.home_office)
            )
            warnings.append(warning)
        entries.append(
            ExpenseCategoryEntry(
                category="home_office",
                label=translator("expenses.category.home_office"),
                amount=office,
                cap=caps.home_office,
                within_cap=within_cap,
                percent_of_cap=percent_of(office, caps.home_office),
                warning=warning,
            )
        )

    travel = request.travel_expenses
    if travel > 0:
        warning = None
        if travel > caps.travel:
            warning = translator("expenses.travel_high")
            warnings.append(warning)
        entries.append(
            ExpenseCategoryEntry(
                category="travel",
                label=translator("expenses.category.travel"),
                amount=travel,
                cap=UNLIMITED,
                within_cap=True,
                percent_of_cap=ZERO,
                warning=warning,
            )
        )

    other = request.other_expenses
    if other > 0:
        entries.append(
            ExpenseCategoryEntry(
                category="other",
                label=translator("expenses.category.other"),
                amount=other,
                cap=UNLIMITED,
                within_cap=True,
                percent_of_cap=ZERO,
            )
        )
        recommendations.append(translator("expenses.other_document"))

    return entries, warnings, recommendations


def validate_expense_categories(
    request: BusinessCalculationRequest,
    caps: ExpenseCapConfig,
    translator: Translator,
    *,
    events: CalculationEvents | None = None,
) -> ExpenseValidationResult:
    """Validate ``request`` expenses and notify ``events`` observers."""

    entries, warnings, recommendations = build_expense_entries(request, caps, translator)
    errors: list[str] = []
    flagged = sum(1 for entry in entries if entry.flagged)

    result = ExpenseValidationResult(
        is_valid=not warnings and not errors,
        warnings=warnings,
        errors=errors,
        recommendations=recommendations,
        categories=entries,
        total_expenses=sum((entry.amount for entry in entries), ZERO),
        category_count=len(entries),
        flagged_count=flagged,
    )

    if events is not None:
        events.publish(
            CalculationNotice(
                event=CalculationEvent.EXPENSES_VALIDATED,
                calculation_type="expenses",
                request=request,
                result=result,
                operation="validate_expenses",
                category_count=result.category_count,
                flagged_count=result.flagged_count,
            )
        )

    return result


__all__ = ["build_expense_entries", "validate_expense_categories"]
