"""Personal income tax: employee contribution plus municipal tax."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from norsktax.backend.app.localization import Translator
from norsktax.backend.app.models import ComputationResult, InvalidArgumentError
from norsktax.backend.config.year_config import YearConfiguration

from .social_contribution import compute_social_contribution
from .utils import HUNDRED, ZERO, apply_percentage, round_currency, round_rate

SOCIAL_CONTRIBUTION_KEY = "social_contribution"
MUNICIPAL_TAX_KEY = "municipal_tax"


def compute_personal_tax(
    income: Decimal,
    config: YearConfiguration,
    translator: Translator,
    *,
    municipality: str | None = None,
    pensioner: bool = False,
    calculated_at: datetime | None = None,
) -> ComputationResult:
    """Return total tax, net income and effective rate for ``income``."""

    if income < 0:
        raise InvalidArgumentError("Income cannot be negative")

    contribution = compute_social_contribution(
        income, config.social_contribution, self_employed=False, pensioner=pensioner
    ).amount

    municipal_rate = config.municipal.rate_for(municipality)
    municipal_tax = round_currency(apply_percentage(income, municipal_rate))

    total_tax = contribution + municipal_tax
    net_income = income - total_tax
    effective_rate = round_rate(total_tax / income * HUNDRED) if income > 0 else ZERO

    return ComputationResult(
        gross_income=income,
        net_income=net_income,
        total_tax=total_tax,
        effective_rate=effective_rate,
        breakdown={
            SOCIAL_CONTRIBUTION_KEY: contribution,
            MUNICIPAL_TAX_KEY: municipal_tax,
        },
        success=True,
        message=translator("messages.personal_completed"),
        calculated_at=calculated_at,
    )


__all__ = ["MUNICIPAL_TAX_KEY", "SOCIAL_CONTRIBUTION_KEY", "compute_personal_tax"]
