"""Trygdeavgift (social security contribution) calculator."""

from __future__ import annotations

from decimal import Decimal

from norsktax.backend.app.models import InvalidArgumentError, SocialContributionResult
from norsktax.backend.config.year_config import SocialContributionConfig

from .utils import ZERO, apply_percentage, round_currency


def contribution_base(income: Decimal, config: SocialContributionConfig) -> Decimal:
    """Return the part of ``income`` that attracts the contribution.

    Incomes below the lower bound are exempt; above the upper bound the base
    is capped.
    """

    if income < config.lower_bound:
        return ZERO
    return min(income, config.upper_bound)


def compute_social_contribution(
    income: Decimal,
    config: SocialContributionConfig,
    *,
    self_employed: bool = False,
    pensioner: bool = False,
) -> SocialContributionResult:
    """Return the bracket-clamped contribution for ``income``."""

    if income < 0:
        raise InvalidArgumentError("Income cannot be negative")

    base = contribution_base(income, config)
    rate = config.rate_for(self_employed=self_employed, pensioner=pensioner)
    amount = round_currency(apply_percentage(base, rate) * config.adjustment_factor)

    return SocialContributionResult(
        income=income,
        base=base,
        rate=rate,
        amount=amount,
        lower_bound=config.lower_bound,
        upper_bound=config.upper_bound,
        self_employed=self_employed,
        pensioner=pensioner and not self_employed,
    )


__all__ = ["compute_social_contribution", "contribution_base"]
