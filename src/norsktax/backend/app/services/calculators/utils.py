"""Utility helpers for calculator modules."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

CENT = Decimal("0.01")
HUNDRED = Decimal("100")
ZERO = Decimal("0")


def round_currency(value: Decimal) -> Decimal:
    """Round monetary amounts to whole øre."""

    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def round_rate(value: Decimal) -> Decimal:
    """Round percentage values to two decimals."""

    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def apply_percentage(amount: Decimal, rate: Decimal) -> Decimal:
    """Return ``rate`` percent of ``amount`` without rounding."""

    return amount * rate / HUNDRED


def percent_of(part: Decimal, whole: Decimal) -> Decimal:
    """Return ``part`` as a rounded percentage of ``whole`` (0 for empty wholes)."""

    if whole <= 0 or not whole.is_finite():
        return ZERO
    return round_rate(part / whole * HUNDRED)


def format_amount(value: Decimal) -> str:
    """Format ``value`` as whole kroner with a space thousands separator."""

    whole = int(value.to_integral_value(rounding=ROUND_HALF_UP))
    return f"{whole:,}".replace(",", " ")


__all__ = [
    "CENT",
    "HUNDRED",
    "ZERO",
    "apply_percentage",
    "format_amount",
    "percent_of",
    "round_currency",
    "round_rate",
]
