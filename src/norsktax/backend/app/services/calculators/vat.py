"""MVA gross/net conversion."""

from __future__ import annotations

from decimal import Decimal

from norsktax.backend.app.models import InvalidArgumentError, VatCategory, VatResult
from norsktax.backend.config.year_config import VatConfig

from .utils import HUNDRED


def compute_vat(
    amount: Decimal,
    category: VatCategory | str | None,
    includes_vat: bool,
    config: VatConfig,
    *,
    description: str | None = None,
) -> VatResult:
    """Split ``amount`` into net, VAT and gross parts.

    Only one figure is rounded (the net amount for inclusive input, the VAT
    for exclusive input); the remaining one is derived so that
    ``gross == net + vat`` holds exactly.
    """

    if amount < 0:
        raise InvalidArgumentError("Amount cannot be negative")

    category_key = category.value if isinstance(category, VatCategory) else category
    rate = config.rate_for(category_key)
    resolved = category_key if category_key in config.rates_by_category() else "standard"

    quantum = config.quantum
    mode = config.rounding_mode
    amount = amount.quantize(quantum, rounding=mode)

    if includes_vat:
        gross = amount
        net = (gross / (1 + rate / HUNDRED)).quantize(quantum, rounding=mode)
        vat = gross - net
    else:
        net = amount
        vat = (net * rate / HUNDRED).quantize(quantum, rounding=mode)
        gross = net + vat

    return VatResult(
        net=net,
        vat=vat,
        gross=gross,
        rate_used=rate,
        category=resolved,
        includes_vat=includes_vat,
        description=description,
    )


__all__ = ["compute_vat"]
