"""Unit tests for MVA gross/net conversion."""

from __future__ import annotations

from decimal import Decimal

import pytest

from norsktax.backend.app.models import InvalidArgumentError, VatCategory
from norsktax.backend.app.services.calculators import compute_vat


def test_exclusive_amount_adds_standard_vat(config_2024) -> None:
    result = compute_vat(Decimal("1000"), VatCategory.STANDARD, False, config_2024.vat)

    assert result.net == Decimal("1000.00")
    assert result.vat == Decimal("250.00")
    assert result.gross == Decimal("1250.00")
    assert result.rate_used == Decimal("25")


def test_inclusive_amount_extracts_food_vat(config_2024) -> None:
    result = compute_vat(Decimal("115"), VatCategory.FOOD, True, config_2024.vat)

    assert result.gross == Decimal("115.00")
    assert result.net == Decimal("100.00")
    assert result.vat == Decimal("15.00")


def test_low_rate_categories_use_twelve_percent(config_2024) -> None:
    for category in (VatCategory.LOW, VatCategory.PASSENGER_TRANSPORT, VatCategory.ACCOMMODATION):
        result = compute_vat(Decimal("100"), category, False, config_2024.vat)
        assert result.rate_used == Decimal("12")
        assert result.vat == Decimal("12.00")


def test_unknown_category_falls_back_to_standard_rate(config_2024) -> None:
    result = compute_vat(Decimal("100"), "luxury", False, config_2024.vat)

    assert result.rate_used == Decimal("25")
    assert result.category == "standard"


@pytest.mark.parametrize("category", list(VatCategory))
def test_gross_equals_net_plus_vat_and_round_trips(config_2024, category: VatCategory) -> None:
    exclusive = compute_vat(Decimal("1234.56"), category, False, config_2024.vat)
    inclusive = compute_vat(exclusive.gross, category, True, config_2024.vat)

    assert exclusive.gross == exclusive.net + exclusive.vat
    assert inclusive.gross == inclusive.net + inclusive.vat
    assert inclusive.net == Decimal("1234.56")
    assert inclusive.gross == exclusive.gross


def test_bankers_rounding_mode_is_honoured(config_2024) -> None:
    vat_config = config_2024.vat.model_copy(update={"rounding": "half_even"})

    # 0.10 * 25% = 0.025 -> 0.02 with banker's rounding, 0.03 half-up.
    even = compute_vat(Decimal("0.10"), VatCategory.STANDARD, False, vat_config)
    up = compute_vat(Decimal("0.10"), VatCategory.STANDARD, False, config_2024.vat)

    assert even.vat == Decimal("0.02")
    assert up.vat == Decimal("0.03")


def test_negative_amount_is_rejected(config_2024) -> None:
    with pytest.raises(InvalidArgumentError):
        compute_vat(Decimal("-5"), VatCategory.STANDARD, False, config_2024.vat)
