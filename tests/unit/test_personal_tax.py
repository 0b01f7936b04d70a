"""Unit tests for the personal tax calculator."""

from __future__ import annotations

from decimal import Decimal

import pytest

from norsktax.backend.app.localization import get_translator
from norsktax.backend.app.models import InvalidArgumentError
from norsktax.backend.app.services.calculators import compute_personal_tax
from norsktax.backend.app.services.calculators.personal import (
    MUNICIPAL_TAX_KEY,
    SOCIAL_CONTRIBUTION_KEY,
)


def test_oslo_income_combines_contribution_and_municipal_tax(config_2024, translator) -> None:
    result = compute_personal_tax(
        Decimal("500000"), config_2024, translator, municipality="0301"
    )

    assert result.breakdown[SOCIAL_CONTRIBUTION_KEY] == Decimal("41000")
    assert result.breakdown[MUNICIPAL_TAX_KEY] == Decimal("110000")
    assert result.total_tax == Decimal("151000")
    assert result.net_income == Decimal("349000")
    assert result.effective_rate == Decimal("30.20")
    assert result.success is True
    assert result.message == "Tax calculation completed"


def test_breakdown_exposes_stable_keys(config_2024, translator) -> None:
    result = compute_personal_tax(Decimal("250000"), config_2024, translator)

    assert set(result.breakdown) == {"social_contribution", "municipal_tax"}
    assert sum(result.breakdown.values()) == result.total_tax


def test_zero_income_has_zero_effective_rate(config_2024, translator) -> None:
    result = compute_personal_tax(Decimal("0"), config_2024, translator)

    assert result.total_tax == Decimal("0")
    assert result.net_income == Decimal("0")
    assert result.effective_rate == Decimal("0")


def test_unknown_municipality_uses_standard_rate(config_2024, translator) -> None:
    adjusted = config_2024.model_copy(
        update={
            "municipal": config_2024.municipal.model_copy(
                update={"standard_rate": Decimal("20")}
            )
        }
    )

    listed = compute_personal_tax(
        Decimal("100000"), adjusted, translator, municipality="0301"
    )
    unlisted = compute_personal_tax(
        Decimal("100000"), adjusted, translator, municipality="9999"
    )

    assert listed.breakdown[MUNICIPAL_TAX_KEY] == Decimal("22000")
    assert unlisted.breakdown[MUNICIPAL_TAX_KEY] == Decimal("20000")


def test_pensioner_flag_switches_contribution_rate(config_2024, translator) -> None:
    result = compute_personal_tax(
        Decimal("300000"), config_2024, translator, pensioner=True
    )

    assert result.breakdown[SOCIAL_CONTRIBUTION_KEY] == Decimal("15300")


def test_message_is_localised(config_2024) -> None:
    result = compute_personal_tax(Decimal("100000"), config_2024, get_translator("nb"))

    assert result.message == "Skatteberegning fullført"


def test_negative_income_is_rejected(config_2024, translator) -> None:
    with pytest.raises(InvalidArgumentError):
        compute_personal_tax(Decimal("-100"), config_2024, translator)
