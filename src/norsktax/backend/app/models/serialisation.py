"""Convert result dataclasses and request models into JSON-ready structures."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import fields, is_dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any


def serialise_result(value: Any) -> Any:
    """Return ``value`` as plain JSON types.

    Decimals become floats, non-finite decimals (unlimited caps) become
    ``None``, enums collapse to their values and datetimes to ISO strings.
    """

    if value is None:
        return None

    if isinstance(value, Enum):
        return value.value

    if isinstance(value, Decimal):
        if not value.is_finite():
            return None
        return float(value)

    if isinstance(value, datetime):
        return value.isoformat()

    if hasattr(value, "model_dump"):
        data = value.model_dump(mode="python")  # type: ignore[call-arg]
        return serialise_result(data)

    if is_dataclass(value) and not isinstance(value, type):
        return {
            entry.name: serialise_result(getattr(value, entry.name))
            for entry in fields(value)
        }

    if isinstance(value, Mapping):
        return {str(key): serialise_result(item) for key, item in value.items()}

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return [serialise_result(item) for item in value]

    return value


__all__ = ["serialise_result"]
