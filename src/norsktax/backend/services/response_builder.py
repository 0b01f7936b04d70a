"""Utilities for serialising calculation responses."""

from __future__ import annotations

from typing import Any, Tuple

from flask import jsonify

from norsktax.backend.app.models import serialise_result

ResponseTuple = Tuple[Any, int]


def build_calculation_response(result: Any, *, status: int = 200) -> ResponseTuple:
    """Return a Flask JSON response for the calculation ``result``."""

    return jsonify(serialise_result(result)), status
