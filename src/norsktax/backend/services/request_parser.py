"""Helpers for normalising incoming calculation requests."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from flask import Request
from werkzeug.exceptions import BadRequest

from norsktax.backend.app.localization import normalise_locale


def _primary_language(header: str | None) -> str | None:
    """Return the first language tag of an ``Accept-Language`` header."""

    if not header:
        return None
    tag = header.split(",", 1)[0].split(";", 1)[0].strip()
    return tag or None


def _locale_hint(req: Request, payload: Mapping[str, Any]) -> str | None:
    """Pick the body locale, then ``?locale=``, then ``Accept-Language``."""

    body_locale = payload.get("locale")
    if isinstance(body_locale, str) and body_locale.strip():
        return body_locale
    return req.args.get("locale") or _primary_language(req.headers.get("Accept-Language"))


def parse_calculation_payload(req: Request) -> dict[str, Any]:
    """Extract a JSON object from ``req`` and attach the resolved locale.

    Raises :class:`~werkzeug.exceptions.BadRequest` for bodies that are not
    valid JSON objects; field validation happens in the service layer.
    """

    data = req.get_json(silent=True)
    if data is None:
        raise BadRequest("Request body must be valid JSON")
    if not isinstance(data, Mapping):
        raise BadRequest("Request JSON must be an object")

    payload = dict(data)
    hint = _locale_hint(req, payload)
    if hint:
        payload["locale"] = normalise_locale(hint)
    return payload
