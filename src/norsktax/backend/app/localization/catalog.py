"""Translation catalogue helpers backed by JSON package resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Mapping

_BASE_LOCALE = "en"
_TRANSLATIONS_PACKAGE = "norsktax.translations"


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings."""

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str) -> str:
        return self._messages.get(key) or self._fallback.get(key, key)

    def format(self, key: str, **params: Any) -> str:
        """Translate ``key`` and substitute ``{name}`` placeholders."""

        return self(key).format(**params)


@cache
def _available_locales() -> tuple[str, ...]:
    """Return the set of locales with published translation payloads."""

    root = resources.files(_TRANSLATIONS_PACKAGE)
    locales = sorted(
        entry.name.rsplit(".", 1)[0]
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(locales) or (_BASE_LOCALE,)


@cache
def _load_messages(locale: str) -> Mapping[str, str]:
    """Load the message table for ``locale``; unknown locales are empty."""

    resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    if not resource.is_file():
        return {}

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    messages = payload.get("messages") or {}
    if not isinstance(messages, dict):
        raise ValueError(f"Translation catalogue '{locale}' must define a messages mapping")
    return {str(key): str(value) for key, value in messages.items()}


def available_locales() -> tuple[str, ...]:
    return _available_locales()


def normalise_locale(locale: str | None) -> str:
    """Normalise requested locale to a supported catalogue key."""

    if not locale:
        return _BASE_LOCALE

    normalized = locale.lower().replace("_", "-").split("-")[0]
    # Norwegian without a written standard maps onto Bokmål.
    if normalized == "no":
        normalized = "nb"
    return normalized if normalized in _available_locales() else _BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    normalized = normalise_locale(locale)
    fallback = _load_messages(_BASE_LOCALE)
    messages = _load_messages(normalized) if normalized != _BASE_LOCALE else fallback

    return Translator(locale=normalized, _messages=messages, _fallback=fallback)


__all__ = [
    "Translator",
    "available_locales",
    "get_translator",
    "normalise_locale",
]
