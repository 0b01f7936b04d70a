"""Shared translation helpers for recommendation and warning texts."""

from .catalog import Translator, available_locales, get_translator, normalise_locale

__all__ = ["Translator", "available_locales", "get_translator", "normalise_locale"]
