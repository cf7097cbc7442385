"""Shared translation helpers for event descriptions and validation messages."""

from .catalog import Translator, available_locales, get_translator, normalise_locale

__all__ = ["Translator", "available_locales", "get_translator", "normalise_locale"]
