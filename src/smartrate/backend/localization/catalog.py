"""Translation catalogue helpers backed by shared JSON resources."""

from __future__ import annotations

import json
from dataclasses import dataclass
from functools import cache
from importlib import resources
from typing import Any, Mapping

_BASE_LOCALE = "en"
_TRANSLATIONS_PACKAGE = "smartrate.translations"


@dataclass(frozen=True)
class Translator:
    """Callable helper for retrieving localized strings.

    Keyword arguments are interpolated with :meth:`str.format` so catalogue
    entries can carry placeholders such as ``{month}``.
    """

    locale: str
    _messages: Mapping[str, str]
    _fallback: Mapping[str, str]

    def __call__(self, key: str, **values: Any) -> str:
        template = self._messages.get(key) or self._fallback.get(key, key)
        if not values:
            return template
        return template.format(**values)


@cache
def available_locales() -> tuple[str, ...]:
    """Return the set of locales with published translation payloads."""

    try:
        root = resources.files(_TRANSLATIONS_PACKAGE)
    except ModuleNotFoundError:  # pragma: no cover
        return (_BASE_LOCALE,)

    locales = sorted(
        entry.name.removesuffix(".json")
        for entry in root.iterdir()
        if entry.name.endswith(".json")
    )
    return tuple(locales) or (_BASE_LOCALE,)


@cache
def _load_messages(locale: str) -> Mapping[str, str]:
    """Load the flat message mapping for the requested locale."""

    try:
        resource = resources.files(_TRANSLATIONS_PACKAGE).joinpath(f"{locale}.json")
    except ModuleNotFoundError:  # pragma: no cover
        return {}

    if not resource.is_file():
        return {}

    with resource.open("r", encoding="utf-8") as handle:
        payload = json.load(handle)

    messages = payload.get("messages") or {}
    if not isinstance(messages, dict):  # pragma: no cover
        return {}
    return {str(key): str(value) for key, value in messages.items()}


def normalise_locale(locale: str | None) -> str:
    """Normalise requested locale to a supported catalogue key."""

    if not locale:
        return _BASE_LOCALE

    normalized = locale.lower().replace("_", "-").split("-")[0]
    return normalized if normalized in available_locales() else _BASE_LOCALE


def get_translator(locale: str | None = None) -> Translator:
    """Return a translator instance for the requested locale."""

    normalized = normalise_locale(locale)
    messages = _load_messages(normalized)
    fallback = _load_messages(_BASE_LOCALE) if normalized != _BASE_LOCALE else messages

    return Translator(locale=normalized, _messages=messages, _fallback=fallback)


__all__ = [
    "Translator",
    "available_locales",
    "get_translator",
    "normalise_locale",
]
