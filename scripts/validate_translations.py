#!/usr/bin/env python3
"""Check that every translation catalogue carries the same keys and placeholders."""

from __future__ import annotations

import argparse
import json
import re
import sys
from collections import defaultdict
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
TRANSLATIONS_DIR = REPO_ROOT / "src" / "smartrate" / "translations"

PLACEHOLDER_PATTERN = re.compile(r"{\s*([a-zA-Z0-9_]+)\s*}")


class ValidationError(Exception):
    """Raised when validation detects unrecoverable issues."""


def _load_catalogues() -> dict[str, dict[str, str]]:
    catalogues: dict[str, dict[str, str]] = {}

    if not TRANSLATIONS_DIR.is_dir():
        raise ValidationError(f"Missing translations directory: {TRANSLATIONS_DIR}")

    for path in sorted(TRANSLATIONS_DIR.glob("*.json")):
        with path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)

        messages = payload.get("messages") if isinstance(payload, dict) else None
        if not isinstance(messages, dict):
            raise ValidationError(f"Translation payload must define a 'messages' mapping: {path}")
        catalogues[path.stem] = {str(key): str(value) for key, value in messages.items()}

    if not catalogues:
        raise ValidationError("No translation catalogues discovered")

    return catalogues


def _missing_keys(catalogues: dict[str, dict[str, str]], base_locale: str) -> list[str]:
    issues: list[str] = []
    expected = set(catalogues[base_locale])

    for locale, messages in catalogues.items():
        missing = expected - set(messages)
        extra = set(messages) - expected
        if missing:
            issues.append(f"Locale '{locale}' missing keys: {', '.join(sorted(missing))}")
        if extra:
            issues.append(f"Locale '{locale}' has unknown keys: {', '.join(sorted(extra))}")
    return issues


def _placeholder_inconsistencies(catalogues: dict[str, dict[str, str]]) -> list[str]:
    placeholders: dict[str, dict[str, frozenset[str]]] = defaultdict(dict)
    for locale, messages in catalogues.items():
        for key, message in messages.items():
            placeholders[key][locale] = frozenset(PLACEHOLDER_PATTERN.findall(message))

    inconsistencies: list[str] = []
    for key, locale_map in sorted(placeholders.items()):
        if len(set(locale_map.values())) <= 1:
            continue
        details = ", ".join(
            f"{locale}={{{', '.join(sorted(values))}}}"
            for locale, values in sorted(locale_map.items())
        )
        inconsistencies.append(f"{key} placeholders differ: {details}")
    return inconsistencies


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--base-locale", default="en", help="Catalogue other locales must match")
    args = parser.parse_args(argv)

    catalogues = _load_catalogues()
    if args.base_locale not in catalogues:
        print(f"[missing] Base locale '{args.base_locale}' not found")
        return 1

    missing = _missing_keys(catalogues, args.base_locale)
    inconsistencies = _placeholder_inconsistencies(catalogues)

    for issue in inconsistencies:
        print(f"[placeholder] {issue}")
    for issue in missing:
        print(f"[missing] {issue}")

    if inconsistencies or missing:
        return 1

    print(f"{len(catalogues)} catalogue(s) consistent")
    return 0


if __name__ == "__main__":
    sys.exit(main())
