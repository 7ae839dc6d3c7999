"""Shared locale preference helpers for UI switching."""
from __future__ import annotations

from typing import Optional

SESSION_LOCALE_KEY = "preferred_locale"
SUPPORTED_LOCALES = ("en_US", "fi_FI", "sv_SE")
LOCALE_NAMES = ("English", "Suomi", "Svenska")
UNSUPPORTED_LOCALE_NAME = "Unsupported Locale"

_ALIASES = {
    "en": "en_US",
    "fi": "fi_FI",
    "sv": "sv_SE",
}


def normalize_locale_choice(raw: Optional[str]) -> Optional[str]:
    """Normalize a user-provided locale code to a supported value.

    Accepts ``fi_FI``, ``fi-fi`` or a bare language code such as ``sv``.
    """
    if not isinstance(raw, str):
        return None
    cleaned = raw.strip().replace("-", "_")
    if not cleaned:
        return None
    parts = cleaned.split("_", 1)
    if len(parts) == 2:
        cleaned = f"{parts[0].lower()}_{parts[1].upper()}"
    else:
        cleaned = _ALIASES.get(parts[0].lower(), "")
    return cleaned if cleaned in SUPPORTED_LOCALES else None


def locale_display_name(locale: Optional[str]) -> str:
    for code, name in zip(SUPPORTED_LOCALES, LOCALE_NAMES):
        if locale == code:
            return name
    return UNSUPPORTED_LOCALE_NAME


def supported_locale_choices() -> list[tuple[str, str]]:
    return list(zip(SUPPORTED_LOCALES, LOCALE_NAMES))


__all__ = [
    "SESSION_LOCALE_KEY",
    "SUPPORTED_LOCALES",
    "LOCALE_NAMES",
    "UNSUPPORTED_LOCALE_NAME",
    "normalize_locale_choice",
    "locale_display_name",
    "supported_locale_choices",
]
