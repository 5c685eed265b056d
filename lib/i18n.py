# =============================================================================
# lib/i18n.py - Supported Languages and Record Localization
# =============================================================================
# Authored content is written in Japanese and stored in the base fields
# (title, content, ...) plus their "_ja" copies. Every other language lives
# in a sibling column with the language suffix: title_en, title_zh, title_ko.
#
# Usage:
#   from lib.i18n import SUPPORTED_LANGS, localize
#   article = localize(record, ["title", "excerpt"], "en")
# =============================================================================

from __future__ import annotations

from typing import Any, Iterable

from app.exceptions import UnsupportedLanguageError

SUPPORTED_LANGS: tuple[str, ...] = ("ja", "en", "zh", "ko")
DEFAULT_LANG = "ja"

# Display names used inside LLM prompts
LANGUAGE_NAMES: dict[str, str] = {
    "ja": "Japanese",
    "en": "English",
    "zh": "Simplified Chinese",
    "ko": "Korean",
}


# =============================================================================
# Language Helpers
# =============================================================================

def is_supported_lang(lang: str | None) -> bool:
    """Check whether a language code is one of SUPPORTED_LANGS."""
    return lang in SUPPORTED_LANGS


def validate_lang(lang: str | None) -> str:
    """
    Return the language code or raise if it is not supported.

    Raises:
        UnsupportedLanguageError: If lang is not in SUPPORTED_LANGS
    """
    if not is_supported_lang(lang):
        raise UnsupportedLanguageError(str(lang), list(SUPPORTED_LANGS))
    return lang  # type: ignore[return-value]


def other_langs(source: str = DEFAULT_LANG) -> list[str]:
    """Every supported language except the source language."""
    return [lang for lang in SUPPORTED_LANGS if lang != source]


def localized_field(name: str, lang: str) -> str:
    """Column name of a field in a given language (title, en) -> title_en."""
    return f"{name}_{lang}"


# =============================================================================
# Record Localization
# =============================================================================

def _has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, dict)):
        return len(value) > 0
    return True


def localized_value(record: dict[str, Any], field: str, lang: str) -> Any:
    """
    Resolve one field of a record for a language.

    Fallback order: field_{lang} -> field_ja -> field.

    Example:
        localized_value({"title": "東京", "title_en": "Tokyo"}, "title", "en")  # "Tokyo"
        localized_value({"title": "東京"}, "title", "ko")                       # "東京"
    """
    for key in (localized_field(field, lang), localized_field(field, DEFAULT_LANG), field):
        value = record.get(key)
        if _has_value(value):
            return value
    return record.get(field)


def localize(record: dict[str, Any], fields: Iterable[str], lang: str) -> dict[str, Any]:
    """
    Return a copy of a record with the given fields resolved for a language.

    The per-language sibling columns are removed from the copy so public
    responses only carry the resolved values.
    """
    fields = list(fields)
    result = {
        key: value
        for key, value in record.items()
        if not any(key == localized_field(f, code) for f in fields for code in SUPPORTED_LANGS)
    }
    for field in fields:
        result[field] = localized_value(record, field, lang)
    return result


def seed_default_lang(data: dict[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """
    Copy base fields into their "_ja" columns (in place) and return data.

    Only fields present in data are copied.
    """
    for field in fields:
        if field in data:
            data[localized_field(field, DEFAULT_LANG)] = data[field]
    return data
