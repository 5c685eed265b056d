# =============================================================================
# core/services/theme_service.py - Theme Business Logic
# =============================================================================
# Reads and saves the theme stored on the tenant. Saving translates every
# visible label into the other languages and stores them as
# "{field}_{lang}" siblings next to the original:
#
#   first_view.catchphrase -> first_view.catchphrase_en, _zh, _ko
#
# Full-English labels ("Instagram", "FAQ") are copied instead of
# translated, and a failed translation falls back to the original text.
# =============================================================================

import copy
import logging
from typing import Any

from agents.translator import TranslatorAgent, is_full_english
from core.models.theme import THEME_LAYOUTS, Theme, default_theme
from core.services.records import now_iso
from lib.i18n import DEFAULT_LANG, localized_value, other_langs
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def merge_theme(stored: dict[str, Any] | None) -> dict[str, Any]:
    """Stored theme over the default theme (missing keys come from the default)."""
    theme = default_theme()
    for key, value in (stored or {}).items():
        if isinstance(value, dict) and isinstance(theme.get(key), dict):
            theme[key] = {**theme[key], **value}
        elif value is not None:
            theme[key] = value
    return theme


class ThemeTranslator:
    """Fills "{field}_{lang}" siblings on theme parts."""

    def __init__(self, translator: TranslatorAgent | None = None):
        self.translator = translator or TranslatorAgent()

    def translate_value(self, text: str, lang: str, context: str) -> str:
        if not text or is_full_english(text):
            return text
        try:
            return self.translator.translate_text(text, lang, context) or text
        except Exception as e:
            logger.warning(f"Theme translation to {lang} failed ({context}), using original: {e}")
            return text

    def localize(self, part: dict[str, Any] | None, field: str, context: str) -> None:
        """Set part[field_ja] and part[field_{lang}] for the other languages."""
        if not part:
            return
        text = part.get(field) or ""
        part[f"{field}_{DEFAULT_LANG}"] = text
        for lang in other_langs():
            part[f"{field}_{lang}"] = self.translate_value(text, lang, context)

    def translate_theme(self, theme: dict[str, Any]) -> dict[str, Any]:
        """Translate every label of a theme dict (in place)."""
        first_view = theme.get("first_view")
        self.localize(first_view, "catchphrase", "first view catchphrase")
        self.localize(first_view, "description", "first view description")

        for content in theme.get("footer_contents") or []:
            self.localize(content, "title", "footer content title")
            self.localize(content, "description", "footer content description")

        for section in theme.get("footer_text_link_sections") or []:
            self.localize(section, "title", "footer section title")
            for link in section.get("links") or []:
                self.localize(link, "text", "footer link text")

        menu = theme.get("menu_settings")
        if menu:
            for field in ("top_label", "articles_label", "search_label"):
                self.localize(menu, field, "menu label")
            for item in menu.get("custom_menus") or []:
                if item.get("label"):
                    self.localize(item, "label", "menu label")

        return theme


def localize_theme(theme: dict[str, Any], lang: str) -> dict[str, Any]:
    """
    Resolve the translated labels of a theme for one language.

    The "{field}_{lang}" siblings are kept; only the base fields are
    replaced with the resolved value.
    """
    theme = copy.deepcopy(theme)

    def resolve(part: dict[str, Any] | None, *fields: str) -> None:
        if part:
            for field in fields:
                part[field] = localized_value(part, field, lang)

    resolve(theme.get("first_view"), "catchphrase", "description")
    for content in theme.get("footer_contents") or []:
        resolve(content, "title", "description")
    for section in theme.get("footer_text_link_sections") or []:
        resolve(section, "title")
        for link in section.get("links") or []:
            resolve(link, "text")
    menu = theme.get("menu_settings")
    resolve(menu, "top_label", "articles_label", "search_label")
    for item in (menu or {}).get("custom_menus") or []:
        resolve(item, "label")
    return theme


class ThemeService:
    """
    Service for tenant theme operations.
    """

    @staticmethod
    def get_theme(tenant: dict[str, Any]) -> dict[str, Any]:
        return merge_theme(tenant.get("theme"))

    @staticmethod
    def list_layouts() -> list[dict[str, Any]]:
        return list(THEME_LAYOUTS.values())

    @staticmethod
    def save_theme(
        tenant: dict[str, Any],
        theme: Theme,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """
        Translate and store a validated theme on the tenant.

        Returns:
            The stored theme dict
        """
        data = ThemeTranslator(translator).translate_theme(theme.model_dump())
        SupabaseClient.update("tenants", tenant["id"], {"theme": data, "updated_at": now_iso()})
        logger.info(f"Saved theme for tenant {tenant['id']} (layout={data.get('layout_theme')})")
        return data
