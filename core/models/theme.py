# =============================================================================
# core/models/theme.py - Theme Schemas and Layout Definitions
# =============================================================================
# The theme is stored as JSON on the tenant record. It controls the layout
# (cobi or furatto), the first view, footer blocks, menus and the color
# palette of the public site.
#
# Translatable strings get "{field}_{lang}" siblings when the theme is saved,
# so sub-models accept extra keys.
#
# Usage:
#   from core.models.theme import Theme, default_theme, THEME_LAYOUTS
#
#   theme = Theme.model_validate(payload)
#   data = theme.model_dump()
# =============================================================================

import copy
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# Layouts
# =============================================================================

THEME_LAYOUTS: dict[str, dict[str, Any]] = {
    "cobi": {
        "id": "cobi",
        "name": "Cobi",
        "display_name": "Cobi（シンプル1カラム）",
        "description": "シンプルで読みやすい1カラムレイアウト。記事コンテンツを中心に据えたデザイン。",
        "block_placements": [
            {"value": "footer", "label": "フッターエリア"},
            {"value": "side-panel", "label": "サイドパネル"},
        ],
    },
    "furatto": {
        "id": "furatto",
        "name": "Furatto",
        "display_name": "ふらっと（バリアフリー特化）",
        "description": "アクセシビリティを重視したバリアフリー情報メディア向けレイアウト。",
        "block_placements": [
            {"value": "top-banner", "label": "トップバナー"},
            {"value": "sidebar-top", "label": "サイドバー上部"},
            {"value": "sidebar-middle", "label": "サイドバー中部"},
            {"value": "sidebar-bottom", "label": "サイドバー下部"},
            {"value": "article-top", "label": "記事上部"},
            {"value": "article-bottom", "label": "記事下部"},
            {"value": "footer", "label": "フッターエリア"},
        ],
    },
}

DEFAULT_LAYOUT = "cobi"

MAX_FOOTER_BLOCKS = 4
MAX_FOOTER_CONTENTS = 3
MAX_TEXT_LINK_SECTIONS = 2
MAX_CUSTOM_MENUS = 5


def block_placements(layout_id: str | None) -> list[str]:
    """Placement values offered by a layout (default layout when unknown)."""
    layout = THEME_LAYOUTS.get(layout_id or DEFAULT_LAYOUT, THEME_LAYOUTS[DEFAULT_LAYOUT])
    return [placement["value"] for placement in layout["block_placements"]]


# =============================================================================
# Theme parts
# =============================================================================

class _Translatable(BaseModel):
    """Base for theme parts that carry "{field}_{lang}" siblings."""
    model_config = ConfigDict(extra="allow")


class FooterBlock(BaseModel):
    """Image link shown in the footer."""
    image_url: str = ""
    alt: str = ""
    link_url: str = ""


class FooterContent(_Translatable):
    """Image + title + description card shown in the cobi footer."""
    image_url: str = ""
    alt: str = ""
    title: str = ""
    description: str = ""
    link_url: str = ""


class FooterTextLink(_Translatable):
    text: str = ""
    url: str = ""


class FooterTextLinkSection(_Translatable):
    title: str = ""
    links: list[FooterTextLink] = Field(default_factory=list)


class MenuItem(_Translatable):
    label: str = ""
    url: str = ""


class MenuSettings(_Translatable):
    """Header/hamburger menu labels and up to five custom entries."""
    top_label: str = "トップ"
    articles_label: str = "記事一覧"
    search_label: str = "検索"
    custom_menus: list[MenuItem] = Field(
        default_factory=lambda: [MenuItem() for _ in range(MAX_CUSTOM_MENUS)]
    )

    @field_validator("custom_menus")
    @classmethod
    def limit_custom_menus(cls, value: list[MenuItem]) -> list[MenuItem]:
        if len(value) > MAX_CUSTOM_MENUS:
            raise ValueError(f"At most {MAX_CUSTOM_MENUS} custom menus are allowed")
        return value


class FirstViewSettings(_Translatable):
    """Hero image and copy on the top page."""
    image_url: str = ""
    catchphrase: str = ""
    description: str = ""


# =============================================================================
# Theme
# =============================================================================

class Theme(BaseModel):
    """
    Per-tenant visual and navigation settings.

    Unknown top-level keys (older color fields) are kept as-is.
    """
    model_config = ConfigDict(extra="allow")

    layout_theme: str = DEFAULT_LAYOUT
    first_view: FirstViewSettings | None = None
    footer_blocks: list[FooterBlock] = Field(default_factory=list)
    footer_contents: list[FooterContent] = Field(default_factory=list)
    footer_text_link_sections: list[FooterTextLinkSection] = Field(default_factory=list)
    menu_settings: MenuSettings = Field(default_factory=MenuSettings)

    # Base colors
    primary_color: str = "#3b82f6"
    secondary_color: str = "#6b7280"
    accent_color: str = "#8b5cf6"

    # Backgrounds
    background_color: str = "#f9fafb"
    header_background_color: str = "#ffffff"
    footer_background_color: str = "#1f2937"
    block_background_color: str = "#ffffff"
    menu_background_color: str = "#1f2937"
    menu_text_color: str = "#ffffff"

    # Text and links
    link_color: str = "#2563eb"
    link_hover_color: str = "#1d4ed8"

    # Decoration
    border_color: str = "#e5e7eb"
    shadow_color: str = "rgba(0, 0, 0, 0.1)"

    custom_css: str = ""

    @field_validator("layout_theme")
    @classmethod
    def check_layout(cls, value: str) -> str:
        if value not in THEME_LAYOUTS:
            raise ValueError(f"Unknown layout '{value}'. Available: {', '.join(THEME_LAYOUTS)}")
        return value

    @field_validator("footer_blocks")
    @classmethod
    def limit_footer_blocks(cls, value: list[FooterBlock]) -> list[FooterBlock]:
        if len(value) > MAX_FOOTER_BLOCKS:
            raise ValueError(f"At most {MAX_FOOTER_BLOCKS} footer blocks are allowed")
        return value

    @field_validator("footer_contents")
    @classmethod
    def limit_footer_contents(cls, value: list[FooterContent]) -> list[FooterContent]:
        if len(value) > MAX_FOOTER_CONTENTS:
            raise ValueError(f"At most {MAX_FOOTER_CONTENTS} footer contents are allowed")
        return value

    @field_validator("footer_text_link_sections")
    @classmethod
    def limit_link_sections(cls, value: list[FooterTextLinkSection]) -> list[FooterTextLinkSection]:
        if len(value) > MAX_TEXT_LINK_SECTIONS:
            raise ValueError(f"At most {MAX_TEXT_LINK_SECTIONS} text link sections are allowed")
        return value


_DEFAULT_THEME = Theme().model_dump()


def default_theme() -> dict[str, Any]:
    """Fresh copy of the default (cobi) theme."""
    return copy.deepcopy(_DEFAULT_THEME)


class ThemeUpdate(BaseModel):
    """PUT /theme body."""
    theme: Theme
