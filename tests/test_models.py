# =============================================================================
# tests/test_models.py - Pydantic Model Tests
# =============================================================================
# Unit tests for the Pydantic models to ensure:
# - Valid data is accepted and parsed correctly
# - Invalid data raises ValidationError
# - Default values work as expected
#
# Run with: pytest tests/test_models.py -v
# =============================================================================

import pytest
from pydantic import ValidationError

from core.models import (
    ArticleCreate,
    BannerReorderRequest,
    BlockType,
    ContentBlock,
    ImageGenerateRequest,
    ImagePromptPatternCreate,
    PageCreate,
    ScheduledGenerationCreate,
    ScheduledGenerationUpdate,
    TagCreate,
    TenantCreate,
    Theme,
    block_placements,
    default_theme,
)


# =============================================================================
# Article and Taxonomy Tests
# =============================================================================

class TestArticleModels:
    """Tests for article and taxonomy schemas."""

    def test_article_defaults(self):
        article = ArticleCreate(title="東京", slug="tokyo")

        assert article.content == ""
        assert article.category_ids == []
        assert article.is_published is False
        assert article.faqs is None

    def test_article_slug_rejects_spaces_and_slashes(self):
        with pytest.raises(ValidationError):
            ArticleCreate(title="東京", slug="tokyo cafe")
        with pytest.raises(ValidationError):
            ArticleCreate(title="東京", slug="tokyo/cafe")

    def test_japanese_slug_is_accepted(self):
        assert TagCreate(name="カフェ", slug="カフェ").slug == "カフェ"

    def test_faq_requires_question_and_answer(self):
        with pytest.raises(ValidationError):
            ArticleCreate(title="t", slug="t", faqs=[{"question": "", "answer": "a"}])


# =============================================================================
# Schedule Tests
# =============================================================================

SCHEDULE = {
    "name": "平日朝",
    "category_id": "cat-1",
    "writer_id": "writer-1",
    "image_prompt_pattern_id": "pattern-1",
    "days_of_week": ["5", "1", "1"],
    "time_of_day": "09:05",
}


class TestScheduleModels:
    """Tests for scheduled generation schemas."""

    def test_valid_schedule(self):
        schedule = ScheduledGenerationCreate(**SCHEDULE)

        assert schedule.days_of_week == ["1", "5"]
        assert schedule.timezone == "Asia/Tokyo"
        assert schedule.is_active is True

    def test_time_must_be_on_five_minute_grid(self):
        with pytest.raises(ValidationError) as exc_info:
            ScheduledGenerationCreate(**{**SCHEDULE, "time_of_day": "09:07"})
        assert "5 minute" in str(exc_info.value)

    def test_time_format(self):
        with pytest.raises(ValidationError):
            ScheduledGenerationCreate(**{**SCHEDULE, "time_of_day": "24:00"})

    def test_invalid_day(self):
        with pytest.raises(ValidationError):
            ScheduledGenerationCreate(**{**SCHEDULE, "days_of_week": ["7"]})

    def test_empty_days(self):
        with pytest.raises(ValidationError):
            ScheduledGenerationCreate(**{**SCHEDULE, "days_of_week": []})

    def test_unknown_timezone(self):
        with pytest.raises(ValidationError):
            ScheduledGenerationCreate(**{**SCHEDULE, "timezone": "Mars/Olympus"})

    def test_partial_update(self):
        update = ScheduledGenerationUpdate(time_of_day="10:30")

        assert update.model_dump(exclude_unset=True) == {"time_of_day": "10:30"}

    def test_image_sizes(self):
        assert ImagePromptPatternCreate(name="n", prompt="p").size == "1792x1024"
        with pytest.raises(ValidationError):
            ImageGenerateRequest(prompt="cat", size="512x512")


# =============================================================================
# Page, Banner and Tenant Tests
# =============================================================================

class TestPageModels:
    """Tests for static pages and content blocks."""

    def test_cta_block(self):
        block = ContentBlock(id="b1", type="cta", config={"text": "お問い合わせ", "url": "/contact"})

        assert block.type == BlockType.CTA
        assert block.show_on_mobile is True

    def test_block_missing_config(self):
        with pytest.raises(ValidationError) as exc_info:
            ContentBlock(id="b1", type="image", config={"image_url": "https://x"})
        assert "alt" in str(exc_info.value)

    def test_unknown_block_type(self):
        with pytest.raises(ValidationError):
            ContentBlock(id="b1", type="carousel")

    def test_page_with_blocks(self):
        page = PageCreate(
            title="会社概要",
            slug="about",
            blocks=[{"id": "b1", "type": "text", "config": {"content": "<p>x</p>"}}],
        )
        assert page.blocks[0].type == BlockType.TEXT


class TestBannerAndTenantModels:

    def test_reorder_requires_updates(self):
        with pytest.raises(ValidationError):
            BannerReorderRequest(updates=[])

    def test_negative_order(self):
        with pytest.raises(ValidationError):
            BannerReorderRequest(updates=[{"id": "b1", "order": -1}])

    def test_tenant_domain_is_normalized(self):
        tenant = TenantCreate(name="Guide", slug="guide", custom_domain="  Guide.Example.COM ")
        assert tenant.custom_domain == "guide.example.com"

    def test_tenant_blank_domain_becomes_none(self):
        assert TenantCreate(name="Guide", slug="guide", custom_domain="  ").custom_domain is None

    def test_tenant_slug_pattern(self):
        with pytest.raises(ValidationError):
            TenantCreate(name="Guide", slug="Guide_Site")


# =============================================================================
# Theme Tests
# =============================================================================

class TestThemeModels:
    """Tests for the theme schema and layouts."""

    def test_default_theme(self):
        theme = default_theme()

        assert theme["layout_theme"] == "cobi"
        assert len(theme["menu_settings"]["custom_menus"]) == 5

    def test_default_theme_is_a_copy(self):
        default_theme()["layout_theme"] = "furatto"
        assert default_theme()["layout_theme"] == "cobi"

    def test_unknown_layout(self):
        with pytest.raises(ValidationError):
            Theme(layout_theme="magazine")

    def test_footer_limits(self):
        with pytest.raises(ValidationError):
            Theme(footer_blocks=[{}] * 5)
        with pytest.raises(ValidationError):
            Theme(footer_contents=[{}] * 4)
        with pytest.raises(ValidationError):
            Theme(menu_settings={"custom_menus": [{}] * 6})

    def test_translated_siblings_are_kept(self):
        theme = Theme(first_view={"catchphrase": "旅へ", "catchphrase_en": "Travel"})

        assert theme.model_dump()["first_view"]["catchphrase_en"] == "Travel"

    def test_block_placements(self):
        assert block_placements("cobi") == ["footer", "side-panel"]
        assert "sidebar-top" in block_placements("furatto")
        assert block_placements("unknown") == ["footer", "side-panel"]
