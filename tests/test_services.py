# =============================================================================
# tests/test_services.py - Tests for the admin services
# =============================================================================
# Tests for the publish pipeline, tag assignment, scheduled generation,
# themes, articles and tenants. The database is replaced by the mock_db
# fixture and the LLM agents by MagicMocks.
#
# Run with: pytest tests/test_services.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from app.exceptions import (
    DuplicateSlugError,
    GenerationError,
    ResourceNotFoundError,
    TenantAccessDeniedError,
    TranslationError,
    ValidationFailedError,
)
from core.models.article import ArticleCreate, ArticleUpdate
from core.models.banner import BannerCreate, BannerOrderUpdate
from core.models.page import PageCreate, PageUpdate
from core.models.schedule import ArticlePatternCreate
from core.models.taxonomy import CategoryCreate, TagCreate
from core.models.tenant import SiteSettingsUpdate, TenantCreate
from core.models.theme import Theme
from core.models.writer import WriterCreate
from core.services.article_service import ArticleService, seed_japanese_fields
from core.services.banner_service import BannerService
from core.services.category_service import CategoryService
from core.services.page_service import PageService
from core.services.pattern_service import ARTICLE_PATTERNS, IMAGE_PROMPT_PATTERNS, PatternService
from core.services.publish_service import PublishService
from core.services.schedule_service import ScheduleService, local_slot, round_to_grid
from core.services.tag_service import TagService
from core.services.tenant_service import TenantService, normalize_host
from core.services.theme_service import ThemeService, ThemeTranslator, localize_theme, merge_theme
from core.services.writer_service import WriterService
from lib.supabase_client import SupabaseClientError


def _fake_translator(fail_langs=()):
    """Translator whose outputs are prefixed with the language code."""
    translator = MagicMock()

    def translate_article(source, lang):
        if lang in fail_langs:
            raise TranslationError(lang, "boom")
        return {name: f"{lang}:{value}" for name, value in source.items()}

    translator.translate_article.side_effect = translate_article
    translator.generate_ai_summary.side_effect = lambda content, lang: f"summary-{lang}"
    translator.translate_faqs.side_effect = lambda faqs, lang: [
        {"question": f"{lang}:{f['question']}", "answer": f"{lang}:{f['answer']}"} for f in faqs
    ]
    translator.translate_to_all.side_effect = lambda text, context=None: {
        "ja": text, "en": f"en:{text}", "zh": f"zh:{text}", "ko": f"ko:{text}",
    }
    return translator


# =============================================================================
# Publish pipeline
# =============================================================================

class TestPublishPipeline:
    """Tests for PublishService.run_pipeline."""

    def test_translates_every_language_and_syncs_search(self, mock_db, sample_article):
        # Arrange
        mock_db.fetch_by_id.return_value = sample_article
        mock_db.update.return_value = None

        # Act
        with patch("core.services.publish_service.SearchClient") as mock_search:
            mock_search.sync_article.return_value = ["ja", "en", "zh", "ko"]
            result = PublishService.run_pipeline("article-1", translator=_fake_translator())

        # Assert
        assert result["success"] is True
        assert result["translated_langs"] == ["en", "zh", "ko"]
        assert result["failed_langs"] == []
        assert result["indexed_langs"] == ["ja", "en", "zh", "ko"]

        mock_db.update.assert_called_once()
        table, article_id, fields = mock_db.update.call_args[0]
        assert (table, article_id) == ("articles", "article-1")
        assert fields["title_en"] == "en:東京のカフェ"
        assert fields["ai_summary_ja"] == "summary-ja"
        assert fields["ai_summary_ko"] == "summary-ko"
        assert fields["faqs_zh"] == [{"question": "zh:営業時間は？", "answer": "zh:9時からです。"}]
        assert [entry["level"] for entry in fields["toc_en"]] == [2, 3]
        assert "toc_ja" in fields

        synced = mock_search.sync_article.call_args[0][0]
        assert synced["title_en"] == "en:東京のカフェ"

    def test_failed_language_does_not_fail_publish(self, mock_db, sample_article):
        mock_db.fetch_by_id.return_value = sample_article

        with patch("core.services.publish_service.SearchClient") as mock_search:
            mock_search.sync_article.return_value = ["ja", "en", "zh", "ko"]
            result = PublishService.run_pipeline("article-1", translator=_fake_translator(fail_langs=("ko",)))

        assert result["success"] is True
        assert result["translated_langs"] == ["en", "zh"]
        assert result["failed_langs"] == ["ko"]

        fields = mock_db.update.call_args[0][2]
        assert "title_ko" not in fields
        assert "toc_ko" not in fields

    def test_search_failure_is_logged_not_raised(self, mock_db, sample_article):
        mock_db.fetch_by_id.return_value = sample_article

        with patch("core.services.publish_service.SearchClient") as mock_search:
            mock_search.sync_article.side_effect = RuntimeError("cluster down")
            result = PublishService.run_pipeline("article-1", translator=_fake_translator())

        assert result["success"] is True
        assert result["indexed_langs"] == []

    def test_save_failure_is_reported_not_raised(self, mock_db, sample_article):
        # Arrange
        mock_db.fetch_by_id.return_value = sample_article
        mock_db.update.side_effect = SupabaseClientError("write timeout")

        # Act
        with patch("core.services.publish_service.SearchClient") as mock_search:
            result = PublishService.run_pipeline("article-1", translator=_fake_translator())

        # Assert
        assert result["success"] is False
        assert result["error"] == "write timeout"
        assert result["translated_langs"] == ["en", "zh", "ko"]
        mock_search.sync_article.assert_not_called()

    def test_missing_article(self, mock_db):
        result = PublishService.run_pipeline("missing", translator=_fake_translator())

        assert result["success"] is False
        mock_db.update.assert_not_called()

    def test_dispatch_runs_inline_when_broker_is_down(self):
        with patch("workers.tasks.publish_article") as mock_task, \
                patch.object(PublishService, "run_pipeline", return_value={"success": True}) as mock_run:
            mock_task.delay.side_effect = ConnectionError("redis down")

            result = PublishService.dispatch_publish("article-1")

        assert result == {"mode": "inline", "result": {"success": True}}
        mock_run.assert_called_once_with("article-1")

    def test_dispatch_queues_task(self):
        with patch("workers.tasks.publish_article") as mock_task:
            mock_task.delay.return_value = MagicMock(id="task-1")

            result = PublishService.dispatch_publish("article-1")

        assert result == {"mode": "queued", "task_id": "task-1"}


# =============================================================================
# Tags
# =============================================================================

class TestGenerateTags:
    """Tests for TagService.generate_tags."""

    def test_reuses_similar_tags_and_creates_new_ones(self, mock_db, sample_tags):
        # Arrange
        def fetch_many(table, filters=None, columns="*", **kwargs):
            if table == "tags" and columns == "id":
                return []  # slug uniqueness check
            return list(sample_tags)

        mock_db.fetch_many.side_effect = fetch_many
        mock_db.fetch_by_ids.return_value = [{"id": "cat-1", "name": "グルメ"}]
        mock_db.insert.return_value = {"id": "tag-3", "name": "温泉", "slug": "onsen"}

        writer = MagicMock()
        writer.generate_tag_names.return_value = ["カフェ", "東京", "温泉"]
        writer.generate_tag_slug.side_effect = {"東京": "tokyo-sightseeing", "温泉": "onsen"}.get

        # Act
        result = TagService.generate_tags(
            "media-1", "東京のカフェ", "<p>本文</p>", ["cat-1"],
            writer=writer, translator=_fake_translator(),
        )

        # Assert
        assert [(t["id"], t["is_new"]) for t in result["tags"]] == [
            ("tag-1", False),
            ("tag-2", False),
            ("tag-3", True),
        ]
        assert result["tags"][0]["similarity"] == 1.0
        assert result["summary"] == {"total": 3, "existing": 2, "new": 1}
        assert writer.generate_tag_names.call_args.kwargs["category_names"] == ["グルメ"]

        inserted = mock_db.insert.call_args[0][1]
        assert inserted["media_id"] == "media-1"
        assert inserted["name_en"] == "en:温泉"
        assert inserted["name_ja"] == "温泉"

    def test_requires_title_or_content(self, mock_db):
        with pytest.raises(ValidationFailedError):
            TagService.generate_tags("media-1", "", "", writer=MagicMock())

    def test_create_tag_duplicate_slug(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "tag-1"}]

        with pytest.raises(DuplicateSlugError):
            TagService.create_tag("media-1", TagCreate(name="カフェ", slug="cafe"), _fake_translator())

    def test_delete_tag_removes_it_from_articles(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "tag-1", "media_id": "media-1"}
        mock_db.fetch_many.return_value = [{"id": "article-1", "tag_ids": ["tag-1", "tag-2"]}]

        TagService.delete_tag("media-1", "tag-1")

        mock_db.delete.assert_called_once_with("tags", "tag-1")
        update_data = mock_db.update.call_args[0][2]
        assert update_data["tag_ids"] == ["tag-2"]

    def test_get_tag_of_another_tenant(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "tag-1", "media_id": "other"}

        with pytest.raises(ResourceNotFoundError):
            TagService.get_tag("media-1", "tag-1")


# =============================================================================
# Scheduled generation
# =============================================================================

MONDAY_0902_UTC = datetime(2024, 3, 4, 0, 2, tzinfo=timezone.utc)


def _schedule(schedule_id, **overrides):
    schedule = {
        "id": schedule_id,
        "media_id": "media-1",
        "category_id": "cat-1",
        "writer_id": f"writer-{schedule_id}",
        "image_prompt_pattern_id": "pattern-1",
        "days_of_week": ["1"],
        "time_of_day": "09:00",
        "timezone": "Asia/Tokyo",
        "is_active": True,
        "last_executed_at": None,
    }
    schedule.update(overrides)
    return schedule


class TestScheduleMatching:
    """Tests for time rounding and local slots."""

    def test_round_to_grid(self):
        base = datetime(2024, 3, 4, 19, 0, tzinfo=timezone.utc)

        assert round_to_grid(base.replace(minute=57)).minute == 55
        assert round_to_grid(base.replace(minute=58)) == datetime(2024, 3, 4, 20, 0, tzinfo=timezone.utc)

    def test_round_to_grid_carries_into_next_day(self):
        rounded = round_to_grid(datetime(2024, 3, 4, 23, 58, tzinfo=timezone.utc))
        assert rounded == datetime(2024, 3, 5, 0, 0, tzinfo=timezone.utc)

    def test_local_slot_uses_schedule_timezone(self):
        assert local_slot(MONDAY_0902_UTC, "Asia/Tokyo") == ("1", "09:00")
        # Still Sunday evening in New York
        assert local_slot(MONDAY_0902_UTC, "America/New_York") == ("0", "19:00")


class TestRunDueSchedules:
    """Tests for ScheduleService.run_due_schedules."""

    def test_runs_due_schedules_independently(self, mock_db):
        # Arrange
        mock_db.fetch_many.return_value = [
            _schedule("s1"),
            _schedule("s2", last_executed_at=(MONDAY_0902_UTC - timedelta(minutes=5)).isoformat()),
            _schedule("s3", category_id="bad"),
            _schedule("s4", days_of_week=["2"]),
            _schedule("s5", is_active=False),
            _schedule("s6", time_of_day="09:05"),
        ]

        def generate(**kwargs):
            if kwargs["category_id"] == "bad":
                raise GenerationError("title", "boom")
            return SimpleNamespace(article_id=f"article-for-{kwargs['writer_id']}")

        # Act
        result = ScheduleService.run_due_schedules(now=MONDAY_0902_UTC, generate=generate)

        # Assert
        assert result["executed"] == 2
        assert result["succeeded"] == 1
        assert result["failed"] == 1
        assert result["results"][0] == {
            "schedule_id": "s1", "success": True, "article_id": "article-for-writer-s1",
        }
        assert result["results"][1]["schedule_id"] == "s3"
        assert "boom" in result["results"][1]["error"]

        mock_db.update.assert_called_once()
        assert mock_db.update.call_args[0][:2] == ("scheduled_generations", "s1")

    def test_old_execution_does_not_block(self, mock_db):
        mock_db.fetch_many.return_value = [
            _schedule("s1", last_executed_at=(MONDAY_0902_UTC - timedelta(days=7)).isoformat()),
        ]

        result = ScheduleService.run_due_schedules(
            now=MONDAY_0902_UTC,
            generate=lambda **kwargs: SimpleNamespace(article_id="a1"),
        )

        assert result["succeeded"] == 1

    def test_bookkeeping_failure_does_not_stop_other_schedules(self, mock_db):
        # Arrange
        mock_db.fetch_many.return_value = [_schedule("s1"), _schedule("s2")]
        mock_db.update.side_effect = SupabaseClientError("db down")
        generate = MagicMock(side_effect=lambda **kwargs: SimpleNamespace(article_id=f"a-{kwargs['writer_id']}"))

        # Act
        result = ScheduleService.run_due_schedules(now=MONDAY_0902_UTC, generate=generate)

        # Assert
        assert generate.call_count == 2
        assert result["succeeded"] == 2
        assert [r["article_id"] for r in result["results"]] == ["a-writer-s1", "a-writer-s2"]
        assert "db down" in result["results"][0]["warning"]


# =============================================================================
# Theme
# =============================================================================

class TestTheme:
    """Tests for theme merging, translation and localization."""

    def test_merge_theme_keeps_defaults(self):
        theme = merge_theme({"primary_color": "#000000", "first_view": {"catchphrase": "旅へ"}})

        assert theme["primary_color"] == "#000000"
        assert theme["secondary_color"] == "#6b7280"
        assert theme["first_view"]["catchphrase"] == "旅へ"
        assert theme["layout_theme"] == "cobi"

    def test_translate_theme(self):
        translator = MagicMock()
        translator.translate_text.side_effect = lambda text, lang, context: f"{lang}:{text}"
        theme = {
            "first_view": {"catchphrase": "旅へ", "description": ""},
            "menu_settings": {
                "top_label": "トップ",
                "articles_label": "Articles",
                "search_label": "検索",
                "custom_menus": [{"label": "", "url": ""}, {"label": "FAQ", "url": "/faq"}],
            },
        }

        ThemeTranslator(translator).translate_theme(theme)

        assert theme["first_view"]["catchphrase_ja"] == "旅へ"
        assert theme["first_view"]["catchphrase_en"] == "en:旅へ"
        assert theme["first_view"]["description_ko"] == ""
        assert theme["menu_settings"]["articles_label_zh"] == "Articles"
        assert theme["menu_settings"]["top_label_ko"] == "ko:トップ"
        assert "label_en" not in theme["menu_settings"]["custom_menus"][0]
        assert theme["menu_settings"]["custom_menus"][1]["label_zh"] == "FAQ"

    def test_translation_failure_keeps_original(self):
        translator = MagicMock()
        translator.translate_text.side_effect = TranslationError("en", "boom")
        part = {"catchphrase": "旅へ"}

        ThemeTranslator(translator).localize(part, "catchphrase", "first view catchphrase")

        assert part["catchphrase_en"] == "旅へ"

    def test_localize_theme(self):
        theme = {"first_view": {"catchphrase": "旅へ", "catchphrase_ja": "旅へ", "catchphrase_en": "Travel"}}

        assert localize_theme(theme, "en")["first_view"]["catchphrase"] == "Travel"
        assert localize_theme(theme, "ko")["first_view"]["catchphrase"] == "旅へ"
        # The input is not modified
        assert theme["first_view"]["catchphrase"] == "旅へ"

    def test_save_theme(self, mock_db, sample_tenant):
        translator = MagicMock()
        translator.translate_text.side_effect = lambda text, lang, context: f"{lang}:{text}"

        data = ThemeService.save_theme(sample_tenant, Theme(layout_theme="furatto"), translator)

        assert data["layout_theme"] == "furatto"
        assert data["menu_settings"]["top_label_en"] == "en:トップ"
        table, record_id, update = mock_db.update.call_args[0]
        assert (table, record_id) == ("tenants", "media-1")
        assert update["theme"] == data


# =============================================================================
# Articles
# =============================================================================

class TestArticleService:
    """Tests for ArticleService."""

    def test_seed_japanese_fields(self):
        data = seed_japanese_fields({"title": "東京", "excerpt": "概要"})

        assert data["title_ja"] == "東京"
        assert data["excerpt_ja"] == "概要"
        assert data["meta_title_ja"] == "東京"
        assert data["meta_description_ja"] == "概要"

    def test_create_published_article_dispatches_pipeline(self, mock_db):
        # Arrange
        mock_db.insert.return_value = {"id": "article-9", "is_published": True}
        payload = ArticleCreate(title="東京", slug="tokyo", content="<p>本文</p>", is_published=True)

        # Act
        with patch.object(PublishService, "dispatch_publish") as mock_dispatch:
            article = ArticleService.create_article("media-1", payload)

        # Assert
        assert article["id"] == "article-9"
        inserted = mock_db.insert.call_args[0][1]
        assert inserted["media_id"] == "media-1"
        assert inserted["title_ja"] == "東京"
        assert inserted["content_ja"] == "<p>本文</p>"
        assert inserted["view_count"] == 0
        mock_dispatch.assert_called_once_with("article-9")

    def test_create_article_duplicate_slug(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "article-1"}]

        with pytest.raises(DuplicateSlugError):
            ArticleService.create_article("media-1", ArticleCreate(title="東京", slug="tokyo"))

    def test_unpublish_removes_from_search(self, mock_db, sample_article):
        mock_db.fetch_by_id.return_value = sample_article

        with patch.object(PublishService, "remove_from_search") as mock_remove, \
                patch.object(PublishService, "dispatch_publish") as mock_dispatch:
            ArticleService.set_published("media-1", "article-1", False)

        mock_remove.assert_called_once_with("article-1")
        mock_dispatch.assert_not_called()

    def test_update_reseeds_japanese_fields(self, mock_db, sample_article):
        mock_db.fetch_by_id.return_value = sample_article

        with patch.object(PublishService, "dispatch_publish") as mock_dispatch:
            ArticleService.update_article("media-1", "article-1", ArticleUpdate(title="京都のカフェ"))

        data = mock_db.update.call_args[0][2]
        assert data["title_ja"] == "京都のカフェ"
        assert data["content_ja"] == sample_article["content"]
        mock_dispatch.assert_called_once_with("article-1")

    def test_article_of_another_tenant_is_not_found(self, mock_db, sample_article):
        mock_db.fetch_by_id.return_value = sample_article

        with pytest.raises(ResourceNotFoundError):
            ArticleService.get_article("other-media", "article-1")

    def test_republish_draft_fails(self, mock_db, sample_article):
        mock_db.fetch_by_id.return_value = {**sample_article, "is_published": False}

        with pytest.raises(ValidationFailedError):
            ArticleService.republish("media-1", "article-1")

    def test_check_duplicate(self, mock_db):
        mock_db.fetch_many.return_value = [
            {"id": "article-1", "title": "東京のカフェ", "content": "<p>全く別の本文</p>"},
            {"id": "article-2", "title": "Osaka hotels", "content": "<p>zzz</p>"},
        ]

        result = ArticleService.check_duplicate("media-1", "東京のカフェ", "")

        assert result["is_duplicate"] is True
        assert [d["article_id"] for d in result["duplicates"]] == ["article-1"]
        assert result["duplicates"][0]["title_similarity"] == 1.0
        assert result["checked_count"] == 2

    def test_check_duplicate_excludes_itself(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "article-1", "title": "東京のカフェ", "content": ""}]

        result = ArticleService.check_duplicate("media-1", "東京のカフェ", "", article_id="article-1")

        assert result == {"is_duplicate": False, "duplicates": [], "checked_count": 0}

    def test_generate_slug_is_unique(self, mock_db):
        mock_db.fetch_many.side_effect = lambda table, filters=None, **kwargs: (
            [{"id": "article-1"}] if filters.get("slug") == "tokyo-cafe" else []
        )
        writer = MagicMock()
        writer.generate_slug.return_value = "tokyo-cafe"

        assert ArticleService.generate_slug("media-1", "東京のカフェ", writer) == "tokyo-cafe-2"


# =============================================================================
# Tenants
# =============================================================================

class TestTenantService:
    """Tests for tenant access and domain resolution."""

    def test_member_can_access(self, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        tenant = TenantService.get_accessible_tenant("media-1", sample_tenant["owner_id"])

        assert tenant["id"] == "media-1"

    def test_non_member_is_denied(self, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        with pytest.raises(TenantAccessDeniedError):
            TenantService.get_accessible_tenant("media-1", "someone-else")

    def test_super_admin_can_access_any_tenant(self, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        assert TenantService.get_accessible_tenant("media-1", "someone-else", super_admin=True)

    def test_create_tenant(self, mock_db):
        mock_db.insert.return_value = {"id": "media-2"}

        TenantService.create_tenant(
            TenantCreate(name="Guide", slug="guide", custom_domain=" Guide.Example.com "),
            user_id="admin",
            super_admin=True,
        )

        data = mock_db.insert.call_args[0][1]
        assert data["owner_id"] == "admin"
        assert data["member_ids"] == ["admin"]
        assert data["custom_domain"] == "guide.example.com"
        assert data["allow_indexing"] is False

    def test_normalize_host(self):
        assert normalize_host("Blog.Example.com:3000") == "blog.example.com"

    def test_resolve_domain_falls_back_to_subdomain(self, mock_db):
        mock_db.fetch_many.side_effect = lambda table, filters=None, **kwargs: (
            [{"id": "media-1"}] if filters.get("slug") == "blog" else []
        )

        assert TenantService.resolve_domain("Blog.Example.com:3000") == "media-1"

    def test_resolve_domain_unknown(self, mock_db):
        assert TenantService.resolve_domain("nowhere.example.com") is None

    def test_owner_cannot_be_removed(self, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        with pytest.raises(ValidationFailedError):
            TenantService.remove_member("media-1", sample_tenant["owner_id"])

    def test_site_settings(self, sample_tenant):
        assert TenantService.site_settings(sample_tenant) == {
            "site_name": "トラベルメディア",
            "site_description": "旅行情報サイト",
            "logo_url": "https://cdn.example.com/logo.png",
            "allow_indexing": False,
        }

    def test_update_site_settings(self, mock_db, sample_tenant):
        mock_db.update.return_value = None

        result = TenantService.update_site_settings(
            sample_tenant, SiteSettingsUpdate(site_description="新しい説明", allow_indexing=True)
        )

        assert result["site_description"] == "新しい説明"
        assert result["allow_indexing"] is True
        assert result["site_name"] == "トラベルメディア"


# =============================================================================
# Banners
# =============================================================================

class TestBannerService:
    """Tests for banner order, placement and reordering."""

    def _payload(self, placement="footer"):
        return BannerCreate(title="夏の特集", image_url="https://cdn.example.com/b.webp", placement=placement)

    def test_new_banner_goes_last(self, mock_db, sample_tenant):
        # Arrange
        mock_db.fetch_many.return_value = [{"id": "b1", "order": 0}, {"id": "b2", "order": 3}]
        mock_db.insert.side_effect = lambda table, data: {"id": "b3", **data}

        # Act
        banner = BannerService.create_banner(sample_tenant, self._payload(), translator=_fake_translator())

        # Assert
        assert banner["order"] == 4
        assert banner["media_id"] == "media-1"
        assert banner["title_en"] == "en:夏の特集"

    def test_first_banner_has_order_zero(self, mock_db, sample_tenant):
        mock_db.insert.side_effect = lambda table, data: {"id": "b1", **data}

        banner = BannerService.create_banner(sample_tenant, self._payload(), translator=_fake_translator())

        assert banner["order"] == 0

    def test_placement_must_exist_in_layout(self, mock_db, sample_tenant):
        with pytest.raises(ValidationFailedError) as exc_info:
            BannerService.create_banner(sample_tenant, self._payload("sidebar-top"), translator=_fake_translator())

        assert exc_info.value.details["allowed"] == ["footer", "side-panel"]
        mock_db.insert.assert_not_called()

    def test_furatto_offers_sidebar_top(self, mock_db, sample_tenant):
        tenant = {**sample_tenant, "theme": {"layout_theme": "furatto"}}
        mock_db.insert.side_effect = lambda table, data: {"id": "b1", **data}

        banner = BannerService.create_banner(tenant, self._payload("sidebar-top"), translator=_fake_translator())

        assert banner["placement"] == "sidebar-top"

    def test_reorder_rejects_foreign_ids_before_writing(self, mock_db):
        # Arrange
        mock_db.fetch_many.return_value = [{"id": "b1", "order": 0}]
        updates = [BannerOrderUpdate(id="b1", order=1), BannerOrderUpdate(id="other-tenant", order=0)]

        # Act / Assert
        with pytest.raises(ResourceNotFoundError):
            BannerService.reorder("media-1", updates)
        mock_db.update.assert_not_called()

    def test_reorder(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "b1"}, {"id": "b2"}]

        count = BannerService.reorder(
            "media-1", [BannerOrderUpdate(id="b1", order=1), BannerOrderUpdate(id="b2", order=0)]
        )

        assert count == 2
        assert mock_db.update.call_args_list[1][0][:2] == ("banners", "b2")
        assert mock_db.update.call_args_list[1][0][2]["order"] == 0


# =============================================================================
# Categories, Tags and Writers
# =============================================================================

class TestTaxonomyDeletion:
    """Deleting a category or tag removes it from its articles."""

    def test_delete_category_pulls_id_from_articles(self, mock_db):
        # Arrange
        mock_db.fetch_by_id.return_value = {"id": "cat-1", "media_id": "media-1"}
        mock_db.fetch_many.return_value = [{"id": "a1", "category_ids": ["cat-1", "cat-2"]}]

        # Act
        CategoryService.delete_category("media-1", "cat-1")

        # Assert
        mock_db.delete.assert_called_once_with("categories", "cat-1")
        assert mock_db.fetch_many.call_args.kwargs["contains"] == {"category_ids": ["cat-1"]}
        table, article_id, fields = mock_db.update.call_args[0]
        assert (table, article_id) == ("articles", "a1")
        assert fields["category_ids"] == ["cat-2"]

    def test_delete_tag_pulls_id_from_articles(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "tag-1", "media_id": "media-1"}
        mock_db.fetch_many.return_value = [{"id": "a1", "tag_ids": ["tag-1"]}]

        TagService.delete_tag("media-1", "tag-1")

        assert mock_db.update.call_args[0][2]["tag_ids"] == []

    def test_delete_category_of_another_tenant(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "cat-1", "media_id": "other"}

        with pytest.raises(ResourceNotFoundError):
            CategoryService.delete_category("media-1", "cat-1")
        mock_db.delete.assert_not_called()


class TestCategoryAndWriterService:

    def test_category_slug_must_be_unique(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "cat-9"}]

        with pytest.raises(DuplicateSlugError):
            CategoryService.create_category(
                "media-1", CategoryCreate(name="グルメ", slug="gourmet"), translator=_fake_translator()
            )

    def test_category_name_and_description_are_translated(self, mock_db):
        mock_db.insert.side_effect = lambda table, data: {"id": "cat-1", **data}

        category = CategoryService.create_category(
            "media-1",
            CategoryCreate(name="グルメ", slug="gourmet", description="食の情報"),
            translator=_fake_translator(),
        )

        assert category["name_ko"] == "ko:グルメ"
        assert category["description_en"] == "en:食の情報"

    def test_writer_handle_name_is_copied_and_bio_translated(self, mock_db):
        # Arrange
        mock_db.insert.side_effect = lambda table, data: {"id": "writer-1", **data}
        translator = _fake_translator()

        # Act
        writer = WriterService.create_writer(
            "media-1", WriterCreate(handle_name="山田", bio="旅が好き"), translator=translator
        )

        # Assert
        assert [writer[f"handle_name_{lang}"] for lang in ("ja", "en", "zh", "ko")] == ["山田"] * 4
        assert writer["bio_en"] == "en:旅が好き"
        translator.translate_to_all.assert_called_once_with("旅が好き", "writer profile")


# =============================================================================
# Pages and Patterns
# =============================================================================

class TestPageService:

    def test_slug_must_be_unique(self, mock_db):
        mock_db.fetch_many.return_value = [{"id": "page-9"}]

        with pytest.raises(DuplicateSlugError):
            PageService.create_page(
                "media-1", PageCreate(title="会社概要", slug="about"), translator=_fake_translator()
            )
        mock_db.insert.assert_not_called()

    def test_update_keeps_own_slug(self, mock_db):
        # Arrange
        mock_db.fetch_by_id.return_value = {"id": "page-1", "media_id": "media-1"}
        mock_db.fetch_many.return_value = [{"id": "page-1"}]

        # Act
        PageService.update_page("media-1", "page-1", PageUpdate(slug="about"), translator=_fake_translator())

        # Assert
        mock_db.update.assert_called_once()

    def test_page_cannot_be_its_own_parent(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "page-1", "media_id": "media-1"}

        with pytest.raises(ValidationFailedError):
            PageService.update_page("media-1", "page-1", PageUpdate(parent_id="page-1"))


class TestPatternService:

    def test_create_sets_tenant(self, mock_db):
        mock_db.insert.side_effect = lambda table, data: {"id": "p1", **data}

        pattern = PatternService.create_pattern(
            ARTICLE_PATTERNS, "media-1", ArticlePatternCreate(name="体験談", prompt="一人称で書く")
        )

        assert pattern["media_id"] == "media-1"
        assert mock_db.insert.call_args[0][0] == "article_patterns"

    def test_pattern_of_another_tenant(self, mock_db):
        mock_db.fetch_by_id.return_value = {"id": "p1", "media_id": "other"}

        with pytest.raises(ResourceNotFoundError):
            PatternService.delete_pattern(IMAGE_PROMPT_PATTERNS, "media-1", "p1")
        mock_db.delete.assert_not_called()
