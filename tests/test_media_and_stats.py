# =============================================================================
# tests/test_media_and_stats.py - Tests for the media library and statistics
# =============================================================================
# Run with: pytest tests/test_media_and_stats.py -v
# =============================================================================

import io
from datetime import datetime, timezone
from unittest.mock import MagicMock, patch

import pytest
from PIL import Image

from agents.content_writer import GeneratedImage
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidMediaTypeError, ValidationFailedError
from core.services.media_service import MediaService, build_usage_index, sanitize_filename
from core.services.stats_service import (
    StatsService,
    articles_frame,
    monthly_published,
    top_articles,
    views_by_category,
)


def _png(width=64, height=48) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(10, 120, 200)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def mock_storage():
    with patch("core.services.media_service.StorageService") as storage:
        storage.upload_bytes.side_effect = lambda path, data, content_type: f"https://cdn.example.com/{path}"
        storage.path_from_url.side_effect = lambda url: url.replace("https://cdn.example.com/", "") if url else None
        yield storage


# =============================================================================
# Media
# =============================================================================

class TestMediaUpload:
    """Tests for MediaService.upload."""

    def test_sanitize_filename(self):
        assert sanitize_filename("写真 1.png") == "___1.png"

    def test_image_is_converted_to_webp(self, mock_db, mock_storage):
        # Arrange
        mock_db.insert.side_effect = lambda table, data: {"id": "file-1", **data}

        # Act
        record = MediaService.upload("media-1", _png(), "photo.png", "image/png")

        # Assert
        assert record["type"] == "image"
        assert record["mime_type"] == "image/webp"
        assert (record["width"], record["height"]) == (64, 48)
        assert record["url"].startswith("https://cdn.example.com/media/images/")
        assert record["url"].endswith("_photo.webp")
        assert record["thumbnail_url"].startswith("https://cdn.example.com/media/thumbnails/")
        assert record["alt"] == "photo"
        assert record["media_id"] == "media-1"
        assert record["is_ai_generated"] is False
        assert mock_storage.upload_bytes.call_count == 2

    def test_video_is_stored_unchanged(self, mock_db, mock_storage):
        mock_db.insert.side_effect = lambda table, data: data

        record = MediaService.upload("media-1", b"\x00video", "clip.mp4", "video/mp4", alt="clip")

        assert record["type"] == "video"
        assert record["size"] == 6
        assert record["thumbnail_url"] == record["url"]
        mock_storage.upload_bytes.assert_called_once()

    def test_rejects_other_types(self, mock_db, mock_storage):
        with pytest.raises(InvalidMediaTypeError):
            MediaService.upload("media-1", b"%PDF", "doc.pdf", "application/pdf")

    def test_rejects_unreadable_image(self, mock_db, mock_storage):
        with pytest.raises(InvalidMediaTypeError):
            MediaService.upload("media-1", b"not an image", "broken.png", "image/png")

    def test_rejects_large_files(self, mock_db, mock_storage):
        with patch.object(settings, "MAX_UPLOAD_SIZE_MB", 0):
            with pytest.raises(FileTooLargeError):
                MediaService.upload("media-1", b"12345", "photo.png", "image/png")


class TestMediaLibrary:
    """Tests for usage tracking, deletion and AI images."""

    def test_usage_counts(self, mock_db, sample_tenant):
        # Arrange
        files = [
            {"id": "f1", "url": "https://cdn.example.com/a.webp"},
            {"id": "f2", "url": "https://cdn.example.com/logo.png"},
            {"id": "f3", "url": "https://cdn.example.com/unused.webp"},
        ]

        def fetch_many(table, **kwargs):
            if table == "media_files":
                return files
            if table == "articles":
                return [{"id": "article-1", "title": "東京", "featured_image": "https://cdn.example.com/a.webp"}]
            return []

        mock_db.fetch_many.side_effect = fetch_many

        # Act
        result = MediaService.list_media(sample_tenant)

        # Assert
        assert [f["usage_count"] for f in result] == [1, 1, 0]
        assert result[0]["usage_details"][0]["type"] == "article"
        assert result[1]["usage_details"][0] == {
            "type": "tenant", "id": "media-1", "title": "トラベルメディア", "field": "logos.square",
        }

    def test_usage_index_includes_theme_images(self, mock_db, sample_tenant):
        tenant = {**sample_tenant, "theme": {"first_view": {"image_url": "https://cdn.example.com/hero.webp"}}}

        index = build_usage_index(tenant)

        assert index["https://cdn.example.com/hero.webp"][0]["field"] == "first_view"

    def test_delete_removes_file_and_thumbnail(self, mock_db, mock_storage):
        mock_db.fetch_by_id.return_value = {
            "id": "f1",
            "media_id": "media-1",
            "url": "https://cdn.example.com/media/images/a.webp",
            "thumbnail_url": "https://cdn.example.com/media/thumbnails/a.webp",
        }

        MediaService.delete_media("media-1", "f1")

        paths = mock_storage.delete.call_args[0][0]
        assert sorted(paths) == ["media/images/a.webp", "media/thumbnails/a.webp"]
        mock_db.delete.assert_called_once_with("media_files", "f1")

    def test_generate_image(self, mock_db, mock_storage):
        mock_db.insert.side_effect = lambda table, data: data
        writer = MagicMock()
        writer.improve_image_prompt.return_value = "a detailed cat"
        writer.generate_image.return_value = GeneratedImage(data=_png(), prompt="a detailed cat", revised_prompt="rev")

        record = MediaService.generate_image("media-1", "a cat", size="1792x1024", writer=writer)

        writer.generate_image.assert_called_once_with("a detailed cat", "1792x1024")
        assert record["is_ai_generated"] is True
        assert record["ai_prompt"] == "a cat"
        assert record["ai_revised_prompt"] == "rev"
        assert record["alt"] == "a cat"
        assert record["url"].startswith("https://cdn.example.com/media/ai/")

    def test_generate_image_requires_prompt(self):
        with pytest.raises(ValidationFailedError):
            MediaService.generate_image("media-1", "  ", writer=MagicMock())


# =============================================================================
# Stats
# =============================================================================

ARTICLES = [
    {"id": "a1", "title": "A", "slug": "a", "is_published": True,
     "published_at": "2024-03-01T00:00:00+00:00", "view_count": 10, "category_ids": ["c1", "c2"]},
    {"id": "a2", "title": "B", "slug": "b", "is_published": True,
     "published_at": "2024-02-10T00:00:00+00:00", "view_count": 5, "category_ids": ["c1"]},
    {"id": "a3", "title": "C", "slug": "c", "is_published": False,
     "published_at": None, "view_count": 99, "category_ids": None},
]


class TestStats:
    """Tests for the dashboard aggregations."""

    def test_monthly_published(self):
        months = monthly_published(articles_frame(ARTICLES), now=datetime(2024, 3, 15, tzinfo=timezone.utc))

        assert len(months) == 12
        assert months[0]["month"] == "2023-04"
        assert months[-1] == {"month": "2024-03", "count": 1}
        assert months[-2] == {"month": "2024-02", "count": 1}
        assert sum(m["count"] for m in months) == 2

    def test_monthly_published_empty(self):
        months = monthly_published(articles_frame([]), now=datetime(2024, 3, 15, tzinfo=timezone.utc))
        assert all(m["count"] == 0 for m in months)

    def test_top_articles_only_published(self):
        top = top_articles(articles_frame(ARTICLES))

        assert [a["id"] for a in top] == ["a1", "a2"]

    def test_views_by_category(self):
        result = views_by_category(articles_frame(ARTICLES), {"c1": "グルメ"})

        assert result == [
            {"category_id": "c1", "name": "グルメ", "views": 15},
            {"category_id": "c2", "name": "", "views": 10},
        ]

    def test_get_stats(self, mock_db):
        mock_db.fetch_many.side_effect = lambda table, **kwargs: (
            ARTICLES if table == "articles" else [{"id": "c1", "name": "グルメ"}]
        )
        mock_db.count.return_value = 3

        stats = StatsService.get_stats("media-1")

        assert stats["articles"] == {"total": 3, "published": 2, "draft": 1}
        assert stats["categories"] == 1
        assert stats["tags"] == 3
        assert stats["views_by_category"][0]["views"] == 15
