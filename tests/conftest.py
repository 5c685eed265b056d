# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides sample tenant, article, tag and category records
# =============================================================================

import os

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_ANON_KEY", "test-anon-key")
os.environ.setdefault("SUPABASE_SERVICE_KEY", "test-service-key")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("OPENAI_API_KEY", "test-openai-key")
os.environ.setdefault("CRON_SECRET", "test-cron-secret")
os.environ.setdefault("SUPER_ADMIN_EMAILS", "root@example.com")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

from types import SimpleNamespace
from unittest.mock import DEFAULT, patch

import pytest

from lib.supabase_client import SupabaseClient


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def media_id():
    return "media-1"


@pytest.fixture
def sample_tenant(media_id):
    """Active tenant with one owner and the default layout."""
    return {
        "id": media_id,
        "name": "トラベルメディア",
        "slug": "travel",
        "custom_domain": "travel.example.com",
        "owner_id": "11111111-1111-1111-1111-111111111111",
        "member_ids": ["11111111-1111-1111-1111-111111111111"],
        "settings": {
            "site_description": "旅行情報サイト",
            "logos": {"landscape": "", "square": "https://cdn.example.com/logo.png", "portrait": ""},
            "favicon_url": "",
            "og_image_url": "",
        },
        "theme": {"layout_theme": "cobi"},
        "allow_indexing": False,
        "is_active": True,
    }


@pytest.fixture
def sample_article(media_id):
    """Published Japanese article with two headings."""
    return {
        "id": "article-1",
        "media_id": media_id,
        "slug": "tokyo-cafe",
        "title": "東京のカフェ",
        "title_ja": "東京のカフェ",
        "content": "<h2>はじめに</h2><p>本文です。</p><h3>詳細</h3><p>詳しく。</p>",
        "content_ja": "<h2>はじめに</h2><p>本文です。</p><h3>詳細</h3><p>詳しく。</p>",
        "excerpt": "おすすめのカフェ",
        "excerpt_ja": "おすすめのカフェ",
        "meta_title": "東京のカフェ",
        "meta_title_ja": "東京のカフェ",
        "meta_description": "",
        "meta_description_ja": "",
        "faqs": [{"question": "営業時間は？", "answer": "9時からです。"}],
        "faqs_ja": [{"question": "営業時間は？", "answer": "9時からです。"}],
        "category_ids": ["cat-1"],
        "tag_ids": ["tag-1"],
        "writer_id": "writer-1",
        "is_published": True,
        "published_at": "2024-03-01T00:00:00+00:00",
        "view_count": 10,
    }


@pytest.fixture
def sample_tags(media_id):
    return [
        {"id": "tag-1", "media_id": media_id, "name": "カフェ", "slug": "cafe"},
        {"id": "tag-2", "media_id": media_id, "name": "東京観光", "slug": "tokyo-sightseeing"},
    ]


@pytest.fixture
def sample_categories(media_id):
    return [
        {"id": "cat-1", "media_id": media_id, "name": "グルメ", "slug": "gourmet"},
        {"id": "cat-2", "media_id": media_id, "name": "ホテル", "slug": "hotel"},
    ]


@pytest.fixture
def mock_db():
    """
    SupabaseClient with every data method replaced by a MagicMock.

    Patched on the class so every module that imported it sees the mocks.
    """
    with patch.multiple(
        SupabaseClient,
        get_client=DEFAULT,
        fetch_by_id=DEFAULT,
        fetch_many=DEFAULT,
        fetch_by_ids=DEFAULT,
        count=DEFAULT,
        insert=DEFAULT,
        update=DEFAULT,
        delete=DEFAULT,
    ) as mocks:
        mocks["fetch_many"].return_value = []
        mocks["fetch_by_ids"].return_value = []
        mocks["fetch_by_id"].return_value = None
        mocks["count"].return_value = 0
        yield SimpleNamespace(**mocks)
