# =============================================================================
# tests/test_api.py - HTTP API Tests
# =============================================================================
# Exercises routing, tenancy headers, auth and error mapping through the
# FastAPI TestClient. Services are patched; no Supabase or OpenAI calls.
#
# Run with: pytest tests/test_api.py -v
# =============================================================================

import time
from uuid import UUID
from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from jose import jwt

from app.auth import AuthUser, get_current_user
from app.auth.dependencies import decode_token
from app.config import settings
from app.dependencies import TenantContext, get_tenant_context
from app.exceptions import ResourceNotFoundError
from app.main import app
from app.routers.tasks import build_status
from lib.search_client import SearchClient
from lib.supabase_client import SupabaseClientError

USER_ID = UUID("11111111-1111-1111-1111-111111111111")
MEDIA_HEADERS = {"X-Media-Id": "media-1"}


@pytest.fixture
def user():
    return AuthUser(id=USER_ID, email="editor@example.com")


@pytest.fixture
def client(user, sample_tenant):
    """TestClient with an authenticated member of media-1."""
    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_tenant_context] = lambda: TenantContext(
        media_id="media-1", tenant=sample_tenant, user=user
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client():
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# Root and Tasks
# =============================================================================

class TestRoot:

    def test_root_lists_languages(self, anonymous_client):
        response = anonymous_client.get("/")

        assert response.status_code == 200

    def test_liveness(self, anonymous_client):
        assert anonymous_client.get("/api/v1/health/live").status_code == 200

    def test_startup_creates_search_indices(self):
        es_client = MagicMock()
        es_client.indices.exists.return_value = False

        with patch.object(SearchClient, "get_client", return_value=es_client), \
                patch.object(SearchClient, "_indices_ready", False):
            with TestClient(app):
                pass

        assert es_client.indices.create.call_count == 4


class TestTaskStatus:
    """Tests for Celery state to response mapping."""

    def test_progress(self):
        result = MagicMock(status="PROGRESS", info={"percent": 40, "message": "Writing body"})

        response = build_status("t1", result)

        assert response.progress == 40
        assert response.message == "Writing body"

    def test_success_carries_result(self):
        result = MagicMock(status="SUCCESS", result={"article_id": "a1"})

        response = build_status("t1", result)

        assert response.progress == 100
        assert response.result == {"article_id": "a1"}

    def test_failure_carries_error(self):
        result = MagicMock(status="FAILURE", result=RuntimeError("boom"))

        assert build_status("t1", result).error == "boom"


# =============================================================================
# Auth
# =============================================================================

def _token(**claims) -> str:
    payload = {
        "sub": str(USER_ID),
        "aud": "authenticated",
        "exp": int(time.time()) + 3600,
        **claims,
    }
    return jwt.encode(payload, settings.SUPABASE_JWT_SECRET, algorithm="HS256")


class TestDecodeToken:
    """Tests for Supabase token verification."""

    def test_app_metadata_role_wins(self):
        user = decode_token(_token(role="authenticated", app_metadata={"role": "editor"}))

        assert user.id == USER_ID
        assert user.role == "editor"

    def test_database_roles_are_ignored(self):
        assert decode_token(_token(role="authenticated")).role is None

    def test_super_admin_by_email(self):
        with patch.object(settings, "SUPER_ADMIN_EMAILS", "root@example.com"):
            user = decode_token(_token(email="Root@Example.com"))
            assert user.is_super_admin is True

    def test_super_admin_by_role(self):
        assert decode_token(_token(app_metadata={"role": "super_admin"})).is_super_admin is True

    def test_expired_token(self):
        with pytest.raises(HTTPException) as exc_info:
            decode_token(_token(exp=int(time.time()) - 60))
        assert exc_info.value.status_code == 401

    def test_wrong_secret(self):
        token = jwt.encode({"sub": str(USER_ID), "aud": "authenticated"}, "other-secret", algorithm="HS256")

        with pytest.raises(HTTPException):
            decode_token(token)

    def test_sub_must_be_uuid(self):
        with pytest.raises(HTTPException):
            decode_token(_token(sub="not-a-uuid"))

    def test_admin_route_requires_token(self, anonymous_client):
        response = anonymous_client.get("/api/v1/admin/articles", headers=MEDIA_HEADERS)

        assert response.status_code in (401, 403)


# =============================================================================
# Tenancy
# =============================================================================

class TestTenantHeader:
    """Tests for X-Media-Id resolution."""

    def test_admin_requires_media_id(self, client):
        app.dependency_overrides.pop(get_tenant_context)

        response = client.get("/api/v1/admin/articles")

        assert response.status_code == 400
        assert response.json()["code"] == "TENANT_REQUIRED"

    def test_admin_rejects_non_member(self, client, mock_db, sample_tenant):
        # Arrange
        app.dependency_overrides.pop(get_tenant_context)
        mock_db.fetch_by_id.return_value = {**sample_tenant, "owner_id": "other", "member_ids": []}

        # Act
        response = client.get("/api/v1/admin/articles", headers=MEDIA_HEADERS)

        # Assert
        assert response.status_code == 403
        assert response.json()["code"] == "TENANT_ACCESS_DENIED"

    def test_public_requires_media_id(self, anonymous_client):
        response = anonymous_client.get("/api/v1/public/ja/site")

        assert response.status_code == 400
        assert response.json()["code"] == "TENANT_REQUIRED"

    def test_public_hides_inactive_tenant(self, anonymous_client, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = {**sample_tenant, "is_active": False}

        response = anonymous_client.get("/api/v1/public/ja/site", headers=MEDIA_HEADERS)

        assert response.status_code == 404
        assert response.json()["code"] == "TENANT_NOT_FOUND"

    def test_domain_to_media_id(self, anonymous_client):
        with patch("app.routers.tenants.TenantService.resolve_domain", return_value="media-1") as resolve:
            response = anonymous_client.get("/api/v1/domain-to-media-id", params={"domain": "travel.example.com"})

        assert response.json() == {"media_id": "media-1"}
        resolve.assert_called_once_with("travel.example.com")

    def test_tenant_delete_requires_super_admin(self, client):
        with patch("app.routers.tenants.TenantService.delete_tenant") as delete:
            response = client.delete("/api/v1/admin/tenants/media-1")

        assert response.status_code == 403
        delete.assert_not_called()


# =============================================================================
# Public API
# =============================================================================

class TestPublicRoutes:

    def test_unsupported_language(self, anonymous_client, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        response = anonymous_client.get("/api/v1/public/fr/site", headers=MEDIA_HEADERS)

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_LANGUAGE"

    def test_list_articles_passes_query(self, anonymous_client, mock_db, sample_tenant):
        # Arrange
        mock_db.fetch_by_id.return_value = sample_tenant

        # Act
        with patch("app.routers.public.PublicService.list_articles", return_value={"articles": []}) as list_articles:
            response = anonymous_client.get(
                "/api/v1/public/en/articles",
                params={"category": "gourmet", "sort": "popular", "page": 2},
                headers=MEDIA_HEADERS,
            )

        # Assert
        assert response.status_code == 200
        args = list_articles.call_args[0]
        assert args[:3] == ("media-1", "en", "gourmet")
        assert "popular" in args
        assert 2 in args

    def test_unknown_article(self, anonymous_client, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        with patch(
            "app.routers.public.PublicService.get_article",
            side_effect=ResourceNotFoundError("article", "missing"),
        ):
            response = anonymous_client.get("/api/v1/public/ja/articles/missing", headers=MEDIA_HEADERS)

        assert response.status_code == 404
        assert response.json()["code"] == "ARTICLE_NOT_FOUND"


# =============================================================================
# Admin API
# =============================================================================

class TestArticleRoutes:
    """Tests for /admin/articles."""

    def test_create_article(self, client):
        with patch("app.routers.articles.ArticleService.create_article", return_value={"id": "a1"}) as create:
            response = client.post(
                "/api/v1/admin/articles",
                json={"title": "東京のカフェ", "slug": "tokyo-cafe"},
                headers=MEDIA_HEADERS,
            )

        assert response.status_code == 201
        assert response.json()["id"] == "a1"
        assert create.call_args[0][0] == "media-1"

    def test_invalid_body(self, client):
        response = client.post("/api/v1/admin/articles", json={"title": ""}, headers=MEDIA_HEADERS)

        assert response.status_code == 422
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_clean_html(self, client):
        html = '<!-- wp:paragraph --><p class="wp-block-paragraph">Hi</p><!-- /wp:paragraph -->'

        response = client.post("/api/v1/admin/articles/clean-html", json={"html": html}, headers=MEDIA_HEADERS)

        cleaned = response.json()["html"]
        assert "Hi" in cleaned
        assert "wp:" not in cleaned
        assert "class" not in cleaned

    def test_generate_advanced_queues_task(self, client):
        payload = {"category_id": "cat-1", "writer_id": "writer-1", "image_prompt_pattern_id": "pattern-1"}

        with patch("workers.tasks.generate_article") as task:
            task.delay.return_value = MagicMock(id="task-1")
            response = client.post("/api/v1/admin/articles/generate-advanced", json=payload, headers=MEDIA_HEADERS)

        assert response.status_code == 202
        assert response.json()["task_id"] == "task-1"
        assert task.delay.call_args[0] == ("media-1",)
        assert task.delay.call_args.kwargs["category_id"] == "cat-1"

    def test_generate_advanced_without_broker(self, client):
        payload = {"category_id": "cat-1", "writer_id": "writer-1", "image_prompt_pattern_id": "pattern-1"}

        with patch("workers.tasks.generate_article") as task:
            task.delay.side_effect = ConnectionError("redis down")
            response = client.post("/api/v1/admin/articles/generate-advanced", json=payload, headers=MEDIA_HEADERS)

        assert response.status_code == 503

    def test_backing_service_error_is_502(self, client):
        with patch(
            "app.routers.stats.StatsService.get_stats",
            side_effect=SupabaseClientError("connection reset", code="QUERY_FAILED"),
        ):
            response = client.get("/api/v1/admin/stats", headers=MEDIA_HEADERS)

        assert response.status_code == 502
        assert response.json() == {"detail": "connection reset", "code": "QUERY_FAILED"}


class TestTranslateRoute:
    """Tests for /admin/translate."""

    def test_status(self, client):
        assert client.get("/api/v1/admin/translate", headers=MEDIA_HEADERS).json()["supported_langs"] == [
            "ja", "en", "zh", "ko",
        ]

    def test_text(self, client):
        with patch("app.routers.translate.TranslatorAgent") as agent_cls:
            agent_cls.return_value.translate_text.return_value = "Tokyo"
            response = client.post(
                "/api/v1/admin/translate",
                json={"type": "text", "target_lang": "en", "text": "東京"},
                headers=MEDIA_HEADERS,
            )

        assert response.json() == {"translated": "Tokyo"}
        agent_cls.return_value.translate_text.assert_called_once_with("東京", "en", None)

    def test_missing_payload(self, client):
        with patch("app.routers.translate.TranslatorAgent"):
            response = client.post(
                "/api/v1/admin/translate", json={"type": "text", "target_lang": "en"}, headers=MEDIA_HEADERS
            )

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_FAILED"

    def test_unsupported_target(self, client):
        response = client.post(
            "/api/v1/admin/translate",
            json={"type": "text", "target_lang": "fr", "text": "x"},
            headers=MEDIA_HEADERS,
        )

        assert response.status_code == 400
        assert response.json()["code"] == "UNSUPPORTED_LANGUAGE"


class TestCronRoute:
    """Tests for the scheduled generation trigger."""

    URL = "/api/v1/cron/scheduled-articles"

    def test_wrong_secret(self, anonymous_client):
        with patch.object(settings, "CRON_SECRET", "test-cron-secret"):
            response = anonymous_client.get(self.URL, headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    def test_runs_due_schedules(self, anonymous_client):
        summary = {"processed": 1, "results": []}

        with patch.object(settings, "CRON_SECRET", "test-cron-secret"), patch(
            "app.routers.schedules.ScheduleService.run_due_schedules", return_value=summary
        ):
            response = anonymous_client.get(self.URL, headers={"Authorization": "Bearer test-cron-secret"})

        assert response.status_code == 200
        assert response.json() == summary


class TestEditorRoutes:
    """Tests for the rewrite, target audience and image helpers."""

    def test_rewrite(self, client):
        result = {
            "content": "<h2>新しい見出し</h2><p>本文</p>",
            "duplicate_check": {"is_duplicate": False, "similarity_score": 0.1, "similar_titles": []},
        }

        with patch("app.routers.articles.EditorialService.rewrite", return_value=result) as rewrite:
            response = client.post(
                "/api/v1/admin/articles/rewrite",
                json={"title": "東京のカフェ", "content": "<p>本文</p>", "article_id": "a1"},
                headers=MEDIA_HEADERS,
            )

        assert response.status_code == 200
        assert response.json() == result
        rewrite.assert_called_once_with("media-1", "東京のカフェ", "<p>本文</p>", "a1")

    def test_rewrite_requires_content(self, client):
        response = client.post("/api/v1/admin/articles/rewrite", json={"title": "x"}, headers=MEDIA_HEADERS)

        assert response.status_code == 422

    def test_rewrite_with_unknown_style(self, client):
        with patch(
            "app.routers.articles.EditorialService.rewrite_with_style",
            side_effect=ResourceNotFoundError("pattern", "style-9"),
        ):
            response = client.post(
                "/api/v1/admin/articles/rewrite-with-style",
                json={"content": "<p>本文</p>", "style_id": "style-9"},
                headers=MEDIA_HEADERS,
            )

        assert response.status_code == 404
        assert response.json()["code"] == "PATTERN_NOT_FOUND"

    def test_generate_target_audience(self, client):
        with patch(
            "app.routers.articles.EditorialService.generate_target_audience",
            return_value="東京で休日を過ごしたい20代",
        ) as generate:
            response = client.post(
                "/api/v1/admin/articles/generate-target-audience",
                json={"category_id": "cat-1"},
                headers=MEDIA_HEADERS,
            )

        assert response.json() == {"target_audience": "東京で休日を過ごしたい20代"}
        generate.assert_called_once_with("media-1", "cat-1")

    def test_inline_image_count_is_capped(self, client):
        response = client.post(
            "/api/v1/admin/articles/generate-inline-images",
            json={"content": "<h2>a</h2>", "image_prompt_pattern_id": "p1", "image_count": 5},
            headers=MEDIA_HEADERS,
        )

        assert response.status_code == 422

    def test_sample_image(self, client):
        with patch(
            "app.routers.articles.EditorialService.generate_sample_image",
            return_value="https://images.example.com/tmp.png",
        ) as generate:
            response = client.post(
                "/api/v1/admin/articles/generate-sample-image",
                json={"prompt": "a cat", "size": "1792x1024"},
                headers=MEDIA_HEADERS,
            )

        assert response.json() == {"image_url": "https://images.example.com/tmp.png"}
        generate.assert_called_once_with("a cat", "1792x1024")

    def test_target_audience_history(self, client):
        with patch(
            "app.routers.audiences.EditorialService.add_target_audience",
            return_value=["新しい読者", "古い読者"],
        ) as add:
            response = client.post(
                "/api/v1/admin/target-audience-history",
                json={"target_audience": "新しい読者"},
                headers=MEDIA_HEADERS,
            )

        assert response.json() == {"history": ["新しい読者", "古い読者"]}
        add.assert_called_once_with("media-1", "新しい読者")

    def test_forget_target_audience(self, client):
        with patch(
            "app.routers.audiences.EditorialService.remove_target_audience",
            return_value=[],
        ) as remove:
            response = client.delete(
                "/api/v1/admin/target-audience-history",
                params={"target_audience": "古い読者"},
                headers=MEDIA_HEADERS,
            )

        assert response.json() == {"history": []}
        remove.assert_called_once_with("media-1", "古い読者")


class TestAccountRoutes:
    """Tests for /admin/accounts."""

    def test_requires_super_admin(self, client):
        with patch("app.routers.accounts.AccountService.list_accounts") as list_accounts:
            response = client.get("/api/v1/admin/accounts")

        assert response.status_code == 403
        assert response.json()["code"] == "SUPER_ADMIN_REQUIRED"
        list_accounts.assert_not_called()

    def test_super_admin_creates_account(self, client):
        # Arrange
        app.dependency_overrides[get_current_user] = lambda: AuthUser(id=USER_ID, email="root@example.com")
        account = {"uid": "u-2", "email": "new@example.com", "media_ids": ["media-1"]}

        # Act
        with patch("app.routers.accounts.AccountService.create_account", return_value=account) as create:
            response = client.post(
                "/api/v1/admin/accounts",
                json={"email": "new@example.com", "password": "secret-pass", "media_id": "media-1"},
            )

        # Assert
        assert response.status_code == 201
        assert response.json()["media_ids"] == ["media-1"]
        assert create.call_args[0][0].media_id == "media-1"

    def test_short_password(self, client):
        app.dependency_overrides[get_current_user] = lambda: AuthUser(id=USER_ID, email="root@example.com")

        response = client.post("/api/v1/admin/accounts", json={"email": "new@example.com", "password": "123"})

        assert response.status_code == 422


class TestSeoRoutes:
    """Tests for the public sitemap and robots data."""

    def test_robots_follow_indexing_flag(self, anonymous_client, mock_db, sample_tenant):
        mock_db.fetch_by_id.return_value = sample_tenant

        response = anonymous_client.get("/api/v1/public/robots", headers=MEDIA_HEADERS)

        assert response.status_code == 200
        assert response.json() == {"rules": [{"user_agent": "*", "allow": [], "disallow": ["/"]}], "sitemap": None}

    def test_sitemap(self, anonymous_client, mock_db, sample_tenant):
        # Arrange
        mock_db.fetch_by_id.return_value = {**sample_tenant, "allow_indexing": True}
        mock_db.fetch_many.return_value = []

        # Act
        response = anonymous_client.get("/api/v1/public/sitemap", headers=MEDIA_HEADERS)

        # Assert
        body = response.json()
        assert body["base_url"] == "https://travel.example.com"
        assert len(body["entries"]) == 12
        assert body["entries"][0]["url"] == "https://travel.example.com/ja"
