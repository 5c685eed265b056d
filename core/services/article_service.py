# =============================================================================
# core/services/article_service.py - Article Business Logic
# =============================================================================
# Admin operations on articles. Every operation is scoped to one tenant
# (media_id); an article of another tenant is reported as not found.
#
# Publishing hands the article to PublishService (translation, TOC, search)
# and unpublishing/deleting removes it from the search indices.
# =============================================================================

import logging
from typing import Any

from agents.content_writer import ContentWriterAgent
from app.exceptions import DuplicateSlugError, ValidationFailedError
from core.models.article import ArticleCreate, ArticleUpdate
from core.services.publish_service import PublishService
from core.services.records import get_tenant_record, now_iso, slug_taken
from lib.html_utils import plain_text
from lib.similarity import DUPLICATE_THRESHOLD, text_similarity, unique_slug
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# Characters of plain content compared by the duplicate check
DUPLICATE_CONTENT_CHARS = 500


def seed_japanese_fields(data: dict[str, Any]) -> dict[str, Any]:
    """
    Fill the "_ja" columns from the authored fields (in place).

    meta_title falls back to title and meta_description to excerpt.
    """
    if "title" in data:
        data["title_ja"] = data["title"]
    if "content" in data:
        data["content_ja"] = data["content"]
    if "excerpt" in data or "title" in data:
        data["excerpt_ja"] = data.get("excerpt") or ""
    if "meta_title" in data or "title" in data:
        data["meta_title_ja"] = data.get("meta_title") or data.get("title") or ""
    if "meta_description" in data or "excerpt" in data:
        data["meta_description_ja"] = data.get("meta_description") or data.get("excerpt") or ""
    if data.get("faqs"):
        data["faqs_ja"] = data["faqs"]
    return data


class ArticleService:
    """
    Service for article management operations.
    """

    # -------------------------------------------------------------------------
    # Read
    # -------------------------------------------------------------------------

    @staticmethod
    def list_articles(media_id: str) -> list[dict[str, Any]]:
        """Tenant articles, newest first; faqs falls back to faqs_ja."""
        articles = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id},
            order_by="created_at",
            desc=True,
        )
        for article in articles:
            if not article.get("faqs"):
                article["faqs"] = article.get("faqs_ja") or []
        return articles

    @staticmethod
    def get_article(media_id: str, article_id: str) -> dict[str, Any]:
        """
        Raises:
            ResourceNotFoundError: If missing or owned by another tenant
        """
        return get_tenant_record("articles", "article", article_id, media_id)

    @staticmethod
    def slug_exists(media_id: str, slug: str, exclude_id: str | None = None) -> bool:
        return slug_taken("articles", media_id, slug, exclude_id)

    # -------------------------------------------------------------------------
    # Write
    # -------------------------------------------------------------------------

    @staticmethod
    def create_article(media_id: str, payload: ArticleCreate) -> dict[str, Any]:
        """
        Create an article and start the publish pipeline when published.

        Raises:
            DuplicateSlugError: If the slug is used in the tenant
        """
        if ArticleService.slug_exists(media_id, payload.slug):
            raise DuplicateSlugError("article", payload.slug)

        data = payload.model_dump(exclude_unset=True, mode="json")
        data.setdefault("content", "")
        now = now_iso()
        data.update({
            "media_id": media_id,
            "created_at": now,
            "published_at": now,
            "updated_at": now,
            "view_count": 0,
            "like_count": 0,
        })
        seed_japanese_fields(data)

        article = SupabaseClient.insert("articles", data)
        logger.info(f"Created article {article['id']} in tenant {media_id}")

        if article.get("is_published"):
            PublishService.dispatch_publish(article["id"])

        return article

    @staticmethod
    def set_published(media_id: str, article_id: str, is_published: bool) -> dict[str, Any]:
        """Toggle publication only."""
        ArticleService.get_article(media_id, article_id)

        article = SupabaseClient.update("articles", article_id, {
            "is_published": is_published,
            "updated_at": now_iso(),
        })

        if is_published:
            PublishService.dispatch_publish(article_id)
        else:
            PublishService.remove_from_search(article_id)

        logger.info(f"Article {article_id} {'published' if is_published else 'unpublished'}")
        return article

    @staticmethod
    def update_article(media_id: str, article_id: str, payload: ArticleUpdate) -> dict[str, Any]:
        """
        Full update. Re-runs the pipeline for published articles.

        Raises:
            ResourceNotFoundError: If the article does not exist in the tenant
            DuplicateSlugError: If the new slug is taken
        """
        current = ArticleService.get_article(media_id, article_id)

        data = payload.model_dump(exclude_unset=True, mode="json")
        if "slug" in data and ArticleService.slug_exists(media_id, data["slug"], exclude_id=article_id):
            raise DuplicateSlugError("article", data["slug"])

        # Seed from the merged record so fallbacks see unchanged fields
        merged = {**current, **data}
        seeded = seed_japanese_fields({
            key: merged.get(key)
            for key in ("title", "content", "excerpt", "meta_title", "meta_description", "faqs")
        })
        data.update({key: value for key, value in seeded.items() if key.endswith("_ja")})
        data["updated_at"] = now_iso()

        article = SupabaseClient.update("articles", article_id, data)

        if merged.get("is_published"):
            PublishService.dispatch_publish(article_id)
        else:
            PublishService.remove_from_search(article_id)

        return article

    @staticmethod
    def delete_article(media_id: str, article_id: str) -> None:
        ArticleService.get_article(media_id, article_id)
        SupabaseClient.delete("articles", article_id)
        PublishService.remove_from_search(article_id)
        logger.info(f"Deleted article {article_id}")

    @staticmethod
    def republish(media_id: str, article_id: str) -> dict[str, Any]:
        """
        Re-run the pipeline for a published article.

        Raises:
            ValidationFailedError: If the article is a draft
        """
        article = ArticleService.get_article(media_id, article_id)
        if not article.get("is_published"):
            raise ValidationFailedError(
                "Only published articles can be republished",
                suggestion="Publish the article first",
            )
        return PublishService.dispatch_publish(article_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def check_duplicate(
        media_id: str,
        title: str,
        content: str,
        article_id: str | None = None,
    ) -> dict[str, Any]:
        """
        Compare a candidate with the tenant's published articles.

        A match is a duplicate when title or content similarity > 0.7.
        Content is compared on the first 500 characters of plain text.

        Raises:
            ValidationFailedError: If both title and content are empty
        """
        if not title and not content:
            raise ValidationFailedError("Title or content is required")

        candidates = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id, "is_published": True},
            columns="id,title,content",
        )
        candidates = [a for a in candidates if a["id"] != article_id]
        candidate_text = plain_text(content)[:DUPLICATE_CONTENT_CHARS]

        duplicates = []
        for existing in candidates:
            title_score = text_similarity(title, existing.get("title") or "") if title else 0.0
            content_score = (
                text_similarity(candidate_text, plain_text(existing.get("content"))[:DUPLICATE_CONTENT_CHARS])
                if candidate_text else 0.0
            )
            if title_score > DUPLICATE_THRESHOLD or content_score > DUPLICATE_THRESHOLD:
                duplicates.append({
                    "article_id": existing["id"],
                    "title": existing.get("title") or "",
                    "title_similarity": round(title_score, 3),
                    "content_similarity": round(content_score, 3),
                })

        duplicates.sort(key=lambda d: max(d["title_similarity"], d["content_similarity"]), reverse=True)
        return {
            "is_duplicate": bool(duplicates),
            "duplicates": duplicates,
            "checked_count": len(candidates),
        }

    @staticmethod
    def generate_slug(media_id: str, title: str, writer: ContentWriterAgent | None = None) -> str:
        """LLM slug for a title, made unique within the tenant."""
        if not title:
            raise ValidationFailedError("Title is required")
        base = (writer or ContentWriterAgent()).generate_slug(title)
        return unique_slug(base, lambda slug: ArticleService.slug_exists(media_id, slug))
