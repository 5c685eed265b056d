# =============================================================================
# core/services/page_service.py - Static Page Business Logic
# =============================================================================
# Static pages share the article slug rules. Titles and bodies are
# translated into every language on save.
# =============================================================================

import logging
from typing import Any

from agents.content_writer import ContentWriterAgent
from agents.translator import TranslatorAgent
from app.exceptions import DuplicateSlugError, ValidationFailedError
from core.models.page import PageCreate, PageUpdate
from core.services.records import get_tenant_record, now_iso, slug_taken, translate_fields
from lib.similarity import unique_slug
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TRANSLATED_FIELDS = ("title", "content")


class PageService:
    """
    Service for static page operations.
    """

    @staticmethod
    def list_pages(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many("pages", filters={"media_id": media_id}, order_by="order")

    @staticmethod
    def get_page(media_id: str, page_id: str) -> dict[str, Any]:
        return get_tenant_record("pages", "page", page_id, media_id)

    @staticmethod
    def create_page(
        media_id: str,
        payload: PageCreate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """
        Raises:
            DuplicateSlugError: If the slug is used in the tenant
        """
        if slug_taken("pages", media_id, payload.slug):
            raise DuplicateSlugError("page", payload.slug)

        now = now_iso()
        data = {
            **payload.model_dump(mode="json"),
            "media_id": media_id,
            "created_at": now,
            "updated_at": now,
        }
        translate_fields(data, TRANSLATED_FIELDS, translator)

        page = SupabaseClient.insert("pages", data)
        logger.info(f"Created page {page['id']} ({payload.slug})")
        return page

    @staticmethod
    def update_page(
        media_id: str,
        page_id: str,
        payload: PageUpdate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        PageService.get_page(media_id, page_id)
        data = payload.model_dump(exclude_unset=True, mode="json")

        if "slug" in data and slug_taken("pages", media_id, data["slug"], exclude_id=page_id):
            raise DuplicateSlugError("page", data["slug"])
        if data.get("parent_id") == page_id:
            raise ValidationFailedError("A page cannot be its own parent")

        translate_fields(data, TRANSLATED_FIELDS, translator)
        data["updated_at"] = now_iso()
        return SupabaseClient.update("pages", page_id, data)

    @staticmethod
    def delete_page(media_id: str, page_id: str) -> None:
        PageService.get_page(media_id, page_id)
        SupabaseClient.delete("pages", page_id)
        logger.info(f"Deleted page {page_id}")

    @staticmethod
    def generate_slug(media_id: str, title: str, writer: ContentWriterAgent | None = None) -> str:
        if not title:
            raise ValidationFailedError("Title is required")
        base = (writer or ContentWriterAgent()).generate_slug(title)
        return unique_slug(base, lambda slug: slug_taken("pages", media_id, slug))
