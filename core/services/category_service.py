# =============================================================================
# core/services/category_service.py - Category Business Logic
# =============================================================================
# Category names and descriptions are translated into every language on
# create and update. Deleting a category removes it from its articles.
# =============================================================================

import logging
from typing import Any

from agents.translator import TranslatorAgent
from app.exceptions import DuplicateSlugError
from core.models.taxonomy import CategoryCreate, CategoryUpdate
from core.services.records import get_tenant_record, now_iso, pull_from_articles, slug_taken, translate_fields
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TRANSLATED_FIELDS = ("name", "description")


class CategoryService:
    """
    Service for category management operations.
    """

    @staticmethod
    def list_categories(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many("categories", filters={"media_id": media_id}, order_by="order")

    @staticmethod
    def get_category(media_id: str, category_id: str) -> dict[str, Any]:
        return get_tenant_record("categories", "category", category_id, media_id)

    @staticmethod
    def create_category(
        media_id: str,
        payload: CategoryCreate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """
        Raises:
            DuplicateSlugError: If the slug is used in the tenant
        """
        if slug_taken("categories", media_id, payload.slug):
            raise DuplicateSlugError("category", payload.slug)

        now = now_iso()
        data = {**payload.model_dump(), "media_id": media_id, "created_at": now, "updated_at": now}
        translate_fields(data, TRANSLATED_FIELDS, translator)

        category = SupabaseClient.insert("categories", data)
        logger.info(f"Created category {category['id']} ({payload.slug})")
        return category

    @staticmethod
    def update_category(
        media_id: str,
        category_id: str,
        payload: CategoryUpdate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        CategoryService.get_category(media_id, category_id)
        data = payload.model_dump(exclude_unset=True)

        if "slug" in data and slug_taken("categories", media_id, data["slug"], exclude_id=category_id):
            raise DuplicateSlugError("category", data["slug"])

        translate_fields(data, TRANSLATED_FIELDS, translator)
        data["updated_at"] = now_iso()
        return SupabaseClient.update("categories", category_id, data)

    @staticmethod
    def delete_category(media_id: str, category_id: str) -> None:
        CategoryService.get_category(media_id, category_id)
        SupabaseClient.delete("categories", category_id)
        pull_from_articles(media_id, "category_ids", category_id)
        logger.info(f"Deleted category {category_id}")
