# =============================================================================
# core/services/pattern_service.py - Prompt Pattern Business Logic
# =============================================================================
# CRUD for the two reusable prompt tables:
# - article_patterns: extra writing instructions for generated bodies
# - image_prompt_patterns: prompt and size for generated images
# =============================================================================

import logging
from typing import Any

from pydantic import BaseModel

from core.services.records import get_tenant_record, now_iso
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

ARTICLE_PATTERNS = "article_patterns"
IMAGE_PROMPT_PATTERNS = "image_prompt_patterns"


class PatternService:
    """
    Service for article and image prompt patterns.

    Every method takes the table name so both pattern kinds share one code
    path.
    """

    @staticmethod
    def list_patterns(table: str, media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many(table, filters={"media_id": media_id}, order_by="created_at", desc=True)

    @staticmethod
    def get_pattern(table: str, media_id: str, pattern_id: str) -> dict[str, Any]:
        return get_tenant_record(table, "pattern", pattern_id, media_id)

    @staticmethod
    def create_pattern(table: str, media_id: str, payload: BaseModel) -> dict[str, Any]:
        now = now_iso()
        data = {**payload.model_dump(), "media_id": media_id, "created_at": now, "updated_at": now}
        pattern = SupabaseClient.insert(table, data)
        logger.info(f"Created {table} record {pattern['id']}")
        return pattern

    @staticmethod
    def update_pattern(table: str, media_id: str, pattern_id: str, payload: BaseModel) -> dict[str, Any]:
        PatternService.get_pattern(table, media_id, pattern_id)
        data = payload.model_dump(exclude_unset=True)
        data["updated_at"] = now_iso()
        return SupabaseClient.update(table, pattern_id, data)

    @staticmethod
    def delete_pattern(table: str, media_id: str, pattern_id: str) -> None:
        PatternService.get_pattern(table, media_id, pattern_id)
        SupabaseClient.delete(table, pattern_id)
        logger.info(f"Deleted {table} record {pattern_id}")
