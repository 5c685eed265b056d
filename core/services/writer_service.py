# =============================================================================
# core/services/writer_service.py - Writer Business Logic
# =============================================================================
# Writers are author profiles. The bio is translated into every language;
# the handle name is a proper noun and is copied as-is.
# =============================================================================

import logging
from typing import Any

from agents.translator import TranslatorAgent
from core.models.writer import WriterCreate, WriterUpdate
from core.services.records import get_tenant_record, now_iso, translate_fields
from lib.i18n import SUPPORTED_LANGS
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def _localize_writer(data: dict[str, Any], translator: TranslatorAgent | None) -> dict[str, Any]:
    if "handle_name" in data:
        for lang in SUPPORTED_LANGS:
            data[f"handle_name_{lang}"] = data["handle_name"]
    return translate_fields(data, ["bio"], translator, context="writer profile")


class WriterService:
    """
    Service for writer management operations.
    """

    @staticmethod
    def list_writers(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many(
            "writers", filters={"media_id": media_id}, order_by="created_at", desc=True
        )

    @staticmethod
    def get_writer(media_id: str, writer_id: str) -> dict[str, Any]:
        return get_tenant_record("writers", "writer", writer_id, media_id)

    @staticmethod
    def create_writer(
        media_id: str,
        payload: WriterCreate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        now = now_iso()
        data = {**payload.model_dump(), "media_id": media_id, "created_at": now, "updated_at": now}
        writer = SupabaseClient.insert("writers", _localize_writer(data, translator))
        logger.info(f"Created writer {writer['id']} ({payload.handle_name})")
        return writer

    @staticmethod
    def update_writer(
        media_id: str,
        writer_id: str,
        payload: WriterUpdate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        WriterService.get_writer(media_id, writer_id)
        data = _localize_writer(payload.model_dump(exclude_unset=True), translator)
        data["updated_at"] = now_iso()
        return SupabaseClient.update("writers", writer_id, data)

    @staticmethod
    def delete_writer(media_id: str, writer_id: str) -> None:
        WriterService.get_writer(media_id, writer_id)
        SupabaseClient.delete("writers", writer_id)
        logger.info(f"Deleted writer {writer_id}")
