# =============================================================================
# core/services/records.py - Tenant-Scoped Record Helpers
# =============================================================================
# Small helpers shared by the admin services:
# - get_tenant_record: fetch a row and enforce tenant ownership
# - slug_taken: per-tenant slug uniqueness
# - translate_fields: fill "{field}_{lang}" columns for every language
# - pull_from_articles: remove a deleted category/tag id from articles
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from agents.translator import TranslatorAgent
from app.exceptions import ResourceNotFoundError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


def now_iso() -> str:
    """Current UTC time as an ISO 8601 string."""
    return datetime.now(timezone.utc).isoformat()


def get_tenant_record(table: str, resource: str, record_id: str, media_id: str) -> dict[str, Any]:
    """
    Fetch a record that must belong to the tenant.

    Raises:
        ResourceNotFoundError: If missing or owned by another tenant
    """
    record = SupabaseClient.fetch_by_id(table, record_id)
    if not record or record.get("media_id") != media_id:
        raise ResourceNotFoundError(resource, record_id)
    return record


def slug_taken(table: str, media_id: str, slug: str, exclude_id: str | None = None) -> bool:
    """Whether another record of the tenant already uses the slug."""
    rows = SupabaseClient.fetch_many(table, filters={"media_id": media_id, "slug": slug}, columns="id")
    return any(row["id"] != exclude_id for row in rows)


def translate_fields(
    data: dict[str, Any],
    fields: Iterable[str],
    translator: TranslatorAgent | None = None,
    context: str | None = None,
) -> dict[str, Any]:
    """
    Add "{field}_{lang}" columns for every supported language (in place).

    Only fields present in data are translated. The Japanese column is the
    original; a failed language falls back to the original text.
    """
    translator = translator or TranslatorAgent()
    for field in fields:
        if field not in data:
            continue
        translations = translator.translate_to_all(data[field] or "", context or field)
        for lang, text in translations.items():
            data[f"{field}_{lang}"] = text
    return data


def pull_from_articles(media_id: str, column: str, value: str) -> int:
    """
    Remove value from an array column (category_ids, tag_ids) of articles.

    Returns:
        Number of articles updated
    """
    articles = SupabaseClient.fetch_many(
        "articles",
        filters={"media_id": media_id},
        contains={column: [value]},
        columns=f"id,{column}",
    )
    for article in articles:
        SupabaseClient.update("articles", article["id"], {
            column: [item for item in article.get(column) or [] if item != value],
            "updated_at": now_iso(),
        })

    if articles:
        logger.info(f"Removed {column} {value} from {len(articles)} articles")
    return len(articles)
