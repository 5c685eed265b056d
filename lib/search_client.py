# =============================================================================
# lib/search_client.py - Elasticsearch Search Index Wrapper
# =============================================================================
# Published articles are mirrored into one search index per language
# ({SEARCH_INDEX_PREFIX}_{lang}). Each document carries the localized title,
# excerpt and a plain-text copy of the content so public search works in
# every supported language.
#
# Sync is best-effort: a failure in one language index is logged and the
# other languages still get updated.
#
# Usage:
#   from lib.search_client import SearchClient
#   SearchClient.sync_article(article, ["旅行"], ["東京", "グルメ"])
#   results = SearchClient.search("tokyo", lang="en", media_id=media_id)
# =============================================================================

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Iterable

from elasticsearch import Elasticsearch, NotFoundError, helpers

from app.config import settings
from lib.html_utils import strip_html_for_search
from lib.i18n import SUPPORTED_LANGS, localized_value

logger = logging.getLogger(__name__)

# Keyword fields are used for exact filtering
INDEX_MAPPINGS: dict[str, Any] = {
    "properties": {
        "objectID": {"type": "keyword"},
        "title": {"type": "text"},
        "slug": {"type": "keyword"},
        "excerpt": {"type": "text"},
        "content_text": {"type": "text"},
        "media_id": {"type": "keyword"},
        "categories": {"type": "keyword"},
        "tags": {"type": "keyword"},
        "published_at": {"type": "long"},
        "is_published": {"type": "boolean"},
        "featured_image": {"type": "keyword", "index": False},
        "featured_image_alt": {"type": "text"},
        "view_count": {"type": "integer"},
    }
}


class SearchClientError(Exception):
    """
    Error during search index operations.

    Provides a code, an actionable suggestion and debugging details.
    """

    def __init__(
        self,
        message: str,
        code: str = "SEARCH_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


# =============================================================================
# Record Building
# =============================================================================

def index_name(lang: str) -> str:
    """Name of the search index holding a language."""
    return f"{settings.SEARCH_INDEX_PREFIX}_{lang}"


def to_epoch_ms(value: Any) -> int:
    """
    Convert a timestamp (datetime or ISO-8601 string) to epoch milliseconds.

    Missing or unparsable values become 0.
    """
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            logger.warning(f"Unparsable timestamp for search record: {value!r}")
            return 0
    if isinstance(value, datetime):
        return int(value.timestamp() * 1000)
    return 0


def build_search_record(
    article: dict[str, Any],
    lang: str,
    category_names: list[str] | None = None,
    tag_names: list[str] | None = None,
) -> dict[str, Any]:
    """
    Build the search document for one article in one language.

    Localized fields fall back to the Japanese/base values when the
    translation is missing.
    """
    content = localized_value(article, "content", lang) or ""

    return {
        "objectID": article["id"],
        "title": localized_value(article, "title", lang) or "",
        "slug": article.get("slug", ""),
        "excerpt": localized_value(article, "excerpt", lang) or "",
        "content_text": strip_html_for_search(content),
        "media_id": article.get("media_id"),
        "categories": category_names or [],
        "tags": tag_names or [],
        "published_at": to_epoch_ms(article.get("published_at")),
        "is_published": bool(article.get("is_published", False)),
        "featured_image": article.get("featured_image") or "",
        "featured_image_alt": article.get("featured_image_alt") or "",
        "view_count": article.get("view_count") or 0,
    }


# =============================================================================
# Client
# =============================================================================

class SearchClient:
    """
    Singleton wrapper around the Elasticsearch client.

    All methods are class methods, mirroring SupabaseClient.
    """

    _instance: Elasticsearch | None = None
    _indices_ready: bool = False

    @classmethod
    def get_client(cls) -> Elasticsearch:
        """
        Get or create the singleton Elasticsearch client.

        Raises:
            SearchClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                kwargs: dict[str, Any] = {}
                if settings.ELASTICSEARCH_API_KEY:
                    kwargs["api_key"] = settings.ELASTICSEARCH_API_KEY
                cls._instance = Elasticsearch(settings.ELASTICSEARCH_URL, **kwargs)
                logger.info("Elasticsearch client initialized successfully")
            except Exception as e:
                raise SearchClientError(
                    message=f"Failed to create Elasticsearch client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check ELASTICSEARCH_URL and ELASTICSEARCH_API_KEY in your .env file"
                )
        return cls._instance

    # -------------------------------------------------------------------------
    # Index Management
    # -------------------------------------------------------------------------

    @classmethod
    def ensure_indices(cls) -> list[str]:
        """
        Create any missing language index.

        Returns:
            Names of the indices that were created
        """
        client = cls.get_client()
        created = []

        for lang in SUPPORTED_LANGS:
            name = index_name(lang)
            try:
                if not client.indices.exists(index=name):
                    client.indices.create(index=name, mappings=INDEX_MAPPINGS)
                    created.append(name)
                    logger.info(f"Created search index: {name}")
            except Exception as e:
                raise SearchClientError(
                    message=f"Failed to create index {name}: {e}",
                    code="INDEX_CREATE_FAILED",
                    details={"index": name}
                )

        return created

    @classmethod
    def prepare_indices(cls) -> bool:
        """
        Run ensure_indices once per process before the first write.

        A failure is logged and retried on the next call, so writes still
        go to indices that already exist.

        Returns:
            True when every language index is known to exist
        """
        if cls._indices_ready:
            return True
        try:
            cls.ensure_indices()
        except SearchClientError as e:
            logger.warning(f"Search indices not ready: {e}")
            return False
        cls._indices_ready = True
        return True

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    @classmethod
    def sync_article(
        cls,
        article: dict[str, Any],
        category_names: list[str] | None = None,
        tag_names: list[str] | None = None,
    ) -> list[str]:
        """
        Index an article in every language index.

        Per-language failures are logged and skipped.

        Returns:
            Languages that were indexed successfully
        """
        client = cls.get_client()
        indexed: list[str] = []
        cls.prepare_indices()

        for lang in SUPPORTED_LANGS:
            record = build_search_record(article, lang, category_names, tag_names)
            try:
                client.index(index=index_name(lang), id=record["objectID"], document=record)
                indexed.append(lang)
            except Exception as e:
                logger.error(f"Search sync failed for article {article.get('id')} [{lang}]: {e}")

        logger.info(f"Synced article {article.get('id')} to search: {indexed}")
        return indexed

    @classmethod
    def delete_article(cls, article_id: str) -> list[str]:
        """
        Remove an article from every language index.

        Missing documents count as removed; other failures are logged.

        Returns:
            Languages the article is no longer present in
        """
        client = cls.get_client()
        removed: list[str] = []

        for lang in SUPPORTED_LANGS:
            try:
                client.delete(index=index_name(lang), id=article_id)
                removed.append(lang)
            except NotFoundError:
                removed.append(lang)
            except Exception as e:
                logger.error(f"Search delete failed for article {article_id} [{lang}]: {e}")

        logger.info(f"Removed article {article_id} from search: {removed}")
        return removed

    @classmethod
    def bulk_sync(
        cls,
        entries: Iterable[tuple[dict[str, Any], list[str], list[str]]],
    ) -> dict[str, int]:
        """
        Index many articles at once.

        Args:
            entries: (article, category_names, tag_names) tuples

        Returns:
            Documents indexed per language

        Raises:
            SearchClientError: If a bulk request fails entirely
        """
        client = cls.get_client()
        entries = list(entries)
        cls.prepare_indices()
        counts: dict[str, int] = {}

        for lang in SUPPORTED_LANGS:
            name = index_name(lang)
            actions = []
            for article, category_names, tag_names in entries:
                record = build_search_record(article, lang, category_names, tag_names)
                actions.append({"_index": name, "_id": record["objectID"], "_source": record})

            try:
                success, errors = helpers.bulk(client, actions, raise_on_error=False)
            except Exception as e:
                raise SearchClientError(
                    message=f"Bulk sync to {name} failed: {e}",
                    code="BULK_SYNC_FAILED",
                    suggestion="Check that the cluster is reachable and the index exists",
                    details={"index": name, "documents": len(actions)}
                )

            if errors:
                logger.warning(f"Bulk sync to {name}: {len(errors)} documents failed")
            counts[lang] = success

        return counts

    # -------------------------------------------------------------------------
    # Query
    # -------------------------------------------------------------------------

    @classmethod
    def search(
        cls,
        query: str,
        lang: str,
        media_id: str,
        category: str | None = None,
        tag: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> dict[str, Any]:
        """
        Full-text search over published articles of one tenant.

        Args:
            query: Search text (fuzzy matched)
            lang: Language index to search
            media_id: Tenant filter
            category: Optional category name filter
            tag: Optional tag name filter
            page: 1-based page number
            per_page: Page size

        Returns:
            {"hits": [...], "total": int, "page": int, "per_page": int}

        Raises:
            SearchClientError: If the search request fails
        """
        client = cls.get_client()

        filters: list[dict[str, Any]] = [
            {"term": {"media_id": media_id}},
            {"term": {"is_published": True}},
        ]
        if category:
            filters.append({"term": {"categories": category}})
        if tag:
            filters.append({"term": {"tags": tag}})

        must: list[dict[str, Any]] = []
        if query.strip():
            must.append({
                "multi_match": {
                    "query": query,
                    "fields": ["title^3", "excerpt^2", "content_text", "tags^2", "categories"],
                    "type": "best_fields",
                    "fuzziness": "AUTO",
                }
            })

        try:
            response = client.search(
                index=index_name(lang),
                query={"bool": {"must": must or [{"match_all": {}}], "filter": filters}},
                highlight={
                    "fields": {
                        "title": {},
                        "content_text": {"fragment_size": 150, "number_of_fragments": 3},
                    }
                },
                sort=[{"_score": {"order": "desc"}}, {"published_at": {"order": "desc"}}],
                from_=(page - 1) * per_page,
                size=per_page,
            )
        except Exception as e:
            raise SearchClientError(
                message=f"Search failed: {e}",
                code="SEARCH_FAILED",
                details={"index": index_name(lang), "query": query}
            )

        hits = response["hits"]
        return {
            "hits": [
                {
                    **hit["_source"],
                    "score": hit.get("_score"),
                    "highlights": hit.get("highlight", {}),
                }
                for hit in hits["hits"]
            ],
            "total": hits["total"]["value"],
            "page": page,
            "per_page": per_page,
        }

    @classmethod
    def ping(cls) -> bool:
        """True when the cluster answers."""
        try:
            return bool(cls.get_client().ping())
        except Exception as e:
            logger.warning(f"Elasticsearch ping failed: {e}")
            return False
