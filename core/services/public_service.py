# =============================================================================
# core/services/public_service.py - Public Localized Read API
# =============================================================================
# Read-only views of a tenant's published content in one language. Every
# localized field falls back to Japanese when the translation is missing
# (see lib.i18n.localize).
#
# Article detail adds:
# - heading ids in the content and the matching table of contents
# - reading time, localized categories/tags/writer, FAQs and AI summary
# - related articles: 2 x shared categories + shared tags, top 6
# - previous/next article by publication date
# =============================================================================

import logging
from typing import Any

from app.exceptions import ResourceNotFoundError
from core.models.article import ARTICLE_LOCALIZED_FIELDS
from core.models.tenant import TenantSettings
from core.services.records import now_iso
from core.services.theme_service import localize_theme, merge_theme
from lib.html_utils import build_table_of_contents, reading_time_minutes
from lib.i18n import SUPPORTED_LANGS, localize
from lib.search_client import SearchClient
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

RELATED_LIMIT = 6
DEFAULT_PER_PAGE = 20

CATEGORY_FIELDS = ("name", "description")
TAG_FIELDS = ("name",)
WRITER_FIELDS = ("handle_name", "bio")
BANNER_FIELDS = ("title",)
PAGE_FIELDS = ("title", "content")
CARD_FIELDS = ("title", "excerpt")


def _localized_columns(base: list[str], fields: tuple[str, ...]) -> str:
    columns = list(base)
    for field in fields:
        columns.append(field)
        columns.extend(f"{field}_{lang}" for lang in SUPPORTED_LANGS)
    return ",".join(columns)


CARD_COLUMNS = _localized_columns(
    ["id", "slug", "featured_image", "featured_image_alt", "published_at", "view_count", "category_ids", "tag_ids"],
    CARD_FIELDS,
)


def article_card(article: dict[str, Any], lang: str) -> dict[str, Any]:
    """Localized fields shown in article lists."""
    localized = localize(article, CARD_FIELDS, lang)
    return {
        "id": localized["id"],
        "slug": localized.get("slug"),
        "title": localized.get("title") or "",
        "excerpt": localized.get("excerpt") or "",
        "featured_image": localized.get("featured_image"),
        "featured_image_alt": localized.get("featured_image_alt"),
        "published_at": localized.get("published_at"),
        "view_count": localized.get("view_count") or 0,
        "category_ids": localized.get("category_ids") or [],
        "tag_ids": localized.get("tag_ids") or [],
    }


def related_articles(
    article: dict[str, Any],
    candidates: list[dict[str, Any]],
    limit: int = RELATED_LIMIT,
) -> list[dict[str, Any]]:
    """
    Rank candidates by relevance to an article.

    relevance = 2 x shared categories + shared tags. The article itself and
    candidates with zero relevance are dropped; ties go to the most
    recently published.
    """
    categories = set(article.get("category_ids") or [])
    tags = set(article.get("tag_ids") or [])

    scored = []
    for candidate in candidates:
        if candidate["id"] == article["id"]:
            continue
        score = (
            2 * len(categories & set(candidate.get("category_ids") or []))
            + len(tags & set(candidate.get("tag_ids") or []))
        )
        if score > 0:
            scored.append((score, candidate))

    scored.sort(key=lambda item: item[1].get("published_at") or "", reverse=True)
    scored.sort(key=lambda item: item[0], reverse=True)
    return [candidate for _, candidate in scored[:limit]]


def adjacent_articles(
    article: dict[str, Any],
    ordered: list[dict[str, Any]],
) -> tuple[dict[str, Any] | None, dict[str, Any] | None]:
    """
    (previous, next) around an article in a list ordered newest first.

    previous is the older neighbour, next the newer one.
    """
    ids = [a["id"] for a in ordered]
    if article["id"] not in ids:
        return None, None
    index = ids.index(article["id"])
    newer = ordered[index - 1] if index > 0 else None
    older = ordered[index + 1] if index + 1 < len(ordered) else None
    return older, newer


class PublicService:
    """
    Service for the public localized site API.
    """

    # -------------------------------------------------------------------------
    # Site
    # -------------------------------------------------------------------------

    @staticmethod
    def site(tenant: dict[str, Any], lang: str) -> dict[str, Any]:
        site = TenantSettings.model_validate(tenant.get("settings") or {})
        return {
            "media_id": tenant["id"],
            "name": tenant.get("name") or "",
            "description": site.site_description,
            "logos": site.logos.model_dump(),
            "favicon_url": site.favicon_url,
            "og_image_url": site.og_image_url,
            "allow_indexing": bool(tenant.get("allow_indexing", False)),
            "lang": lang,
            "theme": localize_theme(merge_theme(tenant.get("theme")), lang),
        }

    # -------------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------------

    @staticmethod
    def _by_slug(table: str, resource: str, media_id: str, slug: str, **filters: Any) -> dict[str, Any]:
        rows = SupabaseClient.fetch_many(table, filters={"media_id": media_id, "slug": slug, **filters}, limit=1)
        if not rows:
            raise ResourceNotFoundError(resource, slug)
        return rows[0]

    @staticmethod
    def _published_articles(media_id: str) -> list[dict[str, Any]]:
        """Card columns of every published article, newest first."""
        return SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id, "is_published": True},
            order_by="published_at",
            desc=True,
            columns=CARD_COLUMNS,
        )

    # -------------------------------------------------------------------------
    # Articles
    # -------------------------------------------------------------------------

    @staticmethod
    def list_articles(
        media_id: str,
        lang: str,
        category: str | None = None,
        tag: str | None = None,
        sort: str = "latest",
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> dict[str, Any]:
        """
        Published articles, optionally filtered by category/tag slug.

        Raises:
            ResourceNotFoundError: If the category or tag slug is unknown
        """
        contains: dict[str, list[str]] = {}
        if category:
            contains["category_ids"] = [PublicService._by_slug("categories", "category", media_id, category)["id"]]
        if tag:
            contains["tag_ids"] = [PublicService._by_slug("tags", "tag", media_id, tag)["id"]]

        filters = {"media_id": media_id, "is_published": True}
        articles = SupabaseClient.fetch_many(
            "articles",
            filters=filters,
            contains=contains or None,
            order_by="view_count" if sort == "popular" else "published_at",
            desc=True,
            limit=per_page,
            offset=(page - 1) * per_page,
            columns=CARD_COLUMNS,
        )
        return {
            "articles": [article_card(a, lang) for a in articles],
            "page": page,
            "per_page": per_page,
        }

    @staticmethod
    def get_article(media_id: str, slug: str, lang: str) -> dict[str, Any]:
        """
        Full localized article.

        Raises:
            ResourceNotFoundError: If no published article has the slug
        """
        record = PublicService._by_slug("articles", "article", media_id, slug, is_published=True)
        article = localize(record, ARTICLE_LOCALIZED_FIELDS, lang)

        content, toc = build_table_of_contents(article.get("content"))
        article["content"] = content
        article["toc"] = toc
        article["reading_time"] = reading_time_minutes(content)
        article["faqs"] = article.get("faqs") or []

        article["categories"] = [
            localize(c, CATEGORY_FIELDS, lang)
            for c in SupabaseClient.fetch_by_ids("categories", record.get("category_ids") or [])
        ]
        article["tags"] = [
            localize(t, TAG_FIELDS, lang)
            for t in SupabaseClient.fetch_by_ids("tags", record.get("tag_ids") or [])
        ]
        writer = SupabaseClient.fetch_by_id("writers", record["writer_id"]) if record.get("writer_id") else None
        article["writer"] = localize(writer, WRITER_FIELDS, lang) if writer else None

        published = PublicService._published_articles(media_id)
        article["related"] = [article_card(a, lang) for a in related_articles(record, published)]
        older, newer = adjacent_articles(record, published)
        article["prev"] = article_card(older, lang) if older else None
        article["next"] = article_card(newer, lang) if newer else None

        return article

    @staticmethod
    def increment_view(media_id: str, slug: str) -> int:
        """
        Add one view to a published article.

        Read-then-write: concurrent views may be counted once.

        Returns:
            The new view count
        """
        record = PublicService._by_slug("articles", "article", media_id, slug, is_published=True)
        count = (record.get("view_count") or 0) + 1
        SupabaseClient.update("articles", record["id"], {"view_count": count, "updated_at": now_iso()})
        return count

    # -------------------------------------------------------------------------
    # Taxonomy, writers, banners, pages
    # -------------------------------------------------------------------------

    @staticmethod
    def list_categories(media_id: str, lang: str) -> list[dict[str, Any]]:
        categories = SupabaseClient.fetch_many("categories", filters={"media_id": media_id}, order_by="order")
        return [localize(c, CATEGORY_FIELDS, lang) for c in categories]

    @staticmethod
    def get_category(media_id: str, slug: str, lang: str, page: int = 1) -> dict[str, Any]:
        category = PublicService._by_slug("categories", "category", media_id, slug)
        listing = PublicService.list_articles(media_id, lang, category=slug, page=page)
        return {"category": localize(category, CATEGORY_FIELDS, lang), **listing}

    @staticmethod
    def list_tags(media_id: str, lang: str) -> list[dict[str, Any]]:
        tags = SupabaseClient.fetch_many("tags", filters={"media_id": media_id}, order_by="name")
        return [localize(t, TAG_FIELDS, lang) for t in tags]

    @staticmethod
    def get_tag(media_id: str, slug: str, lang: str, page: int = 1) -> dict[str, Any]:
        tag = PublicService._by_slug("tags", "tag", media_id, slug)
        listing = PublicService.list_articles(media_id, lang, tag=slug, page=page)
        return {"tag": localize(tag, TAG_FIELDS, lang), **listing}

    @staticmethod
    def get_writer(media_id: str, writer_id: str, lang: str) -> dict[str, Any]:
        writer = SupabaseClient.fetch_by_id("writers", writer_id)
        if not writer or writer.get("media_id") != media_id:
            raise ResourceNotFoundError("writer", writer_id)

        articles = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id, "is_published": True, "writer_id": writer_id},
            order_by="published_at",
            desc=True,
            columns=CARD_COLUMNS,
        )
        return {
            "writer": localize(writer, WRITER_FIELDS, lang),
            "articles": [article_card(a, lang) for a in articles],
        }

    @staticmethod
    def list_banners(media_id: str, lang: str) -> list[dict[str, Any]]:
        banners = SupabaseClient.fetch_many(
            "banners", filters={"media_id": media_id, "is_active": True}, order_by="order"
        )
        return [localize(b, BANNER_FIELDS, lang) for b in banners]

    @staticmethod
    def get_page(media_id: str, slug: str, lang: str) -> dict[str, Any]:
        page = PublicService._by_slug("pages", "page", media_id, slug, is_published=True)
        return localize(page, PAGE_FIELDS, lang)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    @staticmethod
    def search(
        media_id: str,
        lang: str,
        query: str,
        category: str | None = None,
        tag: str | None = None,
        page: int = 1,
        per_page: int = DEFAULT_PER_PAGE,
    ) -> dict[str, Any]:
        """
        Full-text search in the language index.

        The index stores Japanese category/tag names, so slugs are resolved
        to names first.
        """
        category_name = PublicService._by_slug("categories", "category", media_id, category)["name"] if category else None
        tag_name = PublicService._by_slug("tags", "tag", media_id, tag)["name"] if tag else None

        logger.debug(f"Search [{lang}] tenant={media_id} q={query!r} category={category_name} tag={tag_name}")
        return SearchClient.search(
            query,
            lang,
            media_id,
            category=category_name,
            tag=tag_name,
            page=page,
            per_page=per_page,
        )
