# =============================================================================
# core/services/seo_service.py - Sitemap and robots.txt Data
# =============================================================================
# Data the public front end renders as sitemap.xml and robots.txt.
#
# The site URL is the tenant's custom domain, or {slug}.{SITE_ROOT_DOMAIN}.
# Every page is listed once per language with the other languages as
# alternates. A tenant that does not allow indexing gets a robots policy
# that disallows everything and no sitemap.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from lib.i18n import SUPPORTED_LANGS
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# (path, change frequency, priority)
STATIC_PAGES = (
    ("", "daily", 1.0),
    ("/articles", "daily", 0.8),
    ("/search", "weekly", 0.5),
)
ARTICLE_PAGE = ("articles", "weekly", 0.7)
CATEGORY_PAGE = ("categories", "daily", 0.6)
TAG_PAGE = ("tags", "weekly", 0.5)

DISALLOWED_PATHS = ["/admin/", "/api/", "/_next/", "/static/"]
AI_CRAWLERS = (
    "GPTBot",
    "ChatGPT-User",
    "Claude-Web",
    "anthropic-ai",
    "PerplexityBot",
    "Googlebot",
    "Bingbot",
    "Slurp",
    "DuckDuckBot",
)
SOCIAL_CRAWLERS = ("facebookexternalhit", "Twitterbot")


def site_base_url(tenant: dict[str, Any]) -> str:
    """
    Example:
        site_base_url({"slug": "tokyo", "custom_domain": None})
        # "https://tokyo.pixseo.cloud"
    """
    host = tenant.get("custom_domain") or f"{tenant['slug']}.{settings.SITE_ROOT_DOMAIN}"
    return f"https://{host}"


def localized_entries(
    base_url: str,
    path: str,
    change_frequency: str,
    priority: float,
    last_modified: str | None = None,
) -> list[dict[str, Any]]:
    """One sitemap entry per language for a path, each listing all languages."""
    alternates = {lang: f"{base_url}/{lang}{path}" for lang in SUPPORTED_LANGS}
    return [
        {
            "url": alternates[lang],
            "last_modified": last_modified,
            "change_frequency": change_frequency,
            "priority": priority,
            "alternates": alternates,
        }
        for lang in SUPPORTED_LANGS
    ]


def build_sitemap(
    base_url: str,
    articles: list[dict[str, Any]],
    categories: list[dict[str, Any]],
    tags: list[dict[str, Any]],
) -> list[dict[str, Any]]:
    """
    Sitemap entries for the static pages, articles, categories and tags.

    Records without a slug are skipped.
    """
    entries = []
    for path, change_frequency, priority in STATIC_PAGES:
        entries += localized_entries(base_url, path, change_frequency, priority)

    for article in articles:
        if article.get("slug"):
            folder, change_frequency, priority = ARTICLE_PAGE
            last_modified = article.get("updated_at") or article.get("published_at")
            entries += localized_entries(
                base_url, f"/{folder}/{article['slug']}", change_frequency, priority, last_modified
            )

    for records, (folder, change_frequency, priority) in ((categories, CATEGORY_PAGE), (tags, TAG_PAGE)):
        for record in records:
            if record.get("slug"):
                entries += localized_entries(base_url, f"/{folder}/{record['slug']}", change_frequency, priority)

    return entries


def build_robots(base_url: str, allow_indexing: bool) -> dict[str, Any]:
    """
    robots.txt rules.

    Returns:
        {rules: [{user_agent, allow, disallow}], sitemap}; sitemap is None
        when indexing is not allowed
    """
    if not allow_indexing:
        return {"rules": [{"user_agent": "*", "allow": [], "disallow": ["/"]}], "sitemap": None}

    rules = [{"user_agent": "*", "allow": ["/"], "disallow": list(DISALLOWED_PATHS)}]
    rules += [{"user_agent": agent, "allow": ["/"], "disallow": ["/admin/", "/api/"]} for agent in AI_CRAWLERS]
    rules += [{"user_agent": agent, "allow": ["/"], "disallow": []} for agent in SOCIAL_CRAWLERS]
    return {"rules": rules, "sitemap": f"{base_url}/sitemap.xml"}


class SeoService:
    """
    Service for sitemap and robots data of a tenant.
    """

    @staticmethod
    def sitemap(tenant: dict[str, Any]) -> dict[str, Any]:
        """Sitemap of published content; empty when indexing is not allowed."""
        base_url = site_base_url(tenant)
        if not tenant.get("allow_indexing"):
            return {"base_url": base_url, "entries": []}

        media_id = tenant["id"]
        articles = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id, "is_published": True},
            order_by="published_at",
            desc=True,
            columns="slug,updated_at,published_at",
        )
        categories = SupabaseClient.fetch_many("categories", filters={"media_id": media_id}, columns="slug")
        tags = SupabaseClient.fetch_many("tags", filters={"media_id": media_id}, columns="slug")

        entries = build_sitemap(base_url, articles, categories, tags)
        logger.info(f"Sitemap for tenant {media_id}: {len(entries)} entries")
        return {"base_url": base_url, "entries": entries}

    @staticmethod
    def robots(tenant: dict[str, Any]) -> dict[str, Any]:
        return build_robots(site_base_url(tenant), bool(tenant.get("allow_indexing")))
