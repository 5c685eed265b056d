# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - tasks.py: Background task status endpoints
# - articles.py, categories.py, tags.py, writers.py: Content admin
# - banners.py, pages.py, media.py: Blocks, static pages, media library
# - tenants.py, site.py: Tenants, domain lookup, site settings, theme
# - accounts.py: Admin accounts (super admins)
# - patterns.py, schedules.py: AI generation patterns, schedules, cron
# - audiences.py: Target audience history
# - translate.py, stats.py: Editor translation, dashboard statistics
# - public.py: Public localized site API, sitemap and robots
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import (
    accounts,
    articles,
    audiences,
    banners,
    categories,
    health,
    media,
    pages,
    patterns,
    public,
    schedules,
    site,
    stats,
    tags,
    tasks,
    tenants,
    translate,
    writers,
)

__all__ = [
    "accounts",
    "articles",
    "audiences",
    "banners",
    "categories",
    "health",
    "media",
    "pages",
    "patterns",
    "public",
    "schedules",
    "site",
    "stats",
    "tags",
    "tasks",
    "tenants",
    "translate",
    "writers",
]
