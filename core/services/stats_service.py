# =============================================================================
# core/services/stats_service.py - Dashboard Statistics
# =============================================================================
# Counts and simple aggregations for the admin dashboard. Articles are
# loaded once into a pandas DataFrame and aggregated in memory:
# - monthly published articles (last 12 months, missing months = 0)
# - top articles by views
# - views per category (an article counts for each of its categories)
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

import pandas as pd

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

MONTHS = 12
TOP_ARTICLES = 5

ARTICLE_COLUMNS = "id,title,slug,is_published,published_at,view_count,category_ids"


def articles_frame(articles: list[dict[str, Any]]) -> pd.DataFrame:
    """DataFrame with typed columns (empty frames keep the columns)."""
    df = pd.DataFrame(articles, columns=["id", "title", "slug", "is_published", "published_at", "view_count", "category_ids"])
    df["is_published"] = df["is_published"].fillna(False).astype(bool)
    df["view_count"] = pd.to_numeric(df["view_count"], errors="coerce").fillna(0).astype(int)
    df["published_at"] = pd.to_datetime(df["published_at"], errors="coerce", utc=True)
    df["category_ids"] = df["category_ids"].apply(lambda v: v if isinstance(v, list) else [])
    return df


def monthly_published(df: pd.DataFrame, now: datetime | None = None, months: int = MONTHS) -> list[dict[str, Any]]:
    """Published article counts per YYYY-MM for the last `months` months."""
    now = now or datetime.now(timezone.utc)
    current = pd.Period(year=now.year, month=now.month, freq="M")
    periods = pd.period_range(end=current, periods=months, freq="M")

    published = df[df["is_published"] & df["published_at"].notna()]
    counts = (
        published["published_at"].dt.tz_localize(None).dt.to_period("M").value_counts()
        if not published.empty else pd.Series(dtype=int)
    )
    return [{"month": str(period), "count": int(counts.get(period, 0))} for period in periods]


def top_articles(df: pd.DataFrame, limit: int = TOP_ARTICLES) -> list[dict[str, Any]]:
    top = df[df["is_published"]].nlargest(limit, "view_count")
    return [
        {"id": row.id, "title": row.title, "slug": row.slug, "view_count": int(row.view_count)}
        for row in top.itertuples()
    ]


def views_by_category(df: pd.DataFrame, category_names: dict[str, str]) -> list[dict[str, Any]]:
    """Total views per category, highest first."""
    exploded = df[["category_ids", "view_count"]].explode("category_ids").dropna(subset=["category_ids"])
    if exploded.empty:
        return []
    totals = exploded.groupby("category_ids")["view_count"].sum().sort_values(ascending=False)
    return [
        {"category_id": cid, "name": category_names.get(cid, ""), "views": int(views)}
        for cid, views in totals.items()
    ]


class StatsService:
    """
    Service for dashboard statistics.
    """

    @staticmethod
    def get_stats(media_id: str) -> dict[str, Any]:
        articles = SupabaseClient.fetch_many("articles", filters={"media_id": media_id}, columns=ARTICLE_COLUMNS)
        categories = SupabaseClient.fetch_many("categories", filters={"media_id": media_id}, columns="id,name")

        df = articles_frame(articles)
        published = int(df["is_published"].sum())

        stats = {
            "articles": {"total": len(df), "published": published, "draft": len(df) - published},
            "categories": len(categories),
            "tags": SupabaseClient.count("tags", {"media_id": media_id}),
            "writers": SupabaseClient.count("writers", {"media_id": media_id}),
            "media": SupabaseClient.count("media_files", {"media_id": media_id}),
            "monthly_articles": monthly_published(df),
            "top_articles": top_articles(df),
            "views_by_category": views_by_category(df, {c["id"]: c.get("name", "") for c in categories}),
        }
        logger.debug(f"Computed stats for tenant {media_id}")
        return stats
