# =============================================================================
# app/routers/stats.py - Dashboard Statistics Endpoint
# =============================================================================

from fastapi import APIRouter

from app.dependencies import TenantDep
from core.services.stats_service import StatsService

router = APIRouter()


@router.get("")
def get_stats(ctx: TenantDep):
    """
    Content counts, monthly published articles (last 12 months), top
    articles by views and views per category.
    """
    return StatsService.get_stats(ctx.media_id)
