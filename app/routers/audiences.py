# =============================================================================
# app/routers/audiences.py - Target Audience History Endpoints
# =============================================================================
# Target audiences the editors used before, newest first (at most 20), so
# the generation form can offer them again.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import TenantDep
from core.models.editorial import TargetAudienceEntry
from core.services.editorial_service import EditorialService

router = APIRouter()


@router.get("")
def list_target_audiences(ctx: TenantDep):
    return {"history": EditorialService.list_target_audiences(ctx.media_id)}


@router.post("")
def add_target_audience(payload: TargetAudienceEntry, ctx: TenantDep):
    """Remember a target audience. Known entries are not duplicated."""
    return {"history": EditorialService.add_target_audience(ctx.media_id, payload.target_audience)}


@router.delete("")
def remove_target_audience(
    ctx: TenantDep,
    target_audience: Annotated[str, Query(min_length=1, description="Entry to forget")],
):
    return {"history": EditorialService.remove_target_audience(ctx.media_id, target_audience)}
