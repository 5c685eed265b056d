# =============================================================================
# app/routers/banners.py - Banner Block Endpoints
# =============================================================================
# Banner blocks shown in the placements of the tenant's layout
# (footer, side-panel, sidebar-top...). Mounted at /api/v1/admin/blocks.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import TenantDep
from core.models.banner import BannerCreate, BannerReorderRequest, BannerUpdate
from core.services.banner_service import BannerService

router = APIRouter()

BannerId = Annotated[str, Path(description="Banner id")]


@router.get("")
def list_banners(ctx: TenantDep):
    """Banners ordered by their display order."""
    return BannerService.list_banners(ctx.media_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_banner(payload: BannerCreate, ctx: TenantDep):
    """Create a banner at the end of the list."""
    return BannerService.create_banner(ctx.tenant, payload)


@router.put("/reorder")
def reorder_banners(payload: BannerReorderRequest, ctx: TenantDep):
    """
    Apply several order changes at once.

    Every id must belong to the tenant; nothing is written otherwise.
    """
    updated = BannerService.reorder(ctx.media_id, payload.updates)
    return {"success": True, "updated": updated}


@router.get("/{banner_id}")
def get_banner(banner_id: BannerId, ctx: TenantDep):
    return BannerService.get_banner(ctx.media_id, banner_id)


@router.put("/{banner_id}")
def update_banner(banner_id: BannerId, payload: BannerUpdate, ctx: TenantDep):
    return BannerService.update_banner(ctx.tenant, banner_id, payload)


@router.delete("/{banner_id}")
def delete_banner(banner_id: BannerId, ctx: TenantDep):
    BannerService.delete_banner(ctx.media_id, banner_id)
    return {"success": True, "message": "Banner deleted"}
