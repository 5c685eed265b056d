# =============================================================================
# app/routers/tags.py - Tag Admin Endpoints
# =============================================================================
# Tag CRUD. Tag names are translated to every language on save.
# AI tag suggestion lives at POST /admin/articles/generate-tags.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import TenantDep
from core.models.taxonomy import TagCreate, TagUpdate
from core.services.tag_service import TagService

router = APIRouter()

TagId = Annotated[str, Path(description="Tag id")]


@router.get("")
def list_tags(ctx: TenantDep):
    """Tags ordered by name."""
    return TagService.list_tags(ctx.media_id)


@router.get("/{tag_id}")
def get_tag(tag_id: TagId, ctx: TenantDep):
    return TagService.get_tag(ctx.media_id, tag_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_tag(payload: TagCreate, ctx: TenantDep):
    return TagService.create_tag(ctx.media_id, payload)


@router.put("/{tag_id}")
def update_tag(tag_id: TagId, payload: TagUpdate, ctx: TenantDep):
    return TagService.update_tag(ctx.media_id, tag_id, payload)


@router.delete("/{tag_id}")
def delete_tag(tag_id: TagId, ctx: TenantDep):
    """Delete a tag and remove it from every article."""
    TagService.delete_tag(ctx.media_id, tag_id)
    return {"success": True, "message": "Tag deleted"}
