# =============================================================================
# app/routers/pages.py - Static Page Endpoints
# =============================================================================
# Static pages (about, company, contact...) built from HTML content and
# typed content blocks.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status
from pydantic import BaseModel, Field

from app.dependencies import TenantDep
from core.models.page import PageCreate, PageUpdate
from core.services.page_service import PageService

router = APIRouter()

PageId = Annotated[str, Path(description="Page id")]


class PageSlugRequest(BaseModel):
    title: str = Field(..., min_length=1)


@router.get("")
def list_pages(ctx: TenantDep):
    return PageService.list_pages(ctx.media_id)


@router.post("/generate-slug")
def generate_slug(payload: PageSlugRequest, ctx: TenantDep):
    """SEO slug for a page title, unique within the tenant."""
    return {"slug": PageService.generate_slug(ctx.media_id, payload.title)}


@router.get("/{page_id}")
def get_page(page_id: PageId, ctx: TenantDep):
    return PageService.get_page(ctx.media_id, page_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_page(payload: PageCreate, ctx: TenantDep):
    return PageService.create_page(ctx.media_id, payload)


@router.put("/{page_id}")
def update_page(page_id: PageId, payload: PageUpdate, ctx: TenantDep):
    return PageService.update_page(ctx.media_id, page_id, payload)


@router.delete("/{page_id}")
def delete_page(page_id: PageId, ctx: TenantDep):
    PageService.delete_page(ctx.media_id, page_id)
    return {"success": True, "message": "Page deleted"}
