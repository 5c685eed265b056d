# =============================================================================
# app/routers/categories.py - Category Admin Endpoints
# =============================================================================
# Category CRUD. Names and descriptions are translated on save.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status
from pydantic import BaseModel

from agents.content_writer import ContentWriterAgent
from app.dependencies import TenantDep
from core.models.taxonomy import CategoryCreate, CategoryDescriptionRequest, CategoryUpdate
from core.services.category_service import CategoryService

router = APIRouter()

CategoryId = Annotated[str, Path(description="Category id")]


class CategoryDescriptionResponse(BaseModel):
    description: str


@router.get("")
def list_categories(ctx: TenantDep):
    """Categories ordered by their display order."""
    return CategoryService.list_categories(ctx.media_id)


@router.post("/generate-description", response_model=CategoryDescriptionResponse)
def generate_description(payload: CategoryDescriptionRequest, ctx: TenantDep):
    """Write (or improve) a category description with the LLM."""
    description = ContentWriterAgent().generate_category_description(payload.name, payload.existing)
    return CategoryDescriptionResponse(description=description)


@router.get("/{category_id}")
def get_category(category_id: CategoryId, ctx: TenantDep):
    return CategoryService.get_category(ctx.media_id, category_id)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, ctx: TenantDep):
    return CategoryService.create_category(ctx.media_id, payload)


@router.put("/{category_id}")
def update_category(category_id: CategoryId, payload: CategoryUpdate, ctx: TenantDep):
    return CategoryService.update_category(ctx.media_id, category_id, payload)


@router.delete("/{category_id}")
def delete_category(category_id: CategoryId, ctx: TenantDep):
    """Delete a category and remove it from every article."""
    CategoryService.delete_category(ctx.media_id, category_id)
    return {"success": True, "message": "Category deleted"}
