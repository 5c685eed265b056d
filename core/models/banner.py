# =============================================================================
# core/models/banner.py - Banner Block Schemas
# =============================================================================
# Banners are image blocks placed in the areas offered by the tenant's
# layout (footer, side-panel, sidebar-top...). They are shown by `order`.
# =============================================================================

from pydantic import BaseModel, Field


class BannerCreate(BaseModel):
    """Schema for creating a banner."""
    title: str = Field(..., min_length=1, max_length=200)
    image_url: str = Field(..., min_length=1)
    link_url: str = Field(default="")
    alt: str = Field(default="")
    placement: str = Field(default="footer")
    is_active: bool = True


class BannerUpdate(BaseModel):
    """Schema for updating a banner."""
    title: str | None = Field(default=None, min_length=1, max_length=200)
    image_url: str | None = Field(default=None, min_length=1)
    link_url: str | None = None
    alt: str | None = None
    placement: str | None = None
    is_active: bool | None = None
    order: int | None = Field(default=None, ge=0)


class BannerOrderUpdate(BaseModel):
    id: str
    order: int = Field(..., ge=0)


class BannerReorderRequest(BaseModel):
    """Batch order update."""
    updates: list[BannerOrderUpdate] = Field(..., min_length=1)
