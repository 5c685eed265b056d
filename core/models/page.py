# =============================================================================
# core/models/page.py - Static Page and Content Block Schemas
# =============================================================================
# Static pages (about, company, privacy...) are built from an HTML body and
# an optional list of content blocks. Each block type has its own config
# shape, validated here so the public site can render blocks blindly.
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, model_validator

from core.models.taxonomy import SLUG_PATTERN


class BlockType(str, Enum):
    """Content block kinds."""
    TEXT = "text"
    IMAGE = "image"
    CTA = "cta"
    FORM = "form"
    HTML = "html"


# Config keys each block type must provide
REQUIRED_BLOCK_CONFIG: dict[BlockType, tuple[str, ...]] = {
    BlockType.TEXT: ("content",),
    BlockType.IMAGE: ("image_url", "alt"),
    BlockType.CTA: ("text", "url"),
    BlockType.FORM: ("form_id",),
    BlockType.HTML: ("html",),
}


class ContentBlock(BaseModel):
    """
    One block of a page.

    Example:
        {"id": "b1", "type": "cta", "order": 0,
         "config": {"text": "お問い合わせ", "url": "/contact", "style": "primary"}}
    """
    id: str = Field(..., min_length=1)
    type: BlockType
    order: int = Field(default=0, ge=0)
    config: dict[str, Any] = Field(default_factory=dict)
    show_on_mobile: bool = True
    show_on_desktop: bool = True

    @model_validator(mode="after")
    def check_config(self) -> "ContentBlock":
        missing = [key for key in REQUIRED_BLOCK_CONFIG[self.type] if key not in self.config]
        if missing:
            raise ValueError(f"{self.type.value} block is missing config keys: {', '.join(missing)}")
        return self


class PageCreate(BaseModel):
    """Schema for creating a static page."""
    title: str = Field(..., min_length=1, max_length=300)
    slug: str = Field(..., min_length=1, max_length=200, pattern=SLUG_PATTERN)
    content: str = Field(default="")
    excerpt: str | None = None
    featured_image: str | None = None
    featured_image_alt: str | None = None
    is_published: bool = False
    meta_title: str | None = None
    meta_description: str | None = None
    parent_id: str | None = None
    order: int = Field(default=0, ge=0)
    blocks: list[ContentBlock] = Field(default_factory=list)


class PageUpdate(BaseModel):
    """Schema for updating a static page."""
    title: str | None = Field(default=None, min_length=1, max_length=300)
    slug: str | None = Field(default=None, min_length=1, max_length=200, pattern=SLUG_PATTERN)
    content: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    featured_image_alt: str | None = None
    is_published: bool | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    parent_id: str | None = None
    order: int | None = Field(default=None, ge=0)
    blocks: list[ContentBlock] | None = None
