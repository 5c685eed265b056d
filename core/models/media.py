# =============================================================================
# core/models/media.py - Media Library Schemas
# =============================================================================

from enum import Enum

from pydantic import BaseModel, Field


class MediaType(str, Enum):
    """Kinds of files the media library accepts."""
    IMAGE = "image"
    VIDEO = "video"


class MediaUsage(BaseModel):
    """Where a media file is referenced."""
    type: str = Field(..., description="article | category | writer | theme | tenant")
    id: str
    title: str
    field: str | None = None


class MediaAltUpdate(BaseModel):
    alt: str = Field(..., max_length=300)


class ImageGenerateRequest(BaseModel):
    """Generate an image into the media library."""
    prompt: str = Field(..., min_length=1, max_length=4000)
    size: str = Field(default="1024x1024", pattern=r"^(1024x1024|1792x1024|1024x1792)$")
    improve_prompt: bool = True
    alt: str | None = None
