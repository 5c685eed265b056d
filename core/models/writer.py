# =============================================================================
# core/models/writer.py - Writer Schemas
# =============================================================================

from pydantic import BaseModel, Field


class WriterCreate(BaseModel):
    """Schema for creating a writer (article author profile)."""
    handle_name: str = Field(..., min_length=1, max_length=100)
    icon: str = Field(default="")
    bio: str = Field(default="")


class WriterUpdate(BaseModel):
    """Schema for updating a writer."""
    handle_name: str | None = Field(default=None, min_length=1, max_length=100)
    icon: str | None = None
    bio: str | None = None
