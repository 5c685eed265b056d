# =============================================================================
# core/models/taxonomy.py - Category and Tag Schemas
# =============================================================================
# Categories and tags are per-tenant. Their display names are translated into
# every supported language on save (name_en, name_zh, name_ko).
# =============================================================================

from pydantic import BaseModel, Field

SLUG_PATTERN = r"^[^\s/?#]+$"


# =============================================================================
# Categories
# =============================================================================

class CategoryCreate(BaseModel):
    """Schema for creating a category."""
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str = Field(default="")
    image_url: str | None = None
    image_alt: str | None = None
    is_recommended: bool = False
    order: int = Field(default=0, ge=0)


class CategoryUpdate(BaseModel):
    """Schema for updating a category. Only provided fields are changed."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)
    description: str | None = None
    image_url: str | None = None
    image_alt: str | None = None
    is_recommended: bool | None = None
    order: int | None = Field(default=None, ge=0)


class CategoryDescriptionRequest(BaseModel):
    """Ask the LLM for a category description."""
    name: str = Field(..., min_length=1)
    existing: str | None = None


# =============================================================================
# Tags
# =============================================================================

class TagCreate(BaseModel):
    """Schema for creating a tag."""
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=1, max_length=100, pattern=SLUG_PATTERN)


class TagUpdate(BaseModel):
    """Schema for updating a tag."""
    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, min_length=1, max_length=100, pattern=SLUG_PATTERN)


class TagGenerationRequest(BaseModel):
    """Input for AI tag suggestion."""
    title: str = Field(default="")
    content: str = Field(default="")
    category_ids: list[str] = Field(default_factory=list)


class GeneratedTag(BaseModel):
    """A tag chosen for an article: reused or newly created."""
    id: str
    name: str
    slug: str
    is_new: bool
    similarity: float | None = None


class TagGenerationSummary(BaseModel):
    total: int
    existing: int
    new: int


class TagGenerationResult(BaseModel):
    """Tags assigned by the AI tag suggestion."""
    tags: list[GeneratedTag]
    summary: TagGenerationSummary
