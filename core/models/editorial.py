# =============================================================================
# core/models/editorial.py - Editor AI Helper Schemas
# =============================================================================
# Requests and responses of the editor helpers that work on a draft:
# SEO rewrite, style rewrite, target audience suggestions and images
# placed inside the article body.
# =============================================================================

from pydantic import BaseModel, Field


# -----------------------------------------------------------------------------
# Rewriting
# -----------------------------------------------------------------------------

class RewriteRequest(BaseModel):
    """
    SEO rewrite of a draft.

    Example:
        {"title": "東京のカフェ", "content": "<p>...</p>", "article_id": "a-1"}
    """
    content: str = Field(..., min_length=1)
    title: str = Field(default="")
    article_id: str | None = Field(
        default=None,
        description="Article being edited (its own title is not compared)"
    )


class TitleDuplicateCheck(BaseModel):
    """Closest published titles to the draft title."""
    is_duplicate: bool
    similarity_score: float
    similar_titles: list[str]


class RewriteResponse(BaseModel):
    content: str
    duplicate_check: TitleDuplicateCheck


class StyleRewriteRequest(BaseModel):
    """Rewrite the tone of a draft with an article pattern used as style."""
    title: str = Field(default="")
    content: str = Field(..., min_length=1)
    style_id: str = Field(..., min_length=1, description="Article pattern id")


class StyleRewriteResponse(BaseModel):
    content: str
    style_name: str


# -----------------------------------------------------------------------------
# Target audience
# -----------------------------------------------------------------------------

class TargetAudienceRequest(BaseModel):
    category_id: str = Field(..., min_length=1)


class TargetAudienceResponse(BaseModel):
    target_audience: str


class TargetAudienceEntry(BaseModel):
    """One target audience remembered for the tenant."""
    target_audience: str = Field(..., min_length=1, max_length=200)


# -----------------------------------------------------------------------------
# Images
# -----------------------------------------------------------------------------

class InlineImagesRequest(BaseModel):
    """Place generated images after h2 headings of a draft."""
    title: str = Field(default="")
    content: str = Field(..., min_length=1)
    image_prompt_pattern_id: str = Field(..., min_length=1)
    image_count: int = Field(default=2, ge=1, le=3)


class InlineImage(BaseModel):
    url: str
    position: int = Field(..., description="0-based h2 index the image follows")


class InlineImagesResponse(BaseModel):
    content: str
    images: list[InlineImage]
    image_count: int


class SampleImageRequest(BaseModel):
    """Preview an image prompt without storing the result."""
    prompt: str = Field(..., min_length=1, max_length=4000)
    size: str = Field(default="1024x1024", pattern=r"^(1024x1024|1792x1024|1024x1792)$")


class SampleImageResponse(BaseModel):
    image_url: str
