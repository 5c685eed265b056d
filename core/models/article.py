# =============================================================================
# core/models/article.py - Article Schemas
# =============================================================================
# These models define the API contract for article operations:
# - ArticleCreate / ArticleUpdate: admin input
# - PublishToggle: publish/unpublish only
# - DuplicateCheckRequest / DuplicateCheckResponse: similarity check
#
# Articles are authored in Japanese. The base fields (title, content...) are
# copied to their "_ja" columns on save and the publish pipeline fills the
# other languages (title_en, content_zh...).
# =============================================================================

from pydantic import BaseModel, Field

# Fields written by editors and copied to "_ja" on save
ARTICLE_SOURCE_FIELDS = ("title", "content", "excerpt", "meta_title", "meta_description", "faqs")

# Fields resolved per language on the public site
ARTICLE_LOCALIZED_FIELDS = (
    "title",
    "content",
    "excerpt",
    "meta_title",
    "meta_description",
    "ai_summary",
    "faqs",
    "toc",
)


class FAQItem(BaseModel):
    """One question/answer pair shown under an article."""
    question: str = Field(..., min_length=1)
    answer: str = Field(..., min_length=1)


class ArticleCreate(BaseModel):
    """
    Schema for creating an article.

    Example:
        {
            "title": "東京のおすすめカフェ10選",
            "slug": "tokyo-cafe-guide",
            "content": "<h2>...</h2><p>...</p>",
            "category_ids": ["..."],
            "is_published": true
        }
    """
    title: str = Field(..., min_length=1, max_length=300)
    slug: str = Field(..., min_length=1, max_length=200, pattern=r"^[^\s/?#]+$")
    content: str = Field(default="")
    excerpt: str | None = None
    featured_image: str | None = None
    featured_image_alt: str | None = None
    category_ids: list[str] = Field(default_factory=list)
    tag_ids: list[str] = Field(default_factory=list)
    writer_id: str | None = None
    is_published: bool = False
    is_featured: bool = False
    meta_title: str | None = None
    meta_description: str | None = None
    faqs: list[FAQItem] | None = None


class ArticleUpdate(BaseModel):
    """Schema for a full article update. Only provided fields are changed."""
    title: str | None = Field(default=None, min_length=1, max_length=300)
    slug: str | None = Field(default=None, min_length=1, max_length=200, pattern=r"^[^\s/?#]+$")
    content: str | None = None
    excerpt: str | None = None
    featured_image: str | None = None
    featured_image_alt: str | None = None
    category_ids: list[str] | None = None
    tag_ids: list[str] | None = None
    writer_id: str | None = None
    is_published: bool | None = None
    is_featured: bool | None = None
    meta_title: str | None = None
    meta_description: str | None = None
    faqs: list[FAQItem] | None = None


class PublishToggle(BaseModel):
    """Publish or unpublish an article without touching other fields."""
    is_published: bool


class DuplicateCheckRequest(BaseModel):
    """Input for the duplicate article check."""
    title: str = Field(default="")
    content: str = Field(default="")
    article_id: str | None = Field(
        default=None,
        description="Article being edited (excluded from the comparison)"
    )


class DuplicateMatch(BaseModel):
    """An existing article that looks like the candidate."""
    article_id: str
    title: str
    title_similarity: float
    content_similarity: float


class DuplicateCheckResponse(BaseModel):
    """Result of the duplicate article check."""
    is_duplicate: bool
    duplicates: list[DuplicateMatch]
    checked_count: int
