# =============================================================================
# app/routers/articles.py - Article Admin Endpoints
# =============================================================================
# Article CRUD, publication and the AI helpers used by the editor
# (slugs, tags, meta titles, FAQs, rewrites, target audiences, images).
# All endpoints require authentication and the X-Media-Id header.
#
# Publishing dispatches the publish pipeline (translation, AI summary,
# table of contents, search sync) to the worker.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status
from pydantic import BaseModel, Field

from agents.content_writer import ContentWriterAgent
from app.dependencies import TenantDep
from app.exceptions import ValidationFailedError
from core.models.article import (
    ArticleCreate,
    ArticleUpdate,
    DuplicateCheckRequest,
    DuplicateCheckResponse,
    FAQItem,
    PublishToggle,
)
from core.models.editorial import (
    InlineImagesRequest,
    InlineImagesResponse,
    RewriteRequest,
    RewriteResponse,
    SampleImageRequest,
    SampleImageResponse,
    StyleRewriteRequest,
    StyleRewriteResponse,
    TargetAudienceRequest,
    TargetAudienceResponse,
)
from core.models.schedule import GenerationRequest
from core.models.taxonomy import TagGenerationRequest, TagGenerationResult
from core.services.article_service import ArticleService
from core.services.editorial_service import EditorialService
from core.services.publish_service import PublishService
from core.services.tag_service import TagService
from lib.html_utils import clean_wordpress_html

logger = logging.getLogger(__name__)

router = APIRouter()

ArticleId = Annotated[str, Path(description="Article id")]


# =============================================================================
# Request/Response Models
# =============================================================================

class ArticleCreateResponse(BaseModel):
    """Response when creating an article."""
    id: str
    message: str = Field(default="Article created successfully")


class SlugRequest(BaseModel):
    title: str = Field(..., min_length=1)


class SlugResponse(BaseModel):
    slug: str


class MetaTitleRequest(BaseModel):
    title: str = Field(..., min_length=1)


class MetaTitleResponse(BaseModel):
    meta_title: str


class FAQRequest(BaseModel):
    title: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)


class FAQResponse(BaseModel):
    faqs: list[FAQItem]


class CleanHtmlRequest(BaseModel):
    """Markup pasted from a WordPress export."""
    html: str


class GenerationTaskResponse(BaseModel):
    """Response when an article generation task is queued."""
    task_id: str
    status: str
    message: str


# =============================================================================
# CRUD
# =============================================================================

@router.get("")
def list_articles(ctx: TenantDep):
    """List the tenant's articles, newest first."""
    return ArticleService.list_articles(ctx.media_id)


@router.get("/{article_id}")
def get_article(article_id: ArticleId, ctx: TenantDep):
    """Get one article. 404 when it belongs to another tenant."""
    return ArticleService.get_article(ctx.media_id, article_id)


@router.post("", response_model=ArticleCreateResponse, status_code=status.HTTP_201_CREATED)
def create_article(payload: ArticleCreate, ctx: TenantDep):
    """
    Create an article.

    The Japanese fields (title_ja, content_ja...) are seeded from the base
    fields. Published articles are sent through the publish pipeline.
    """
    article = ArticleService.create_article(ctx.media_id, payload)
    return ArticleCreateResponse(id=article["id"])


@router.put("/{article_id}")
def toggle_publish(article_id: ArticleId, payload: PublishToggle, ctx: TenantDep):
    """
    Publish or unpublish an article.

    Unpublishing removes the article from every search index.
    """
    return ArticleService.set_published(ctx.media_id, article_id, payload.is_published)


@router.put("/{article_id}/update")
def update_article(article_id: ArticleId, payload: ArticleUpdate, ctx: TenantDep):
    """Full update of an article."""
    return ArticleService.update_article(ctx.media_id, article_id, payload)


@router.delete("/{article_id}")
def delete_article(article_id: ArticleId, ctx: TenantDep):
    """Delete an article and its search records."""
    ArticleService.delete_article(ctx.media_id, article_id)
    return {"success": True, "message": "Article deleted"}


# =============================================================================
# Publication
# =============================================================================

@router.post("/{article_id}/republish")
def republish_article(article_id: ArticleId, ctx: TenantDep):
    """Re-run translation, summaries, TOC and search sync."""
    return ArticleService.republish(ctx.media_id, article_id)


@router.post("/reindex")
def reindex_articles(ctx: TenantDep):
    """Push every published article of the tenant to the search index."""
    return PublishService.reindex_tenant(ctx.media_id)


# =============================================================================
# Editor helpers
# =============================================================================

@router.post("/check-duplicate", response_model=DuplicateCheckResponse)
def check_duplicate(payload: DuplicateCheckRequest, ctx: TenantDep):
    """Compare a draft with the tenant's published articles."""
    return ArticleService.check_duplicate(ctx.media_id, payload.title, payload.content, payload.article_id)


@router.post("/generate-slug", response_model=SlugResponse)
def generate_slug(payload: SlugRequest, ctx: TenantDep):
    """SEO slug for a title, unique within the tenant."""
    return SlugResponse(slug=ArticleService.generate_slug(ctx.media_id, payload.title))


@router.post("/generate-tags", response_model=TagGenerationResult)
def generate_tags(payload: TagGenerationRequest, ctx: TenantDep):
    """Suggest tags, reusing similar existing tags and creating the rest."""
    return TagService.generate_tags(ctx.media_id, payload.title, payload.content, payload.category_ids)


@router.post("/generate-meta-title", response_model=MetaTitleResponse)
def generate_meta_title(payload: MetaTitleRequest, ctx: TenantDep):
    return MetaTitleResponse(meta_title=ContentWriterAgent().generate_meta_title(payload.title))


@router.post("/generate-faq", response_model=FAQResponse)
def generate_faq(payload: FAQRequest, ctx: TenantDep):
    """Generate 3-5 question/answer pairs from the article."""
    faqs = ContentWriterAgent().generate_faqs(payload.title, payload.content)
    if not faqs:
        raise ValidationFailedError(
            "No FAQ could be generated from this content",
            suggestion="Add more body text and retry",
        )
    return FAQResponse(faqs=faqs)


@router.post("/clean-html")
async def clean_html(payload: CleanHtmlRequest, ctx: TenantDep):
    """Normalize WordPress markup before pasting it into an article."""
    return {"html": clean_wordpress_html(payload.html)}


@router.post("/rewrite", response_model=RewriteResponse)
def rewrite(payload: RewriteRequest, ctx: TenantDep):
    """
    SEO rewrite of a draft with h2/h3 structure.

    duplicate_check compares the draft title with the published titles.
    """
    return EditorialService.rewrite(ctx.media_id, payload.title, payload.content, payload.article_id)


@router.post("/rewrite-with-style", response_model=StyleRewriteResponse)
def rewrite_with_style(payload: StyleRewriteRequest, ctx: TenantDep):
    """Rewrite the tone of a draft with an article pattern as writing style."""
    return EditorialService.rewrite_with_style(ctx.media_id, payload.title, payload.content, payload.style_id)


@router.post("/generate-target-audience", response_model=TargetAudienceResponse)
def generate_target_audience(payload: TargetAudienceRequest, ctx: TenantDep):
    audience = EditorialService.generate_target_audience(ctx.media_id, payload.category_id)
    return TargetAudienceResponse(target_audience=audience)


@router.post("/generate-inline-images", response_model=InlineImagesResponse)
def generate_inline_images(payload: InlineImagesRequest, ctx: TenantDep):
    """
    Generate up to 3 images and insert them after h2 headings.

    The images are added to the media library; the article is not saved.
    """
    return EditorialService.generate_inline_images(
        ctx.media_id,
        payload.title,
        payload.content,
        payload.image_prompt_pattern_id,
        payload.image_count,
    )


@router.post("/generate-sample-image", response_model=SampleImageResponse)
def generate_sample_image(payload: SampleImageRequest, ctx: TenantDep):
    """Preview an image prompt. The URL is temporary and nothing is stored."""
    return SampleImageResponse(image_url=EditorialService.generate_sample_image(payload.prompt, payload.size))


@router.post(
    "/generate-advanced",
    response_model=GenerationTaskResponse,
    status_code=status.HTTP_202_ACCEPTED,
)
def generate_advanced(payload: GenerationRequest, ctx: TenantDep):
    """
    Generate a complete draft article in the background.

    Use GET /api/v1/tasks/{task_id} to follow progress.
    """
    from workers.tasks import generate_article

    try:
        task = generate_article.delay(ctx.media_id, **payload.model_dump())
    except Exception as e:
        logger.error(f"Error queueing article generation: {e}")
        raise HTTPException(
            status_code=503,
            detail=f"Failed to submit task. Is Redis running? Error: {e}"
        )
    logger.info(f"Queued article generation for tenant {ctx.media_id}: task {task.id}")
    return GenerationTaskResponse(
        task_id=task.id,
        status="PENDING",
        message="Article generation started. Use GET /api/v1/tasks/{task_id} to check status.",
    )
