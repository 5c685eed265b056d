# =============================================================================
# app/routers/patterns.py - Prompt Pattern Endpoints
# =============================================================================
# Reusable prompts for the article generator:
#   /article-patterns       extra writing instructions
#   /image-prompt-patterns  featured image prompt and size
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import TenantDep
from core.models.schedule import (
    ArticlePatternCreate,
    ArticlePatternUpdate,
    ImagePromptPatternCreate,
    ImagePromptPatternUpdate,
)
from core.services.pattern_service import ARTICLE_PATTERNS, IMAGE_PROMPT_PATTERNS, PatternService

router = APIRouter()

PatternId = Annotated[str, Path(description="Pattern id")]


# =============================================================================
# Article patterns
# =============================================================================

@router.get("/article-patterns")
def list_article_patterns(ctx: TenantDep):
    return PatternService.list_patterns(ARTICLE_PATTERNS, ctx.media_id)


@router.get("/article-patterns/{pattern_id}")
def get_article_pattern(pattern_id: PatternId, ctx: TenantDep):
    return PatternService.get_pattern(ARTICLE_PATTERNS, ctx.media_id, pattern_id)


@router.post("/article-patterns", status_code=status.HTTP_201_CREATED)
def create_article_pattern(payload: ArticlePatternCreate, ctx: TenantDep):
    return PatternService.create_pattern(ARTICLE_PATTERNS, ctx.media_id, payload)


@router.put("/article-patterns/{pattern_id}")
def update_article_pattern(pattern_id: PatternId, payload: ArticlePatternUpdate, ctx: TenantDep):
    return PatternService.update_pattern(ARTICLE_PATTERNS, ctx.media_id, pattern_id, payload)


@router.delete("/article-patterns/{pattern_id}")
def delete_article_pattern(pattern_id: PatternId, ctx: TenantDep):
    PatternService.delete_pattern(ARTICLE_PATTERNS, ctx.media_id, pattern_id)
    return {"success": True, "message": "Pattern deleted"}


# =============================================================================
# Image prompt patterns
# =============================================================================

@router.get("/image-prompt-patterns")
def list_image_prompt_patterns(ctx: TenantDep):
    return PatternService.list_patterns(IMAGE_PROMPT_PATTERNS, ctx.media_id)


@router.get("/image-prompt-patterns/{pattern_id}")
def get_image_prompt_pattern(pattern_id: PatternId, ctx: TenantDep):
    return PatternService.get_pattern(IMAGE_PROMPT_PATTERNS, ctx.media_id, pattern_id)


@router.post("/image-prompt-patterns", status_code=status.HTTP_201_CREATED)
def create_image_prompt_pattern(payload: ImagePromptPatternCreate, ctx: TenantDep):
    return PatternService.create_pattern(IMAGE_PROMPT_PATTERNS, ctx.media_id, payload)


@router.put("/image-prompt-patterns/{pattern_id}")
def update_image_prompt_pattern(pattern_id: PatternId, payload: ImagePromptPatternUpdate, ctx: TenantDep):
    return PatternService.update_pattern(IMAGE_PROMPT_PATTERNS, ctx.media_id, pattern_id, payload)


@router.delete("/image-prompt-patterns/{pattern_id}")
def delete_image_prompt_pattern(pattern_id: PatternId, ctx: TenantDep):
    PatternService.delete_pattern(IMAGE_PROMPT_PATTERNS, ctx.media_id, pattern_id)
    return {"success": True, "message": "Pattern deleted"}
