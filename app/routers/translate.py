# =============================================================================
# app/routers/translate.py - Translation Endpoint
# =============================================================================
# On-demand translation for the admin editor.
#
# POST body by type:
#   text        {text, context?}        -> {translated}
#   batch       {texts, context?}       -> {translated: [...]}
#   article     {article: {title...}}   -> {translated: {title...}}
#   faqs        {faqs: [{question...}]} -> {translated: [...]}
#   ai_summary  {content}               -> {summary}
# =============================================================================

import logging
from enum import Enum
from typing import Any

from fastapi import APIRouter
from pydantic import BaseModel, Field

from agents.translator import TranslatorAgent
from app.dependencies import TenantDep
from app.exceptions import ValidationFailedError
from lib.i18n import SUPPORTED_LANGS, validate_lang

logger = logging.getLogger(__name__)

router = APIRouter()


class TranslationType(str, Enum):
    TEXT = "text"
    BATCH = "batch"
    ARTICLE = "article"
    FAQS = "faqs"
    AI_SUMMARY = "ai_summary"


class TranslateRequest(BaseModel):
    """Translation request; the payload field depends on type."""
    type: TranslationType
    target_lang: str
    text: str | None = None
    texts: list[str] | None = None
    article: dict[str, Any] | None = None
    faqs: list[dict[str, str]] | None = None
    content: str | None = None
    context: str | None = Field(default=None, description="What the text is (e.g. 'menu label')")


def _missing(field: str, kind: TranslationType) -> ValidationFailedError:
    return ValidationFailedError(
        f"'{field}' is required for type '{kind.value}'",
        details={"type": kind.value, "field": field},
    )


def run_translation(request: TranslateRequest, translator: TranslatorAgent | None = None) -> dict[str, Any]:
    """
    Dispatch a translation request to the translator.

    Raises:
        UnsupportedLanguageError: If target_lang is not supported
        ValidationFailedError: If the payload for the type is missing
    """
    lang = validate_lang(request.target_lang)
    translator = translator or TranslatorAgent()
    kind = request.type

    if kind is TranslationType.TEXT:
        if request.text is None:
            raise _missing("text", kind)
        return {"translated": translator.translate_text(request.text, lang, request.context)}

    if kind is TranslationType.BATCH:
        if request.texts is None:
            raise _missing("texts", kind)
        return {"translated": translator.translate_batch(request.texts, lang, request.context)}

    if kind is TranslationType.ARTICLE:
        if request.article is None:
            raise _missing("article", kind)
        return {"translated": translator.translate_article(request.article, lang)}

    if kind is TranslationType.FAQS:
        if request.faqs is None:
            raise _missing("faqs", kind)
        return {"translated": translator.translate_faqs(request.faqs, lang)}

    if not request.content:
        raise _missing("content", kind)
    return {"summary": translator.generate_ai_summary(request.content, lang)}


@router.post("")
def translate(payload: TranslateRequest, ctx: TenantDep):
    logger.info(f"Translate [{payload.type.value}] to {payload.target_lang} for tenant {ctx.media_id}")
    return run_translation(payload)


@router.get("")
async def translate_status(ctx: TenantDep):
    """Check that the endpoint is available and list the languages."""
    return {"status": "ok", "supported_langs": list(SUPPORTED_LANGS)}
