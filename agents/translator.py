# =============================================================================
# agents/translator.py - Translator Agent
# =============================================================================
# Translates Japanese source content into the other supported languages and
# writes the per-language AI summaries.
#
# The translator itself raises on failure (TranslationError). Callers that
# must tolerate partial failure (publish pipeline, batch translation, theme
# labels) catch per item and fall back to the original text.
#
# Usage:
#   from agents.translator import TranslatorAgent
#   agent = TranslatorAgent()
#   title_en = agent.translate_text("東京の旅行ガイド", "en", context="article title")
# =============================================================================

from __future__ import annotations

import logging
import re
from concurrent.futures import ThreadPoolExecutor
from typing import Any

from openai import OpenAI

from agents.llm import AgentError, chat
from agents.prompts.translation import build_summary_prompt, build_translation_prompt
from app.exceptions import TranslationError
from lib.html_utils import plain_text
from lib.i18n import DEFAULT_LANG, SUPPORTED_LANGS, validate_lang

logger = logging.getLogger(__name__)

BATCH_CHUNK_SIZE = 5
SUMMARY_INPUT_LIMIT = 3000

_FULL_ENGLISH_RE = re.compile(r"^[a-zA-Z0-9\s\.,!?;:'\"()\-\/_&]+$")

# Contexts passed to the model for each article field
ARTICLE_FIELD_CONTEXTS: dict[str, str] = {
    "title": "article title",
    "content": "article body (HTML)",
    "excerpt": "article excerpt",
    "meta_title": "SEO meta title",
    "meta_description": "SEO meta description",
}


def is_full_english(text: str | None) -> bool:
    """
    True when text only contains ASCII letters, digits, whitespace and
    common punctuation (such text is reused as-is in every language).
    """
    if not text or not text.strip():
        return False
    return bool(_FULL_ENGLISH_RE.match(text))


class TranslatorAgent:
    """
    LLM-backed translator from Japanese into en/zh/ko.

    Example:
        agent = TranslatorAgent()
        fields = agent.translate_article(
            {"title": "...", "content": "<p>...</p>", "excerpt": "..."},
            "en",
        )
        print(fields["title"])

    Attributes:
        model: OpenAI model to use (default from settings)
    """

    TEMPERATURE = 0.3
    MAX_TOKENS = 4000
    SUMMARY_TEMPERATURE = 0.7
    SUMMARY_MAX_TOKENS = 500

    def __init__(self, model: str | None = None, client: OpenAI | None = None):
        self.model = model
        self.client = client

    # -------------------------------------------------------------------------
    # Single Text
    # -------------------------------------------------------------------------

    def translate_text(self, text: str | None, target_lang: str, context: str | None = None) -> str:
        """
        Translate Japanese text into target_lang.

        Args:
            text: Source text (may contain HTML)
            target_lang: Target language code
            context: What the text is, given to the model as a hint

        Returns:
            Translated text; "" for empty input; the input itself for "ja"

        Raises:
            UnsupportedLanguageError: If target_lang is not supported
            TranslationError: If the LLM call fails
        """
        if not text or not text.strip():
            return ""

        validate_lang(target_lang)
        if target_lang == DEFAULT_LANG:
            return text

        messages = [
            {"role": "system", "content": build_translation_prompt(target_lang, context)},
            {"role": "user", "content": text},
        ]

        try:
            return chat(
                messages,
                temperature=self.TEMPERATURE,
                max_tokens=self.MAX_TOKENS,
                model=self.model,
                client=self.client,
            )
        except AgentError as e:
            raise TranslationError(target_lang, e.message)

    # -------------------------------------------------------------------------
    # Batches
    # -------------------------------------------------------------------------

    def translate_batch(
        self,
        texts: list[str],
        target_lang: str,
        context: str | None = None,
    ) -> list[str]:
        """
        Translate several texts, BATCH_CHUNK_SIZE at a time in parallel.

        A text whose translation fails is returned unchanged.

        Returns:
            Translations in the same order as texts
        """
        validate_lang(target_lang)

        def translate_one(text: str) -> str:
            try:
                return self.translate_text(text, target_lang, context)
            except TranslationError as e:
                logger.warning(f"Batch item translation failed, keeping original: {e.message}")
                return text

        results: list[str] = []
        with ThreadPoolExecutor(max_workers=BATCH_CHUNK_SIZE) as executor:
            for start in range(0, len(texts), BATCH_CHUNK_SIZE):
                chunk = texts[start:start + BATCH_CHUNK_SIZE]
                results.extend(executor.map(translate_one, chunk))

        return results

    def translate_article(self, fields: dict[str, Any], target_lang: str) -> dict[str, str]:
        """
        Translate the text fields of an article.

        meta_title falls back to title and meta_description to excerpt
        before translation, so every language gets SEO fields.

        Returns:
            {"title", "content", "excerpt", "meta_title", "meta_description"}

        Raises:
            TranslationError: If any field fails
        """
        source = {
            "title": fields.get("title") or "",
            "content": fields.get("content") or "",
            "excerpt": fields.get("excerpt") or "",
            "meta_title": fields.get("meta_title") or fields.get("title") or "",
            "meta_description": fields.get("meta_description") or fields.get("excerpt") or "",
        }

        with ThreadPoolExecutor(max_workers=len(source)) as executor:
            futures = {
                name: executor.submit(self.translate_text, value, target_lang, ARTICLE_FIELD_CONTEXTS[name])
                for name, value in source.items()
            }
            return {name: future.result() for name, future in futures.items()}

    def translate_faqs(self, faqs: list[dict[str, str]], target_lang: str) -> list[dict[str, str]]:
        """
        Translate question/answer pairs.

        Raises:
            TranslationError: If any question or answer fails
        """
        return [
            {
                "question": self.translate_text(faq.get("question", ""), target_lang, "FAQ question"),
                "answer": self.translate_text(faq.get("answer", ""), target_lang, "FAQ answer"),
            }
            for faq in faqs
        ]

    def translate_to_all(self, text: str | None, context: str | None = None) -> dict[str, str]:
        """
        Translate text into every supported language.

        The Japanese entry is the original. A failed language falls back to
        the original text.

        Returns:
            {"ja": text, "en": ..., "zh": ..., "ko": ...}
        """
        text = text or ""
        result = {DEFAULT_LANG: text}

        for lang in SUPPORTED_LANGS:
            if lang == DEFAULT_LANG:
                continue
            try:
                result[lang] = self.translate_text(text, lang, context) or text
            except TranslationError as e:
                logger.warning(f"Translation to {lang} failed, using original: {e.message}")
                result[lang] = text

        return result

    # -------------------------------------------------------------------------
    # AI Summary
    # -------------------------------------------------------------------------

    def generate_ai_summary(self, content: str | None, lang: str) -> str:
        """
        Write the 150-200 character AI summary of an article in lang.

        Args:
            content: Article body (HTML or plain text)
            lang: Language of the summary

        Raises:
            TranslationError: If the LLM call fails
        """
        validate_lang(lang)
        text = plain_text(content)[:SUMMARY_INPUT_LIMIT]
        if not text:
            return ""

        messages = [
            {"role": "system", "content": build_summary_prompt(lang)},
            {"role": "user", "content": f"Article:\n{text}"},
        ]

        try:
            return chat(
                messages,
                temperature=self.SUMMARY_TEMPERATURE,
                max_tokens=self.SUMMARY_MAX_TOKENS,
                model=self.model,
                client=self.client,
            )
        except AgentError as e:
            raise TranslationError(lang, f"AI summary generation failed: {e.message}")
