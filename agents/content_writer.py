# =============================================================================
# agents/content_writer.py - Content Writer Agent
# =============================================================================
# Editorial helpers used by the admin surface:
# - Slugs for article titles and tag names
# - Tag suggestions, SEO meta titles, FAQs
# - SEO and style rewrites, target audiences
# - Category descriptions
# - Image prompt improvement and image generation
#
# Usage:
#   from agents.content_writer import ContentWriterAgent
#   writer = ContentWriterAgent()
#   slug = writer.generate_slug("東京のおすすめカフェ10選")
# =============================================================================

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

import httpx
from openai import OpenAI

from agents.llm import AgentError, chat, get_openai_client
from agents.prompts import content as prompts
from app.config import settings
from app.exceptions import GenerationError
from lib.html_utils import clean_generated_html, plain_text
from lib.similarity import clean_slug, fallback_slug

logger = logging.getLogger(__name__)

MAX_TAGS = 5
META_TITLE_MAX_LENGTH = 70
TAG_CONTENT_LIMIT = 1500
FAQ_CONTENT_LIMIT = 1500
REWRITE_CONTENT_LIMIT = 6000
REWRITE_TITLE_LIMIT = 50

IMAGE_SIZES = ("1024x1024", "1792x1024", "1024x1792")

_TAG_SPLIT_RE = re.compile(r"[,、，]")
# Accepts half/full-width Q/A and colons; answers may span several lines
_FAQ_RE = re.compile(
    r"[QＱ][:：]\s*([^\n]+)\s*\n\s*[AＡ][:：]\s*([^\n]+(?:\n(?![QＱ][:：])[^\n]+)*)",
    re.IGNORECASE,
)


def parse_faqs(text: str) -> list[dict[str, str]]:
    """
    Parse "Q: ... / A: ..." blocks into question/answer dicts.

    Multi-line answers are joined with spaces.
    """
    faqs = []
    for question, answer in _FAQ_RE.findall(text or ""):
        question = question.strip()
        answer = re.sub(r"\n+", " ", answer.strip())
        if question and answer:
            faqs.append({"question": question, "answer": answer})
    return faqs


def parse_tag_names(text: str, limit: int = MAX_TAGS) -> list[str]:
    """Split a comma/読点 separated tag list, dropping blanks and duplicates."""
    names: list[str] = []
    for raw in _TAG_SPLIT_RE.split(text or ""):
        name = raw.strip().strip("「」\"'#")
        if name and name not in names:
            names.append(name)
    return names[:limit]


@dataclass
class GeneratedImage:
    """Image bytes returned by the image model."""
    data: bytes
    prompt: str
    revised_prompt: str | None = None


class ContentWriterAgent:
    """
    LLM helpers for editors.

    Methods that have a sensible fallback (slugs, image prompt improvement)
    never raise; the others raise GenerationError.

    Attributes:
        model: OpenAI model to use (default from settings)
    """

    def __init__(self, model: str | None = None, client: OpenAI | None = None):
        self.model = model
        self.client = client

    def _chat(self, system: str, user: str, temperature: float, max_tokens: int) -> str:
        return chat(
            [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            temperature=temperature,
            max_tokens=max_tokens,
            model=self.model,
            client=self.client,
        )

    # -------------------------------------------------------------------------
    # Slugs
    # -------------------------------------------------------------------------

    def generate_slug(self, title: str) -> str:
        """
        English URL slug for a title.

        Falls back to a kana/kanji-preserving slug if the model fails or
        returns nothing usable.
        """
        try:
            raw = self._chat(prompts.SLUG_SYSTEM_PROMPT, prompts.build_slug_request(title), 0.3, 100)
            slug = clean_slug(raw)
        except AgentError as e:
            logger.warning(f"Slug generation failed, using fallback: {e.message}")
            slug = ""

        return slug or fallback_slug(title)

    def generate_tag_slug(self, name: str) -> str:
        """English URL slug (max 3 words) for a tag name, with fallback."""
        try:
            raw = self._chat(prompts.TAG_SLUG_SYSTEM_PROMPT, prompts.build_tag_slug_request(name), 0.2, 50)
            slug = clean_slug(raw)
        except AgentError as e:
            logger.warning(f"Tag slug generation failed for '{name}', using fallback: {e.message}")
            slug = ""

        return slug or fallback_slug(name)

    # -------------------------------------------------------------------------
    # Tags / Meta / FAQ
    # -------------------------------------------------------------------------

    def generate_tag_names(
        self,
        title: str,
        content: str,
        category_names: list[str] | None = None,
        existing_tag_names: list[str] | None = None,
    ) -> list[str]:
        """
        Suggest up to 5 broad Japanese tags for an article.

        Raises:
            GenerationError: If the model call fails
        """
        request = prompts.build_tag_request(
            title=title or "",
            content=plain_text(content)[:TAG_CONTENT_LIMIT],
            category_names=category_names or [],
            existing_tag_names=existing_tag_names or [],
        )

        try:
            raw = self._chat(prompts.TAG_SYSTEM_PROMPT, request, 0.7, 200)
        except AgentError as e:
            raise GenerationError("tags", e.message)

        names = parse_tag_names(raw)
        category_set = {c.strip().lower() for c in category_names or []}
        names = [n for n in names if n.lower() not in category_set]

        logger.info(f"Generated tag names: {names}")
        return names

    def generate_meta_title(self, title: str) -> str:
        """
        SEO meta title of at most 70 characters.

        Raises:
            GenerationError: If the model call fails
        """
        try:
            meta_title = self._chat(
                prompts.META_TITLE_SYSTEM_PROMPT, prompts.build_meta_title_request(title), 0.3, 150
            )
        except AgentError as e:
            raise GenerationError("meta_title", e.message)

        meta_title = meta_title.strip().strip("「」\"'")
        if len(meta_title) > META_TITLE_MAX_LENGTH:
            meta_title = meta_title[:META_TITLE_MAX_LENGTH - 3] + "..."
        return meta_title or title

    def generate_faqs(self, title: str, content: str, content_limit: int = FAQ_CONTENT_LIMIT) -> list[dict[str, str]]:
        """
        3-5 FAQ entries for an article.

        Raises:
            GenerationError: If the model call fails
        """
        request = prompts.build_faq_request(title, plain_text(content)[:content_limit])

        try:
            raw = self._chat(prompts.FAQ_SYSTEM_PROMPT, request, 0.7, 1500)
        except AgentError as e:
            raise GenerationError("faq", e.message)

        faqs = parse_faqs(raw)
        logger.info(f"Generated {len(faqs)} FAQs for '{title[:30]}'")
        return faqs

    # -------------------------------------------------------------------------
    # Rewriting
    # -------------------------------------------------------------------------

    def rewrite_article(self, title: str, content: str, existing_titles: list[str] | None = None) -> str:
        """
        SEO rewrite of an article as h2/h3 structured HTML.

        Raises:
            GenerationError: If the model call fails
        """
        request = prompts.build_rewrite_request(
            title or "",
            plain_text(content)[:REWRITE_CONTENT_LIMIT],
            (existing_titles or [])[:REWRITE_TITLE_LIMIT],
        )
        try:
            raw = self._chat(prompts.REWRITE_SYSTEM_PROMPT, request, 0.7, 4000)
        except AgentError as e:
            raise GenerationError("rewrite", e.message)
        return clean_generated_html(raw)

    def rewrite_with_style(self, title: str, content: str, style_name: str, style_prompt: str) -> str:
        """
        Rewrite the tone of an article; returns plain text, one block per line.

        Raises:
            GenerationError: If the model call fails
        """
        request = prompts.build_style_rewrite_request(
            title or "", plain_text(content)[:REWRITE_CONTENT_LIMIT], style_name, style_prompt
        )
        try:
            return self._chat(prompts.STYLE_REWRITE_SYSTEM_PROMPT, request, 0.7, 4000)
        except AgentError as e:
            raise GenerationError("style_rewrite", e.message)

    def generate_target_audience(self, category_name: str, description: str | None = None) -> str:
        """
        One-sentence reader persona for a category.

        Raises:
            GenerationError: If the model call fails
        """
        try:
            audience = self._chat(
                prompts.TARGET_AUDIENCE_SYSTEM_PROMPT,
                prompts.build_target_audience_request(category_name, description),
                0.7,
                100,
            )
        except AgentError as e:
            raise GenerationError("target_audience", e.message)
        return audience.strip().strip("「」\"'")

    # -------------------------------------------------------------------------
    # Categories
    # -------------------------------------------------------------------------

    def generate_category_description(self, name: str, existing: str | None = None) -> str:
        """
        Japanese description for a category.

        Raises:
            GenerationError: If the model call fails
        """
        try:
            return self._chat(
                prompts.CATEGORY_DESCRIPTION_SYSTEM_PROMPT,
                prompts.build_category_description_request(name, existing),
                0.7,
                500,
            )
        except AgentError as e:
            raise GenerationError("category_description", e.message)

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    def improve_image_prompt(self, prompt: str) -> str:
        """Rewrite a prompt for the image model; the original is kept on failure."""
        try:
            improved = self._chat(prompts.IMPROVE_IMAGE_PROMPT_SYSTEM_PROMPT, prompt, 0.7, 500)
        except AgentError as e:
            logger.warning(f"Image prompt improvement failed, using original: {e.message}")
            return prompt
        return improved or prompt

    def _request_image(self, prompt: str, size: str) -> tuple[str, str | None]:
        """Call the image model; returns (temporary URL, revised prompt)."""
        if size not in IMAGE_SIZES:
            size = IMAGE_SIZES[0]

        client = self.client or get_openai_client()

        try:
            response = client.images.generate(
                model=settings.OPENAI_IMAGE_MODEL,
                prompt=prompt,
                n=1,
                size=size,
                quality="standard",
            )
        except Exception as e:
            raise GenerationError("image", str(e))

        image = response.data[0] if response.data else None
        if image is None or not image.url:
            raise GenerationError("image", "The image model returned no image")
        return image.url, getattr(image, "revised_prompt", None)

    def generate_image_url(self, prompt: str, size: str = "1024x1024") -> str:
        """
        Generate one image and return the model's temporary URL (not stored).

        Raises:
            GenerationError: If generation fails
        """
        url, _ = self._request_image(prompt, size)
        logger.info(f"Generated sample image ({size})")
        return url

    def generate_image(self, prompt: str, size: str = "1024x1024") -> GeneratedImage:
        """
        Generate one image and download its bytes.

        Raises:
            GenerationError: If generation or download fails
        """
        url, revised_prompt = self._request_image(prompt, size)

        try:
            download = httpx.get(url, timeout=60)
            download.raise_for_status()
        except httpx.HTTPError as e:
            raise GenerationError("image", str(e))

        logger.info(f"Generated image ({size}, {len(download.content)} bytes)")
        return GeneratedImage(data=download.content, prompt=prompt, revised_prompt=revised_prompt)
