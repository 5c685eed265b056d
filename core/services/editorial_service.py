# =============================================================================
# core/services/editorial_service.py - Editor AI Helpers
# =============================================================================
# AI helpers that work on a draft in the article editor:
#
# - SEO rewrite, with the draft title compared to the published titles
# - Style rewrite, using an article pattern as the writing style
# - Target audience suggestion for a category, and the tenant's history
#   of target audiences (newest first, at most 20)
# - Images placed after h2 headings, and unsaved sample images
#
# Nothing here writes to the article itself; the editor decides what to keep.
# =============================================================================

import logging
from typing import Any

from agents.content_writer import ContentWriterAgent
from app.exceptions import ValidationFailedError
from core.services.media_service import MediaService
from core.services.pattern_service import ARTICLE_PATTERNS, IMAGE_PROMPT_PATTERNS, PatternService
from core.services.records import get_tenant_record, now_iso
from lib.html_utils import extract_h2_headings
from lib.similarity import DUPLICATE_THRESHOLD, text_similarity
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TARGET_AUDIENCE_HISTORY_TABLE = "target_audience_history"
TARGET_AUDIENCE_HISTORY_LIMIT = 20
MAX_INLINE_IMAGES = 3

# A line is a heading when it is short and has no Japanese punctuation
STYLE_HEADING_MAX_LENGTH = 50
_SENTENCE_PUNCTUATION = ("。", "、")

# Fractions of the heading list where 1, 2 or 3 images go
_SPREADS = {
    1: ((1, 2),),
    2: ((1, 3), (2, 3)),
    3: ((1, 4), (1, 2), (3, 4)),
}


# =============================================================================
# Pure helpers
# =============================================================================

def title_duplicate_check(title: str, existing_titles: list[str]) -> dict[str, Any]:
    """
    Compare a title with existing titles.

    Returns:
        {is_duplicate, similarity_score, similar_titles} where a title is
        similar when its score is above 0.7
    """
    if not title or not existing_titles:
        return {"is_duplicate": False, "similarity_score": 0.0, "similar_titles": []}

    scores = [(existing, text_similarity(title, existing)) for existing in existing_titles]
    best = max(score for _, score in scores)
    return {
        "is_duplicate": best > DUPLICATE_THRESHOLD,
        "similarity_score": round(best, 3),
        "similar_titles": [t for t, score in scores if score > DUPLICATE_THRESHOLD],
    }


def style_lines_to_html(text: str) -> str:
    """
    Turn plain text (one block per line) into h2 and p elements.

    Short lines without 。 or 、 become headings, everything else a paragraph.
    """
    blocks = []
    for line in (text or "").splitlines():
        line = line.strip()
        if not line:
            continue
        is_heading = len(line) < STYLE_HEADING_MAX_LENGTH and not any(p in line for p in _SENTENCE_PUNCTUATION)
        tag = "h2" if is_heading else "p"
        blocks.append(f"<{tag}>{line}</{tag}>")
    return "\n".join(blocks)


def plan_inline_positions(heading_count: int, requested: int) -> list[int]:
    """
    h2 indexes that get an image, spread over the article.

    At most 3 images and at most one per two headings (but at least one):
    1 image at 1/2, 2 at 1/3 and 2/3, 3 at 1/4, 1/2 and 3/4.

    Example:
        plan_inline_positions(6, 2)  # [2, 4]
    """
    if heading_count <= 0 or requested <= 0:
        return []

    count = min(requested, MAX_INLINE_IMAGES, max(1, heading_count // 2))
    return [heading_count * numerator // denominator for numerator, denominator in _SPREADS[count]]


def normalize_audiences(values: list[str]) -> list[str]:
    """Unique, non-empty, in order, capped to the history size."""
    seen: list[str] = []
    for value in values:
        value = (value or "").strip()
        if value and value not in seen:
            seen.append(value)
    return seen[:TARGET_AUDIENCE_HISTORY_LIMIT]


class EditorialService:
    """
    Service for the editor AI helpers.
    """

    # -------------------------------------------------------------------------
    # Rewriting
    # -------------------------------------------------------------------------

    @staticmethod
    def published_titles(media_id: str, exclude_id: str | None = None) -> list[str]:
        articles = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id, "is_published": True},
            columns="id,title",
        )
        return [a["title"] for a in articles if a["id"] != exclude_id and a.get("title")]

    @staticmethod
    def rewrite(
        media_id: str,
        title: str,
        content: str,
        article_id: str | None = None,
        writer: ContentWriterAgent | None = None,
    ) -> dict[str, Any]:
        """
        SEO rewrite of a draft that steers away from the published titles.

        Returns:
            {content, duplicate_check}

        Raises:
            ValidationFailedError: If content is empty
            GenerationError: If the model call fails
        """
        if not content.strip():
            raise ValidationFailedError("Content is required")

        existing_titles = EditorialService.published_titles(media_id, article_id)
        rewritten = (writer or ContentWriterAgent()).rewrite_article(title, content, existing_titles)
        check = title_duplicate_check(title, existing_titles)

        logger.info(
            f"Rewrote draft '{title[:30]}' ({len(rewritten)} chars, "
            f"title similarity {check['similarity_score']})"
        )
        return {"content": rewritten, "duplicate_check": check}

    @staticmethod
    def rewrite_with_style(
        media_id: str,
        title: str,
        content: str,
        style_id: str,
        writer: ContentWriterAgent | None = None,
    ) -> dict[str, Any]:
        """
        Rewrite the tone of a draft with an article pattern as style.

        Returns:
            {content, style_name}

        Raises:
            ResourceNotFoundError: If the pattern is not the tenant's
            GenerationError: If the model call fails
        """
        style = PatternService.get_pattern(ARTICLE_PATTERNS, media_id, style_id)
        text = (writer or ContentWriterAgent()).rewrite_with_style(
            title, content, style.get("name") or "", style.get("prompt") or ""
        )
        return {"content": style_lines_to_html(text), "style_name": style.get("name") or ""}

    # -------------------------------------------------------------------------
    # Target audience
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_target_audience(
        media_id: str,
        category_id: str,
        writer: ContentWriterAgent | None = None,
    ) -> str:
        category = get_tenant_record("categories", "category", category_id, media_id)
        audience = (writer or ContentWriterAgent()).generate_target_audience(
            category.get("name") or "", category.get("description")
        )
        logger.info(f"Target audience for category {category_id}: {audience}")
        return audience

    @staticmethod
    def _history_rows(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many(
            TARGET_AUDIENCE_HISTORY_TABLE,
            filters={"media_id": media_id},
            order_by="created_at",
            desc=True,
        )

    @staticmethod
    def list_target_audiences(media_id: str) -> list[str]:
        """Remembered target audiences, newest first."""
        rows = EditorialService._history_rows(media_id)
        return normalize_audiences([row.get("target_audience") or "" for row in rows])

    @staticmethod
    def add_target_audience(media_id: str, target_audience: str) -> list[str]:
        """
        Remember a target audience.

        Known entries are left where they are. Entries beyond the 20 newest
        are deleted.
        """
        value = target_audience.strip()
        if not value:
            raise ValidationFailedError("Target audience is required")

        rows = EditorialService._history_rows(media_id)
        if any((row.get("target_audience") or "").strip() == value for row in rows):
            return normalize_audiences([row.get("target_audience") or "" for row in rows])

        row = SupabaseClient.insert(TARGET_AUDIENCE_HISTORY_TABLE, {
            "media_id": media_id,
            "target_audience": value,
            "created_at": now_iso(),
        })
        rows = [row] + rows
        for stale in rows[TARGET_AUDIENCE_HISTORY_LIMIT:]:
            SupabaseClient.delete(TARGET_AUDIENCE_HISTORY_TABLE, stale["id"])

        return normalize_audiences([r.get("target_audience") or "" for r in rows])

    @staticmethod
    def remove_target_audience(media_id: str, target_audience: str) -> list[str]:
        """Forget a target audience; returns the remaining history."""
        value = target_audience.strip()
        remaining = []
        for row in EditorialService._history_rows(media_id):
            if (row.get("target_audience") or "").strip() == value:
                SupabaseClient.delete(TARGET_AUDIENCE_HISTORY_TABLE, row["id"])
            else:
                remaining.append(row.get("target_audience") or "")
        return normalize_audiences(remaining)

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_inline_images(
        media_id: str,
        title: str,
        content: str,
        image_prompt_pattern_id: str,
        image_count: int = 2,
        writer: ContentWriterAgent | None = None,
    ) -> dict[str, Any]:
        """
        Generate images for some h2 sections and insert them after the headings.

        Each image goes to the media library. A failed image is skipped.

        Returns:
            {content, images: [{url, position}], image_count}

        Raises:
            ValidationFailedError: If the content has no h2 heading
        """
        # Imported here: the generator module imports this package
        from agents.article_generator import insert_inline_images

        headings = extract_h2_headings(content)
        if not headings:
            raise ValidationFailedError(
                "The content has no h2 heading",
                suggestion="Add <h2> section headings before generating images",
            )

        pattern = PatternService.get_pattern(IMAGE_PROMPT_PATTERNS, media_id, image_prompt_pattern_id)
        writer = writer or ContentWriterAgent()

        images: dict[int, str] = {}
        for position in plan_inline_positions(len(headings), image_count):
            prompt = (
                f'{pattern["prompt"]}\nSection heading: "{headings[position]}"\n'
                "The image should visually represent the main concept of this section."
            )
            try:
                record = MediaService.generate_image(
                    media_id,
                    prompt,
                    size=pattern.get("size") or "1792x1024",
                    alt=f"{title} - {headings[position]}"[:100],
                    writer=writer,
                )
            except Exception as e:
                logger.error(f"Inline image for h2 #{position + 1} failed, skipping: {e}")
                continue
            images[position] = record["url"]

        logger.info(f"Generated {len(images)} inline images for '{title[:30]}'")
        return {
            "content": insert_inline_images(content, images, title),
            "images": [{"url": url, "position": position} for position, url in sorted(images.items())],
            "image_count": len(images),
        }

    @staticmethod
    def generate_sample_image(prompt: str, size: str = "1024x1024", writer: ContentWriterAgent | None = None) -> str:
        """Temporary URL of an image for a prompt; nothing is stored."""
        if not prompt.strip():
            raise ValidationFailedError("Prompt is required")
        return (writer or ContentWriterAgent()).generate_image_url(prompt, size)
