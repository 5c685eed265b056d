# =============================================================================
# agents/article_generator.py - Advanced Article Generator
# =============================================================================
# Writes a complete draft article for a category, step by step:
#
#   1. Keyword          (research model, avoids the category's recent keywords)
#   2. Research brief   (persona, needs, goal, related keywords)
#   3. Title
#   4. Outline          (h2/h3)
#   5. Introduction
#   6. Body
#   7. Tags             (keyword + related keywords)
#   8. Featured image   (image prompt pattern)
#   9. Slug, meta title, meta description
#  10. FAQs
#  11. Inline images    (after the first h2 headings)
#  12. Save as draft
#
# Used by the generate-advanced endpoint (through Celery) and by the
# scheduled generation cron.
#
# Usage:
#   from agents.article_generator import ArticleGeneratorAgent
#   result = ArticleGeneratorAgent().generate(
#       media_id, category_id, writer_id, image_prompt_pattern_id
#   )
#   print(result.article_id, result.title)
# =============================================================================

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable
from zoneinfo import ZoneInfo

from openai import OpenAI

from agents.content_writer import ContentWriterAgent
from agents.llm import AgentError, chat, get_research_client
from agents.prompts import generation as prompts
from agents.translator import TranslatorAgent
from app.config import settings
from app.exceptions import GenerationError, ResourceNotFoundError
from core.services.storage_service import StorageService
from lib.html_utils import clean_generated_html, plain_text
from lib.i18n import other_langs
from lib.images import optimize_image
from lib.similarity import clean_slug, unique_slug
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

TOTAL_STEPS = 12
MAX_KEYWORD_ATTEMPTS = 3
RECENT_KEYWORD_COUNT = 5
MAX_RELATED_KEYWORDS = 4
MAX_INLINE_IMAGES = 4
META_TITLE_LIMIT = 60
META_DESCRIPTION_LIMIT = 160
SLUG_BASE_LIMIT = 60
FAQ_CONTENT_LIMIT = 3000
SUMMARY_CONTENT_LIMIT = 1000

GENERATED_IMAGE_MAX_WIDTH = 1200
GENERATED_IMAGE_QUALITY = 85

_KEYWORD_RE = re.compile(r"キーワード[：:]\s*(.+)", re.IGNORECASE)
_TITLE_RE = re.compile(r"タイトル[：:]\s*(.+)", re.IGNORECASE)
_BRIEF_PATTERNS = {
    "target_audience": re.compile(r"検索ユーザーのペルソナ[（(]人物像[)）][：:]\s*(.+)"),
    "explicit_needs": re.compile(r"検索意図[（(]顕在ニーズ[)）][：:]\s*(.+)"),
    "latent_needs": re.compile(r"検索意図[（(]潜在ニーズ[)）][：:]\s*(.+)"),
    "article_goal": re.compile(r"記事のゴール[：:]\s*(.+)"),
    "content_requirements": re.compile(r"記事に記載すべき内容[：:]\s*(.+)"),
    "related_keywords": re.compile(r"関連キーワード[：:]\s*(.+)"),
}
_RELATED_SPLIT_RE = re.compile(r"[,、]")
_H2_RE = re.compile(r"<h2[^>]*>.*?</h2>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")

ProgressCallback = Callable[[int, int, str], None]


# =============================================================================
# Results
# =============================================================================

@dataclass
class ResearchBrief:
    """Parsed output of the research step."""
    target_audience: str = ""
    explicit_needs: str = ""
    latent_needs: str = ""
    article_goal: str = ""
    content_requirements: str = ""
    related_keywords: list[str] = field(default_factory=list)

    def as_prompt_context(self) -> dict[str, str]:
        return {
            "explicit_needs": self.explicit_needs,
            "latent_needs": self.latent_needs,
            "goal": self.article_goal,
            "content_requirements": self.content_requirements,
        }


@dataclass
class GenerationResult:
    """Outcome of one generation."""
    article_id: str
    title: str
    slug: str
    keyword: str
    tag_ids: list[str]
    inline_images: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": True,
            "article_id": self.article_id,
            "title": self.title,
            "slug": self.slug,
            "keyword": self.keyword,
            "tag_ids": self.tag_ids,
            "inline_images": self.inline_images,
            "message": "Article saved as draft",
        }


# =============================================================================
# Parsing helpers
# =============================================================================

def parse_keyword(text: str) -> str:
    match = _KEYWORD_RE.search(text or "")
    return match.group(1).strip() if match else ""


def parse_title(text: str) -> str:
    match = _TITLE_RE.search(text or "")
    return match.group(1).strip() if match else ""


def parse_research_brief(text: str) -> ResearchBrief:
    """
    Extract the brief fields from "label: value" lines.

    Missing labels become empty strings; related keywords are split on
    commas (ASCII or Japanese) and capped at four.
    """
    values = {}
    for name, pattern in _BRIEF_PATTERNS.items():
        match = pattern.search(text or "")
        values[name] = match.group(1).strip() if match else ""

    related = [kw.strip() for kw in _RELATED_SPLIT_RE.split(values.pop("related_keywords"))]
    related = [kw for kw in related if kw][:MAX_RELATED_KEYWORDS]

    return ResearchBrief(related_keywords=related, **values)


def base_slug_from_title(title: str) -> str:
    """ASCII slug from a title, cut to SLUG_BASE_LIMIT characters."""
    return clean_slug(title)[:SLUG_BASE_LIMIT].strip("-")


def build_meta_title(title: str) -> str:
    if len(title) > META_TITLE_LIMIT:
        return title[:META_TITLE_LIMIT - 3] + "..."
    return title


def insert_inline_images(content: str, images: dict[int, str], title: str) -> str:
    """
    Insert figures right after h2 headings.

    Args:
        content: Article HTML
        images: h2 position (0-based) -> image URL
        title: Article title, used in the alt text

    Headings are processed from last to first so earlier insert offsets
    stay valid.
    """
    headings = list(_H2_RE.finditer(content))
    for position in sorted(images, reverse=True):
        if position >= len(headings):
            continue
        match = headings[position]
        heading_text = _TAG_RE.sub("", match.group(0)).strip()
        figure = (
            f'<figure class="inline-image">'
            f'<img src="{images[position]}" alt="{title} - {heading_text}" />'
            f"</figure>"
        )
        content = content[:match.end()] + figure + content[match.end():]
    return content


def current_date_info(tz_name: str | None = None) -> str:
    """Current year and month in Japanese, e.g. "2026年10月"."""
    now = datetime.now(ZoneInfo(tz_name or settings.SCHEDULE_DEFAULT_TIMEZONE))
    return f"{now.year}年{now.month}月"


# =============================================================================
# Agent
# =============================================================================

class ArticleGeneratorAgent:
    """
    Generates a draft article from a category, writer and image pattern.

    The research model (keyword, brief) and the writing model (everything
    else) can differ; see agents.llm.get_research_client.
    """

    KEYWORD_TEMPERATURE = 0.8
    RESEARCH_TEMPERATURE = 0.7
    WRITING_TEMPERATURE = 0.7

    def __init__(
        self,
        writer: ContentWriterAgent | None = None,
        translator: TranslatorAgent | None = None,
        research_client: OpenAI | None = None,
        research_model: str | None = None,
    ):
        self.writer = writer or ContentWriterAgent()
        self.translator = translator or TranslatorAgent()
        self.research_client = research_client
        self.research_model = research_model

    # -------------------------------------------------------------------------
    # LLM calls
    # -------------------------------------------------------------------------

    def _research(self, system: str, user: str, temperature: float, max_tokens: int) -> str:
        client, model = self.research_client, self.research_model
        if client is None:
            client, model = get_research_client()
        return chat(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            temperature=temperature,
            max_tokens=max_tokens,
            model=model,
            client=client,
        )

    def _write(self, system: str, user: str, max_tokens: int) -> str:
        return chat(
            [{"role": "system", "content": system}, {"role": "user", "content": user}],
            temperature=self.WRITING_TEMPERATURE,
            max_tokens=max_tokens,
        )

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    def select_keyword(self, media_id: str, category: dict[str, Any], date_info: str) -> str:
        """
        Step 1: pick a trending keyword not used by recent category articles.

        Raises:
            GenerationError: If no new keyword is found after 3 attempts
        """
        recent = SupabaseClient.fetch_many(
            "articles",
            filters={"media_id": media_id},
            contains={"category_ids": [category["id"]]},
            order_by="created_at",
            desc=True,
            limit=RECENT_KEYWORD_COUNT,
            columns="id,selected_keyword",
        )
        recent_keywords = [row["selected_keyword"] for row in recent if row.get("selected_keyword")]

        prompt = prompts.build_keyword_prompt(category.get("name", ""), date_info, recent_keywords)
        system = prompts.writer_system_prompt(
            date_info, "Select keywords based on the latest trends."
        )

        for attempt in range(1, MAX_KEYWORD_ATTEMPTS + 1):
            logger.info(f"Keyword selection attempt {attempt}/{MAX_KEYWORD_ATTEMPTS}")
            candidate = parse_keyword(self._research(system, prompt, self.KEYWORD_TEMPERATURE, 200))
            if candidate and candidate not in recent_keywords:
                return candidate

        raise GenerationError("keyword", "Failed to select a unique keyword")

    def research(self, keyword: str, date_info: str) -> ResearchBrief:
        """Step 2: research brief for the keyword."""
        system = prompts.writer_system_prompt(
            date_info, "Research the latest information and focus on current trends."
        )
        text = self._research(
            system,
            prompts.build_research_prompt(keyword, date_info),
            self.RESEARCH_TEMPERATURE,
            2000,
        )
        return parse_research_brief(text)

    def write_title(self, keyword: str, target_audience: str, date_info: str) -> str:
        """Step 3: title including the keyword (the keyword itself on parse failure)."""
        system = prompts.writer_system_prompt(date_info, "Write an attractive title.")
        text = self._write(system, prompts.build_title_prompt(keyword, target_audience), 200)
        return parse_title(text) or keyword

    def write_outline(self, brief: ResearchBrief, title: str, keyword: str, date_info: str) -> str:
        """Step 4: h2/h3 outline."""
        system = prompts.writer_system_prompt(date_info, "Create an outline based on current trends.")
        prompt = prompts.build_outline_prompt(
            brief.as_prompt_context(), title, keyword, brief.related_keywords
        )
        return self._write(system, prompt, 1000)

    def write_intro(self, brief: ResearchBrief, title: str, keyword: str, date_info: str) -> str:
        """Step 5: introduction paragraph."""
        system = prompts.writer_system_prompt(date_info, "Write an engaging introduction.")
        return self._write(system, prompts.build_intro_prompt(brief.as_prompt_context(), title, keyword), 500)

    def write_body(
        self,
        keyword: str,
        outline: str,
        date_info: str,
        pattern_prompt: str | None = None,
    ) -> str:
        """Step 6: article body, cleaned."""
        system = prompts.writer_system_prompt(
            date_info, "Write the body using the latest information, cases and techniques."
        )
        text = self._write(system, prompts.build_body_prompt(keyword, outline, pattern_prompt), 10000)
        return clean_generated_html(text)

    def assign_tags(self, media_id: str, names: list[str]) -> list[str]:
        """
        Step 7: reuse tags by case-insensitive name, create the missing ones.

        Returns:
            Tag IDs in the order of names (deduplicated)
        """
        tags = SupabaseClient.fetch_many("tags", filters={"media_id": media_id}, columns="id,name,slug")
        existing = {(tag.get("name") or "").lower(): tag["id"] for tag in tags}
        used_slugs = {tag.get("slug") for tag in tags}

        tag_ids: list[str] = []
        for name in names:
            key = name.lower()
            if key not in existing:
                slug = unique_slug(self.writer.generate_tag_slug(name), lambda s: s in used_slugs)
                used_slugs.add(slug)

                record = {"name": name, "name_ja": name, "slug": slug, "media_id": media_id}
                for lang in other_langs():
                    try:
                        record[f"name_{lang}"] = self.translator.translate_text(name, lang, "tag name") or name
                    except Exception as e:
                        logger.warning(f"Tag name translation to {lang} failed: {e}")
                        record[f"name_{lang}"] = name

                created = SupabaseClient.insert("tags", record)
                existing[key] = created["id"]
                logger.info(f"Created tag '{name}' ({slug})")

            if existing[key] not in tag_ids:
                tag_ids.append(existing[key])

        return tag_ids

    def _store_generated_image(
        self,
        media_id: str,
        prompt: str,
        size: str,
        folder: str,
        original_name: str,
        usage_context: str,
    ) -> str:
        """Improve the prompt, generate, optimize, upload and record an image."""
        improved = self.writer.improve_image_prompt(prompt)
        generated = self.writer.generate_image(improved, size)
        image = optimize_image(
            generated.data,
            max_width=GENERATED_IMAGE_MAX_WIDTH,
            quality=GENERATED_IMAGE_QUALITY,
        )

        timestamp = int(datetime.now(timezone.utc).timestamp() * 1000)
        path = f"{folder}/{timestamp}-{uuid.uuid4()}.webp"
        url = StorageService.upload_bytes(path, image.data, image.content_type)

        SupabaseClient.insert("media_files", {
            "name": path,
            "original_name": original_name,
            "url": url,
            "thumbnail_url": url,
            "type": "image",
            "mime_type": image.content_type,
            "size": len(image.data),
            "width": image.width,
            "height": image.height,
            "alt": original_name.rsplit(".", 1)[0],
            "is_ai_generated": True,
            "ai_prompt": prompt,
            "ai_revised_prompt": generated.revised_prompt,
            "usage_context": usage_context,
            "media_id": media_id,
        })
        return url

    def generate_featured_image(self, media_id: str, pattern: dict[str, Any], title: str) -> str:
        """Step 8: featured image from the image prompt pattern."""
        prompt = f'{pattern["prompt"]}\nThis is a featured image for an article titled "{title}".'
        return self._store_generated_image(
            media_id,
            prompt,
            pattern.get("size") or "1792x1024",
            folder="featured-images",
            original_name=f"featured-{title}.webp",
            usage_context="featured-image",
        )

    def make_slug(self, media_id: str, title: str) -> str:
        """
        Step 9a: unique article slug.

        Titles without ASCII words get an LLM slug as the base.
        """
        base = base_slug_from_title(title) or self.writer.generate_slug(title)

        def exists(slug: str) -> bool:
            return bool(SupabaseClient.fetch_many(
                "articles",
                filters={"media_id": media_id, "slug": slug},
                limit=1,
                columns="id",
            ))

        return unique_slug(base, exists, start=1)

    def add_inline_images(
        self,
        media_id: str,
        content: str,
        pattern: dict[str, Any],
        title: str,
    ) -> tuple[str, int]:
        """
        Step 11: one image after each of the first four h2 headings.

        Failed images are skipped.

        Returns:
            (content with figures, number of images inserted)
        """
        headings = [_TAG_RE.sub("", m.group(0)).strip() for m in _H2_RE.finditer(content)]
        images: dict[int, str] = {}

        for position in reversed(range(min(MAX_INLINE_IMAGES, len(headings)))):
            heading = headings[position]
            prompt = (
                f'{pattern["prompt"]}\nSection heading: "{heading}"\n'
                "The image should visually represent the main concept of this section."
            )
            try:
                images[position] = self._store_generated_image(
                    media_id,
                    prompt,
                    pattern.get("size") or "1792x1024",
                    folder="inline-images",
                    original_name=f"inline-{title}-{position}.webp",
                    usage_context="inline-image",
                )
            except Exception as e:
                logger.error(f"Inline image for h2 #{position + 1} failed, skipping: {e}")

        return insert_inline_images(content, images, title), len(images)

    # -------------------------------------------------------------------------
    # Orchestration
    # -------------------------------------------------------------------------

    def generate(
        self,
        media_id: str,
        category_id: str,
        writer_id: str,
        image_prompt_pattern_id: str,
        pattern_id: str | None = None,
        target_audience: str | None = None,
        progress: ProgressCallback | None = None,
    ) -> GenerationResult:
        """
        Run every step and save the article as an unpublished draft.

        Args:
            media_id: Tenant
            category_id: Category of the article
            writer_id: Writer shown as the author
            image_prompt_pattern_id: Pattern used for featured and inline images
            pattern_id: Optional article pattern whose prompt shapes the body
            target_audience: Overrides the persona from the research brief
            progress: Called with (step, total, message) before each step

        Raises:
            ResourceNotFoundError: If a referenced record is missing
            GenerationError: If a required step fails
        """
        def report(step: int, message: str) -> None:
            logger.info(f"[Step {step}/{TOTAL_STEPS}] {message}")
            if progress:
                progress(step, TOTAL_STEPS, message)

        category = self._load("categories", "category", category_id, media_id)
        self._load("writers", "writer", writer_id, media_id)
        image_pattern = self._load("image_prompt_patterns", "pattern", image_prompt_pattern_id, media_id)
        article_pattern = (
            self._load("article_patterns", "pattern", pattern_id, media_id) if pattern_id else None
        )

        date_info = current_date_info()

        try:
            report(1, "Selecting keyword")
            keyword = self.select_keyword(media_id, category, date_info)

            report(2, f"Researching '{keyword}'")
            brief = self.research(keyword, date_info)
            audience = target_audience or brief.target_audience

            report(3, "Writing title")
            title = self.write_title(keyword, audience, date_info)

            report(4, "Writing outline")
            outline = self.write_outline(brief, title, keyword, date_info)

            report(5, "Writing introduction")
            intro = self.write_intro(brief, title, keyword, date_info)

            report(6, "Writing body")
            body = self.write_body(
                keyword, outline, date_info,
                pattern_prompt=article_pattern.get("prompt") if article_pattern else None,
            )
            content = f"{intro}\n{body}"
        except AgentError as e:
            raise GenerationError("writing", e.message)

        report(7, "Assigning tags")
        tag_ids = self.assign_tags(media_id, [keyword, *brief.related_keywords])

        report(8, "Generating featured image")
        featured_image = self.generate_featured_image(media_id, image_pattern, title)

        report(9, "Building slug and meta fields")
        slug = self.make_slug(media_id, title)
        plain = plain_text(content)
        meta_title = build_meta_title(title)
        meta_description = plain[:META_DESCRIPTION_LIMIT]

        report(10, "Generating FAQs")
        faqs = self.writer.generate_faqs(title, plain, content_limit=FAQ_CONTENT_LIMIT)

        report(11, "Generating inline images")
        content, inline_count = self.add_inline_images(media_id, content, image_pattern, title)

        report(12, "Saving draft")
        now = datetime.now(timezone.utc).isoformat()
        record = {
            "title": title,
            "title_ja": title,
            "content": content,
            "content_ja": content,
            "excerpt": meta_description,
            "excerpt_ja": meta_description,
            "meta_title": meta_title,
            "meta_title_ja": meta_title,
            "meta_description": meta_description,
            "meta_description_ja": meta_description,
            "slug": slug,
            "category_ids": [category_id],
            "tag_ids": tag_ids,
            "writer_id": writer_id,
            "featured_image": featured_image,
            "featured_image_alt": title,
            "faqs_ja": faqs,
            "is_published": False,
            "is_featured": False,
            "media_id": media_id,
            "published_at": now,
            "updated_at": now,
            "created_at": now,
            "view_count": 0,
            "like_count": 0,
            "selected_keyword": keyword,
            "related_keywords": brief.related_keywords,
            "explicit_needs": brief.explicit_needs,
            "latent_needs": brief.latent_needs,
            "article_goal": brief.article_goal,
            "content_requirements": brief.content_requirements,
            "target_audience": audience,
        }

        try:
            summary = self.translator.generate_ai_summary(plain[:SUMMARY_CONTENT_LIMIT], "ja")
            record["ai_summary"] = summary
            record["ai_summary_ja"] = summary
        except Exception as e:
            logger.error(f"AI summary failed, saving without it: {e}")

        article = SupabaseClient.insert("articles", record)
        logger.info(f"Generated draft article {article['id']}: {title}")

        return GenerationResult(
            article_id=article["id"],
            title=title,
            slug=slug,
            keyword=keyword,
            tag_ids=tag_ids,
            inline_images=inline_count,
        )

    @staticmethod
    def _load(table: str, resource: str, record_id: str, media_id: str) -> dict[str, Any]:
        record = SupabaseClient.fetch_by_id(table, record_id)
        if not record or record.get("media_id") != media_id:
            raise ResourceNotFoundError(resource, record_id)
        return record
