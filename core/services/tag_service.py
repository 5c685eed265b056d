# =============================================================================
# core/services/tag_service.py - Tag Business Logic
# =============================================================================
# Tag CRUD plus AI tag assignment:
#
#   generate_tags(title, content)
#     -> LLM suggests up to 5 names
#     -> each name reuses the most similar existing tag (similarity > 0.7)
#        or a tag with the same generated slug
#     -> otherwise a new tag is created with translated names
# =============================================================================

import logging
from typing import Any

from agents.content_writer import ContentWriterAgent
from agents.translator import TranslatorAgent
from app.exceptions import DuplicateSlugError, ValidationFailedError
from core.models.taxonomy import TagCreate, TagUpdate
from core.services.records import get_tenant_record, now_iso, pull_from_articles, slug_taken, translate_fields
from lib.similarity import TAG_MATCH_THRESHOLD, find_most_similar, unique_slug
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class TagService:
    """
    Service for tag management and AI tag assignment.
    """

    @staticmethod
    def list_tags(media_id: str) -> list[dict[str, Any]]:
        return SupabaseClient.fetch_many("tags", filters={"media_id": media_id}, order_by="name")

    @staticmethod
    def get_tag(media_id: str, tag_id: str) -> dict[str, Any]:
        return get_tenant_record("tags", "tag", tag_id, media_id)

    @staticmethod
    def create_tag(
        media_id: str,
        payload: TagCreate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """
        Create a tag with its name in every language.

        Raises:
            DuplicateSlugError: If the slug is used in the tenant
        """
        if slug_taken("tags", media_id, payload.slug):
            raise DuplicateSlugError("tag", payload.slug)

        now = now_iso()
        data = {**payload.model_dump(), "media_id": media_id, "created_at": now, "updated_at": now}
        translate_fields(data, ["name"], translator, context="tag name")

        tag = SupabaseClient.insert("tags", data)
        logger.info(f"Created tag {tag['id']} ({payload.slug})")
        return tag

    @staticmethod
    def update_tag(
        media_id: str,
        tag_id: str,
        payload: TagUpdate,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """Update a tag; names are re-translated when the name changes."""
        current = TagService.get_tag(media_id, tag_id)
        data = payload.model_dump(exclude_unset=True)

        if "slug" in data and slug_taken("tags", media_id, data["slug"], exclude_id=tag_id):
            raise DuplicateSlugError("tag", data["slug"])
        if "name" in data and data["name"] != current.get("name"):
            translate_fields(data, ["name"], translator, context="tag name")

        data["updated_at"] = now_iso()
        return SupabaseClient.update("tags", tag_id, data)

    @staticmethod
    def delete_tag(media_id: str, tag_id: str) -> None:
        TagService.get_tag(media_id, tag_id)
        SupabaseClient.delete("tags", tag_id)
        pull_from_articles(media_id, "tag_ids", tag_id)
        logger.info(f"Deleted tag {tag_id}")

    # -------------------------------------------------------------------------
    # AI tag assignment
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_tags(
        media_id: str,
        title: str,
        content: str,
        category_ids: list[str] | None = None,
        writer: ContentWriterAgent | None = None,
        translator: TranslatorAgent | None = None,
    ) -> dict[str, Any]:
        """
        Suggest tags for an article and resolve them to tag records.

        Args:
            media_id: Tenant
            title: Article title
            content: Article HTML
            category_ids: Categories of the article (their names are not used as tags)

        Returns:
            {"tags": [{id, name, slug, is_new, similarity?}],
             "summary": {total, existing, new}}

        Raises:
            ValidationFailedError: If title and content are both empty
            GenerationError: If the LLM call fails
        """
        if not title and not content:
            raise ValidationFailedError("Title or content is required to generate tags")

        writer = writer or ContentWriterAgent()
        existing_tags = TagService.list_tags(media_id)
        categories = SupabaseClient.fetch_by_ids("categories", category_ids or [], columns="id,name")

        names = writer.generate_tag_names(
            title,
            content,
            category_names=[c["name"] for c in categories if c.get("name")],
            existing_tag_names=[t["name"] for t in existing_tags if t.get("name")],
        )

        results: list[dict[str, Any]] = []
        seen_ids: set[str] = set()

        for name in names:
            match, score = find_most_similar(name, existing_tags)
            if match and score > TAG_MATCH_THRESHOLD:
                tag, is_new, similarity = match, False, round(score, 3)
            else:
                slug = writer.generate_tag_slug(name)
                same_slug = next((t for t in existing_tags if t.get("slug") == slug), None)
                if same_slug:
                    tag, is_new, similarity = same_slug, False, None
                else:
                    slug = unique_slug(slug, lambda s: any(t.get("slug") == s for t in existing_tags))
                    tag = TagService.create_tag(media_id, TagCreate(name=name, slug=slug), translator)
                    existing_tags.append(tag)
                    is_new, similarity = True, None

            if tag["id"] in seen_ids:
                continue
            seen_ids.add(tag["id"])
            results.append({
                "id": tag["id"],
                "name": tag["name"],
                "slug": tag["slug"],
                "is_new": is_new,
                "similarity": similarity,
            })

        new_count = sum(1 for r in results if r["is_new"])
        logger.info(f"Generated {len(results)} tags ({new_count} new) for tenant {media_id}")
        return {
            "tags": results,
            "summary": {"total": len(results), "existing": len(results) - new_count, "new": new_count},
        }
