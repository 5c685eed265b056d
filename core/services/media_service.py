# =============================================================================
# core/services/media_service.py - Media Library Business Logic
# =============================================================================
# Handles the media library of a tenant:
# - upload: images are optimized to WebP with a thumbnail, videos stored as-is
# - list with usage: where each file is referenced (articles, categories,
#   writers, theme, tenant logos)
# - alt text updates, deletion (storage objects + record)
# - AI image generation into the library
# =============================================================================

import logging
import re
import time
from typing import Any

from PIL import UnidentifiedImageError

from agents.content_writer import ContentWriterAgent
from app.config import settings
from app.exceptions import FileTooLargeError, InvalidMediaTypeError, ValidationFailedError
from core.services.records import get_tenant_record, now_iso
from core.services.storage_service import StorageService
from lib.images import make_thumbnail, optimize_image
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

UPLOAD_MAX_WIDTH = 2000
UPLOAD_QUALITY = 80
THUMBNAIL_SIZE = (300, 300)
THUMBNAIL_QUALITY = 70
GENERATED_MAX_WIDTH = 1200
GENERATED_QUALITY = 85

_UNSAFE_FILENAME_RE = re.compile(r"[^a-zA-Z0-9.-]")
_EXTENSION_RE = re.compile(r"\.[^.]+$")


def sanitize_filename(filename: str) -> str:
    """Replace anything but ASCII letters, digits, dots and dashes with "_"."""
    return _UNSAFE_FILENAME_RE.sub("_", filename or "file")


def strip_extension(filename: str) -> str:
    return _EXTENSION_RE.sub("", filename or "")


# =============================================================================
# Usage
# =============================================================================

def theme_image_urls(theme: dict[str, Any] | None) -> list[tuple[str, str]]:
    """(field, url) pairs of every image referenced by a theme."""
    theme = theme or {}
    urls = []
    for i, block in enumerate(theme.get("footer_blocks") or []):
        urls.append((f"footer_blocks[{i}]", block.get("image_url")))
    for i, content in enumerate(theme.get("footer_contents") or []):
        urls.append((f"footer_contents[{i}]", content.get("image_url")))
    urls.append(("first_view", (theme.get("first_view") or {}).get("image_url")))
    return [(field, url) for field, url in urls if url]


def tenant_image_urls(tenant: dict[str, Any]) -> list[tuple[str, str]]:
    """(field, url) pairs of the tenant logos, favicon and OG image."""
    site = tenant.get("settings") or {}
    logos = site.get("logos") or {}
    urls = [(f"logos.{kind}", logos.get(kind)) for kind in ("landscape", "square", "portrait")]
    urls.append(("favicon_url", site.get("favicon_url")))
    urls.append(("og_image_url", site.get("og_image_url")))
    return [(field, url) for field, url in urls if url]


def build_usage_index(tenant: dict[str, Any]) -> dict[str, list[dict[str, Any]]]:
    """
    Map every referenced URL of a tenant to where it is used.

    Returns:
        url -> [{type, id, title, field}]
    """
    media_id = tenant["id"]
    index: dict[str, list[dict[str, Any]]] = {}

    def add(url: str | None, usage: dict[str, Any]) -> None:
        if url:
            index.setdefault(url, []).append(usage)

    for article in SupabaseClient.fetch_many(
        "articles", filters={"media_id": media_id}, columns="id,title,featured_image"
    ):
        add(article.get("featured_image"), {
            "type": "article", "id": article["id"], "title": article.get("title") or "", "field": "featured_image",
        })

    for category in SupabaseClient.fetch_many(
        "categories", filters={"media_id": media_id}, columns="id,name,image_url"
    ):
        add(category.get("image_url"), {
            "type": "category", "id": category["id"], "title": category.get("name") or "", "field": "image_url",
        })

    for writer in SupabaseClient.fetch_many(
        "writers", filters={"media_id": media_id}, columns="id,handle_name,icon"
    ):
        add(writer.get("icon"), {
            "type": "writer", "id": writer["id"], "title": writer.get("handle_name") or "", "field": "icon",
        })

    for field, url in theme_image_urls(tenant.get("theme")):
        add(url, {"type": "theme", "id": media_id, "title": tenant.get("name") or "", "field": field})

    for field, url in tenant_image_urls(tenant):
        add(url, {"type": "tenant", "id": media_id, "title": tenant.get("name") or "", "field": field})

    return index


class MediaService:
    """
    Service for media library operations.
    """

    @staticmethod
    def list_media(tenant: dict[str, Any]) -> list[dict[str, Any]]:
        """Tenant media, newest first, with usage_count and usage_details."""
        files = SupabaseClient.fetch_many(
            "media_files", filters={"media_id": tenant["id"]}, order_by="created_at", desc=True
        )
        usage = build_usage_index(tenant)

        for item in files:
            details = usage.get(item.get("url"), [])
            item["usage_count"] = len(details)
            item["usage_details"] = details
        return files

    @staticmethod
    def get_media(media_id: str, file_id: str) -> dict[str, Any]:
        return get_tenant_record("media_files", "media", file_id, media_id)

    @staticmethod
    def upload(
        media_id: str,
        content: bytes,
        filename: str,
        content_type: str | None,
        alt: str | None = None,
    ) -> dict[str, Any]:
        """
        Store an uploaded file in the media library.

        Images become WebP (max width 2000, quality 80) with a 300x300
        thumbnail; videos are stored unchanged.

        Raises:
            FileTooLargeError: If the file exceeds MAX_UPLOAD_SIZE_MB
            InvalidMediaTypeError: If the file is neither an image nor a video
            StorageUploadError: If the storage upload fails
        """
        if len(content) > settings.max_upload_size_bytes:
            raise FileTooLargeError(len(content) / (1024 * 1024), settings.MAX_UPLOAD_SIZE_MB)

        content_type = content_type or ""
        safe_name = sanitize_filename(filename)
        stamped = f"{int(time.time() * 1000)}_{safe_name}"
        webp_name = f"{strip_extension(stamped)}.webp"

        if content_type.startswith("image/"):
            try:
                optimized = optimize_image(content, max_width=UPLOAD_MAX_WIDTH, quality=UPLOAD_QUALITY)
                thumbnail = make_thumbnail(content, size=THUMBNAIL_SIZE, quality=THUMBNAIL_QUALITY)
            except UnidentifiedImageError:
                raise InvalidMediaTypeError(filename, content_type)

            url = StorageService.upload_bytes(f"media/images/{webp_name}", optimized.data, optimized.content_type)
            thumbnail_url = StorageService.upload_bytes(
                f"media/thumbnails/{webp_name}", thumbnail.data, thumbnail.content_type
            )
            record = {
                "type": "image",
                "mime_type": optimized.content_type,
                "size": len(optimized.data),
                "width": optimized.width,
                "height": optimized.height,
                "url": url,
                "thumbnail_url": thumbnail_url,
            }
            logger.info(f"Optimized upload {filename}: {len(content)} -> {len(optimized.data)} bytes")

        elif content_type.startswith("video/"):
            url = StorageService.upload_bytes(f"media/videos/{stamped}", content, content_type)
            record = {
                "type": "video",
                "mime_type": content_type,
                "size": len(content),
                "width": 0,
                "height": 0,
                "url": url,
                "thumbnail_url": url,
            }

        else:
            raise InvalidMediaTypeError(filename, content_type)

        now = now_iso()
        record.update({
            "name": stamped,
            "original_name": filename,
            "alt": alt or strip_extension(filename),
            "is_ai_generated": False,
            "media_id": media_id,
            "created_at": now,
            "updated_at": now,
        })
        return SupabaseClient.insert("media_files", record)

    @staticmethod
    def update_alt(media_id: str, file_id: str, alt: str) -> dict[str, Any]:
        MediaService.get_media(media_id, file_id)
        return SupabaseClient.update("media_files", file_id, {"alt": alt, "updated_at": now_iso()})

    @staticmethod
    def delete_media(media_id: str, file_id: str) -> None:
        """Delete the storage objects (file and thumbnail) and the record."""
        item = MediaService.get_media(media_id, file_id)
        paths = {StorageService.path_from_url(item.get("url")), StorageService.path_from_url(item.get("thumbnail_url"))}
        StorageService.delete([p for p in paths if p])
        SupabaseClient.delete("media_files", file_id)
        logger.info(f"Deleted media {file_id}")

    @staticmethod
    def generate_image(
        media_id: str,
        prompt: str,
        size: str = "1024x1024",
        improve_prompt: bool = True,
        alt: str | None = None,
        writer: ContentWriterAgent | None = None,
    ) -> dict[str, Any]:
        """
        Generate an image and store it in the media library.

        Raises:
            ValidationFailedError: If the prompt is empty
            GenerationError: If the image model fails
        """
        if not prompt.strip():
            raise ValidationFailedError("Prompt is required")

        writer = writer or ContentWriterAgent()
        final_prompt = writer.improve_image_prompt(prompt) if improve_prompt else prompt
        generated = writer.generate_image(final_prompt, size)
        image = optimize_image(generated.data, max_width=GENERATED_MAX_WIDTH, quality=GENERATED_QUALITY)

        name = f"{int(time.time() * 1000)}_ai.webp"
        url = StorageService.upload_bytes(f"media/ai/{name}", image.data, image.content_type)

        now = now_iso()
        return SupabaseClient.insert("media_files", {
            "name": name,
            "original_name": name,
            "url": url,
            "thumbnail_url": url,
            "type": "image",
            "mime_type": image.content_type,
            "size": len(image.data),
            "width": image.width,
            "height": image.height,
            "alt": alt or prompt[:100],
            "is_ai_generated": True,
            "ai_prompt": prompt,
            "ai_revised_prompt": generated.revised_prompt,
            "media_id": media_id,
            "created_at": now,
            "updated_at": now,
        })
