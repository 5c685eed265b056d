# =============================================================================
# app/routers/media.py - Media Library Endpoints
# =============================================================================
# Upload, list, describe, delete and AI-generate media files.
#
# Uploaded images are converted to WebP with a thumbnail; videos are stored
# as-is. Files live in the public storage bucket under media/.
# =============================================================================

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, File, Form, Path, UploadFile, status

from app.dependencies import TenantDep
from core.models.media import ImageGenerateRequest, MediaAltUpdate
from core.services.media_service import MediaService

logger = logging.getLogger(__name__)

router = APIRouter()

FileId = Annotated[str, Path(description="Media file id")]


@router.get("")
def list_media(ctx: TenantDep):
    """
    Media files, newest first.

    Each item carries usage_count and usage_details listing the articles,
    categories, writers, theme parts and site settings that use its url.
    """
    return MediaService.list_media(ctx.tenant)


@router.post("/upload", status_code=status.HTTP_201_CREATED)
def upload_media(
    ctx: TenantDep,
    file: Annotated[UploadFile, File(description="Image or video file")],
    alt: Annotated[Optional[str], Form()] = None,
):
    """
    Upload an image or a video.

    Returns the media record. 413 when the file is too large, 400 for other
    file types.
    """
    content = file.file.read()
    logger.info(f"Upload {file.filename} ({len(content)} bytes, {file.content_type}) to tenant {ctx.media_id}")
    return MediaService.upload(ctx.media_id, content, file.filename or "upload", file.content_type, alt)


@router.post("/generate-image", status_code=status.HTTP_201_CREATED)
def generate_image(payload: ImageGenerateRequest, ctx: TenantDep):
    """Generate an image with the image model and add it to the library."""
    return MediaService.generate_image(
        ctx.media_id,
        payload.prompt,
        size=payload.size,
        improve_prompt=payload.improve_prompt,
        alt=payload.alt,
    )


@router.patch("/{file_id}")
def update_alt(file_id: FileId, payload: MediaAltUpdate, ctx: TenantDep):
    return MediaService.update_alt(ctx.media_id, file_id, payload.alt)


@router.delete("/{file_id}")
def delete_media(file_id: FileId, ctx: TenantDep):
    """Delete the stored file, its thumbnail and the record."""
    MediaService.delete_media(ctx.media_id, file_id)
    return {"success": True, "message": "Media deleted"}
