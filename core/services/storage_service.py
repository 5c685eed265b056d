# =============================================================================
# core/services/storage_service.py - Supabase Storage Operations
# =============================================================================
# Handles uploads and deletions of media assets in the public storage bucket.
# Objects are addressed by path (media/images/..., media/thumbnails/...) and
# served through their public URL.
# =============================================================================

import logging

from lib.supabase_client import SupabaseClient
from app.config import settings
from app.exceptions import StorageUploadError

logger = logging.getLogger(__name__)


class StorageService:
    """
    Service for Supabase Storage operations.

    Handles uploading media bytes and cleaning up deleted assets.
    """

    @staticmethod
    def bucket_name() -> str:
        return settings.STORAGE_BUCKET

    @staticmethod
    def upload_bytes(
        path: str,
        content: bytes,
        content_type: str,
    ) -> str:
        """
        Upload bytes to the media bucket and return the public URL.

        Args:
            path: Object path inside the bucket
            content: File bytes
            content_type: MIME type stored with the object

        Returns:
            Public URL of the uploaded object

        Raises:
            StorageUploadError: If upload fails
        """
        client = SupabaseClient.get_client()
        bucket = client.storage.from_(StorageService.bucket_name())

        try:
            bucket.upload(
                path=path,
                file=content,
                file_options={"content-type": content_type, "upsert": "true"}
            )
            url = bucket.get_public_url(path)

            logger.info(f"Uploaded file to storage: {path} ({len(content)} bytes)")
            return url

        except Exception as e:
            logger.error(f"Storage upload failed: {e}")
            raise StorageUploadError(str(e))

    @staticmethod
    def path_from_url(url: str | None) -> str | None:
        """
        Recover the object path from a public URL of the media bucket.

        Returns None for URLs that do not point into the bucket.

        Example:
            .../storage/v1/object/public/media/media/images/1_a.webp -> "media/images/1_a.webp"
        """
        if not url:
            return None
        marker = f"/object/public/{StorageService.bucket_name()}/"
        if marker not in url:
            return None
        return url.split(marker, 1)[1].split("?", 1)[0]

    @staticmethod
    def delete(paths: list[str]) -> int:
        """
        Delete objects from the media bucket.

        Failures are logged and not raised: a record whose file is already
        gone must still be deletable.

        Returns:
            Number of paths submitted for deletion
        """
        paths = [p for p in paths if p]
        if not paths:
            return 0

        client = SupabaseClient.get_client()

        try:
            client.storage.from_(StorageService.bucket_name()).remove(paths)
            logger.info(f"Deleted {len(paths)} objects from storage")
        except Exception as e:
            logger.warning(f"Storage delete failed for {paths}: {e}")

        return len(paths)
