# =============================================================================
# lib/images.py - Image Optimization (Pillow)
# =============================================================================
# Converts uploaded and generated images to WebP:
# - optimize_image: downscale to a maximum width (never upscale)
# - make_thumbnail: center-cropped fixed-size thumbnail ("cover")
#
# Usage:
#   from lib.images import optimize_image, make_thumbnail
#   result = optimize_image(raw_bytes, max_width=2000, quality=80)
#   print(result.width, result.height, len(result.data))
# =============================================================================

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, ImageOps


@dataclass
class ProcessedImage:
    """WebP bytes plus the final dimensions."""
    data: bytes
    width: int
    height: int
    content_type: str = "image/webp"


def _load(content: bytes) -> Image.Image:
    image = Image.open(io.BytesIO(content))
    # Apply EXIF orientation so phone photos are not rotated
    image = ImageOps.exif_transpose(image)
    if image.mode not in ("RGB", "RGBA"):
        image = image.convert("RGBA" if "A" in image.getbands() else "RGB")
    return image


def _to_webp(image: Image.Image, quality: int) -> ProcessedImage:
    buffer = io.BytesIO()
    image.save(buffer, format="WEBP", quality=quality, method=4)
    return ProcessedImage(data=buffer.getvalue(), width=image.width, height=image.height)


def optimize_image(content: bytes, max_width: int = 2000, quality: int = 80) -> ProcessedImage:
    """
    Resize an image to fit max_width (keeping aspect ratio) and encode as WebP.

    Images narrower than max_width keep their size.

    Raises:
        PIL.UnidentifiedImageError: If the bytes are not a readable image
    """
    image = _load(content)

    if image.width > max_width:
        height = round(image.height * max_width / image.width)
        image = image.resize((max_width, height), Image.Resampling.LANCZOS)

    return _to_webp(image, quality)


def make_thumbnail(content: bytes, size: tuple[int, int] = (300, 300), quality: int = 70) -> ProcessedImage:
    """
    Create a center-cropped thumbnail of exactly `size` encoded as WebP.
    """
    image = _load(content)
    thumbnail = ImageOps.fit(image, size, Image.Resampling.LANCZOS, centering=(0.5, 0.5))
    return _to_webp(thumbnail, quality)
