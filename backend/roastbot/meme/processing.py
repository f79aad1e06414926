"""Image processing for custom template uploads: decode, bound, re-encode as JPEG."""

from __future__ import annotations

import base64
import binascii
import io
from dataclasses import dataclass

from PIL import Image, ImageOps, UnidentifiedImageError

from roastbot.errors import ImageProcessingError


@dataclass(frozen=True)
class ImageMetadata:
    width: int
    height: int
    format: str
    size: int


@dataclass(frozen=True)
class ProcessedImage:
    buffer: bytes
    metadata: ImageMetadata


def process_image(
    data: str | bytes,
    max_width: int = 1200,
    max_height: int = 1200,
    quality: int = 85,
    min_dimension: int = 200,
) -> ProcessedImage:
    """Fit an image inside ``max_width`` x ``max_height`` (never enlarging) and
    re-encode it as JPEG. Accepts raw bytes or a base64 data URL.
    """
    if isinstance(data, str):
        payload = data.split(";base64,")[-1]
        if not payload:
            raise ImageProcessingError("Invalid base64 image data")
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ImageProcessingError("Invalid base64 image data") from e
    else:
        raw = data

    try:
        img = Image.open(io.BytesIO(raw))
        img.load()
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        raise ImageProcessingError("Invalid image metadata") from e

    width, height = img.size
    if width < min_dimension or height < min_dimension:
        raise ImageProcessingError(
            f"Image dimensions too small. Minimum {min_dimension}px required."
        )

    img = ImageOps.exif_transpose(img)
    img.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)

    buf = io.BytesIO()
    img.convert("RGB").save(buf, format="JPEG", quality=quality, optimize=True)
    output = buf.getvalue()

    return ProcessedImage(
        buffer=output,
        metadata=ImageMetadata(width=img.width, height=img.height, format="jpeg", size=len(output)),
    )


def validate_image_size(size: int, max_size_mb: float = 5) -> None:
    if size > max_size_mb * 1024 * 1024:
        raise ImageProcessingError(f"Image size exceeds {max_size_mb:g}MB limit")
