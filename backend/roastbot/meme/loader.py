"""Image Loader. Turns an inline data URL, a named template or the content
type's default template into a decoded, size-checked raster image.

Resolution order: inline data → named template → default template. The first
two are retried through the shared RetryPolicy and fall back on failure; the
default template is read once and its failure is fatal. Dimension errors are
never retried and never trigger a fallback.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import io
import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from roastbot.errors import (
    ImageLoadError,
    ImageTooLarge,
    ImageTooSmall,
    InvalidImage,
)
from roastbot.meme.retry import RetryPolicy
from roastbot.meme.templates import TemplateCatalog

logger = logging.getLogger(__name__)

MIN_DIMENSION = 50
MAX_DIMENSION = 5000

_BASE64_MARKER = ";base64,"


@dataclass(frozen=True)
class DecodedImage:
    width: int
    height: int
    image: Image.Image
    source: str = "default"


def decode_data_url(data_url: str) -> Image.Image:
    """Decode a ``data:image/...;base64,`` URL (or bare base64) into a loaded image."""
    payload = data_url.split(_BASE64_MARKER, 1)[-1]
    if not payload:
        raise ImageLoadError("Inline image payload is empty")
    try:
        raw = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ImageLoadError(f"Inline image is not valid base64: {e}") from e
    try:
        img = Image.open(io.BytesIO(raw))
        validate_dimensions(*img.size)
        img.load()
    except Image.DecompressionBombError as e:
        raise ImageTooLarge(f"Image dimensions too large: {e}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Inline image could not be decoded: {e}") from e
    return img


def decode_file(path: Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            validate_dimensions(*img.size)
            img.load()
            return img
    except FileNotFoundError as e:
        raise ImageLoadError(f"Template file not found: {path.name}") from e
    except Image.DecompressionBombError as e:
        raise ImageTooLarge(f"Template {path.name} dimensions too large: {e}") from e
    except (UnidentifiedImageError, OSError) as e:
        raise ImageLoadError(f"Template {path.name} could not be decoded: {e}") from e


def validate_dimensions(width: int | None, height: int | None) -> None:
    if not width or not height:
        raise InvalidImage("Invalid image data")
    if width < MIN_DIMENSION or height < MIN_DIMENSION:
        raise ImageTooSmall(
            f"Image dimensions too small ({width}x{height}, minimum {MIN_DIMENSION}px)"
        )
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise ImageTooLarge(
            f"Image dimensions too large ({width}x{height}, maximum {MAX_DIMENSION}px)"
        )


def _is_transient(exc: BaseException) -> bool:
    return isinstance(exc, ImageLoadError)


class ImageLoader:
    def __init__(self, catalog: TemplateCatalog, retry_policy: RetryPolicy | None = None) -> None:
        self.catalog = catalog
        self.retry_policy = (retry_policy or RetryPolicy()).with_predicate(_is_transient)

    async def load(
        self,
        content_type: str,
        image_data: str | None = None,
        template: str | None = None,
    ) -> DecodedImage:
        if image_data:
            try:
                return await self._load_with_retry(
                    lambda: decode_data_url(image_data), source="inline",
                )
            except ImageLoadError as e:
                logger.warning("Inline image unusable, falling back: %s", e)

        if template:
            path = self.catalog.resolve(template)
            if path is None:
                logger.warning("Unknown template %r, falling back to default", template)
            else:
                try:
                    return await self._load_with_retry(
                        lambda: decode_file(path), source=f"template:{template}",
                    )
                except ImageLoadError as e:
                    logger.warning("Template %r unusable, falling back: %s", template, e)

        default_path = self.catalog.default_path(content_type)
        try:
            return await self._decode(lambda: decode_file(default_path), source="default")
        except ImageLoadError as e:
            raise ImageLoadError(
                f"Default {content_type} template could not be loaded: {e.details}"
            ) from e

    async def _load_with_retry(self, decode: Callable[[], Image.Image], source: str) -> DecodedImage:
        return await self.retry_policy.run(
            lambda: self._decode(decode, source), label=f"load {source}",
        )

    async def _decode(self, decode: Callable[[], Image.Image], source: str) -> DecodedImage:
        loop = asyncio.get_running_loop()
        img = await loop.run_in_executor(None, decode)
        width, height = img.size
        validate_dimensions(width, height)
        logger.debug("Loaded %s image %dx%d", source, width, height)
        return DecodedImage(width=width, height=height, image=img, source=source)
