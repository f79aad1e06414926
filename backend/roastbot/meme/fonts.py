"""Font resolution for the renderer.

The configured bold face (Poppins Bold by default) is preferred; if it is not
installed the provider falls back to DejaVu Sans Bold, then to Pillow's bundled
default font. The chosen source is fixed on first use so every render in the
process measures text with the same metrics.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from PIL import ImageFont

logger = logging.getLogger(__name__)

_FALLBACK_FONTS = ("DejaVuSans-Bold.ttf", "LiberationSans-Bold.ttf")

Font = ImageFont.FreeTypeFont | ImageFont.ImageFont


class FontProvider:
    def __init__(self, font_path: Path | str | None = None) -> None:
        self.font_path = Path(font_path) if font_path else None
        self._source: str | None = None
        self._cache: dict[int, Font] = {}
        self._lock = threading.Lock()

    @property
    def source(self) -> str:
        """Path/name of the face in use, or ``"default"`` for Pillow's bundled font."""
        if self._source is None:
            self._source = self._resolve_source()
        return self._source

    def get(self, size: float) -> Font:
        px = max(1, int(round(size)))
        with self._lock:
            font = self._cache.get(px)
            if font is None:
                font = self._load(px)
                self._cache[px] = font
        return font

    def _resolve_source(self) -> str:
        candidates = [str(self.font_path)] if self.font_path else []
        candidates.extend(_FALLBACK_FONTS)
        for candidate in candidates:
            try:
                ImageFont.truetype(candidate, 12)
            except OSError:
                continue
            if candidate != candidates[0]:
                logger.warning("Font %s unavailable, using %s", candidates[0], candidate)
            return candidate
        logger.warning("No TrueType font found, using Pillow's default font")
        return "default"

    def _load(self, px: int) -> Font:
        if self.source == "default":
            return ImageFont.load_default(size=px)
        return ImageFont.truetype(self.source, px)


def text_width(font: Font, text: str) -> float:
    return float(font.getlength(text))
