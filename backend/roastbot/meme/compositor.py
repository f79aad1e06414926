"""Compositor: paints the meme and encodes it as PNG.

Layer order (each fully applied before the next):
  1. black background
  2. source image scaled to the canvas, additive ("lighter") blend
  3. radial vignette
  4. caption lines: drop shadow, black outline, white fill
  5. translucent band over the caption block
  6. bottom-right watermark

The band is painted after the caption and therefore dims it as well.
"""

from __future__ import annotations

import asyncio
import io
import logging

import numpy as np
from PIL import Image, ImageChops, ImageDraw, ImageFilter

from roastbot.errors import RenderError
from roastbot.meme.fonts import Font, FontProvider
from roastbot.meme.layout import CanvasPlan, TextLayout
from roastbot.meme.loader import DecodedImage
from roastbot.meme.retry import RetryPolicy

logger = logging.getLogger(__name__)

PNG_COMPRESS_LEVEL = 8
PNG_DPI = 72

# Vignette: transparent centre → 30% black at max(W, H) / 1.5
VIGNETTE_ALPHA = 0.3
VIGNETTE_RADIUS_DIVISOR = 1.5

# Caption styling, all relative to the font size
SHADOW_COLOR = (0, 0, 0, 204)
SHADOW_BLUR = 0.15
SHADOW_OFFSET = 0.08
STROKE_COLOR = (0, 0, 0, 230)
STROKE_FACTOR = 0.15
STROKE_MIN_PX = 4
FILL_COLOR = (255, 255, 255, 255)

BAND_COLOR = (0, 0, 0, 77)

WATERMARK_SCALE = 0.4
WATERMARK_MIN_PX = 12
WATERMARK_FILL = (255, 255, 255, 204)
WATERMARK_STROKE = (0, 0, 0, 204)


def _is_transient_encode_error(exc: BaseException) -> bool:
    return isinstance(exc, OSError)


def vignette_mask(width: int, height: int) -> Image.Image:
    """'L' mask rising linearly from 0 at the centre to 30% at the gradient radius."""
    radius = max(width, height) / VIGNETTE_RADIUS_DIVISOR
    ys, xs = np.ogrid[:height, :width]
    dist = np.hypot(xs + 0.5 - width / 2, ys + 0.5 - height / 2)
    alpha = np.clip(dist / radius, 0.0, 1.0) * (VIGNETTE_ALPHA * 255)
    return Image.fromarray(np.round(alpha).astype(np.uint8))


class Compositor:
    def __init__(
        self,
        fonts: FontProvider,
        watermark_text: str = "RoastBot.app",
        retry_policy: RetryPolicy | None = None,
    ) -> None:
        self.fonts = fonts
        self.watermark_text = watermark_text
        self.retry_policy = (retry_policy or RetryPolicy()).with_predicate(_is_transient_encode_error)

    async def render(self, source: DecodedImage, plan: CanvasPlan, layout: TextLayout) -> bytes:
        """Compose and encode off the event loop; encoding goes through the retry policy."""
        loop = asyncio.get_running_loop()
        try:
            canvas = await loop.run_in_executor(None, self.compose, source, plan, layout)
        except Exception as e:
            raise RenderError(f"Compositing failed: {e}") from e
        try:
            return await self.retry_policy.run(
                lambda: loop.run_in_executor(None, self.encode, canvas), label="encode png",
            )
        except Exception as e:
            raise RenderError(f"Encoding failed: {e}") from e

    # ── Drawing ──

    def compose(self, source: DecodedImage, plan: CanvasPlan, layout: TextLayout) -> Image.Image:
        size = (plan.width, plan.height)
        canvas = Image.new("RGBA", size, (0, 0, 0, 255))
        canvas = self.draw_source(canvas, source.image)

        vignette = Image.new("RGBA", size, (0, 0, 0, 0))
        vignette.putalpha(vignette_mask(*size))
        canvas = Image.alpha_composite(canvas, vignette)

        canvas = self.draw_caption(canvas, layout)
        canvas = self.draw_band(canvas, plan, layout)
        return self.draw_watermark(canvas, layout)

    def draw_source(self, canvas: Image.Image, image: Image.Image) -> Image.Image:
        try:
            scaled = image.convert("RGBA").resize(canvas.size, Image.Resampling.LANCZOS)
            return ImageChops.add(canvas, scaled)
        except (ValueError, OSError) as e:
            logger.error("Blended image draw failed, redrawing plainly: %s", e)
            plain = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            plain.paste(image.resize(canvas.size))
            return plain

    def draw_caption(self, canvas: Image.Image, layout: TextLayout) -> Image.Image:
        font = self.fonts.get(layout.font_size)
        fs = layout.font_size
        stroke = round(max(STROKE_MIN_PX, fs * STROKE_FACTOR) / 2)
        offset = fs * SHADOW_OFFSET
        x = canvas.width / 2
        y = layout.start_y

        for line in layout.lines:
            cy = y + layout.line_height / 2

            shadow = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            ImageDraw.Draw(shadow).text(
                (x + offset, cy + offset), line, font=font, anchor="mm",
                fill=SHADOW_COLOR, stroke_width=stroke, stroke_fill=SHADOW_COLOR,
            )
            shadow = shadow.filter(ImageFilter.GaussianBlur(fs * SHADOW_BLUR / 2))
            canvas = Image.alpha_composite(canvas, shadow)

            text_layer = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
            ImageDraw.Draw(text_layer).text(
                (x, cy), line, font=font, anchor="mm",
                fill=FILL_COLOR, stroke_width=stroke, stroke_fill=STROKE_COLOR,
            )
            canvas = Image.alpha_composite(canvas, text_layer)

            y += layout.line_height
        return canvas

    def draw_band(self, canvas: Image.Image, plan: CanvasPlan, layout: TextLayout) -> Image.Image:
        band_height = layout.total_height + layout.font_size
        if plan.is_portrait:
            band_y = plan.height * 0.10
        else:
            band_y = (plan.height - band_height) / 2
        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).rectangle(
            (0, band_y, plan.width, band_y + band_height), fill=BAND_COLOR,
        )
        return Image.alpha_composite(canvas, overlay)

    def draw_watermark(self, canvas: Image.Image, layout: TextLayout) -> Image.Image:
        if not self.watermark_text:
            return canvas
        width, height = canvas.size
        font: Font = self.fonts.get(max(WATERMARK_MIN_PX, layout.font_size * WATERMARK_SCALE))
        padding = max(10, width / 80)
        stroke = max(1, round(max(2, width / 400) / 2))

        overlay = Image.new("RGBA", canvas.size, (0, 0, 0, 0))
        ImageDraw.Draw(overlay).text(
            (width - padding, height - padding), self.watermark_text, font=font, anchor="rs",
            fill=WATERMARK_FILL, stroke_width=stroke, stroke_fill=WATERMARK_STROKE,
        )
        return Image.alpha_composite(canvas, overlay)

    # ── Encoding ──

    @staticmethod
    def encode(canvas: Image.Image) -> bytes:
        buf = io.BytesIO()
        canvas.convert("RGB").save(
            buf, format="PNG", compress_level=PNG_COMPRESS_LEVEL, dpi=(PNG_DPI, PNG_DPI),
        )
        return buf.getvalue()
