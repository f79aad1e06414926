"""Layout Engine: canvas sizing, responsive font size, greedy line wrapping
and vertical placement of the caption block.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass

from roastbot.meme.fonts import FontProvider, text_width

# ── Canvas sizing ──
CANVAS_MIN_DIMENSION = 400
CANVAS_MAX_WIDTH = 1200
CANVAS_MAX_HEIGHT = 1200

# ── Font sizing ──
FONT_BASE_DIVISOR = 15
FONT_LENGTH_DIVISOR = 200
FONT_MIN_LENGTH_FACTOR = 0.6
FONT_MIN_PX = 16
FONT_MAX_PX = 48

# ── Wrapping / placement ──
PORTRAIT_LINE_WIDTH = 0.85
LANDSCAPE_LINE_WIDTH = 0.75
MAX_LINES = 10
LINE_COUNT_SPACING = 1.2
LINE_HEIGHT_FACTOR = 1.4
PORTRAIT_TOP_PADDING = 0.10
PORTRAIT_UPPER_THIRD = 0.15
ELLIPSIS = "..."


@dataclass(frozen=True)
class CanvasPlan:
    width: int
    height: int

    @property
    def is_portrait(self) -> bool:
        return self.height > self.width


@dataclass(frozen=True)
class TextLayout:
    font_size: float
    lines: tuple[str, ...]
    line_height: float
    start_y: float
    max_line_width: float
    max_lines: int

    @property
    def total_height(self) -> float:
        return len(self.lines) * self.line_height


def plan_canvas(
    width: int,
    height: int,
    max_width: int = CANVAS_MAX_WIDTH,
    max_height: int = CANVAS_MAX_HEIGHT,
    min_dimension: int = CANVAS_MIN_DIMENSION,
) -> CanvasPlan:
    """Scale source dimensions into the canvas range, keeping aspect ratio.

    Small images (both sides under ``min_dimension``) are scaled up so the
    shorter side reaches it; wide images are capped at ``max_width``, then
    tall ones at ``max_height``. Both results are floored to even numbers.
    """
    new_w, new_h = float(width), float(height)

    if width < min_dimension and height < min_dimension:
        scale = min_dimension / min(width, height)
        new_w, new_h = width * scale, height * scale

    aspect = width / height
    if new_w > max_width:
        new_w = max_width
        new_h = max_width / aspect
    if new_h > max_height:
        new_h = max_height
        new_w = max_height * aspect

    return CanvasPlan(width=max(2, int(new_w // 2) * 2), height=max(2, int(new_h // 2) * 2))


def compute_font_size(width: int, height: int, text_length: int) -> float:
    base = min(width, height) / FONT_BASE_DIVISOR
    length_factor = max(FONT_MIN_LENGTH_FACTOR, 1 - text_length / FONT_LENGTH_DIVISOR)
    return max(FONT_MIN_PX, min(FONT_MAX_PX, base * length_factor))


def max_line_width(width: int, height: int) -> float:
    return width * (PORTRAIT_LINE_WIDTH if height > width else LANDSCAPE_LINE_WIDTH)


def max_line_count(height: int, font_size: float) -> int:
    return max(1, min(MAX_LINES, math.floor(height / (font_size * LINE_COUNT_SPACING))))


def wrap_text(
    words: list[str],
    measure: Callable[[str], float],
    max_width: float,
    max_lines: int,
) -> list[str]:
    """Greedy word wrap. Words are never split; the caption is cut with an
    ellipsis once ``max_lines - 1`` lines are committed and words remain.
    """
    lines: list[str] = []
    current = ""
    for index, word in enumerate(words):
        candidate = f"{current} {word}" if current else word
        if measure(candidate) > max_width and current:
            lines.append(current)
            current = word
            if len(lines) >= max_lines - 1:
                if index < len(words) - 1:
                    current += ELLIPSIS
                break
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines[:max_lines]


def layout_text(text: str, plan: CanvasPlan, fonts: FontProvider) -> TextLayout:
    width, height = plan.width, plan.height
    font_size = compute_font_size(width, height, len(text))
    font = fonts.get(font_size)
    line_budget = max_line_width(width, height)
    max_lines = max_line_count(height, font_size)

    lines = wrap_text(text.split(), lambda s: text_width(font, s), line_budget, max_lines)

    line_height = font_size * LINE_HEIGHT_FACTOR
    if plan.is_portrait:
        start_y = height * PORTRAIT_TOP_PADDING + height * PORTRAIT_UPPER_THIRD
    else:
        start_y = (height - len(lines) * line_height) / 2

    return TextLayout(
        font_size=font_size,
        lines=tuple(lines),
        line_height=line_height,
        start_y=start_y,
        max_line_width=line_budget,
        max_lines=max_lines,
    )
