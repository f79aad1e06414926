"""RoastBot meme rendering core."""

from roastbot.meme.cache import ResultCache, cache_key
from roastbot.meme.compositor import Compositor
from roastbot.meme.layout import CanvasPlan, TextLayout, layout_text, plan_canvas
from roastbot.meme.loader import DecodedImage, ImageLoader
from roastbot.meme.service import MemeService, RenderRequest, RenderResult, create_meme_service

__all__ = [
    "CanvasPlan",
    "Compositor",
    "DecodedImage",
    "ImageLoader",
    "MemeService",
    "RenderRequest",
    "RenderResult",
    "ResultCache",
    "TextLayout",
    "cache_key",
    "create_meme_service",
    "layout_text",
    "plan_canvas",
]
