"""Meme rendering service: cache lookup, then loader, layout and compositor."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from roastbot.errors import RenderError, RoastBotError
from roastbot.meme.cache import ResultCache, cache_key
from roastbot.meme.compositor import Compositor
from roastbot.meme.fonts import FontProvider
from roastbot.meme.layout import layout_text, plan_canvas
from roastbot.meme.loader import ImageLoader
from roastbot.meme.retry import RetryPolicy, policy_from_settings
from roastbot.meme.templates import TemplateCatalog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderRequest:
    text: str
    content_type: str  # roast | compliment
    image_data: str | None = None
    template: str | None = None


@dataclass(frozen=True)
class RenderResult:
    png: bytes
    from_cache: bool


class MemeService:
    def __init__(
        self,
        loader: ImageLoader,
        fonts: FontProvider,
        compositor: Compositor,
        cache: ResultCache,
        image_prefix_chars: int = 50,
    ) -> None:
        self.loader = loader
        self.fonts = fonts
        self.compositor = compositor
        self.cache = cache
        self.image_prefix_chars = image_prefix_chars

    def cache_key(self, request: RenderRequest) -> str:
        return cache_key(
            request.text,
            request.content_type,
            request.image_data,
            request.template,
            image_prefix_chars=self.image_prefix_chars,
        )

    async def render(self, request: RenderRequest) -> RenderResult:
        key = self.cache_key(request)
        cached = self.cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s", key[:12])
            return RenderResult(png=cached, from_cache=True)

        png = await self.render_uncached(request)
        self.cache.put(key, png)
        return RenderResult(png=png, from_cache=False)

    async def render_uncached(self, request: RenderRequest) -> bytes:
        """Full render pipeline, bypassing the cache."""
        try:
            source = await self.loader.load(
                request.content_type,
                image_data=request.image_data,
                template=request.template,
            )
            plan = plan_canvas(source.width, source.height)
            layout = layout_text(request.text, plan, self.fonts)
            logger.info(
                "Rendering %s meme from %s: %dx%d canvas, %d lines at %.1fpx",
                request.content_type, source.source, plan.width, plan.height,
                len(layout.lines), layout.font_size,
            )
            return await self.compositor.render(source, plan, layout)
        except RoastBotError:
            raise
        except Exception as e:
            logger.exception("Unexpected failure while rendering meme")
            raise RenderError(str(e) or type(e).__name__) from e


def create_meme_service(
    settings,
    catalog: TemplateCatalog | None = None,
    retry_policy: RetryPolicy | None = None,
) -> MemeService:
    policy = retry_policy or policy_from_settings(settings)
    catalog = catalog or TemplateCatalog(settings.templates_dir, settings.custom_templates_dir)
    fonts = FontProvider(settings.font_path)
    return MemeService(
        loader=ImageLoader(catalog, policy),
        fonts=fonts,
        compositor=Compositor(fonts, watermark_text=settings.watermark_text, retry_policy=policy),
        cache=ResultCache(settings.cache_max_entries, settings.cache_ttl_seconds),
        image_prefix_chars=settings.cache_image_prefix_chars,
    )
