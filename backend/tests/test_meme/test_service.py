"""End-to-end tests for the meme rendering service."""

from __future__ import annotations

import asyncio
import io

import pytest
from PIL import Image

from roastbot.config import Settings
from roastbot.errors import ImageTooSmall, RenderError
from roastbot.meme.service import RenderRequest, create_meme_service


def _render(service, **kwargs):
    kwargs.setdefault("text", "You spent three hours picking a font.")
    kwargs.setdefault("content_type", "roast")
    return asyncio.run(service.render(RenderRequest(**kwargs)))


def test_inline_image_end_to_end(meme_service, red_png_url):
    result = _render(meme_service, image_data=red_png_url)
    assert not result.from_cache
    img = Image.open(io.BytesIO(result.png))
    assert img.format == "PNG"
    # 300x200 source is scaled up so the short side reaches 400
    assert img.size == (600, 400)


def test_second_identical_request_served_from_cache(meme_service, red_png_url):
    first = _render(meme_service, image_data=red_png_url)
    second = _render(meme_service, image_data=red_png_url)
    assert second.from_cache
    assert second.png == first.png
    assert len(meme_service.cache) == 1


def test_cached_bytes_match_uncached_render(meme_service):
    request = RenderRequest(text="Nice try.", content_type="compliment")
    cached = asyncio.run(meme_service.render(request)).png
    fresh = asyncio.run(meme_service.render_uncached(request))
    assert cached == fresh


def test_distinct_requests_get_distinct_entries(meme_service):
    _render(meme_service, text="one")
    _render(meme_service, text="two")
    _render(meme_service, text="one", content_type="compliment")
    assert len(meme_service.cache) == 3


def test_default_template_follows_content_type(meme_service):
    roast = Image.open(io.BytesIO(_render(meme_service, content_type="roast").png))
    compliment = Image.open(io.BytesIO(_render(meme_service, content_type="compliment").png))
    assert roast.size == (600, 400)
    assert compliment.size == (400, 600)


def test_dimension_error_surfaces_and_is_not_cached(meme_service, image_factory, to_data_url):
    with pytest.raises(ImageTooSmall):
        _render(meme_service, image_data=to_data_url(image_factory(40, 40)))
    assert len(meme_service.cache) == 0


def test_unexpected_failure_becomes_render_error(meme_service, monkeypatch):
    async def broken_load(*args, **kwargs):
        raise RuntimeError("decoder exploded")

    monkeypatch.setattr(meme_service.loader, "load", broken_load)
    with pytest.raises(RenderError, match="decoder exploded"):
        _render(meme_service)
    assert len(meme_service.cache) == 0


def test_create_meme_service_from_settings(templates_dir, fast_policy):
    settings = Settings(
        templates_dir=templates_dir,
        custom_templates_dir=templates_dir / "custom",
        cache_max_entries=5,
        cache_ttl_seconds=60,
        watermark_text="test.app",
    )
    service = create_meme_service(settings, retry_policy=fast_policy)
    assert service.cache.max_entries == 5
    assert service.compositor.watermark_text == "test.app"
    result = _render(service, template="drake")
    assert Image.open(io.BytesIO(result.png)).size == (500, 500)
