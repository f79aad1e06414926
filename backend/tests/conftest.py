"""Shared test fixtures."""

from __future__ import annotations

import base64
import io
from pathlib import Path

import pytest
from PIL import Image

from roastbot.analytics.repository import InMemoryAnalyticsRepository
from roastbot.meme.cache import ResultCache
from roastbot.meme.compositor import Compositor
from roastbot.meme.fonts import FontProvider
from roastbot.meme.loader import ImageLoader
from roastbot.meme.retry import RetryPolicy
from roastbot.meme.service import MemeService
from roastbot.meme.templates import TemplateCatalog


def make_image(width: int, height: int, color=(200, 60, 40), fmt: str = "PNG") -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", (width, height), color).save(buf, format=fmt)
    return buf.getvalue()


def data_url(raw: bytes, media_type: str = "image/png") -> str:
    return f"data:{media_type};base64," + base64.b64encode(raw).decode("ascii")


def decode_png_data_url(url: str) -> Image.Image:
    assert url.startswith("data:image/png;base64,")
    return Image.open(io.BytesIO(base64.b64decode(url.split(",", 1)[1])))


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def fast_policy(sleeps) -> RetryPolicy:
    """Three attempts with the production back-off, recording delays instead of sleeping."""

    async def _record(delay: float) -> None:
        sleeps.append(delay)

    return RetryPolicy(max_attempts=3, base_delay=1.0, multiplier=1.5, sleep=_record)


@pytest.fixture
def templates_dir(tmp_path: Path) -> Path:
    root = tmp_path / "meme-templates"
    root.mkdir()
    (root / "roast-template.png").write_bytes(make_image(600, 400, (180, 40, 40)))
    (root / "compliment-template.png").write_bytes(make_image(400, 600, (40, 120, 200)))
    (root / "drake.jpg").write_bytes(make_image(500, 500, (230, 200, 30), fmt="JPEG"))
    return root


@pytest.fixture
def catalog(templates_dir: Path) -> TemplateCatalog:
    return TemplateCatalog(templates_dir, templates_dir / "custom")


@pytest.fixture
def fonts() -> FontProvider:
    return FontProvider(None)


@pytest.fixture
def meme_service(catalog, fonts, fast_policy) -> MemeService:
    return MemeService(
        loader=ImageLoader(catalog, fast_policy),
        fonts=fonts,
        compositor=Compositor(fonts, retry_policy=fast_policy),
        cache=ResultCache(max_entries=100, ttl_seconds=3600),
    )


@pytest.fixture
def analytics_repo() -> InMemoryAnalyticsRepository:
    return InMemoryAnalyticsRepository()


@pytest.fixture
def red_png() -> bytes:
    return make_image(300, 200)


@pytest.fixture
def red_png_url(red_png) -> str:
    return data_url(red_png)


@pytest.fixture
def image_factory():
    return make_image


@pytest.fixture
def to_data_url():
    return data_url


@pytest.fixture
def png_from_url():
    return decode_png_data_url
