"""Tests for image loading: source priority, fallback and dimension checks."""

from __future__ import annotations

import asyncio
import struct
import zlib

import pytest

from roastbot.errors import (
    ImageDimensionError,
    ImageLoadError,
    ImageTooLarge,
    ImageTooSmall,
    InvalidImage,
)
from roastbot.meme.loader import ImageLoader, decode_data_url, validate_dimensions
from roastbot.meme.templates import TemplateCatalog


@pytest.fixture
def loader(catalog, fast_policy) -> ImageLoader:
    return ImageLoader(catalog, fast_policy)


def _load(loader, content_type="roast", **kwargs):
    return asyncio.run(loader.load(content_type, **kwargs))


def _with_declared_size(png: bytes, width: int, height: int) -> bytes:
    """Rewrite the IHDR of ``png`` so its header claims ``width`` x ``height``."""
    ihdr = png[12:16] + struct.pack(">II", width, height) + png[24:29]
    return png[:12] + ihdr + struct.pack(">I", zlib.crc32(ihdr)) + png[33:]


class TestSourcePriority:
    def test_inline_image_wins(self, loader, red_png_url):
        img = _load(loader, image_data=red_png_url, template="drake")
        assert img.source == "inline"
        assert (img.width, img.height) == (300, 200)

    def test_named_template(self, loader):
        img = _load(loader, template="drake")
        assert img.source == "template:drake"
        assert (img.width, img.height) == (500, 500)

    def test_template_by_filename(self, loader):
        img = _load(loader, template="drake.jpg")
        assert (img.width, img.height) == (500, 500)

    def test_default_per_content_type(self, loader):
        roast = _load(loader, "roast")
        compliment = _load(loader, "compliment")
        assert roast.source == compliment.source == "default"
        assert (roast.width, roast.height) == (600, 400)
        assert (compliment.width, compliment.height) == (400, 600)


class TestFallback:
    def test_undecodable_inline_retried_then_falls_back(self, loader, sleeps):
        img = _load(loader, image_data="data:image/png;base64,bm90IGFuIGltYWdl")
        assert img.source == "default"
        assert sleeps == [1.0, 1.5]

    def test_invalid_base64_falls_back(self, loader):
        img = _load(loader, image_data="data:image/png;base64,@@@not-base64@@@")
        assert img.source == "default"

    def test_unknown_template_falls_back(self, loader, sleeps):
        img = _load(loader, template="no-such-template")
        assert img.source == "default"
        assert sleeps == []

    def test_builtin_template_without_file_falls_back(self, loader, sleeps):
        img = _load(loader, template="doge")
        assert img.source == "default"
        assert sleeps == [1.0, 1.5]

    def test_path_traversal_is_not_followed(self, loader, templates_dir, image_factory):
        (templates_dir.parent / "secret.png").write_bytes(image_factory(300, 300))
        img = _load(loader, template="../secret.png")
        assert img.source == "default"

    def test_missing_default_is_fatal(self, tmp_path, fast_policy):
        loader = ImageLoader(TemplateCatalog(tmp_path), fast_policy)
        with pytest.raises(ImageLoadError, match="Default roast template"):
            _load(loader)


class TestDimensions:
    def test_49px_rejected_without_retry_or_fallback(self, loader, sleeps, image_factory, to_data_url):
        with pytest.raises(ImageTooSmall):
            _load(loader, image_data=to_data_url(image_factory(49, 49)))
        assert sleeps == []

    def test_50px_accepted(self, loader, image_factory, to_data_url):
        img = _load(loader, image_data=to_data_url(image_factory(50, 50)))
        assert (img.width, img.height) == (50, 50)

    def test_too_large(self, loader, image_factory, to_data_url):
        with pytest.raises(ImageTooLarge):
            _load(loader, image_data=to_data_url(image_factory(5001, 60)))

    def test_validate_dimensions(self):
        validate_dimensions(50, 5000)
        with pytest.raises(InvalidImage):
            validate_dimensions(0, 100)
        with pytest.raises(ImageTooSmall):
            validate_dimensions(100, 49)
        with pytest.raises(ImageTooLarge):
            validate_dimensions(5001, 100)


def test_decode_data_url_accepts_bare_base64(red_png_url):
    img = decode_data_url(red_png_url.split(",", 1)[1])
    assert img.size == (300, 200)


def test_decode_data_url_rejects_empty_payload():
    with pytest.raises(ImageLoadError):
        decode_data_url("data:image/png;base64,")


class TestOversizedImages:
    pytestmark = pytest.mark.filterwarnings("ignore::PIL.Image.DecompressionBombWarning")

    def test_huge_inline_image_rejected_before_decode(self, loader, sleeps, image_factory, to_data_url):
        huge = _with_declared_size(image_factory(100, 100), 15000, 15000)
        with pytest.raises(ImageTooLarge):
            _load(loader, image_data=to_data_url(huge))
        assert sleeps == []

    def test_decompression_bomb_is_a_dimension_error(self, loader, sleeps, image_factory, to_data_url):
        bomb = _with_declared_size(image_factory(100, 100), 40000, 40000)
        with pytest.raises(ImageDimensionError):
            _load(loader, image_data=to_data_url(bomb))
        assert sleeps == []

    def test_huge_template_file_not_absorbed_by_fallback(self, loader, templates_dir, sleeps, image_factory):
        (templates_dir / "huge.png").write_bytes(_with_declared_size(image_factory(100, 100), 40000, 40000))
        with pytest.raises(ImageTooLarge):
            _load(loader, template="huge.png")
        assert sleeps == []


def test_unloadable_inline_and_template_fall_back_to_default(loader, sleeps):
    img = _load(loader, image_data="data:image/png;base64,bm90IGFuIGltYWdl", template="doge")
    assert img.source == "default"
    assert sleeps == [1.0, 1.5, 1.0, 1.5]
