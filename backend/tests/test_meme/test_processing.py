"""Tests for custom template image processing."""

from __future__ import annotations

import io

import pytest
from PIL import Image

from roastbot.errors import ImageProcessingError
from roastbot.meme.processing import process_image, validate_image_size


def test_fits_inside_bounds_keeping_aspect(image_factory, to_data_url):
    result = process_image(to_data_url(image_factory(1600, 1200)), max_width=800, max_height=600)
    assert (result.metadata.width, result.metadata.height) == (800, 600)
    assert result.metadata.format == "jpeg"
    assert result.metadata.size == len(result.buffer)
    assert Image.open(io.BytesIO(result.buffer)).format == "JPEG"


def test_never_enlarges(image_factory):
    result = process_image(image_factory(300, 250), max_width=800, max_height=600)
    assert (result.metadata.width, result.metadata.height) == (300, 250)


def test_rejects_small_images(image_factory, to_data_url):
    with pytest.raises(ImageProcessingError, match="Minimum 200px"):
        process_image(to_data_url(image_factory(150, 300)))


@pytest.mark.parametrize("payload", [
    "data:image/png;base64,",
    "data:image/png;base64,***",
    "data:image/png;base64,aGVsbG8=",
])
def test_rejects_bad_payloads(payload):
    with pytest.raises(ImageProcessingError):
        process_image(payload)


def test_validate_image_size():
    validate_image_size(5 * 1024 * 1024)
    with pytest.raises(ImageProcessingError, match="5MB"):
        validate_image_size(5 * 1024 * 1024 + 1)
    with pytest.raises(ImageProcessingError, match="0.5MB"):
        validate_image_size(600 * 1024, max_size_mb=0.5)
