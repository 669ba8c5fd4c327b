"""
Shared fixtures: in-memory card images for preprocessing and extraction tests.
"""

import io

import pytest
from PIL import Image

from card_extractor.models import ImageFile


def make_image_bytes(fmt: str = "PNG", size=(64, 40), color=(200, 30, 30), mode: str = "RGB") -> bytes:
    """Render a solid-colour image in the given format."""
    buffer = io.BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_card():
    return ImageFile(filename="card.png", data=make_image_bytes("PNG"), mime_type="image/png")


@pytest.fixture
def card_batch():
    """Two card images in different formats."""
    return [
        ImageFile(filename="front.png", data=make_image_bytes("PNG"), mime_type="image/png"),
        ImageFile(filename="back.jpg", data=make_image_bytes("JPEG", color=(240, 240, 240)), mime_type="image/jpeg"),
    ]
