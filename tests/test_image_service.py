import io

import pytest
from PIL import Image

from conftest import make_image
from app.errors import ValidationError
from app.services import ImageService


def test_optimize_resizes_and_converts_to_webp():
    service = ImageService()
    output = service.optimize(make_image("JPEG", size=(800, 400)), width=200, quality=70)

    with Image.open(io.BytesIO(output)) as img:
        assert img.format == "WEBP"
        assert img.size == (200, 100)

def test_optimize_never_enlarges():
    output = ImageService().optimize(make_image("PNG", size=(120, 90)), width=1200)
    with Image.open(io.BytesIO(output)) as img:
        assert img.size == (120, 90)

def test_optimize_rejects_non_images():
    with pytest.raises(ValidationError):
        ImageService().optimize(b"not an image")

def test_parse_options_clamps_and_defaults():
    service = ImageService()
    assert service.parse_options(None, None) == (1200, 75)
    assert service.parse_options("abc", "zz") == (1200, 75)
    assert service.parse_options("99999", "0") == (4096, 1)
    assert service.parse_options("640", "90") == (640, 90)

def test_optimize_rejects_decompression_bombs(monkeypatch):
    monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
    with pytest.raises(ValidationError):
        ImageService().optimize(make_image("JPEG", size=(64, 48)))
