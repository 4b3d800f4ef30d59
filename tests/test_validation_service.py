import pytest

from conftest import make_image
from app.enums import ImageMimeType
from app.errors import ValidationError
from app.services import UploadValidator, UploadedImage

MAX_BYTES = 15 * 1024 * 1024


@pytest.fixture
def validator():
    return UploadValidator(max_file_bytes=MAX_BYTES, max_files=20)


def test_sniff_detects_supported_formats():
    sniff = UploadValidator.sniff_image_type
    assert sniff(make_image("JPEG")) == ImageMimeType.JPEG
    assert sniff(make_image("PNG")) == ImageMimeType.PNG
    assert sniff(make_image("GIF")) == ImageMimeType.GIF
    assert sniff(make_image("WEBP")) == ImageMimeType.WEBP
    assert sniff(b"\x00\x00\x00\x1cftypavif\x00\x00\x00\x00") == ImageMimeType.AVIF
    assert sniff(b"%PDF-1.7") is None

def test_image_jpg_is_treated_as_jpeg(validator, jpeg_bytes):
    types = validator.validate_files([UploadedImage("a.jpg", "image/jpg", jpeg_bytes)])
    assert types == [ImageMimeType.JPEG]

def test_rejects_disallowed_type(validator):
    with pytest.raises(ValidationError, match="Invalid file type"):
        validator.validate_files([UploadedImage("doc.pdf", "application/pdf", b"%PDF-1.7")])

def test_rejects_content_that_does_not_match_declared_type(validator, png_bytes):
    with pytest.raises(ValidationError, match="does not match"):
        validator.validate_files([UploadedImage("fake.jpg", "image/jpeg", png_bytes)])

def test_rejects_oversized_and_empty_files(validator):
    big = b"\xff\xd8\xff" + b"0" * MAX_BYTES
    with pytest.raises(ValidationError, match="too large"):
        validator.validate_files([UploadedImage("big.jpg", "image/jpeg", big)])
    with pytest.raises(ValidationError, match="empty"):
        validator.validate_files([UploadedImage("empty.jpg", "image/jpeg", b"")])

def test_rejects_empty_batch_and_too_many_files(jpeg_bytes):
    validator = UploadValidator(max_file_bytes=MAX_BYTES, max_files=2)
    with pytest.raises(ValidationError, match="No files"):
        validator.validate_files([])
    files = [UploadedImage(f"{i}.jpg", "image/jpeg", jpeg_bytes) for i in range(3)]
    with pytest.raises(ValidationError, match="Too many files"):
        validator.validate_files(files)

def test_sanitize_filename():
    sanitize = UploadValidator.sanitize_filename
    assert sanitize("mi foto (1).jpg") == "mi-foto--1-.jpg"
    assert sanitize("../../etc/passwd") == "-.-etc-passwd"
    assert sanitize("..hidden..jpg") == "hidden.jpg"
    assert sanitize("") == "photo"
    assert sanitize(None) == "photo"
    assert len(sanitize("a" * 400 + ".jpg")) == 255

def test_sanitize_filename_keeps_extension_when_truncating():
    name = UploadValidator.sanitize_filename("b" * 300 + ".webp", max_length=100)
    assert len(name) == 100
    assert name.endswith(".webp")
    assert UploadValidator.sanitize_filename("c" * 50, max_length=10) == "c" * 10
