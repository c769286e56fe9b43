# type: ignore
import pytest
from common.images import (
    jpeg_bytes,
    png_bytes,
    rotated_jpeg_bytes,
    size_of,
    webp_bytes,
)
from pydantic import ValidationError

from picset.pipeline import (
    ALLOWED_MEDIA_TYPES,
    DecodeFailure,
    InputValidationFailure,
    Normalizer,
    PipelineConfig,
    RawUpload,
    WorkingBuffer,
)


def upload(content: bytes, media_type: str) -> RawUpload:
    return RawUpload(content=content, media_type=media_type, uploader_id="u")


@pytest.mark.parametrize("media_type", sorted(ALLOWED_MEDIA_TYPES))
def test_accepted_media_types(media_type: str):
    working = Normalizer().normalize(upload(png_bytes(30, 20), media_type))
    assert (working.width, working.height) == (30, 20)
    assert working.source_format == "PNG"


@pytest.mark.parametrize(
    "content, media_type, source_format",
    [
        (jpeg_bytes(30, 20), "image/png", "JPEG"),
        (webp_bytes(30, 20), "image/jpeg", "WEBP"),
        (png_bytes(30, 20), "image/heif", "PNG"),
    ],
)
def test_mismatched_media_type(
    content: bytes, media_type: str, source_format: str
):
    working = Normalizer().normalize(upload(content, media_type))
    assert working.source_format == source_format
    assert (working.width, working.height) == (30, 20)


@pytest.mark.parametrize(
    "media_type",
    ["image/gif", "image/tiff", "image/svg+xml", "application/pdf", ""],
)
def test_rejected_media_types_never_decode(media_type: str, monkeypatch):
    def decode(*args, **kwargs):
        raise AssertionError("decode attempted")

    monkeypatch.setattr("picset.pipeline.normalizer.Image", decode)
    with pytest.raises(InputValidationFailure):
        Normalizer().normalize(upload(png_bytes(30, 20), media_type))


def test_working_buffer():
    working = Normalizer().normalize(
        upload(rotated_jpeg_bytes(80, 60), "image/jpeg")
    )
    assert isinstance(working, WorkingBuffer)
    assert (working.width, working.height) == (60, 80)
    assert size_of(working.content) == (60, 80)
    assert working.mode == "RGB"
    assert working.source_format == "JPEG"
    with pytest.raises(ValidationError):
        working.width = 10


def test_idempotent():
    content = jpeg_bytes(300, 200)
    first = Normalizer().normalize(upload(content, "image/jpeg"))
    second = Normalizer().normalize(upload(content, "image/jpeg"))
    assert first.content == second.content
    assert first == second


def test_alpha():
    working = Normalizer().normalize(
        upload(png_bytes(30, 20, "RGBA"), "image/png")
    )
    assert working.mode == "RGBA"


def test_limits():
    normalizer = Normalizer(PipelineConfig(max_upload_bytes=50))
    with pytest.raises(InputValidationFailure):
        normalizer.normalize(upload(b"", "image/png"))
    with pytest.raises(InputValidationFailure):
        normalizer.normalize(upload(png_bytes(30, 20), "image/png"))


def test_decode_failure():
    with pytest.raises(DecodeFailure) as exc_info:
        Normalizer().normalize(upload(b"\x89PNG broken", "image/png"))
    assert exc_info.value.__cause__ is not None
