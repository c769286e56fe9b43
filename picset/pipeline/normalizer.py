from __future__ import annotations

from picset.content.image import Image
from picset.core import get_logger
from picset.core.exceptions import UnprocessableError

from ._models import RawUpload, WorkingBuffer
from .config import PipelineConfig
from .exceptions import DecodeFailure, InputValidationFailure

logger = get_logger(__name__)


def parse_media_type(media_type: str) -> str:
    return media_type.split(";", 1)[0].strip().lower()


class Normalizer:
    """Turns an upload into the canonical working buffer.

    The declared media type and the size are checked before any
    decoding. The decoded image is rotated upright, converted to
    sRGB and re-encoded as PNG without metadata, so the same bytes
    always give the same working buffer.
    """

    config: PipelineConfig
    image_provider: str | dict

    def __init__(
        self,
        config: PipelineConfig | None = None,
        image_provider: str | dict = "pillow",
    ):
        self.config = config or PipelineConfig()
        self.image_provider = image_provider

    def validate(self, upload: RawUpload) -> str:
        media_type = parse_media_type(upload.media_type)
        if media_type not in self.config.media_types:
            raise InputValidationFailure(
                f"Media type {upload.media_type} not supported"
            )
        if not upload.content:
            raise InputValidationFailure("Upload is empty")
        if len(upload.content) > self.config.max_upload_bytes:
            raise InputValidationFailure(
                f"Upload of {len(upload.content)} bytes exceeds "
                f"the limit of {self.config.max_upload_bytes} bytes"
            )
        return media_type

    def normalize(self, upload: RawUpload) -> WorkingBuffer:
        media_type = self.validate(upload)
        try:
            image = Image(
                content=upload.content,
                __provider__=self.image_provider,
            )
            source_info = image.get_info()
            normalized = image.normalize()
            info = normalized.get_info()
        except UnprocessableError as e:
            raise DecodeFailure(f"Upload could not be decoded: {e}") from e
        # The declared type only gates decoding. A decoded format that
        # differs from it is accepted and recorded as the source format.
        logger.debug(
            "Decoded %s upload as %s", media_type, source_info.format
        )
        return WorkingBuffer(
            content=normalized.content,
            width=info.width,
            height=info.height,
            mode=info.mode,
            source_format=source_info.format,
        )
