from __future__ import annotations

from picset.content.image import Image
from picset.core import get_logger

from ._catalog import ORIGINAL_VARIANT
from ._models import DerivedEncoding, WorkingBuffer
from .config import PipelineConfig
from .exceptions import DerivationFailure

logger = get_logger(__name__)


class VariantDeriver:
    """Resizes the working buffer and encodes every variant twice.

    Resizing fits the image within the target width and never
    enlarges it. Each variant is encoded as WebP and JPEG at the
    same quality, and its size is read back from the WebP bytes.
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

    def derive_one(
        self,
        working: WorkingBuffer,
        name: str,
        target_width: int,
    ) -> DerivedEncoding:
        try:
            image = Image(
                content=working.content,
                __provider__=self.image_provider,
            )
            resized = image.resize(width=target_width)
            webp = resized.convert(
                type="bytes", format="WEBP", quality=self.config.quality
            )
            jpeg = resized.convert(
                type="bytes", format="JPEG", quality=self.config.quality
            )
            info = Image(
                content=webp,
                __provider__=self.image_provider,
            ).get_info()
        except Exception as e:
            raise DerivationFailure(
                f"Variant {name} could not be derived: {e}"
            ) from e
        logger.debug(
            "Derived %s at %dx%d (webp %d bytes, jpeg %d bytes)",
            name,
            info.width,
            info.height,
            len(webp),
            len(jpeg),
        )
        return DerivedEncoding(
            name=name,
            target_width=target_width,
            width=info.width,
            height=info.height,
            webp=webp,
            jpeg=jpeg,
        )

    def derive_original(self, working: WorkingBuffer) -> DerivedEncoding:
        return self.derive_one(
            working, ORIGINAL_VARIANT, self.config.original_width
        )

    def derive(self, working: WorkingBuffer) -> list[DerivedEncoding]:
        encodings = [
            self.derive_one(working, spec.name, spec.width)
            for spec in self.config.catalog
        ]
        encodings.append(self.derive_original(working))
        return encodings
