from __future__ import annotations

from pydantic import model_validator

from picset.core import DataModel

from ._catalog import (
    ALLOWED_MEDIA_TYPES,
    CACHE_CONTROL,
    DEFAULT_CATALOG,
    ENCODE_QUALITY,
    MAX_UPLOAD_BYTES,
    ORIGINAL_WIDTH_CAP,
    VariantSpec,
    validate_catalog,
)


class PipelineConfig(DataModel):
    """Pipeline settings.

    Attributes:
        catalog: Ordered variant catalog.
        original_width: Width cap of the original encoding.
        quality: Encoder quality of WebP and JPEG.
        media_types: Accepted declared media types.
        max_upload_bytes: Upload size limit.
        cache_control: Cache directive of every stored object.
        key_prefix: First segment of every storage key.
        public_base_url: Base url of returned urls. Defaults
            to the url reported by the object store.
        parallel: Derive and upload variants concurrently.
        max_workers: Worker threads for parallel ingest.
            Defaults to one per variant.
    """

    catalog: list[VariantSpec] = list(DEFAULT_CATALOG)
    original_width: int = ORIGINAL_WIDTH_CAP
    quality: int = ENCODE_QUALITY
    media_types: list[str] = sorted(ALLOWED_MEDIA_TYPES)
    max_upload_bytes: int = MAX_UPLOAD_BYTES
    cache_control: str = CACHE_CONTROL
    key_prefix: str = "events"
    public_base_url: str | None = None
    parallel: bool = True
    max_workers: int | None = None

    @model_validator(mode="after")
    def _check(self) -> PipelineConfig:
        validate_catalog(self.catalog, self.original_width)
        if not 1 <= self.quality <= 100:
            raise ValueError("Quality must be between 1 and 100")
        if self.max_upload_bytes <= 0:
            raise ValueError("Upload size limit must be positive")
        self.media_types = [m.lower() for m in self.media_types]
        return self
