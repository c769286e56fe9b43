from __future__ import annotations

from pydantic import ConfigDict

from picset.core import DataModel, DataModelField

from ._catalog import CATALOG_VERSION


class RawUpload(DataModel):
    """Bytes handed over by the upload boundary for one invocation."""

    content: bytes
    """Uploaded bytes."""

    media_type: str
    """Declared media type."""

    uploader_id: str
    """Identity of the uploading user."""

    association_id: str | None = None
    """Owning entity, e.g. an event."""


class WorkingBuffer(DataModel):
    """Canonical raster every variant is derived from."""

    model_config = ConfigDict(frozen=True)

    content: bytes
    """Lossless PNG bytes without metadata."""

    width: int
    """Width in pixels."""

    height: int
    """Height in pixels."""

    mode: str
    """Pixel mode, RGB or RGBA."""

    source_format: str | None = None
    """Format detected by the decoder, e.g. JPEG."""


class DerivedEncoding(DataModel):
    """One variant encoded as WebP and JPEG."""

    name: str
    """Variant name."""

    target_width: int
    """Requested maximum width."""

    width: int
    """Width read back from the encoded bytes."""

    height: int
    """Height read back from the encoded bytes."""

    webp: bytes
    """WebP encoding."""

    jpeg: bytes
    """JPEG encoding."""


class StoredVariant(DataModel):
    """Variant after both encodings are written."""

    width: int
    height: int
    webp_key: str = DataModelField(alias="webpKey")
    jpg_key: str = DataModelField(alias="jpgKey")
    webp_url: str = DataModelField(alias="webpUrl")
    jpg_url: str = DataModelField(alias="jpgUrl")


VariantMap = dict[str, StoredVariant]


class ImageRecord(DataModel):
    """Persisted image with its variant map."""

    id: str
    """Generated record id."""

    event_id: str | None = DataModelField(alias="eventId", default=None)
    """Association id."""

    uploader_id: str = DataModelField(alias="uploaderId")
    """Uploader id."""

    original_key: str = DataModelField(alias="originalKey")
    """Storage key of the original WebP encoding."""

    format: str = "webp"
    """Format of the original key."""

    source_format: str | None = DataModelField(
        alias="sourceFormat", default=None
    )
    """Format detected on upload."""

    width: int
    """Width of the original encoding."""

    height: int
    """Height of the original encoding."""

    variants: VariantMap
    """Variant name to stored variant."""

    catalog_version: int = DataModelField(
        alias="catalogVersion", default=CATALOG_VERSION
    )
    """Catalog version the variant map was built with."""

    created_at: str = DataModelField(alias="createdAt")
    """Creation time, ISO-8601 UTC."""

    updated_at: str = DataModelField(alias="updatedAt")
    """Update time, ISO-8601 UTC."""


class IngestResult(DataModel):
    """Outcome of a successful ingest."""

    id: str
    variants: VariantMap
    record: ImageRecord
