from picset.core import DataModel


class ImageData(DataModel):
    source: str | None = None
    """Local path of the image."""

    content: bytes | None = None
    """Image bytes."""

    media_type: str | None = None
    """Declared media type of the image."""


class ImageInfo(DataModel):
    width: int
    """Width of the image in pixels."""

    height: int
    """Height of the image in pixels."""

    format: str | None = None
    """Format detected by the decoder, e.g. JPEG."""

    mode: str | None = None
    """Pixel mode, e.g. RGB."""
