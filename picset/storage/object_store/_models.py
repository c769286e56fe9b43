from __future__ import annotations

from picset.core import DataModel


class ObjectKey(DataModel):
    """Object key."""

    id: str
    """Object id."""

    version: str | None = None
    """Object version."""


class ObjectProperties(DataModel):
    """Object properties."""

    cache_control: str | None = None
    """Cache control."""

    content_disposition: str | None = None
    """Content disposition."""

    content_length: int | None = None
    """Content length."""

    content_type: str | None = None
    """Content type."""

    last_modified: float | None = None
    """Last modified time."""

    etag: str | None = None
    """Etag value."""


class ObjectItem(DataModel):
    """Object item."""

    key: ObjectKey
    """Object key."""

    value: bytes | None = None
    """Object value."""

    metadata: dict | None = None
    """Object metadata."""

    properties: ObjectProperties | None = None
    """Object properties."""

    url: str | None = None
    """Object url."""


class ObjectList(DataModel):
    """Object list."""

    items: list[ObjectItem]
    """List of items."""

    continuation: str | None = None
    """Continuation token."""
