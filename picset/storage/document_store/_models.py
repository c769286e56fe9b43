from __future__ import annotations

from typing import Any, Union

from picset.core import DataModel

DocumentKeyType = Union[str, int]


class DocumentKey(DataModel):
    """Document key.

    Attributes:
        id: Document id.
    """

    id: DocumentKeyType


class DocumentProperties(DataModel):
    """Document properties.

    Attributes:
        etag: Document ETag.
    """

    etag: str | None = None


class DocumentItem(DataModel):
    """Document item.

    Attributes:
        key: Document key.
        value: Document value.
        properties: Document properties.
    """

    key: DocumentKey
    value: dict[str, Any] | None = None
    properties: DocumentProperties | None = None
