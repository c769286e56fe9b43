"""
In Memory Document Store.
"""

from __future__ import annotations

__all__ = ["Memory"]

import copy
from threading import Lock
from typing import Any

from picset.core import Context, DataModel, Provider, Response
from picset.core.exceptions import NotFoundError, PreconditionFailedError

from .._helper import generate_etag, get_collection_name, get_id, get_value
from .._models import (
    DocumentItem,
    DocumentKey,
    DocumentKeyType,
    DocumentProperties,
)


class Memory(Provider):
    collection: str | None

    # (collection, id, item)
    _db: dict[str, dict[DocumentKeyType, DocumentItem]]
    _lock: Lock

    def __init__(
        self,
        collection: str | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            collection:
                Collection name.
        """
        self.collection = collection
        self._db = dict()
        self._lock = Lock()

    def __setup__(self, context: Context | None = None) -> None:
        pass

    def _get_collection(
        self, collection: str | None
    ) -> dict[DocumentKeyType, DocumentItem]:
        name = get_collection_name(
            collection, self.collection, self.__component__
        )
        if name not in self._db:
            self._db[name] = dict()
        return self._db[name]

    def get(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        id = get_id(key)
        with self._lock:
            items = self._get_collection(collection)
            if id not in items:
                raise NotFoundError(f"Document {id} not found")
            item = items[id].copy(deep=True)
        return Response(result=item)

    def put(
        self,
        value: dict[str, Any] | DataModel,
        key: DocumentKeyType | dict | DocumentKey | None = None,
        exists: bool | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[DocumentItem]:
        document = copy.deepcopy(get_value(value))
        id = get_id(key, document, self.__component__.id_map_field)
        with self._lock:
            items = self._get_collection(collection)
            if exists is False and id in items:
                raise PreconditionFailedError(f"Document {id} exists")
            if exists is True and id not in items:
                raise NotFoundError(f"Document {id} not found")
            item = DocumentItem(
                key=DocumentKey(id=id),
                value=document,
                properties=DocumentProperties(etag=generate_etag()),
            )
            items[id] = item
        return Response(
            result=DocumentItem(key=item.key, properties=item.properties)
        )

    def delete(
        self,
        key: DocumentKeyType | dict | DocumentKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        id = get_id(key)
        with self._lock:
            items = self._get_collection(collection)
            if id not in items:
                raise NotFoundError(f"Document {id} not found")
            items.pop(id)
        return Response(result=None)

    def count(
        self,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[int]:
        with self._lock:
            return Response(result=len(self._get_collection(collection)))

    def close(self, **kwargs: Any) -> Response[None]:
        return Response(result=None)
