"""
In Memory Object Store.
"""

from __future__ import annotations

__all__ = ["Memory"]

import hashlib
import time
from threading import Lock
from typing import Any

from picset.core import Context, Provider, Response
from picset.core.exceptions import NotFoundError

from .._helper import (
    build_url,
    get_collection_name,
    get_id,
    get_method,
    get_properties,
)
from .._models import ObjectItem, ObjectKey, ObjectList, ObjectProperties


class Memory(Provider):
    collection: str | None
    base_url: str | None

    # (collection, id, item)
    _db: dict[str, dict[str, ObjectItem]]
    _lock: Lock

    def __init__(
        self,
        collection: str | None = None,
        base_url: str | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            collection:
                Collection name.
            base_url:
                Base url of returned object urls. Defaults
                to memory://{collection}.
        """
        self.collection = collection
        self.base_url = base_url
        self._db = dict()
        self._lock = Lock()

    def __setup__(self, context: Context | None = None) -> None:
        pass

    def _get_collection(self, collection: str | None) -> dict[str, ObjectItem]:
        name = get_collection_name(
            collection, self.collection, self.__component__
        )
        if name not in self._db:
            self._db[name] = dict()
        return self._db[name]

    def _get_url(self, collection: str | None, id: str) -> str:
        if self.base_url is not None:
            return build_url(self.base_url, id)
        name = get_collection_name(
            collection, self.collection, self.__component__
        )
        return build_url(f"memory://{name}", id)

    def put(
        self,
        key: str | dict | ObjectKey,
        value: bytes,
        metadata: dict | None = None,
        properties: dict | ObjectProperties | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        id = get_id(key)
        props = get_properties(properties).copy()
        props.content_length = len(value)
        props.etag = hashlib.md5(value, usedforsecurity=False).hexdigest()
        props.last_modified = time.time()
        item = ObjectItem(
            key=ObjectKey(id=id),
            value=value,
            metadata=metadata,
            properties=props,
            url=self._get_url(collection, id),
        )
        with self._lock:
            self._get_collection(collection)[id] = item
        return Response(
            result=ObjectItem(key=item.key, properties=props, url=item.url)
        )

    def get(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        id = get_id(key)
        with self._lock:
            items = self._get_collection(collection)
            if id not in items:
                raise NotFoundError(f"Object {id} not found")
            item = items[id].copy(deep=True)
        return Response(result=item)

    def delete(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        id = get_id(key)
        with self._lock:
            items = self._get_collection(collection)
            if id not in items:
                raise NotFoundError(f"Object {id} not found")
            items.pop(id)
        return Response(result=None)

    def query(
        self,
        prefix: str | None = None,
        limit: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectList]:
        with self._lock:
            items = self._get_collection(collection)
            ids = sorted(
                id for id in items if prefix is None or id.startswith(prefix)
            )
            if limit is not None:
                ids = ids[:limit]
            result = [
                ObjectItem(
                    key=items[id].key,
                    metadata=items[id].metadata,
                    properties=items[id].properties,
                    url=items[id].url,
                )
                for id in ids
            ]
        return Response(result=ObjectList(items=result))

    def generate(
        self,
        key: str | dict | ObjectKey,
        method: str = "GET",
        expiry: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        id = get_id(key)
        get_method(method)
        return Response(
            result=ObjectItem(
                key=ObjectKey(id=id),
                url=self._get_url(collection, id),
            )
        )

    def close(self, **kwargs: Any) -> Response[None]:
        return Response(result=None)
