"""
Object Store on File System.
"""

from __future__ import annotations

__all__ = ["FileSystem"]

import hashlib
import json
import os
import tempfile
from pathlib import Path
from typing import Any

from picset.core import Context, DataModel, Provider, Response
from picset.core.exceptions import BadRequestError, NotFoundError

from .._helper import (
    build_url,
    get_collection_name,
    get_id,
    get_method,
    get_properties,
)
from .._models import ObjectItem, ObjectKey, ObjectList, ObjectProperties

META_FOLDER = ".__meta__"


class ObjectDocument(DataModel):
    id: str
    metadata: dict | None
    properties: dict


class FileSystem(Provider):
    store_path: str
    folder: str | None
    base_url: str | None

    _init: bool

    def __init__(
        self,
        store_path: str = ".",
        folder: str | None = None,
        base_url: str | None = None,
        **kwargs,
    ):
        """Initialize.

        Args:
            store_path:
                Base store path. Defaults to ".".
            folder:
                Folder name mapped to object store collection name.
            base_url:
                Base url the store path is served from.
                Defaults to file urls.
        """
        self.store_path = store_path
        self.folder = folder
        self.base_url = base_url
        self._init = False

    def __setup__(self, context: Context | None = None) -> None:
        if self._init:
            return
        os.makedirs(self.store_path, exist_ok=True)
        self._init = True

    def _get_folder_path(self, collection: str | None) -> str:
        folder = get_collection_name(
            collection, self.folder, self.__component__
        )
        return os.path.join(self.store_path, folder)

    def _get_paths(self, collection: str | None, id: str) -> tuple[str, str]:
        folder_path = self._get_folder_path(collection)
        object_path = os.path.normpath(os.path.join(folder_path, id))
        if not object_path.startswith(os.path.normpath(folder_path) + os.sep):
            raise BadRequestError(f"Key {id} escapes the collection folder")
        if META_FOLDER in Path(id).parts:
            raise BadRequestError(f"Key {id} uses a reserved folder name")
        meta_path = os.path.join(folder_path, META_FOLDER, f"{id}.json")
        return object_path, meta_path

    def _get_url(self, collection: str | None, id: str, path: str) -> str:
        if self.base_url is not None:
            folder = get_collection_name(
                collection, self.folder, self.__component__
            )
            return build_url(self.base_url, f"{folder}/{id}")
        return Path(os.path.abspath(path)).as_uri()

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
        object_path, meta_path = self._get_paths(collection, id)
        props = get_properties(properties).copy()
        props.content_length = len(value)
        props.etag = hashlib.md5(value, usedforsecurity=False).hexdigest()
        self._write_file(object_path, value)
        props.last_modified = os.path.getmtime(object_path)
        document = ObjectDocument(
            id=id,
            metadata=metadata,
            properties=props.to_dict(),
        )
        self._write_file(meta_path, document.to_json().encode("utf-8"))
        return Response(
            result=ObjectItem(
                key=ObjectKey(id=id),
                properties=props,
                url=self._get_url(collection, id, object_path),
            )
        )

    def get(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectItem]:
        id = get_id(key)
        object_path, meta_path = self._get_paths(collection, id)
        if not os.path.isfile(object_path):
            raise NotFoundError(f"Object {id} not found")
        with open(object_path, "rb") as file:
            value = file.read()
        document = self._read_document(id, meta_path)
        return Response(
            result=ObjectItem(
                key=ObjectKey(id=id),
                value=value,
                metadata=document.metadata,
                properties=ObjectProperties.from_dict(document.properties),
                url=self._get_url(collection, id, object_path),
            )
        )

    def delete(
        self,
        key: str | dict | ObjectKey,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[None]:
        id = get_id(key)
        object_path, meta_path = self._get_paths(collection, id)
        if not os.path.isfile(object_path):
            raise NotFoundError(f"Object {id} not found")
        os.remove(object_path)
        if os.path.isfile(meta_path):
            os.remove(meta_path)
        return Response(result=None)

    def query(
        self,
        prefix: str | None = None,
        limit: int | None = None,
        collection: str | None = None,
        **kwargs: Any,
    ) -> Response[ObjectList]:
        folder_path = self._get_folder_path(collection)
        ids: list[str] = []
        for root, dirs, files in os.walk(folder_path):
            if META_FOLDER in dirs:
                dirs.remove(META_FOLDER)
            for name in files:
                if name.startswith(".tmp"):
                    continue
                rel = os.path.relpath(os.path.join(root, name), folder_path)
                id = Path(rel).as_posix()
                if prefix is None or id.startswith(prefix):
                    ids.append(id)
        ids.sort()
        if limit is not None:
            ids = ids[:limit]
        items = []
        for id in ids:
            object_path, meta_path = self._get_paths(collection, id)
            document = self._read_document(id, meta_path)
            items.append(
                ObjectItem(
                    key=ObjectKey(id=id),
                    metadata=document.metadata,
                    properties=ObjectProperties.from_dict(document.properties),
                    url=self._get_url(collection, id, object_path),
                )
            )
        return Response(result=ObjectList(items=items))

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
        object_path, _ = self._get_paths(collection, id)
        return Response(
            result=ObjectItem(
                key=ObjectKey(id=id),
                url=self._get_url(collection, id, object_path),
            )
        )

    def close(self, **kwargs: Any) -> Response[None]:
        return Response(result=None)

    def _read_document(self, id: str, meta_path: str) -> ObjectDocument:
        if not os.path.isfile(meta_path):
            return ObjectDocument(id=id, metadata=None, properties=dict())
        with open(meta_path, "r", encoding="utf-8") as file:
            return ObjectDocument.from_dict(json.load(file))

    @staticmethod
    def _write_file(path: str, data: bytes) -> None:
        folder = os.path.dirname(path)
        os.makedirs(folder, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(dir=folder, prefix=".tmp")
        try:
            with os.fdopen(fd, "wb") as file:
                file.write(data)
            os.replace(temp_path, path)
        except BaseException:
            if os.path.exists(temp_path):
                os.remove(temp_path)
            raise
