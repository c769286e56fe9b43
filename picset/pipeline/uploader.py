from __future__ import annotations

import uuid

from picset.core import get_logger
from picset.storage.object_store import ObjectItem, ObjectStore
from picset.storage.object_store._helper import build_url

from ._catalog import key_name
from ._models import DerivedEncoding, StoredVariant
from .config import PipelineConfig
from .exceptions import StorageWriteFailure

logger = get_logger(__name__)

UNASSIGNED = "unassigned"


class StorageUploader:
    """Writes both encodings of a variant to the object store.

    Each object is written once with no retry. Keys written before
    a failure are not deleted; they are reported on the error.
    """

    object_store: ObjectStore
    config: PipelineConfig

    def __init__(
        self,
        object_store: ObjectStore,
        config: PipelineConfig | None = None,
    ):
        self.object_store = object_store
        self.config = config or PipelineConfig()

    def new_base_key(self, association_id: str | None = None) -> str:
        return "/".join(
            [
                self.config.key_prefix,
                association_id or UNASSIGNED,
                str(uuid.uuid4()),
            ]
        )

    def get_keys(self, name: str, base_key: str) -> tuple[str, str]:
        stem = f"{base_key}_{key_name(name)}"
        return f"{stem}.webp", f"{stem}.jpg"

    def upload(
        self,
        encoding: DerivedEncoding,
        base_key: str,
        written: list[str] | None = None,
    ) -> StoredVariant:
        written = written if written is not None else []
        webp_key, jpg_key = self.get_keys(encoding.name, base_key)
        webp_url = self._put(
            webp_key, encoding.webp, "image/webp", written
        )
        jpg_url = self._put(jpg_key, encoding.jpeg, "image/jpeg", written)
        return self._stored(encoding, webp_key, jpg_key, webp_url, jpg_url)

    async def aupload(
        self,
        encoding: DerivedEncoding,
        base_key: str,
        written: list[str] | None = None,
    ) -> StoredVariant:
        written = written if written is not None else []
        webp_key, jpg_key = self.get_keys(encoding.name, base_key)
        webp_url = await self._aput(
            webp_key, encoding.webp, "image/webp", written
        )
        jpg_url = await self._aput(
            jpg_key, encoding.jpeg, "image/jpeg", written
        )
        return self._stored(encoding, webp_key, jpg_key, webp_url, jpg_url)

    def _put(
        self,
        key: str,
        value: bytes,
        content_type: str,
        written: list[str],
    ) -> str:
        try:
            response = self.object_store.put(
                key=key,
                value=value,
                properties=self._properties(content_type),
            )
        except Exception as e:
            raise StorageWriteFailure(
                f"Object {key} could not be written: {e}",
                orphaned_keys=written,
            ) from e
        written.append(key)
        return self._url(key, response.result, written)

    async def _aput(
        self,
        key: str,
        value: bytes,
        content_type: str,
        written: list[str],
    ) -> str:
        try:
            response = await self.object_store.aput(
                key=key,
                value=value,
                properties=self._properties(content_type),
            )
        except Exception as e:
            raise StorageWriteFailure(
                f"Object {key} could not be written: {e}",
                orphaned_keys=written,
            ) from e
        written.append(key)
        return self._url(key, response.result, written)

    def _properties(self, content_type: str) -> dict:
        return {
            "content_type": content_type,
            "cache_control": self.config.cache_control,
        }

    def _url(self, key: str, item: ObjectItem, written: list[str]) -> str:
        if self.config.public_base_url is not None:
            return build_url(self.config.public_base_url, key)
        if item.url is None:
            raise StorageWriteFailure(
                f"Object store returned no url for {key}",
                orphaned_keys=written,
            )
        return item.url

    @staticmethod
    def _stored(
        encoding: DerivedEncoding,
        webp_key: str,
        jpg_key: str,
        webp_url: str,
        jpg_url: str,
    ) -> StoredVariant:
        logger.debug(
            "Stored %s as %s and %s", encoding.name, webp_key, jpg_key
        )
        return StoredVariant(
            width=encoding.width,
            height=encoding.height,
            webp_key=webp_key,
            jpg_key=jpg_key,
            webp_url=webp_url,
            jpg_url=jpg_url,
        )
