from __future__ import annotations

import uuid
from datetime import datetime, timezone

from picset.core import get_logger
from picset.core.exceptions import InternalError, NotFoundError
from picset.storage.document_store import DocumentStore

from ._catalog import CATALOG_VERSION, ORIGINAL_VARIANT
from ._models import ImageRecord, StoredVariant, VariantMap
from .config import PipelineConfig
from .exceptions import MetadataPersistFailure

logger = get_logger(__name__)


class MetadataAssembler:
    """Builds the image record and creates it in the document store.

    The create is the only write to the document store and happens
    once per ingest, after every variant is stored.
    """

    document_store: DocumentStore
    config: PipelineConfig

    def __init__(
        self,
        document_store: DocumentStore,
        config: PipelineConfig | None = None,
    ):
        self.document_store = document_store
        self.config = config or PipelineConfig()

    def expected_names(self) -> list[str]:
        return [spec.name for spec in self.config.catalog] + [
            ORIGINAL_VARIANT
        ]

    def assemble(
        self,
        variants: dict[str, StoredVariant],
        uploader_id: str,
        association_id: str | None = None,
        source_format: str | None = None,
    ) -> ImageRecord:
        names = self.expected_names()
        if sorted(variants.keys()) != sorted(names):
            raise InternalError(
                f"Variant map {sorted(variants.keys())} "
                f"does not match the catalog {names}"
            )
        variant_map: VariantMap = {name: variants[name] for name in names}
        original = variant_map[ORIGINAL_VARIANT]
        now = datetime.now(timezone.utc).isoformat()
        return ImageRecord(
            id=str(uuid.uuid4()),
            event_id=association_id,
            uploader_id=uploader_id,
            original_key=original.webp_key,
            format="webp",
            source_format=source_format,
            width=original.width,
            height=original.height,
            variants=variant_map,
            catalog_version=CATALOG_VERSION,
            created_at=now,
            updated_at=now,
        )

    def persist(self, record: ImageRecord) -> ImageRecord:
        try:
            self.document_store.put(
                value=record.to_dict(by_alias=True),
                key=record.id,
                exists=False,
            )
        except Exception as e:
            raise MetadataPersistFailure(
                f"Image record {record.id} could not be created: {e}",
                orphaned_keys=self._keys(record),
            ) from e
        logger.debug("Created image record %s", record.id)
        return record

    async def apersist(self, record: ImageRecord) -> ImageRecord:
        try:
            await self.document_store.aput(
                value=record.to_dict(by_alias=True),
                key=record.id,
                exists=False,
            )
        except Exception as e:
            raise MetadataPersistFailure(
                f"Image record {record.id} could not be created: {e}",
                orphaned_keys=self._keys(record),
            ) from e
        logger.debug("Created image record %s", record.id)
        return record

    def load(self, id: str) -> ImageRecord:
        try:
            response = self.document_store.get(key=id)
        except NotFoundError as e:
            raise NotFoundError(f"Image {id} not found") from e
        return ImageRecord.from_dict(response.result.value)

    async def aload(self, id: str) -> ImageRecord:
        try:
            response = await self.document_store.aget(key=id)
        except NotFoundError as e:
            raise NotFoundError(f"Image {id} not found") from e
        return ImageRecord.from_dict(response.result.value)

    @staticmethod
    def _keys(record: ImageRecord) -> list[str]:
        keys = []
        for variant in record.variants.values():
            keys.extend([variant.webp_key, variant.jpg_key])
        return keys
