from typing import Any

from picset.pipeline import ImagePipeline, PipelineConfig
from picset.storage.document_store import DocumentStore
from picset.storage.document_store.providers.memory import (
    Memory as MemoryDocumentStore,
)
from picset.storage.object_store import ObjectStore
from picset.storage.object_store.providers.memory import (
    Memory as MemoryObjectStore,
)


class FailingObjectStore(MemoryObjectStore):
    """Memory object store that fails writes of matching keys."""

    def __init__(self, fail_on: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.fail_on = fail_on
        self.put_keys: list[str] = []

    def put(self, key, value, **kwargs):
        self.put_keys.append(key)
        if self.fail_on is not None and self.fail_on in key:
            raise ConnectionError(f"Write of {key} refused")
        return super().put(key=key, value=value, **kwargs)


class RecordingDocumentStore(MemoryDocumentStore):
    """Memory document store that records every put."""

    def __init__(self, fail: bool = False, **kwargs):
        super().__init__(**kwargs)
        self.fail = fail
        self.puts: list[dict] = []

    def put(self, value, key=None, exists=None, **kwargs):
        self.puts.append(dict(value=value, key=key, exists=exists))
        if self.fail:
            raise ConnectionError("Metadata store unavailable")
        return super().put(value=value, key=key, exists=exists, **kwargs)


def get_pipeline(
    fail_on: str | None = None,
    fail_metadata: bool = False,
    **config: Any,
) -> tuple[ImagePipeline, FailingObjectStore, RecordingDocumentStore]:
    object_provider = FailingObjectStore(
        fail_on=fail_on, collection="images"
    )
    document_provider = RecordingDocumentStore(
        fail=fail_metadata, collection="images"
    )
    pipeline = ImagePipeline(
        object_store=ObjectStore(__provider__=object_provider),
        document_store=DocumentStore(__provider__=document_provider),
        config=PipelineConfig(**config),
    )
    return pipeline, object_provider, document_provider


def stored_keys(object_provider: FailingObjectStore) -> list[str]:
    return sorted(object_provider._get_collection(None).keys())
