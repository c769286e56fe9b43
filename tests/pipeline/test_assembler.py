# type: ignore
from datetime import datetime

import pytest

from picset.core.exceptions import InternalError, NotFoundError
from picset.pipeline import (
    CATALOG_VERSION,
    ImageRecord,
    MetadataAssembler,
    MetadataPersistFailure,
    PipelineConfig,
    StoredVariant,
)
from picset.storage.document_store import DocumentStore

from ._providers import RecordingDocumentStore

BASE_KEY = "events/e1/abc"


def stored(name: str, width: int, height: int) -> StoredVariant:
    key = f"{BASE_KEY}_{'orig' if name == 'original' else name}"
    return StoredVariant(
        width=width,
        height=height,
        webp_key=f"{key}.webp",
        jpg_key=f"{key}.jpg",
        webp_url=f"memory://images/{key}.webp",
        jpg_url=f"memory://images/{key}.jpg",
    )


def variants() -> dict[str, StoredVariant]:
    # Completion order, not catalog order.
    return {
        "original": stored("original", 2400, 1600),
        "hero": stored("hero", 2000, 1333),
        "tiny": stored("tiny", 300, 200),
        "card": stored("card", 1200, 800),
        "thumb": stored("thumb", 600, 400),
    }


def get_assembler(fail: bool = False):
    provider = RecordingDocumentStore(fail=fail, collection="images")
    assembler = MetadataAssembler(
        DocumentStore(__provider__=provider), PipelineConfig()
    )
    return assembler, provider


def test_assemble():
    assembler, provider = get_assembler()
    record = assembler.assemble(
        variants(), uploader_id="u1", association_id="e1", source_format="JPEG"
    )
    assert list(record.variants.keys()) == [
        "tiny",
        "thumb",
        "card",
        "hero",
        "original",
    ]
    assert record.original_key == f"{BASE_KEY}_orig.webp"
    assert (record.width, record.height) == (2400, 1600)
    assert record.format == "webp"
    assert record.source_format == "JPEG"
    assert record.event_id == "e1"
    assert record.uploader_id == "u1"
    assert record.catalog_version == CATALOG_VERSION
    assert record.created_at == record.updated_at
    assert datetime.fromisoformat(record.created_at).tzinfo is not None
    # Nothing is written while assembling.
    assert provider.puts == []


def test_assemble_fresh_id():
    assembler, _ = get_assembler()
    first = assembler.assemble(variants(), uploader_id="u1")
    second = assembler.assemble(variants(), uploader_id="u1")
    assert first.id != second.id
    assert first.event_id is None


@pytest.mark.parametrize("missing", ["tiny", "original"])
def test_assemble_incomplete(missing):
    assembler, _ = get_assembler()
    partial = variants()
    partial.pop(missing)
    with pytest.raises(InternalError):
        assembler.assemble(partial, uploader_id="u1")


def test_assemble_unexpected():
    assembler, _ = get_assembler()
    extra = variants()
    extra["poster"] = stored("poster", 800, 533)
    with pytest.raises(InternalError):
        assembler.assemble(extra, uploader_id="u1")


def test_persist():
    assembler, provider = get_assembler()
    record = assembler.assemble(
        variants(), uploader_id="u1", association_id="e1"
    )
    assert assembler.persist(record) is record
    assert len(provider.puts) == 1
    put = provider.puts[0]
    assert put["key"] == record.id
    assert put["exists"] is False
    assert put["value"]["eventId"] == "e1"
    assert put["value"]["originalKey"] == record.original_key
    assert put["value"]["variants"]["thumb"]["webpKey"] == (
        f"{BASE_KEY}_thumb.webp"
    )

    loaded = assembler.load(record.id)
    assert isinstance(loaded, ImageRecord)
    assert loaded == record


def test_persist_duplicate():
    assembler, provider = get_assembler()
    record = assembler.assemble(variants(), uploader_id="u1")
    assembler.persist(record)
    with pytest.raises(MetadataPersistFailure) as exc_info:
        assembler.persist(record)
    assert len(exc_info.value.orphaned_keys) == 10
    assert len(provider.puts) == 2


def test_persist_failure():
    assembler, provider = get_assembler(fail=True)
    record = assembler.assemble(variants(), uploader_id="u1")
    with pytest.raises(MetadataPersistFailure) as exc_info:
        assembler.persist(record)
    assert sorted(exc_info.value.orphaned_keys) == sorted(
        key
        for variant in record.variants.values()
        for key in (variant.webp_key, variant.jpg_key)
    )
    assert isinstance(exc_info.value.__cause__, ConnectionError)
    assert len(provider.puts) == 1


def test_load_missing():
    assembler, _ = get_assembler()
    with pytest.raises(NotFoundError):
        assembler.load("missing")


@pytest.mark.asyncio
async def test_apersist():
    assembler, provider = get_assembler()
    record = assembler.assemble(variants(), uploader_id="u1")
    await assembler.apersist(record)
    assert (await assembler.aload(record.id)).id == record.id
    assert provider.puts[0]["exists"] is False

    with pytest.raises(NotFoundError):
        await assembler.aload("missing")
