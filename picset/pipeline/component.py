"""
Image Pipeline
"""

from __future__ import annotations

import asyncio
import time
from concurrent.futures import FIRST_EXCEPTION, ThreadPoolExecutor, wait
from typing import Any

from picset.core import Component, Response, get_logger, operation
from picset.core._async_helper import run_async
from picset.storage.document_store import DocumentStore
from picset.storage.object_store import ObjectStore

from ._catalog import ORIGINAL_VARIANT
from ._models import (
    ImageRecord,
    IngestResult,
    RawUpload,
    StoredVariant,
    WorkingBuffer,
)
from .assembler import MetadataAssembler
from .config import PipelineConfig
from .deriver import VariantDeriver
from .exceptions import PipelineError
from .normalizer import Normalizer
from .uploader import StorageUploader

logger = get_logger(__name__)


class ImagePipeline(Component):
    object_store: ObjectStore
    document_store: DocumentStore
    config: PipelineConfig

    _normalizer: Normalizer
    _deriver: VariantDeriver
    _uploader: StorageUploader
    _assembler: MetadataAssembler

    def __init__(
        self,
        object_store: ObjectStore,
        document_store: DocumentStore,
        config: PipelineConfig | dict | None = None,
        image_provider: str | dict = "pillow",
        **kwargs,
    ):
        """Initialize.

        Args:
            object_store:
                Object store the encodings are written to.
            document_store:
                Document store the image records are created in.
            config:
                Pipeline settings.
            image_provider:
                Image provider used to decode and encode.
        """
        self.object_store = object_store
        self.document_store = document_store
        if isinstance(config, dict):
            config = PipelineConfig.from_dict(config)
        self.config = config or PipelineConfig()
        self._normalizer = Normalizer(self.config, image_provider)
        self._deriver = VariantDeriver(self.config, image_provider)
        self._uploader = StorageUploader(object_store, self.config)
        self._assembler = MetadataAssembler(document_store, self.config)
        super().__init__(**kwargs)

    @operation()
    def ingest(
        self,
        content: bytes,
        media_type: str,
        uploader_id: str,
        association_id: str | None = None,
        **kwargs: Any,
    ) -> Response[IngestResult]:
        """Ingest an uploaded image.

        Args:
            content:
                Uploaded bytes.
            media_type:
                Declared media type.
            uploader_id:
                Identity of the uploader.
            association_id:
                Owning entity, e.g. an event.

        Returns:
            Id and variant map of the created image record.

        Raises:
            InputValidationFailure:
                Media type not accepted, or upload empty or too large.
            DecodeFailure:
                Upload could not be decoded.
            DerivationFailure:
                A variant could not be resized or encoded.
            StorageWriteFailure:
                An object could not be written.
            MetadataPersistFailure:
                The image record could not be created.
        """
        upload = RawUpload(
            content=content,
            media_type=media_type,
            uploader_id=uploader_id,
            association_id=association_id,
        )
        base_key = self._uploader.new_base_key(association_id)
        started = time.perf_counter()
        try:
            working = self._start(upload, base_key)
            written: list[str] = []
            if self.config.parallel:
                variants = self._run_parallel(working, base_key, written)
            else:
                variants = self._run_sequential(working, base_key, written)
            record = self._assembler.assemble(
                variants,
                uploader_id=upload.uploader_id,
                association_id=upload.association_id,
                source_format=working.source_format,
            )
            self._assembler.persist(record)
        except PipelineError as e:
            self._log_failure(base_key, e)
            raise
        return self._finish(base_key, record, started)

    @operation()
    async def aingest(
        self,
        content: bytes,
        media_type: str,
        uploader_id: str,
        association_id: str | None = None,
        **kwargs: Any,
    ) -> Response[IngestResult]:
        """Ingest an uploaded image.

        Args:
            content:
                Uploaded bytes.
            media_type:
                Declared media type.
            uploader_id:
                Identity of the uploader.
            association_id:
                Owning entity, e.g. an event.

        Returns:
            Id and variant map of the created image record.
        """
        upload = RawUpload(
            content=content,
            media_type=media_type,
            uploader_id=uploader_id,
            association_id=association_id,
        )
        base_key = self._uploader.new_base_key(association_id)
        started = time.perf_counter()
        try:
            working = await run_async(self._start, upload, base_key)
            written: list[str] = []
            if self.config.parallel:
                variants = await self._arun_parallel(
                    working, base_key, written
                )
            else:
                variants = await self._arun_sequential(
                    working, base_key, written
                )
            record = self._assembler.assemble(
                variants,
                uploader_id=upload.uploader_id,
                association_id=upload.association_id,
                source_format=working.source_format,
            )
            await self._assembler.apersist(record)
        except PipelineError as e:
            self._log_failure(base_key, e)
            raise
        return self._finish(base_key, record, started)

    @operation()
    def get(
        self,
        id: str,
        **kwargs: Any,
    ) -> Response[ImageRecord]:
        """Get an image record.

        Args:
            id:
                Image record id.

        Returns:
            Image record.

        Raises:
            NotFoundError:
                Image record not found.
        """
        return Response(result=self._assembler.load(id))

    @operation()
    async def aget(
        self,
        id: str,
        **kwargs: Any,
    ) -> Response[ImageRecord]:
        """Get an image record.

        Args:
            id:
                Image record id.

        Returns:
            Image record.
        """
        return Response(result=await self._assembler.aload(id))

    def _units(self) -> list[tuple[str, int]]:
        units = [(spec.name, spec.width) for spec in self.config.catalog]
        units.append((ORIGINAL_VARIANT, self.config.original_width))
        return units

    def _start(self, upload: RawUpload, base_key: str) -> WorkingBuffer:
        logger.info(
            "Ingest %s started (%s, %d bytes)",
            base_key,
            upload.media_type,
            len(upload.content),
        )
        working = self._normalizer.normalize(upload)
        logger.debug(
            "Normalized %s to %dx%d %s",
            base_key,
            working.width,
            working.height,
            working.mode,
        )
        return working

    def _run_unit(
        self,
        working: WorkingBuffer,
        name: str,
        width: int,
        base_key: str,
        written: list[str],
    ) -> StoredVariant:
        encoding = self._deriver.derive_one(working, name, width)
        return self._uploader.upload(encoding, base_key, written)

    async def _arun_unit(
        self,
        working: WorkingBuffer,
        name: str,
        width: int,
        base_key: str,
        written: list[str],
    ) -> StoredVariant:
        encoding = await run_async(
            self._deriver.derive_one, working, name, width
        )
        return await self._uploader.aupload(encoding, base_key, written)

    def _run_sequential(
        self,
        working: WorkingBuffer,
        base_key: str,
        written: list[str],
    ) -> dict[str, StoredVariant]:
        variants = dict()
        try:
            for name, width in self._units():
                variants[name] = self._run_unit(
                    working, name, width, base_key, written
                )
        except PipelineError as e:
            e.orphaned_keys = list(written)
            raise
        return variants

    async def _arun_sequential(
        self,
        working: WorkingBuffer,
        base_key: str,
        written: list[str],
    ) -> dict[str, StoredVariant]:
        variants = dict()
        try:
            for name, width in self._units():
                variants[name] = await self._arun_unit(
                    working, name, width, base_key, written
                )
        except PipelineError as e:
            e.orphaned_keys = list(written)
            raise
        return variants

    def _run_parallel(
        self,
        working: WorkingBuffer,
        base_key: str,
        written: list[str],
    ) -> dict[str, StoredVariant]:
        units = self._units()
        executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers or len(units),
            thread_name_prefix="picset-variant",
        )
        try:
            futures = [
                executor.submit(
                    self._run_unit, working, name, width, base_key, written
                )
                for name, width in units
            ]
            # Units still running on failure are abandoned, not awaited.
            wait(futures, return_when=FIRST_EXCEPTION)
            for future in futures:
                if future.done() and future.exception() is not None:
                    raise self._orphaned(future.exception(), written)
            return {
                name: future.result()
                for (name, _), future in zip(units, futures)
            }
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

    async def _arun_parallel(
        self,
        working: WorkingBuffer,
        base_key: str,
        written: list[str],
    ) -> dict[str, StoredVariant]:
        units = self._units()
        tasks = [
            asyncio.ensure_future(
                self._arun_unit(working, name, width, base_key, written)
            )
            for name, width in units
        ]
        done, pending = await asyncio.wait(
            tasks, return_when=asyncio.FIRST_EXCEPTION
        )
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        for task in tasks:
            if task in done and task.exception() is not None:
                raise self._orphaned(task.exception(), written)
        return {
            name: task.result() for (name, _), task in zip(units, tasks)
        }

    @staticmethod
    def _orphaned(error: BaseException, written: list[str]) -> BaseException:
        if isinstance(error, PipelineError):
            error.orphaned_keys = list(written)
        return error

    def _finish(
        self,
        base_key: str,
        record: ImageRecord,
        started: float,
    ) -> Response[IngestResult]:
        logger.info(
            "Ingest %s finished as image %s in %.3fs",
            base_key,
            record.id,
            time.perf_counter() - started,
        )
        return Response(
            result=IngestResult(
                id=record.id,
                variants=record.variants,
                record=record,
            )
        )

    def _log_failure(self, base_key: str, error: PipelineError) -> None:
        logger.error(
            "Ingest %s failed with %s: %s (%d orphaned objects)",
            base_key,
            type(error).__name__,
            error,
            len(error.orphaned_keys),
        )
