from common.sync_and_async_client import SyncAndAsyncClient

from picset.pipeline import ImagePipeline


class PipelineSyncAndAsyncClient(SyncAndAsyncClient):
    def __init__(self, pipeline: ImagePipeline, async_call: bool):
        self.client = pipeline
        self.async_call = async_call

    async def ingest(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def get(self, **kwargs):
        return await self._execute_method(**kwargs)
