from typing import Any

from common.sync_and_async_client import SyncAndAsyncClient

from ._providers import get_component


class ObjectStoreSyncAndAsyncClient(SyncAndAsyncClient):
    def __init__(
        self, provider_type: str, async_call: bool, **parameters: Any
    ):
        self.client = get_component(provider_type, **parameters)
        self.async_call = async_call
        self.provider_type = provider_type

    async def put(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def get(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def delete(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def query(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def generate(self, **kwargs):
        return await self._execute_method(**kwargs)

    async def close(self, **kwargs):
        return await self._execute_method(**kwargs)
