import asyncio
from typing import Any, Callable


def run_async(func: Callable[..., Any], *args, **kwargs):
    return asyncio.to_thread(func, *args, **kwargs)


def run_sync(afunc: Callable[..., Any], *args, **kwargs):
    return asyncio.run(afunc(*args, **kwargs))
