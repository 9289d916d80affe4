"""Concurrent store reads that fail as a unit."""

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """
    Await all awaitables concurrently and return their results in order.

    If one fails, the others are cancelled before the error propagates, so
    no read keeps running for a statement that is never returned. The first
    failure is re-raised as-is instead of an ExceptionGroup.

    Raises:
        Exception: The first error raised by any of the awaitables
    """
    try:
        async with asyncio.TaskGroup() as group:
            tasks = [group.create_task(_as_coroutine(aw)) for aw in aws]
    except BaseExceptionGroup as errors:
        raise errors.exceptions[0] from None

    return [task.result() for task in tasks]


async def _as_coroutine(aw: Awaitable[Any]) -> Any:
    return await aw


__all__ = ["gather_or_cancel"]
