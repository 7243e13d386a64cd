"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-flight request de-duplication (single-flight) for cache misses.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

T = TypeVar("T")


class RequestCoalescer:
    """Deduplicate identical in-flight producer calls by key."""

    def __init__(self) -> None:
        self._tasks: dict[str, asyncio.Task[Any]] = {}

    def in_flight(self, key: str) -> bool:
        task = self._tasks.get(key)
        return task is not None and not task.done()

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    async def run(self, key: str, factory: Callable[[], Awaitable[T]]) -> T:
        """
        Await the in-flight task for `key`, starting it with `factory` if none.

        Waiters are shielded so one cancelled caller does not cancel the
        shared task for the others.
        """
        task = self._tasks.get(key)
        if task is None:
            task = asyncio.ensure_future(factory())
            self._tasks[key] = task
            task.add_done_callback(lambda done, k=key: self._forget(k, done))
        return await asyncio.shield(task)

    def _forget(self, key: str, task: asyncio.Task[Any]) -> None:
        if self._tasks.get(key) is task:
            del self._tasks[key]
        # Retrieve the exception so abandoned failures are not reported as
        # "never retrieved" when every waiter was cancelled.
        if not task.cancelled():
            task.exception()
