"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Background expiry sweeper that reclaims memory held by stale entries.

Reads never depend on the sweeper: `CacheStore.get` checks TTL on every
lookup. The sweeper only bounds how long expired rows stay resident.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

logger = logging.getLogger("barbercache.cache.sweeper")


class SweepTarget(Protocol):
    """Anything exposing an expiry sweep."""

    def sweep_expired(self) -> int: ...


class ExpirySweeper:
    """Periodically call `sweep_expired()` on one target."""

    def __init__(self, target: SweepTarget, *, interval_s: float) -> None:
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self._target = target
        self._interval_s = interval_s
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self.total_swept = 0

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self._running:
            raise RuntimeError("ExpirySweeper is already running")
        loop = asyncio.get_running_loop()
        self._running = True
        self._task = loop.create_task(self._loop())
        logger.debug("ExpirySweeper started (interval=%.1fs)", self._interval_s)

    async def stop(self) -> None:
        self._running = False
        if self._task and not self._task.done():
            self._task.cancel()
            await asyncio.gather(self._task, return_exceptions=True)
        self._task = None
        logger.debug("ExpirySweeper stopped (swept=%d)", self.total_swept)

    async def _loop(self) -> None:
        while self._running:
            try:
                await asyncio.sleep(self._interval_s)
                if not self._running:
                    break
                removed = self._target.sweep_expired()
                self.total_swept += removed
                if removed:
                    logger.debug("ExpirySweeper removed %d expired entries", removed)
            except asyncio.CancelledError:
                raise
            except Exception:  # noqa: BLE001
                logger.exception("ExpirySweeper pass failed")
