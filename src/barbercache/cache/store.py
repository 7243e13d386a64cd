"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-memory cache store with TTL expiry and tag-based invalidation.
"""

from __future__ import annotations

import copy
import heapq
import logging
import time
from collections.abc import Iterable
from typing import TYPE_CHECKING, Any

from ..errors import CacheStoreClosedError
from .coalescing import RequestCoalescer
from .metrics import CacheMetrics, NoOpCacheMetrics
from .patterns import key_matches
from .sweeper import ExpirySweeper
from .types import CacheEntry, Clock, EntryDebugInfo, Producer

if TYPE_CHECKING:
    from ..settings import CacheSettings

logger = logging.getLogger("barbercache.cache.store")

DEFAULT_TTL_S = 300.0

# Rebuild the deadline heap once stale records outnumber live entries this much.
_HEAP_COMPACT_FACTOR = 2
_HEAP_COMPACT_MIN = 64


class CacheStore:
    """
    Process-local key/value store with per-entry TTL and tag groups.

    Expiry is checked lazily on every read; that check is the source of truth.
    Deadlines are also kept in a min-heap so `sweep_expired()` (run on each
    write and by the optional background sweeper) can reclaim stale rows
    without one timer per entry. Heap records carry the entry version, so a
    record left behind by an overwritten key never evicts the newer entry.

    Payloads are deep-copied on the way in and on the way out unless
    `copy_values=False`.

    Without `single_flight`, concurrent `get_or_set` misses on the same key
    each invoke their producer. With it, they share one in-flight call.
    """

    def __init__(
        self,
        *,
        default_ttl_s: float = DEFAULT_TTL_S,
        sweep_interval_s: float | None = None,
        single_flight: bool = False,
        copy_values: bool = True,
        clock: Clock | None = None,
        metrics: CacheMetrics | None = None,
    ) -> None:
        if default_ttl_s < 0:
            raise ValueError("default_ttl_s must be >= 0")
        if sweep_interval_s is not None and sweep_interval_s <= 0:
            raise ValueError("sweep_interval_s must be > 0 or None")
        self._default_ttl_s = default_ttl_s
        self._sweep_interval_s = sweep_interval_s
        self._copy_values = copy_values
        self._clock: Clock = clock or time.monotonic
        self._metrics: CacheMetrics = metrics or NoOpCacheMetrics()
        self._coalescer = RequestCoalescer() if single_flight else None

        self._entries: dict[str, CacheEntry] = {}
        self._tags: dict[str, set[str]] = {}
        self._deadlines: list[tuple[float, int, str]] = []
        self._version = 0

        self._sweeper: ExpirySweeper | None = None
        self._closed = False

    @classmethod
    def from_settings(
        cls,
        settings: CacheSettings,
        *,
        clock: Clock | None = None,
        metrics: CacheMetrics | None = None,
    ) -> CacheStore:
        return cls(
            default_ttl_s=settings.default_ttl_s,
            sweep_interval_s=settings.sweep_interval_s,
            single_flight=settings.single_flight,
            copy_values=settings.copy_values,
            clock=clock,
            metrics=metrics,
        )

    @property
    def default_ttl_s(self) -> float:
        return self._default_ttl_s

    @property
    def single_flight(self) -> bool:
        return self._coalescer is not None

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def set(
        self,
        key: str,
        data: Any,
        ttl_s: float | None = None,
        tags: Iterable[str] = (),
    ) -> None:
        """Store `data` under `key`, replacing any previous entry."""
        self._ensure_open()
        self._validate_key(key)
        ttl = self._resolve_ttl(ttl_s)
        tag_set = self._normalize_tags(tags)

        now = self._clock()
        self._sweep_due(now)
        self._remove(key)

        self._version += 1
        entry = CacheEntry(
            data=self._copy(data),
            created_at=now,
            ttl_s=ttl,
            tags=tag_set,
            version=self._version,
        )
        self._entries[key] = entry
        for tag in tag_set:
            self._tags.setdefault(tag, set()).add(key)
        heapq.heappush(self._deadlines, (entry.expires_at, entry.version, key))
        self._maybe_compact()
        self._metrics.incr("cache_sets")
        logger.debug("cache set key=%s ttl=%.1fs tags=%s", key, ttl, sorted(tag_set))

    def get(self, key: str, default: Any = None) -> Any:
        """Return a copy of the fresh value at `key`, or `default`."""
        entry = self._lookup(key)
        if entry is None:
            self._metrics.incr("cache_misses")
            return default
        self._metrics.incr("cache_hits")
        return self._copy(entry.data)

    def delete(self, key: str) -> bool:
        """Remove one entry; `False` when nothing was stored under `key`."""
        removed = self._remove(key) is not None
        if removed:
            self._metrics.incr("cache_deletes")
        return removed

    def clear(self, pattern: str | None = None) -> int:
        """
        Drop every entry, or only the keys matching a glob `pattern`.

        Returns the number of entries removed.
        """
        if pattern is None:
            count = len(self._entries)
            self._entries.clear()
            self._tags.clear()
            self._deadlines.clear()
            logger.debug("cache cleared (%d entries)", count)
            return count

        matched = [key for key in self._entries if key_matches(pattern, key)]
        for key in matched:
            self._remove(key)
        logger.debug("cache cleared pattern=%s (%d entries)", pattern, len(matched))
        return len(matched)

    def invalidate_by_tag(self, tag: str) -> int:
        """Delete every entry registered under `tag` and return the count."""
        keys = list(self._tags.get(tag, ()))
        count = 0
        for key in keys:
            if self._remove(key) is not None:
                count += 1
        if count:
            self._metrics.incr("cache_invalidations", count)
        logger.debug("cache invalidated tag=%s (%d entries)", tag, count)
        return count

    async def get_or_set(
        self,
        key: str,
        producer: Producer,
        ttl_s: float | None = None,
        tags: Iterable[str] = (),
    ) -> Any:
        """
        Return the cached value for `key`, producing and storing it on a miss.

        Producer failures propagate and nothing is written.
        """
        self._ensure_open()
        self._validate_key(key)
        ttl = self._resolve_ttl(ttl_s)
        tag_set = self._normalize_tags(tags)

        entry = self._lookup(key)
        if entry is not None:
            self._metrics.incr("cache_hits")
            return self._copy(entry.data)
        self._metrics.incr("cache_misses")

        if self._coalescer is None:
            return await self._produce(key, producer, ttl, tag_set)

        value = await self._coalescer.run(
            key, lambda: self._produce(key, producer, ttl, tag_set)
        )
        return self._copy(value)

    def size(self) -> int:
        return len(self._entries)

    def keys(self) -> list[str]:
        return list(self._entries)

    def debug(self) -> dict[str, EntryDebugInfo]:
        """Snapshot age, TTL and tags per entry without touching the store."""
        now = self._clock()
        out: dict[str, EntryDebugInfo] = {}
        for key, entry in self._entries.items():
            age = now - entry.created_at
            out[key] = {
                "age_s": age,
                "ttl_s": entry.ttl_s,
                "expires_in_s": entry.ttl_s - age,
                "tags": sorted(entry.tags),
            }
        return out

    def sweep_expired(self) -> int:
        """Delete entries whose TTL elapsed; returns the number removed."""
        return self._sweep_due(self._clock())

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start the background sweeper when a sweep interval is configured."""
        self._ensure_open()
        if self._sweep_interval_s is None:
            return
        if self._sweeper is not None and self._sweeper.is_running:
            return
        self._sweeper = ExpirySweeper(self, interval_s=self._sweep_interval_s)
        self._sweeper.start()

    async def close(self) -> None:
        """Stop the sweeper and drop all entries. Later writes raise."""
        if self._closed:
            return
        self._closed = True
        if self._sweeper is not None:
            await self._sweeper.stop()
            self._sweeper = None
        self.clear()

    async def __aenter__(self) -> CacheStore:
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _produce(
        self,
        key: str,
        producer: Producer,
        ttl_s: float,
        tags: frozenset[str],
    ) -> Any:
        data = await producer()
        if self._closed:
            logger.debug("cache closed while producing key=%s; result not stored", key)
            return data
        self.set(key, data, ttl_s, tags)
        return data

    def _lookup(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self._clock()):
            self._remove(key)
            self._metrics.incr("cache_expired")
            return None
        return entry

    def _remove(self, key: str) -> CacheEntry | None:
        entry = self._entries.pop(key, None)
        if entry is None:
            return None
        for tag in entry.tags:
            bucket = self._tags.get(tag)
            if bucket is None:
                continue
            bucket.discard(key)
            if not bucket:
                del self._tags[tag]
        return entry

    def _sweep_due(self, now: float) -> int:
        removed = 0
        while self._deadlines and self._deadlines[0][0] <= now:
            deadline, version, key = heapq.heappop(self._deadlines)
            entry = self._entries.get(key)
            if entry is None or entry.version != version:
                continue
            if not entry.is_expired(now):
                heapq.heappush(self._deadlines, (deadline, version, key))
                break
            self._remove(key)
            removed += 1
        if removed:
            self._metrics.incr("cache_expired", removed)
        return removed

    def _maybe_compact(self) -> None:
        live = len(self._entries)
        if len(self._deadlines) <= max(_HEAP_COMPACT_MIN, live * _HEAP_COMPACT_FACTOR):
            return
        self._deadlines = [
            (entry.expires_at, entry.version, key)
            for key, entry in self._entries.items()
        ]
        heapq.heapify(self._deadlines)

    def _copy(self, value: Any) -> Any:
        if not self._copy_values:
            return value
        return copy.deepcopy(value)

    def _resolve_ttl(self, ttl_s: float | None) -> float:
        ttl = self._default_ttl_s if ttl_s is None else float(ttl_s)
        if ttl < 0:
            raise ValueError("ttl_s must be >= 0")
        return ttl

    def _ensure_open(self) -> None:
        if self._closed:
            raise CacheStoreClosedError("Cache store is closed")

    @staticmethod
    def _validate_key(key: str) -> None:
        if not isinstance(key, str) or not key.strip():
            raise ValueError("Cache key must be a non-empty string")

    @staticmethod
    def _normalize_tags(tags: Iterable[str]) -> frozenset[str]:
        if isinstance(tags, str):
            tags = (tags,)
        return frozenset(tag for tag in tags if tag)
