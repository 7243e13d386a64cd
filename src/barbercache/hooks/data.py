"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Single-value data-fetch controller backed by `CacheStore`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ..cache.store import CacheStore
from ..cache.types import Producer
from .base import DEFAULT_REFETCH_ERROR_MESSAGE, ErrorCallback, FetchController

logger = logging.getLogger("barbercache.hooks.data")


@dataclass(frozen=True, slots=True)
class DataState:
    """Point-in-time view of a `DataController`."""

    data: Any = None
    is_loading: bool = False
    error: str | None = None


class DataController(FetchController):
    """
    Load one value under an explicit cache key.

    `load()` reads through the cache; `refetch()` skips the cache read but
    writes the fresh value back under the same key and tag. With `skip=True`
    nothing is fetched and `is_loading` stays `False`. Refetch failures fall
    back to `refetch_error_message` instead of `error_message`.
    """

    def __init__(
        self,
        key: str,
        fetch_fn: Producer,
        store: CacheStore,
        *,
        ttl_s: float | None = None,
        tag: str | None = None,
        skip: bool = False,
        on_error: ErrorCallback | None = None,
        error_message: str | None = None,
        refetch_error_message: str | None = None,
    ) -> None:
        super().__init__(
            on_error=on_error, error_message=error_message, is_loading=not skip
        )
        self._key = key
        self._fetch_fn = fetch_fn
        self._store = store
        self._ttl_s = ttl_s
        self._tags: tuple[str, ...] = (tag,) if tag else ()
        self._skip = skip
        self._refetch_error = refetch_error_message or DEFAULT_REFETCH_ERROR_MESSAGE
        self._data: Any = None

    @property
    def key(self) -> str:
        return self._key

    @property
    def data(self) -> Any:
        return self._data

    @property
    def skip(self) -> bool:
        return self._skip

    def snapshot(self) -> DataState:
        return DataState(data=self._data, is_loading=self.is_loading, error=self.error)

    async def load(self) -> None:
        """Read through the cache unless skipped."""
        if self._skip:
            return
        token = self._begin()
        try:
            value = await self._store.get_or_set(
                self._key, self._fetch_fn, self._ttl_s, self._tags
            )
        except Exception as exc:
            if self._is_current(token):
                self._data = None
                self._record_failure(exc)
        else:
            if self._is_current(token):
                self._data = value
            else:
                logger.debug("Dropping stale value for key=%s", self._key)
        finally:
            self._settle(token)

    async def refetch(self) -> None:
        """Call the fetch function directly and refresh the cached copy."""
        token = self._begin()
        try:
            value = await self._fetch_fn()
            self._store.set(self._key, value, self._ttl_s, self._tags)
        except Exception as exc:
            if self._is_current(token):
                self._data = None
                self._record_failure(exc, self._refetch_error)
        else:
            if self._is_current(token):
                self._data = value
        finally:
            self._settle(token)

    async def set_skip(self, skip: bool) -> None:
        """Toggle skipping; turning it off triggers a load."""
        if skip == self._skip:
            return
        self._skip = skip
        if skip:
            if self._is_loading:
                self._is_loading = False
                self._notify()
            return
        await self.load()
