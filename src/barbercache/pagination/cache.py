"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Page-shaped caching on top of `CacheStore`.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeAlias

from ..cache.store import CacheStore
from ..cache.types import EntryDebugInfo
from .types import PaginatedResponse, PaginationParams

logger = logging.getLogger("barbercache.pagination")

PAGINATION_KEY_PREFIX = "pagination"

PageFetcher: TypeAlias = Callable[[PaginationParams], Awaitable[Any]]


def pagination_key(endpoint: str, params: PaginationParams) -> str:
    """Build the deterministic cache key for one page of `endpoint`."""
    return ":".join(
        (
            PAGINATION_KEY_PREFIX,
            endpoint,
            str(params.page),
            str(params.limit),
            params.sort_by or "default",
            params.sort_order or "asc",
        )
    )


def endpoint_tag(endpoint: str) -> str:
    """Tag attached to every cached page of `endpoint`."""
    return f"{endpoint}:pagination"


class PaginationCache:
    """
    Cache paged collection fetches under deterministic keys.

    Every stored page is tagged with `"<endpoint>:pagination"` in addition to
    the caller's tag, so `invalidate_endpoint` drops all pages of one endpoint.
    """

    def __init__(self, store: CacheStore) -> None:
        self._store = store

    @property
    def store(self) -> CacheStore:
        return self._store

    def key_for(self, endpoint: str, params: PaginationParams) -> str:
        return pagination_key(endpoint, params)

    async def get_paginated(
        self,
        endpoint: str,
        params: PaginationParams,
        fetch_fn: PageFetcher,
        ttl_s: float | None = None,
        tag: str | None = None,
    ) -> PaginatedResponse:
        """Return the cached page or fetch, store and return it."""
        key = pagination_key(endpoint, params)
        tags = [tag, endpoint_tag(endpoint)] if tag else [endpoint_tag(endpoint)]

        async def _fetch() -> PaginatedResponse:
            logger.debug("pagination miss endpoint=%s key=%s", endpoint, key)
            return PaginatedResponse.coerce(await fetch_fn(params))

        return await self._store.get_or_set(key, _fetch, ttl_s, tags)

    def invalidate_endpoint(self, endpoint: str) -> int:
        """Drop every cached page of `endpoint`; returns the count removed."""
        count = self._store.invalidate_by_tag(endpoint_tag(endpoint))
        logger.debug("pagination invalidated endpoint=%s (%d pages)", endpoint, count)
        return count

    def clear_all(self) -> None:
        """Clear the whole underlying store, not only pagination entries."""
        self._store.clear()

    def debug(self) -> dict[str, EntryDebugInfo]:
        return self._store.debug()
