"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers that build injectable cache instances from settings.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .cache.metrics import CacheMetrics, create_cache_metrics
from .cache.store import CacheStore
from .cache.types import Clock
from .pagination.cache import PaginationCache
from .pagination.types import PaginationQuery
from .settings import CacheSettings


def create_cache_store(
    settings: CacheSettings | None = None,
    *,
    metrics: CacheMetrics | None = None,
    clock: Clock | None = None,
) -> CacheStore:
    """
    Build a `CacheStore` from explicit settings, or from `BARBERCACHE_*` env.

    The caller owns the store: call `start()` (or use `async with`) to run the
    background sweeper and `close()` at shutdown.
    """
    resolved = settings or CacheSettings.from_env()
    if metrics is None:
        metrics = create_cache_metrics(
            resolved.metrics_backend, namespace=resolved.metrics_namespace
        )
    return CacheStore.from_settings(resolved, clock=clock, metrics=metrics)


def create_pagination_cache(
    store: CacheStore | None = None,
    *,
    settings: CacheSettings | None = None,
) -> PaginationCache:
    """Wrap `store`, or a freshly built one, in a `PaginationCache`."""
    return PaginationCache(store or create_cache_store(settings))


def parse_pagination_query(
    query: Mapping[str, Any],
    settings: CacheSettings | None = None,
) -> PaginationQuery:
    """Parse raw query values using the configured default and max page size."""
    resolved = settings or CacheSettings.from_env()
    return PaginationQuery.from_query(
        query,
        default_limit=resolved.default_page_limit,
        max_limit=resolved.max_page_limit,
    )
