"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

In-memory cache, pagination cache and data-fetch controllers for the
barbershop booking client.
"""

from .cache import CacheEntry, CacheStore, cache_middleware, cached, make_cache_key
from .errors import CacheError, CacheStoreClosedError, PaginationError
from .factory import (
    create_cache_store,
    create_pagination_cache,
    parse_pagination_query,
)
from .hooks import (
    AsyncState,
    DataController,
    LoadingTracker,
    PaginationController,
)
from .pagination import (
    PaginatedResponse,
    PaginationCache,
    PaginationParams,
    PaginationQuery,
    pagination_key,
)
from .settings import CacheSettings

__all__ = [
    "CacheEntry",
    "CacheStore",
    "cache_middleware",
    "cached",
    "make_cache_key",
    "CacheError",
    "CacheStoreClosedError",
    "PaginationError",
    "CacheSettings",
    "create_cache_store",
    "create_pagination_cache",
    "parse_pagination_query",
    "PaginationCache",
    "PaginationParams",
    "PaginatedResponse",
    "PaginationQuery",
    "pagination_key",
    "PaginationController",
    "DataController",
    "LoadingTracker",
    "AsyncState",
]
