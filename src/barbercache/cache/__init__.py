"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: cache/__init__.py.
"""

from .coalescing import RequestCoalescer
from .metrics import (
    CacheMetrics,
    InMemoryCacheMetrics,
    NoOpCacheMetrics,
    PrometheusCacheMetrics,
    create_cache_metrics,
)
from .middleware import cache_middleware, cached, make_cache_key
from .patterns import compile_key_pattern, key_matches
from .store import DEFAULT_TTL_S, CacheStore
from .sweeper import ExpirySweeper
from .types import CacheEntry, EntryDebugInfo, Producer

__all__ = [
    "CacheEntry",
    "CacheStore",
    "DEFAULT_TTL_S",
    "EntryDebugInfo",
    "Producer",
    "RequestCoalescer",
    "ExpirySweeper",
    "CacheMetrics",
    "NoOpCacheMetrics",
    "InMemoryCacheMetrics",
    "PrometheusCacheMetrics",
    "create_cache_metrics",
    "cache_middleware",
    "cached",
    "make_cache_key",
    "compile_key_pattern",
    "key_matches",
]
