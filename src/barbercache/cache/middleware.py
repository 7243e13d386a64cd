"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Helpers that route async producers through `CacheStore.get_or_set`.
"""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

from .store import CacheStore
from .types import Producer

T = TypeVar("T")


def cache_middleware(
    store: CacheStore,
    key: str,
    ttl_s: float | None = None,
    tags: Iterable[str] = (),
) -> Callable[[Producer], Awaitable[Any]]:
    """
    Bind a fixed key/TTL/tags and return a runner for producers.

    Usage::

        run = cache_middleware(store, "barbershops:featured", ttl_s=60)
        shops = await run(api.list_featured)
    """
    tag_list = tuple(tags)

    async def _run(fn: Producer) -> Any:
        return await store.get_or_set(key, fn, ttl_s, tag_list)

    return _run


def cached(
    store: CacheStore,
    key_builder: Callable[..., str],
    *,
    ttl_s: float | None = None,
    tags: Iterable[str] = (),
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[T]]]:
    """
    Decorate an async function so its results are cached per derived key.

    `key_builder` receives the same arguments as the decorated function.
    """
    tag_list = tuple(tags)

    def _decorator(fn: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(fn)
        async def _wrapper(*args: Any, **kwargs: Any) -> T:
            key = key_builder(*args, **kwargs)
            return await store.get_or_set(
                key, lambda: fn(*args, **kwargs), ttl_s, tag_list
            )

        return _wrapper

    return _decorator


def make_cache_key(*parts: object) -> str:
    """Join key parts with `:`, the separator used across cache keys."""
    return ":".join(str(part) for part in parts)
