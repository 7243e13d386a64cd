"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache entry rows and shared callable aliases.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeAlias, TypedDict

Producer: TypeAlias = Callable[[], Awaitable[Any]]
Clock: TypeAlias = Callable[[], float]


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """
    One cached payload with expiration metadata.

    Attributes:
        data: Stored payload. Owned by the store once written.
        created_at: Store clock timestamp of the write.
        ttl_s: Lifetime in seconds; the entry is stale once
            `now - created_at > ttl_s`.
        tags: Group labels used for bulk invalidation.
        version: Store-wide write counter identifying this entry instance.
    """

    data: Any
    created_at: float
    ttl_s: float
    tags: frozenset[str] = field(default_factory=frozenset)
    version: int = 0

    @property
    def expires_at(self) -> float:
        return self.created_at + self.ttl_s

    def is_expired(self, now: float) -> bool:
        return now - self.created_at > self.ttl_s


class EntryDebugInfo(TypedDict):
    """Diagnostic view of one entry returned by `CacheStore.debug`."""

    age_s: float
    ttl_s: float
    expires_in_s: float
    tags: list[str]
