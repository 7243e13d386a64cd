"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Cache runtime settings and explicit config loading.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    value = raw.strip().lower()
    if value in _TRUTHY:
        return True
    if value in _FALSY:
        return False
    raise ValueError(f"Invalid boolean for {name}: {raw!r}")


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """Explicit settings used by cache stores, pagination and controllers."""

    default_ttl_s: float = 300.0
    sweep_interval_s: float | None = 60.0
    single_flight: bool = False
    copy_values: bool = True

    default_page_limit: int = 10
    max_page_limit: int = 100

    metrics_backend: str = "none"
    metrics_namespace: str = "barbercache"

    def __post_init__(self) -> None:
        if self.default_ttl_s < 0:
            raise ValueError("default_ttl_s must be >= 0")
        if self.sweep_interval_s is not None and self.sweep_interval_s <= 0:
            raise ValueError("sweep_interval_s must be > 0 or None")
        if self.default_page_limit < 1:
            raise ValueError("default_page_limit must be >= 1")
        if self.max_page_limit < self.default_page_limit:
            raise ValueError("max_page_limit must be >= default_page_limit")

    @staticmethod
    def from_env() -> "CacheSettings":
        """Load settings from `BARBERCACHE_*` environment variables."""
        sweep = float(os.getenv("BARBERCACHE_SWEEP_INTERVAL_S", "60"))
        return CacheSettings(
            default_ttl_s=float(os.getenv("BARBERCACHE_DEFAULT_TTL_S", "300")),
            sweep_interval_s=sweep if sweep > 0 else None,
            single_flight=_env_bool("BARBERCACHE_SINGLE_FLIGHT", False),
            copy_values=_env_bool("BARBERCACHE_COPY_VALUES", True),
            default_page_limit=int(os.getenv("BARBERCACHE_DEFAULT_PAGE_LIMIT", "10")),
            max_page_limit=int(os.getenv("BARBERCACHE_MAX_PAGE_LIMIT", "100")),
            metrics_backend=os.getenv("BARBERCACHE_METRICS_BACKEND", "none")
            .strip()
            .lower(),
            metrics_namespace=os.getenv("BARBERCACHE_METRICS_NAMESPACE", "barbercache"),
        )
