"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics sinks for cache store observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class CacheMetrics(Protocol):
    """Minimal metrics interface for cache store instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpCacheMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


class InMemoryCacheMetrics:
    """Counter sink that keeps totals in a dict, mostly useful in tests."""

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = tags
        self.counters[name] = self.counters.get(name, 0) + value


# Prometheus refuses a second collector with the same name in one registry,
# so counters are shared per (registry, namespace, metric, labels).
_SHARED_COUNTERS: dict[tuple[object, str, str], object] = {}


class PrometheusCacheMetrics:
    """
    Prometheus-backed cache metrics adapter.

    Requires `prometheus_client` package. Instances that target the same
    registry and namespace feed the same counters, so several stores can
    report into one process-wide registry.
    """

    def __init__(self, *, namespace: str = "barbercache", registry=None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCacheMetrics requires `prometheus_client` to be installed."
            ) from exc

        self._Counter = Counter
        self._namespace = namespace
        self._registry = registry if registry is not None else REGISTRY

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        label_names = tuple(sorted((tags or {}).keys()))
        key = (self._registry, self._namespace, f"{name}|{','.join(label_names)}")
        counter = _SHARED_COUNTERS.get(key)
        if counter is None:
            counter = self._Counter(
                name=name,
                documentation=f"Cache store metric {name}",
                namespace=self._namespace,
                labelnames=label_names,
                registry=self._registry,
            )
            _SHARED_COUNTERS[key] = counter

        if label_names:
            label_values = [str((tags or {})[label]) for label in label_names]
            counter.labels(*label_values).inc(value)
        else:
            counter.inc(value)


def create_cache_metrics(backend: str = "none", *, namespace: str = "barbercache") -> CacheMetrics:
    """Resolve a metrics sink from a backend id."""
    key = backend.strip().lower()
    if key in ("", "none", "noop"):
        return NoOpCacheMetrics()
    if key in ("memory", "inmemory"):
        return InMemoryCacheMetrics()
    if key == "prometheus":
        return PrometheusCacheMetrics(namespace=namespace)
    raise ValueError(f"Unknown cache metrics backend: {backend}")
