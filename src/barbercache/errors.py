"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error types raised by cache stores and pagination helpers.
"""

from __future__ import annotations


class CacheError(RuntimeError):
    """Base error for cache store failures."""


class CacheStoreClosedError(CacheError):
    """Raised when an operation targets a store that was already closed."""


class PaginationError(ValueError):
    """Raised for invalid pagination parameters or unusable page payloads."""
