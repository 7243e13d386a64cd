"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: pagination/__init__.py.
"""

from .cache import (
    PAGINATION_KEY_PREFIX,
    PageFetcher,
    PaginationCache,
    endpoint_tag,
    pagination_key,
)
from .types import (
    DEFAULT_PAGE_LIMIT,
    MAX_PAGE_LIMIT,
    PaginatedResponse,
    PaginationParams,
    PaginationQuery,
    SortOrder,
    count_pages,
)

__all__ = [
    "PaginationCache",
    "PageFetcher",
    "PAGINATION_KEY_PREFIX",
    "pagination_key",
    "endpoint_tag",
    "PaginationParams",
    "PaginatedResponse",
    "PaginationQuery",
    "SortOrder",
    "DEFAULT_PAGE_LIMIT",
    "MAX_PAGE_LIMIT",
    "count_pages",
]
