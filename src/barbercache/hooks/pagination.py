"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Paginated data-fetch controller backed by `PaginationCache`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..pagination.cache import PageFetcher, PaginationCache
from ..pagination.types import (
    DEFAULT_PAGE_LIMIT,
    PaginatedResponse,
    PaginationParams,
    SortOrder,
)
from .base import ErrorCallback, FetchController

logger = logging.getLogger("barbercache.hooks.pagination")


@dataclass(frozen=True, slots=True)
class PaginationState:
    """Point-in-time view of a `PaginationController`."""

    data: list[Any] = field(default_factory=list)
    is_loading: bool = False
    error: str | None = None
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    total: int = 0
    pages: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False


class PaginationController(FetchController):
    """
    Track one paged collection: current page, page size, loading and error.

    Call `load()` once to mount. Page and limit changes refetch through the
    pagination cache. Navigation past known bounds is silently ignored.
    """

    def __init__(
        self,
        endpoint: str,
        fetch_fn: PageFetcher,
        pagination_cache: PaginationCache,
        *,
        initial_page: int = 1,
        initial_limit: int = DEFAULT_PAGE_LIMIT,
        ttl_s: float | None = None,
        tag: str | None = None,
        sort_by: str | None = None,
        sort_order: SortOrder = "asc",
        on_error: ErrorCallback | None = None,
        error_message: str | None = None,
    ) -> None:
        super().__init__(on_error=on_error, error_message=error_message)
        # Validates page/limit/sort up front.
        PaginationParams(
            page=initial_page, limit=initial_limit, sort_by=sort_by, sort_order=sort_order
        )
        self._endpoint = endpoint
        self._fetch_fn = fetch_fn
        self._cache = pagination_cache
        self._ttl_s = ttl_s
        self._tag = endpoint if tag is None else tag
        self._sort_by = sort_by
        self._sort_order: SortOrder = sort_order

        self._page = initial_page
        self._limit = initial_limit
        self._data: list[Any] = []
        self._pagination: PaginatedResponse | None = None

    # ------------------------------------------------------------------
    # Exposed state
    # ------------------------------------------------------------------

    @property
    def endpoint(self) -> str:
        return self._endpoint

    @property
    def data(self) -> list[Any]:
        return self._data

    @property
    def page(self) -> int:
        return self._page

    @property
    def limit(self) -> int:
        return self._limit

    @property
    def total(self) -> int:
        return self._pagination.total if self._pagination else 0

    @property
    def pages(self) -> int:
        return self._pagination.pages if self._pagination else 0

    @property
    def has_next_page(self) -> bool:
        return bool(self._pagination and self._pagination.has_next_page)

    @property
    def has_previous_page(self) -> bool:
        return bool(self._pagination and self._pagination.has_previous_page)

    def params(self) -> PaginationParams:
        return PaginationParams(
            page=self._page,
            limit=self._limit,
            sort_by=self._sort_by,
            sort_order=self._sort_order,
        )

    def snapshot(self) -> PaginationState:
        return PaginationState(
            data=list(self._data),
            is_loading=self.is_loading,
            error=self.error,
            page=self._page,
            limit=self._limit,
            total=self.total,
            pages=self.pages,
            has_next_page=self.has_next_page,
            has_previous_page=self.has_previous_page,
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def load(self) -> None:
        """Fetch the current page (cache-backed) and apply the result."""
        params = self.params()
        token = self._begin()
        try:
            response = await self._cache.get_paginated(
                self._endpoint, params, self._fetch_fn, self._ttl_s, self._tag
            )
        except Exception as exc:
            if not self._is_current(token):
                logger.debug("Dropping stale failure for %s page %d", self._endpoint, params.page)
                return
            self._data = []
            self._record_failure(exc)
        else:
            if not self._is_current(token):
                logger.debug("Dropping stale page %d for %s", params.page, self._endpoint)
                return
            self._data = list(response.data)
            self._pagination = response
        finally:
            self._settle(token)

    async def go_to_page(self, page: int) -> None:
        if page < 1:
            return
        if self._pagination is not None and page > self._pagination.pages:
            return
        self._page = page
        await self.load()

    async def next_page(self) -> None:
        if self.has_next_page:
            await self.go_to_page(self._page + 1)

    async def previous_page(self) -> None:
        if self.has_previous_page:
            await self.go_to_page(self._page - 1)

    async def set_limit(self, limit: int) -> None:
        """Change page size and start over from page 1."""
        if limit < 1:
            return
        self._limit = limit
        self._page = 1
        await self.load()

    async def set_sort(self, sort_by: str | None, sort_order: SortOrder = "asc") -> None:
        """Change ordering and start over from page 1."""
        PaginationParams(page=1, limit=self._limit, sort_by=sort_by, sort_order=sort_order)
        self._sort_by = sort_by
        self._sort_order = sort_order
        self._page = 1
        await self.load()
