"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Pagination request/response types shared by the cache and controllers.
"""

from __future__ import annotations

import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from ..errors import PaginationError

SortOrder = Literal["asc", "desc"]

DEFAULT_PAGE_LIMIT = 10
MAX_PAGE_LIMIT = 100

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True, slots=True)
class PaginationParams:
    """One page request: 1-based page number, page size and optional sort."""

    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    sort_by: str | None = None
    sort_order: SortOrder = "asc"

    def __post_init__(self) -> None:
        if isinstance(self.page, bool) or not isinstance(self.page, int) or self.page < 1:
            raise PaginationError(f"page must be an integer >= 1, got {self.page!r}")
        if isinstance(self.limit, bool) or not isinstance(self.limit, int) or self.limit < 1:
            raise PaginationError(f"limit must be an integer >= 1, got {self.limit!r}")
        if self.sort_order not in ("asc", "desc"):
            raise PaginationError(
                f"sort_order must be 'asc' or 'desc', got {self.sort_order!r}"
            )

    @property
    def offset(self) -> int:
        """Number of rows skipped before this page."""
        return (self.page - 1) * self.limit


def count_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if total > 0 else 0


@dataclass(slots=True)
class PaginatedResponse:
    """
    One page of a collection plus the totals needed for navigation.

    Attributes:
        data: Rows on this page, in order.
        page: 1-based page number.
        limit: Page size used for this page.
        total: Total rows in the collection.
        pages: `ceil(total / limit)`.
        has_next_page: `page < pages`.
        has_previous_page: `page > 1`.
    """

    data: list[Any] = field(default_factory=list)
    page: int = 1
    limit: int = DEFAULT_PAGE_LIMIT
    total: int = 0
    pages: int = 0
    has_next_page: bool = False
    has_previous_page: bool = False

    @classmethod
    def build(
        cls,
        data: Sequence[Any],
        total: int,
        page: int,
        limit: int,
    ) -> PaginatedResponse:
        """Assemble a page and derive `pages` and navigation flags."""
        if limit < 1:
            raise PaginationError("limit must be >= 1")
        if total < 0:
            raise PaginationError("total must be >= 0")
        pages = count_pages(total, limit)
        return cls(
            data=list(data),
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next_page=page < pages,
            has_previous_page=page > 1,
        )

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> PaginatedResponse:
        """
        Parse an API payload in camelCase or snake_case.

        Missing `pages`/navigation flags are derived from `total` and `limit`.
        """
        if "data" not in payload:
            raise PaginationError("Paginated payload is missing 'data'")
        nested = payload.get("pagination")
        meta: Mapping[str, Any] = nested if isinstance(nested, Mapping) else payload

        try:
            page = int(meta.get("page", 1))
            limit = int(meta.get("limit", DEFAULT_PAGE_LIMIT))
            total = int(meta.get("total", 0))
        except (TypeError, ValueError) as exc:
            raise PaginationError(f"Invalid pagination metadata: {exc}") from exc
        if limit < 1:
            raise PaginationError("limit must be >= 1")

        pages = meta.get("pages")
        pages = count_pages(total, limit) if pages is None else int(pages)
        has_next = _first_present(meta, "hasNextPage", "has_next_page")
        has_prev = _first_present(meta, "hasPreviousPage", "has_previous_page")
        return cls(
            data=list(payload["data"]),
            page=page,
            limit=limit,
            total=total,
            pages=pages,
            has_next_page=page < pages if has_next is None else bool(has_next),
            has_previous_page=page > 1 if has_prev is None else bool(has_prev),
        )

    @classmethod
    def coerce(cls, value: Any) -> PaginatedResponse:
        """Accept a `PaginatedResponse` or a mapping payload."""
        if isinstance(value, PaginatedResponse):
            return value
        if isinstance(value, Mapping):
            return cls.from_mapping(value)
        raise PaginationError(
            f"Expected a paginated response, got {type(value).__name__}"
        )

    def to_dict(self) -> dict[str, Any]:
        """Render the camelCase shape the booking API emits."""
        return {
            "data": list(self.data),
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
            "hasNextPage": self.has_next_page,
            "hasPreviousPage": self.has_previous_page,
        }


def _first_present(meta: Mapping[str, Any], *names: str) -> Any:
    for name in names:
        if name in meta and meta[name] is not None:
            return meta[name]
    return None


def _parse_int(raw: Any) -> int | None:
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    match = _LEADING_INT.match(str(raw))
    if match is None:
        return None
    return int(match.group(1))


class PaginationQuery(BaseModel):
    """Validated page request parsed from raw query-string values."""

    model_config = ConfigDict(frozen=True)

    page: int = Field(default=1, ge=1)
    limit: int = Field(default=DEFAULT_PAGE_LIMIT, ge=1)
    sort_by: str | None = None
    sort_order: SortOrder = "asc"

    @classmethod
    def from_query(
        cls,
        query: Mapping[str, Any],
        *,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
    ) -> PaginationQuery:
        """
        Clamp raw values instead of rejecting them.

        Missing, zero or non-numeric `page` becomes 1; `limit` falls back to
        `default_limit` and is clamped into `[1, max_limit]`. Unknown sort
        orders become `"asc"`.
        """
        page = max(1, _parse_int(query.get("page")) or 1)
        limit = min(max_limit, max(1, _parse_int(query.get("limit")) or default_limit))

        raw_sort_by = query.get("sortBy", query.get("sort_by"))
        sort_by = str(raw_sort_by).strip() if raw_sort_by is not None else ""

        sort_order = str(query.get("sortOrder", query.get("sort_order", "asc"))).strip().lower()
        if sort_order not in ("asc", "desc"):
            sort_order = "asc"

        return cls(
            page=page, limit=limit, sort_by=sort_by or None, sort_order=sort_order
        )

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def to_params(self) -> PaginationParams:
        return PaginationParams(
            page=self.page,
            limit=self.limit,
            sort_by=self.sort_by,
            sort_order=self.sort_order,
        )
