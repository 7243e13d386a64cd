from __future__ import annotations

import asyncio

import pytest

from barbercache.cache import CacheStore
from barbercache.errors import PaginationError
from barbercache.pagination import (
    PaginatedResponse,
    PaginationCache,
    PaginationParams,
    pagination_key,
)


def run_async(coro):
    return asyncio.run(coro)


def _page(params: PaginationParams, total: int = 100) -> PaginatedResponse:
    rows = [{"id": (params.page - 1) * params.limit + i} for i in range(1, 3)]
    return PaginatedResponse.build(rows, total=total, page=params.page, limit=params.limit)


def test_key_is_deterministic_and_uses_defaults():
    params = PaginationParams(page=1, limit=10)
    assert pagination_key("reviews", params) == "pagination:reviews:1:10:default:asc"
    assert pagination_key("reviews", params) == pagination_key(
        "reviews", PaginationParams(page=1, limit=10)
    )


@pytest.mark.parametrize(
    "endpoint,params",
    [
        ("services", PaginationParams(page=1, limit=10)),
        ("reviews", PaginationParams(page=2, limit=10)),
        ("reviews", PaginationParams(page=1, limit=20)),
        ("reviews", PaginationParams(page=1, limit=10, sort_by="rating")),
        ("reviews", PaginationParams(page=1, limit=10, sort_order="desc")),
    ],
)
def test_key_changes_when_any_field_changes(endpoint, params):
    base = pagination_key("reviews", PaginationParams(page=1, limit=10))
    assert pagination_key(endpoint, params) != base


def test_get_paginated_fetches_once_then_hits_cache():
    async def scenario() -> None:
        pages = PaginationCache(CacheStore())
        calls: list[PaginationParams] = []

        async def fetch(params):
            calls.append(params)
            return _page(params)

        params = PaginationParams(page=1, limit=10)
        first = await pages.get_paginated("appointments", params, fetch)
        second = await pages.get_paginated("appointments", params, fetch)

        assert first == second
        assert len(calls) == 1
        assert first.pages == 10

    run_async(scenario())


def test_entries_carry_caller_and_endpoint_tags():
    async def scenario() -> None:
        store = CacheStore()
        pages = PaginationCache(store)

        async def fetch(params):
            return _page(params)

        params = PaginationParams(page=1, limit=10)
        await pages.get_paginated("reviews", params, fetch, tag="shop:7")
        await pages.get_paginated("services", params, fetch)

        debug = pages.debug()
        assert debug[pagination_key("reviews", params)]["tags"] == [
            "reviews:pagination",
            "shop:7",
        ]
        assert debug[pagination_key("services", params)]["tags"] == [
            "services:pagination"
        ]
        assert store.invalidate_by_tag("shop:7") == 1

    run_async(scenario())


def test_invalidate_endpoint_drops_all_pages_of_that_endpoint_only():
    async def scenario() -> None:
        pages = PaginationCache(CacheStore())

        async def fetch(params):
            return _page(params)

        for page in (1, 2, 3):
            await pages.get_paginated("reviews", PaginationParams(page=page), fetch, tag="x")
        await pages.get_paginated("services", PaginationParams(page=1), fetch)

        assert pages.invalidate_endpoint("reviews") == 3
        assert pages.invalidate_endpoint("reviews") == 0
        assert pages.store.size() == 1

    run_async(scenario())


def test_clear_all_drops_non_pagination_entries_too():
    async def scenario() -> None:
        store = CacheStore()
        pages = PaginationCache(store)
        store.set("user:1", {"name": "Ana"})

        async def fetch(params):
            return _page(params)

        await pages.get_paginated("reviews", PaginationParams(), fetch)
        pages.clear_all()
        assert store.size() == 0

    run_async(scenario())


def test_mapping_payloads_are_normalised():
    async def scenario() -> None:
        pages = PaginationCache(CacheStore())

        async def fetch(params):
            return {
                "data": [{"id": 1}],
                "page": params.page,
                "limit": params.limit,
                "total": 30,
            }

        response = await pages.get_paginated("barbershops", PaginationParams(page=3), fetch)
        assert isinstance(response, PaginatedResponse)
        assert response.pages == 3
        assert response.has_next_page is False
        assert response.has_previous_page is True

    run_async(scenario())


def test_fetch_failure_propagates_and_caches_nothing():
    async def scenario() -> None:
        store = CacheStore()
        pages = PaginationCache(store)

        async def fetch(params):
            raise ConnectionError("timeout")

        with pytest.raises(ConnectionError):
            await pages.get_paginated("reviews", PaginationParams(), fetch)
        assert store.size() == 0

        async def bad_fetch(params):
            return ["not", "a", "page"]

        with pytest.raises(PaginationError):
            await pages.get_paginated("reviews", PaginationParams(), bad_fetch)
        assert store.size() == 0

    run_async(scenario())


def test_expired_page_is_fetched_again():
    async def scenario() -> None:
        now = [1000.0]
        pages = PaginationCache(CacheStore(clock=lambda: now[0]))
        calls = 0

        async def fetch(params):
            nonlocal calls
            calls += 1
            return _page(params)

        await pages.get_paginated("reviews", PaginationParams(), fetch, ttl_s=30)
        now[0] += 31
        await pages.get_paginated("reviews", PaginationParams(), fetch, ttl_s=30)
        assert calls == 2

    run_async(scenario())
