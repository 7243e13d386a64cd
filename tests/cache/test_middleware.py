from __future__ import annotations

import asyncio

from barbercache.cache import CacheStore, cache_middleware, cached, make_cache_key


def run_async(coro):
    return asyncio.run(coro)


def test_cache_middleware_runs_producer_once_per_key():
    async def scenario() -> None:
        store = CacheStore()
        calls = 0

        async def list_featured():
            nonlocal calls
            calls += 1
            return ["Navalha de Ouro", "Barba Negra"]

        run = cache_middleware(store, "barbershops:featured", ttl_s=60, tags=["barbershops"])
        assert await run(list_featured) == ["Navalha de Ouro", "Barba Negra"]
        assert await run(list_featured) == ["Navalha de Ouro", "Barba Negra"]
        assert calls == 1
        assert store.invalidate_by_tag("barbershops") == 1

    run_async(scenario())


def test_cached_decorator_keys_results_by_arguments():
    async def scenario() -> None:
        store = CacheStore()
        calls: list[int] = []

        @cached(store, lambda shop_id: make_cache_key("shop", shop_id, "reviews"), tags=["reviews"])
        async def fetch_reviews(shop_id: int) -> list[str]:
            calls.append(shop_id)
            return [f"review for {shop_id}"]

        assert await fetch_reviews(1) == ["review for 1"]
        assert await fetch_reviews(1) == ["review for 1"]
        assert await fetch_reviews(2) == ["review for 2"]

        assert calls == [1, 2]
        assert sorted(store.keys()) == ["shop:1:reviews", "shop:2:reviews"]
        assert fetch_reviews.__name__ == "fetch_reviews"

    run_async(scenario())


def test_make_cache_key_joins_parts():
    assert make_cache_key("appointments", 3, "upcoming") == "appointments:3:upcoming"
