from __future__ import annotations

import asyncio

from barbercache.cache import CacheStore
from barbercache.hooks import DataController


def run_async(coro):
    return asyncio.run(coro)


class _Fetch:
    def __init__(self) -> None:
        self.calls = 0

    async def __call__(self):
        self.calls += 1
        return {"id": 1, "name": "Test Data", "version": self.calls}


def test_loads_value_through_cache():
    async def scenario() -> None:
        store = CacheStore()
        fetch = _Fetch()
        controller = DataController("test-key", fetch, store)
        assert controller.is_loading is True

        await controller.load()
        assert controller.is_loading is False
        assert controller.data == {"id": 1, "name": "Test Data", "version": 1}
        assert fetch.calls == 1

        other = DataController("test-key", fetch, store)
        await other.load()
        assert other.data == controller.data
        assert fetch.calls == 1

    run_async(scenario())


def test_skip_suppresses_fetch_until_enabled():
    async def scenario() -> None:
        fetch = _Fetch()
        controller = DataController("test-key", fetch, CacheStore(), skip=True)

        assert controller.is_loading is False
        await controller.load()
        assert controller.data is None
        assert fetch.calls == 0

        await controller.set_skip(False)
        assert fetch.calls == 1
        assert controller.data["version"] == 1

    run_async(scenario())


def test_refetch_bypasses_cache_read_and_writes_back():
    async def scenario() -> None:
        store = CacheStore()
        fetch = _Fetch()
        controller = DataController("profile", fetch, store, tag="user")

        await controller.load()
        await controller.refetch()

        assert fetch.calls == 2
        assert controller.data["version"] == 2
        assert store.get("profile")["version"] == 2
        assert store.invalidate_by_tag("user") == 1

    run_async(scenario())


def test_fetch_failure_becomes_error_state():
    async def scenario() -> None:
        errors: list[BaseException] = []

        async def failing():
            raise RuntimeError("Erro no carregamento")

        store = CacheStore()
        controller = DataController("test-key", failing, store, on_error=errors.append)
        await controller.load()

        assert controller.is_loading is False
        assert controller.error == "Erro no carregamento"
        assert controller.data is None
        assert len(errors) == 1
        assert store.size() == 0

    run_async(scenario())


def test_refetch_failure_clears_data_and_keeps_cached_copy():
    async def scenario() -> None:
        store = CacheStore()
        fetch = _Fetch()
        controller = DataController("profile", fetch, store)
        await controller.load()

        async def failing():
            raise RuntimeError()

        controller._fetch_fn = failing  # noqa: SLF001
        await controller.refetch()

        assert controller.error == "Failed to refresh data"
        assert controller.data is None
        assert store.get("profile")["version"] == 1

    run_async(scenario())


def test_snapshot_reflects_state():
    async def scenario() -> None:
        controller = DataController("k", _Fetch(), CacheStore())
        await controller.load()
        state = controller.snapshot()
        assert state.is_loading is False
        assert state.error is None
        assert state.data["name"] == "Test Data"

    run_async(scenario())


def test_refetch_failure_uses_its_own_fallback_message():
    async def scenario() -> None:
        async def failing():
            raise RuntimeError()

        controller = DataController(
            "profile",
            failing,
            CacheStore(),
            error_message="Erro ao carregar",
            refetch_error_message="Erro ao atualizar",
        )
        await controller.load()
        assert controller.error == "Erro ao carregar"

        await controller.refetch()
        assert controller.error == "Erro ao atualizar"

    run_async(scenario())


def test_enabling_skip_before_first_load_clears_loading():
    async def scenario() -> None:
        fetch = _Fetch()
        controller = DataController("test-key", fetch, CacheStore())
        seen: list[bool] = []
        controller.subscribe(lambda c: seen.append(c.is_loading))
        assert controller.is_loading is True

        await controller.set_skip(True)

        assert controller.is_loading is False
        assert seen == [False]
        assert fetch.calls == 0

    run_async(scenario())


def test_raising_error_callback_does_not_escape_load():
    async def scenario() -> None:
        async def failing():
            raise RuntimeError("Erro no carregamento")

        def broken_callback(exc: BaseException) -> None:
            raise ValueError("callback broke")

        controller = DataController(
            "test-key", failing, CacheStore(), on_error=broken_callback
        )
        await controller.load()

        assert controller.error == "Erro no carregamento"
        assert controller.is_loading is False

    run_async(scenario())
