from __future__ import annotations

import asyncio

import pytest

from barbercache.cache import RequestCoalescer


def run_async(coro):
    return asyncio.run(coro)


def test_identical_in_flight_requests_share_one_call():
    async def scenario() -> None:
        coalescer = RequestCoalescer()
        gate = asyncio.Event()
        calls = 0

        async def factory():
            nonlocal calls
            calls += 1
            await gate.wait()
            return "ok"

        pending = asyncio.gather(
            coalescer.run("k", factory),
            coalescer.run("k", factory),
        )
        await asyncio.sleep(0)
        assert coalescer.in_flight("k")
        gate.set()

        assert await pending == ["ok", "ok"]
        assert calls == 1
        assert coalescer.pending_count == 0

    run_async(scenario())


def test_different_keys_do_not_share():
    async def scenario() -> None:
        coalescer = RequestCoalescer()
        calls: list[str] = []

        async def factory_for(name: str):
            calls.append(name)
            return name

        results = await asyncio.gather(
            coalescer.run("a", lambda: factory_for("a")),
            coalescer.run("b", lambda: factory_for("b")),
        )
        assert results == ["a", "b"]
        assert sorted(calls) == ["a", "b"]

    run_async(scenario())


def test_failure_reaches_every_waiter_and_is_not_retained():
    async def scenario() -> None:
        coalescer = RequestCoalescer()
        gate = asyncio.Event()

        async def factory():
            await gate.wait()
            raise RuntimeError("boom")

        pending = asyncio.gather(
            coalescer.run("k", factory),
            coalescer.run("k", factory),
            return_exceptions=True,
        )
        await asyncio.sleep(0)
        gate.set()
        results = await pending

        assert all(isinstance(r, RuntimeError) for r in results)
        assert coalescer.pending_count == 0

        async def ok():
            return 1

        assert await coalescer.run("k", ok) == 1

    run_async(scenario())


def test_cancelled_waiter_does_not_cancel_shared_call():
    async def scenario() -> None:
        coalescer = RequestCoalescer()
        gate = asyncio.Event()
        calls = 0

        async def factory():
            nonlocal calls
            calls += 1
            await gate.wait()
            return "ok"

        first = asyncio.create_task(coalescer.run("k", factory))
        second = asyncio.create_task(coalescer.run("k", factory))
        await asyncio.sleep(0)

        first.cancel()
        await asyncio.gather(first, return_exceptions=True)
        gate.set()

        assert await second == "ok"
        assert first.cancelled()
        assert calls == 1

    run_async(scenario())


def test_factory_result_must_be_awaitable():
    async def scenario() -> None:
        coalescer = RequestCoalescer()
        with pytest.raises(TypeError):
            await coalescer.run("k", lambda: "not awaitable")  # type: ignore[arg-type,return-value]

    run_async(scenario())
