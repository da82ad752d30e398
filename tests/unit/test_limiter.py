"""Tests for the bounded-concurrency scheduler."""

import asyncio

import pytest

from uiforge.pipeline import RateLimitedInvoker


async def _settle_loop(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.mark.unit
def test_limit_must_be_positive():
    with pytest.raises(ValueError):
        RateLimitedInvoker(limit=0)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_never_exceeds_limit():
    """Twelve tasks against a limit of nine: three wait."""
    invoker = RateLimitedInvoker(limit=9)
    gate = asyncio.Event()
    running = 0
    peak = 0

    async def work():
        nonlocal running, peak
        running += 1
        peak = max(peak, running)
        await gate.wait()
        running -= 1
        return "done"

    handles = [invoker.schedule(work) for _ in range(12)]
    await _settle_loop()

    assert invoker.active_count == 9
    assert invoker.pending_count == 3
    assert running == 9

    gate.set()
    results = await asyncio.gather(*handles)

    assert results == ["done"] * 12
    assert peak == 9
    assert invoker.active_count == 0
    assert invoker.pending_count == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_starts_in_submission_order():
    invoker = RateLimitedInvoker(limit=1)
    started: list[int] = []

    def make(index: int):
        async def work():
            started.append(index)
            await asyncio.sleep(0)
            return index

        return work

    handles = [invoker.schedule(make(i)) for i in range(6)]
    results = await asyncio.gather(*handles)

    assert started == list(range(6))
    assert results == list(range(6))


@pytest.mark.unit
@pytest.mark.asyncio
async def test_failed_task_frees_slot():
    invoker = RateLimitedInvoker(limit=1)

    async def boom():
        raise RuntimeError("boom")

    async def ok():
        return 42

    failing = invoker.schedule(boom)
    following = invoker.schedule(ok)

    with pytest.raises(RuntimeError, match="boom"):
        await failing
    assert await following == 42
    assert invoker.active_count == 0


@pytest.mark.unit
@pytest.mark.asyncio
async def test_runs_without_being_awaited():
    """Scheduling alone is enough for the task to run."""
    invoker = RateLimitedInvoker(limit=2)
    ran = asyncio.Event()

    async def work():
        ran.set()

    invoker.schedule(work)
    await asyncio.wait_for(ran.wait(), timeout=1.0)


@pytest.mark.unit
@pytest.mark.asyncio
async def test_cancelled_waiter_leaves_queue():
    invoker = RateLimitedInvoker(limit=1)
    gate = asyncio.Event()

    async def hold():
        await gate.wait()

    async def quick():
        return "quick"

    holder = invoker.schedule(hold)
    waiting = invoker.schedule(hold)
    last = invoker.schedule(quick)
    await _settle_loop()
    assert invoker.pending_count == 2

    waiting.cancel()
    await _settle_loop()
    assert invoker.pending_count == 1

    gate.set()
    await holder
    assert await last == "quick"
    assert invoker.active_count == 0
