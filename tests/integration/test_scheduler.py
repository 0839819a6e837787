"""Tests for refresh scheduling."""

import asyncio

import pytest

from content_search.config.base import RefreshConfig
from content_search.services.base import RefreshInProgressError
from content_search.services.scheduler import RefreshScheduler, resolve_startup_delay


class GatedCycle:
    """Cycle that blocks until released."""

    def __init__(self):
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self):
        self.calls += 1
        await self.release.wait()


def test_resolve_startup_delay(monkeypatch):
    assert resolve_startup_delay(RefreshConfig()) == 0.0
    assert resolve_startup_delay(RefreshConfig(startup_delay=20)) == 20

    monkeypatch.setattr("random.uniform", lambda low, high: high / 2)
    config = RefreshConfig(randomize_startup_delay=True, max_startup_delay=300)
    assert resolve_startup_delay(config) == 150


@pytest.mark.asyncio
async def test_loop_runs_immediately_and_repeats(wait_for):
    calls = []

    async def cycle():
        calls.append(asyncio.get_running_loop().time())

    scheduler = RefreshScheduler(cycle, interval=0.01)
    scheduler.start()
    try:
        await wait_for(lambda: len(calls) >= 3)
        assert scheduler.running
    finally:
        await scheduler.stop()

    assert not scheduler.running


@pytest.mark.asyncio
async def test_startup_delay_defers_first_cycle(wait_for):
    calls = []

    async def cycle():
        calls.append(1)

    scheduler = RefreshScheduler(cycle, interval=60, startup_delay=0.1)
    scheduler.start()
    try:
        await asyncio.sleep(0.02)
        assert calls == []
        await wait_for(lambda: len(calls) == 1)
    finally:
        await scheduler.stop()


@pytest.mark.asyncio
async def test_failing_cycle_keeps_loop_alive(wait_for):
    calls = []

    async def cycle():
        calls.append(1)
        raise RuntimeError("backend down")

    scheduler = RefreshScheduler(cycle, interval=0.01)
    scheduler.start()
    try:
        await wait_for(lambda: len(calls) >= 2)
        assert scheduler.running
    finally:
        await scheduler.stop()


@pytest.mark.asyncio
async def test_trigger_runs_cycle():
    calls = []

    async def cycle():
        calls.append(1)

    scheduler = RefreshScheduler(cycle, interval=60)

    assert await scheduler.trigger() is True
    assert calls == [1]
    assert not scheduler.running


@pytest.mark.asyncio
async def test_trigger_is_skipped_while_in_flight(wait_for):
    cycle = GatedCycle()
    scheduler = RefreshScheduler(cycle, interval=60)

    first = asyncio.create_task(scheduler.trigger())
    await wait_for(lambda: scheduler.in_flight)

    assert await scheduler.trigger() is False
    with pytest.raises(RefreshInProgressError):
        await scheduler.run_cycle(wait=False)

    cycle.release.set()
    assert await first is True
    assert cycle.calls == 1
    assert not scheduler.in_flight


@pytest.mark.asyncio
async def test_waiting_cycle_runs_after_in_flight_one(wait_for):
    cycle = GatedCycle()
    scheduler = RefreshScheduler(cycle, interval=60)

    first = asyncio.create_task(scheduler.run_cycle())
    await wait_for(lambda: scheduler.in_flight)
    second = asyncio.create_task(scheduler.run_cycle())
    await asyncio.sleep(0.01)

    assert cycle.calls == 1

    cycle.release.set()
    await asyncio.gather(first, second)
    assert cycle.calls == 2


@pytest.mark.asyncio
async def test_stop_without_start():
    async def cycle():
        pass

    scheduler = RefreshScheduler(cycle, interval=60)

    await scheduler.stop()
    assert not scheduler.running
