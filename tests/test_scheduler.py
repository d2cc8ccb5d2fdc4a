"""Tests for IntervalJob and Scheduler.

Timing-based tests use short intervals (tens of milliseconds) and generous
assertions so they stay stable on slow CI machines.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from gasbot.scheduler import IntervalJob, Scheduler


class TestIntervalJob:
    @pytest.mark.asyncio
    async def test_runs_immediately_at_start(self) -> None:
        func = AsyncMock()
        job = IntervalJob("tick", func, interval=3600, timeout=1.0, run_immediately=True)

        await job.start()
        await asyncio.sleep(0.05)
        await job.stop()

        func.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_waits_one_interval_when_not_immediate(self) -> None:
        func = AsyncMock()
        job = IntervalJob("daily", func, interval=3600, timeout=1.0)

        await job.start()
        await asyncio.sleep(0.05)
        await job.stop()

        func.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_repeats_every_interval(self) -> None:
        func = AsyncMock()
        job = IntervalJob("tick", func, interval=0.02, timeout=1.0, run_immediately=True)

        await job.start()
        await asyncio.sleep(0.2)
        await job.stop()

        assert func.await_count >= 3

    @pytest.mark.asyncio
    async def test_timeout_is_contained(self) -> None:
        async def hang() -> None:
            await asyncio.sleep(10)

        job = IntervalJob("tick", hang, interval=3600, timeout=0.05)

        assert await job.run_once() is False
        assert job.failures == 1

    @pytest.mark.asyncio
    async def test_exception_is_contained(self) -> None:
        func = AsyncMock(side_effect=RuntimeError("boom"))
        job = IntervalJob("tick", func, interval=0.02, timeout=1.0, run_immediately=True)

        await job.start()
        await asyncio.sleep(0.1)
        assert job.running
        await job.stop()

        assert func.await_count >= 2
        assert job.failures >= 2

    @pytest.mark.asyncio
    async def test_start_twice_is_ignored(self) -> None:
        func = AsyncMock()
        job = IntervalJob("tick", func, interval=3600, timeout=1.0, run_immediately=True)

        await job.start()
        await job.start()
        await asyncio.sleep(0.05)
        await job.stop()

        func.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_stop_cancels_in_flight_run(self) -> None:
        started = asyncio.Event()

        async def slow() -> None:
            started.set()
            await asyncio.sleep(10)

        job = IntervalJob("tick", slow, interval=3600, timeout=60.0, run_immediately=True)
        await job.start()
        await asyncio.wait_for(started.wait(), timeout=1.0)

        await asyncio.wait_for(job.stop(), timeout=1.0)

        assert not job.running


class TestScheduler:
    @pytest.mark.asyncio
    async def test_hung_job_does_not_block_the_other(self) -> None:
        async def hang() -> None:
            await asyncio.sleep(10)

        fast = AsyncMock()
        scheduler = Scheduler(
            [
                IntervalJob("slow", hang, interval=3600, timeout=30.0, run_immediately=True),
                IntervalJob("fast", fast, interval=0.02, timeout=1.0, run_immediately=True),
            ]
        )

        await scheduler.start()
        await asyncio.sleep(0.2)
        await scheduler.stop()

        assert fast.await_count >= 3

    @pytest.mark.asyncio
    async def test_stop_stops_all_jobs(self) -> None:
        scheduler = Scheduler(
            [
                IntervalJob("a", AsyncMock(), interval=3600, timeout=1.0),
                IntervalJob("b", AsyncMock(), interval=3600, timeout=1.0),
            ]
        )

        await scheduler.start()
        assert all(job.running for job in scheduler.jobs)
        await scheduler.stop()
        assert not any(job.running for job in scheduler.jobs)
