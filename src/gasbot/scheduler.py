"""Fixed-interval job scheduler.

Each IntervalJob owns one asyncio task, so the primary tracker tick and the
daily summary never wait on each other. Runs are bounded by a timeout; a
timeout or exception is logged and the job carries on at its next slot.
Runs of the same job never overlap: if a run outlasts the interval, the
next run starts as soon as it finishes.
"""

import asyncio
import time
from collections.abc import Awaitable, Callable

import structlog

from gasbot.logging import get_logger

logger = get_logger(__name__)


class IntervalJob:
    """Runs an async callable every `interval` seconds in the background.

    Args:
        name: Job name, bound into log context for every run.
        func: Async callable executed on each run.
        interval: Seconds between run starts.
        timeout: Seconds before a run is abandoned as failed.
        run_immediately: Run once at start instead of after one interval.
    """

    def __init__(
        self,
        name: str,
        func: Callable[[], Awaitable[object]],
        interval: float,
        timeout: float,
        run_immediately: bool = False,
    ) -> None:
        self.name = name
        self._func = func
        self._interval = interval
        self._timeout = timeout
        self._run_immediately = run_immediately
        self._running = False
        self._task: asyncio.Task | None = None  # type: ignore[type-arg]
        self.runs = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._running

    async def start(self) -> None:
        """Begin running the job in the background."""
        if self._running:
            logger.warning("job_already_running", job=self.name)
            return
        self._running = True
        self._task = asyncio.create_task(self._loop(), name=f"job:{self.name}")
        logger.info("job_started", job=self.name, interval=self._interval)

    async def stop(self) -> None:
        """Stop the job, cancelling any in-flight run."""
        self._running = False
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        logger.info("job_stopped", job=self.name)

    async def _loop(self) -> None:
        next_run = time.monotonic()
        if not self._run_immediately:
            next_run += self._interval

        while self._running:
            delay = next_run - time.monotonic()
            if delay > 0:
                await asyncio.sleep(delay)
            if not self._running:
                break
            next_run = max(next_run + self._interval, time.monotonic())
            await self.run_once()

    async def run_once(self) -> bool:
        """Execute a single bounded run. Returns True on success."""
        self.runs += 1
        with structlog.contextvars.bound_contextvars(job=self.name, run=self.runs):
            try:
                await asyncio.wait_for(self._func(), timeout=self._timeout)
            except asyncio.CancelledError:
                raise
            except asyncio.TimeoutError:
                self.failures += 1
                logger.warning("job_timeout", timeout=self._timeout)
                return False
            except Exception:
                self.failures += 1
                logger.error("job_error", exc_info=True)
                return False
        return True


class Scheduler:
    """Owns the independent interval jobs of the bot."""

    def __init__(self, jobs: list[IntervalJob]) -> None:
        self._jobs = jobs

    @property
    def jobs(self) -> list[IntervalJob]:
        return list(self._jobs)

    async def start(self) -> None:
        for job in self._jobs:
            await job.start()

    async def stop(self) -> None:
        for job in self._jobs:
            await job.stop()
