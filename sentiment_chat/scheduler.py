"""Delayed background tasks on the running event loop."""

import asyncio
import logging
from typing import Awaitable, Callable, Set

logger = logging.getLogger(__name__)


class DeferredTaskScheduler:
    """Runs coroutines once after a delay, detached from their caller.

    Tasks are kept referenced until they finish so they are not garbage
    collected mid-sleep. Exceptions are logged and never reach the caller
    that scheduled them.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()

    def schedule(self, delay: float, job: Callable[[], Awaitable[None]], *, name: str = "") -> asyncio.Task:
        """Run ``job()`` after ``delay`` seconds.

        :param delay: Seconds to wait before running the job
        :param job: Zero-argument callable returning the coroutine to run
        :param name: Optional task name for logging
        :return: The scheduled task
        """
        task = asyncio.create_task(self._run(delay, job, name), name=name or None)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run(self, delay: float, job: Callable[[], Awaitable[None]], name: str) -> None:
        await asyncio.sleep(delay)
        try:
            await job()
        except Exception as e:
            logger.error(f"[SCHEDULER] Deferred task {name or '<unnamed>'} failed: {type(e).__name__}: {e}",
                         exc_info=True)

    @property
    def pending_count(self) -> int:
        return len(self._tasks)

    async def wait_idle(self) -> None:
        """Wait until every task scheduled so far has completed."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> int:
        """Cancel all pending tasks (used on shutdown). Returns count cancelled."""
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
            logger.info(f"[SCHEDULER] Cancelled {len(tasks)} pending tasks")
        return len(tasks)
