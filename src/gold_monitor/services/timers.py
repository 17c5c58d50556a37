"""Recurring timers and background tasks on the asyncio event loop.

Every timer has exactly one teardown path, ``cancel()``. ``TimerSlot`` holds at
most one timer, so restarting never leaves a duplicate running.
"""
import asyncio
import logging
from collections.abc import Callable, Coroutine
from typing import Any, Protocol

logger = logging.getLogger(__name__)


class IntervalTimer(Protocol):
    """A recurring timer that can be cancelled."""

    @property
    def active(self) -> bool: ...

    def cancel(self) -> None: ...


TimerCallback = Callable[[], None]
TimerFactory = Callable[[float, TimerCallback], IntervalTimer]


class AsyncioIntervalTimer:
    """Call ``callback`` every ``interval`` seconds until cancelled.

    The first call happens one interval after creation. Deadlines are computed
    from the loop clock so slow callbacks do not accumulate drift. Must be
    created while an event loop is running.
    """

    def __init__(self, interval: float, callback: TimerCallback) -> None:
        self._interval = interval
        self._callback = callback
        self._task = asyncio.get_running_loop().create_task(self._run())

    @property
    def active(self) -> bool:
        return not self._task.done()

    def cancel(self) -> None:
        self._task.cancel()

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time()
        while True:
            deadline += self._interval
            await asyncio.sleep(max(0.0, deadline - loop.time()))
            try:
                self._callback()
            except Exception:  # pylint: disable=broad-except
                logger.exception("Timer callback %r failed", self._callback)


class TimerSlot:
    """Owns at most one running timer; starting a new one cancels the previous."""

    def __init__(self, factory: TimerFactory = AsyncioIntervalTimer) -> None:
        self._factory = factory
        self._timer: IntervalTimer | None = None

    @property
    def active(self) -> bool:
        return self._timer is not None and self._timer.active

    def start(self, interval: float, callback: TimerCallback) -> None:
        self.clear()
        self._timer = self._factory(interval, callback)

    def clear(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


class BackgroundTasks:
    """Tracks fire-and-forget coroutines so they can be awaited or cancelled together."""

    def __init__(self) -> None:
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def spawn(self, coro: Coroutine[Any, Any, Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._finished)
        return task

    def _finished(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Background task failed", exc_info=task.exception())

    async def join(self) -> None:
        """Wait until every task, including ones spawned meanwhile, has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def cancel_all(self) -> None:
        tasks = list(self._tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
