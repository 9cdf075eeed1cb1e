"""Deferred execution for simulated asynchrony.

Every lifecycle event a socket or server emits is queued here instead of
being run inside the call that caused it. Code that attaches listeners right
after ``WebSocket(url)`` therefore still sees the ``open`` event.

Two schedulers are provided:

- ``ManualScheduler``: a FIFO queue the caller drains with ``tick()`` or
  ``flush()``. Fully deterministic; the usual choice in tests.
- ``AsyncioScheduler``: hands tasks to ``loop.call_soon`` so they run on the
  next iterations of a running asyncio event loop.

Neither uses threads: a task always runs to completion before the next one
starts.
"""

from __future__ import annotations

import asyncio
from collections import deque
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

from mocksocket.errors import SchedulerError
from mocksocket.observability import get_logger

logger = get_logger(__name__)

DEFAULT_MAX_FLUSH_TASKS = 10_000


@runtime_checkable
class Scheduler(Protocol):
    """Anything that can run a callback after the current call stack unwinds."""

    def defer(self, callback: Callable[..., Any], *args: Any) -> None: ...


class ManualScheduler:
    """FIFO task queue drained explicitly by the caller.

    Example:
        >>> scheduler = ManualScheduler()
        >>> seen = []
        >>> scheduler.defer(seen.append, 1)
        >>> seen
        []
        >>> scheduler.flush()
        1
        >>> seen
        [1]
    """

    def __init__(self) -> None:
        self._queue: deque[tuple[Callable[..., Any], tuple[Any, ...]]] = deque()

    @property
    def pending(self) -> int:
        """Number of queued tasks."""
        return len(self._queue)

    def defer(self, callback: Callable[..., Any], *args: Any) -> None:
        self._queue.append((callback, args))

    def tick(self) -> int:
        """Run the tasks that were queued before this call.

        Tasks queued while the batch runs wait for the next tick.

        Returns:
            Number of tasks run.
        """
        batch = len(self._queue)
        for _ in range(batch):
            callback, args = self._queue.popleft()
            callback(*args)
        return batch

    def flush(self, max_tasks: int = DEFAULT_MAX_FLUSH_TASKS) -> int:
        """Run tasks until the queue is empty.

        Args:
            max_tasks: Upper bound on tasks run, guarding against tasks that
                keep rescheduling themselves.

        Returns:
            Number of tasks run.

        Raises:
            SchedulerError: If the queue is still not empty after max_tasks.
        """
        ran = 0
        while self._queue:
            if ran >= max_tasks:
                raise SchedulerError(
                    f"Scheduler did not settle after {max_tasks} tasks",
                    details={"max_tasks": max_tasks, "pending": len(self._queue)},
                )
            callback, args = self._queue.popleft()
            callback(*args)
            ran += 1
        return ran

    def clear(self) -> None:
        """Drop every queued task without running it."""
        if self._queue:
            logger.debug("mocksocket.scheduler.cleared", dropped=len(self._queue))
        self._queue.clear()


class AsyncioScheduler:
    """Scheduler backed by an asyncio event loop.

    Args:
        loop: Loop to schedule on. When omitted, the loop running at the time
            of each ``defer`` call is used.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def defer(self, callback: Callable[..., Any], *args: Any) -> None:
        loop = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError as e:
                raise SchedulerError(
                    "No running event loop: use mocksocket from async code, or build a "
                    "NetworkBridge with a ManualScheduler"
                ) from e
        loop.call_soon(callback, *args)


async def settle(iterations: int = 10) -> None:
    """Yield to the running loop enough times for chained deferred tasks to run."""
    for _ in range(iterations):
        await asyncio.sleep(0)
