"""Tests for the deferred-execution schedulers."""

import asyncio
from typing import Any

import pytest

from mocksocket.errors import SchedulerError
from mocksocket.scheduler import AsyncioScheduler, ManualScheduler, Scheduler, settle


class TestManualScheduler:
    """Tests for ManualScheduler."""

    def test_defer_does_not_run_immediately(self) -> None:
        scheduler = ManualScheduler()
        calls: list[int] = []

        scheduler.defer(calls.append, 1)

        assert calls == []
        assert scheduler.pending == 1

    def test_flush_runs_in_fifo_order(self) -> None:
        scheduler = ManualScheduler()
        calls: list[int] = []
        for i in range(3):
            scheduler.defer(calls.append, i)

        assert scheduler.flush() == 3
        assert calls == [0, 1, 2]
        assert scheduler.pending == 0

    def test_tick_leaves_tasks_queued_during_tick(self) -> None:
        """A tick runs only the batch queued before it started."""
        scheduler = ManualScheduler()
        calls: list[str] = []

        def outer() -> None:
            calls.append("outer")
            scheduler.defer(calls.append, "inner")

        scheduler.defer(outer)

        assert scheduler.tick() == 1
        assert calls == ["outer"]
        assert scheduler.tick() == 1
        assert calls == ["outer", "inner"]
        assert scheduler.tick() == 0

    def test_flush_runs_chained_tasks(self) -> None:
        scheduler = ManualScheduler()
        calls: list[str] = []
        scheduler.defer(lambda: scheduler.defer(calls.append, "chained"))

        assert scheduler.flush() == 2
        assert calls == ["chained"]

    def test_flush_guards_against_runaway(self) -> None:
        scheduler = ManualScheduler()

        def forever() -> None:
            scheduler.defer(forever)

        scheduler.defer(forever)

        with pytest.raises(SchedulerError, match="did not settle"):
            scheduler.flush(max_tasks=50)

    def test_clear_drops_tasks(self) -> None:
        scheduler = ManualScheduler()
        calls: list[Any] = []
        scheduler.defer(calls.append, 1)

        scheduler.clear()

        assert scheduler.flush() == 0
        assert calls == []

    def test_task_exception_propagates(self) -> None:
        scheduler = ManualScheduler()

        def boom() -> None:
            raise RuntimeError("listener failed")

        scheduler.defer(boom)

        with pytest.raises(RuntimeError, match="listener failed"):
            scheduler.flush()

    def test_satisfies_protocol(self) -> None:
        assert isinstance(ManualScheduler(), Scheduler)
        assert isinstance(AsyncioScheduler(), Scheduler)


class TestAsyncioScheduler:
    """Tests for AsyncioScheduler."""

    def test_defer_without_running_loop_raises(self) -> None:
        with pytest.raises(SchedulerError, match="No running event loop"):
            AsyncioScheduler().defer(print)

    @pytest.mark.asyncio
    async def test_defer_runs_on_next_iteration(self) -> None:
        scheduler = AsyncioScheduler()
        calls: list[int] = []

        scheduler.defer(calls.append, 1)
        scheduler.defer(calls.append, 2)
        assert calls == []

        await asyncio.sleep(0)
        assert calls == [1, 2]

    @pytest.mark.asyncio
    async def test_settle_runs_chained_tasks(self) -> None:
        scheduler = AsyncioScheduler()
        calls: list[str] = []
        scheduler.defer(lambda: scheduler.defer(calls.append, "chained"))

        await settle()

        assert calls == ["chained"]
