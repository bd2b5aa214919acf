# src/taskboard_client/tasks/board.py

"""
Task board: the bounded "recent tasks" cache plus the statistics snapshot.

Key invariants:
- the recent view holds at most RECENT_TASKS_LIMIT incomplete tasks, in server order (newest first),
- the view and the stats are only ever replaced wholesale from a fetch, never patched locally,
- every successful mutation is followed by load_recent() then load_stats(), sequentially,
- a failed fetch leaves the previous view/stats in place,
- a fetch that resolves after clear() is discarded.

There is deliberately no ordering between concurrent operations: refreshes interleave and the
last one to resolve wins, so the view and the stats can briefly disagree.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

from ..core.errors import NetworkOrServerError
from ..core.ports import BoardListener
from ..core.result import Result
from .models import Task, TaskStats
from .task_api import TaskApi

logger = logging.getLogger(__name__)

RECENT_TASKS_LIMIT = 5

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class BoardSnapshot:
    recent: tuple[Task, ...]
    stats: TaskStats | None
    busy: frozenset[int]
    last_error: str | None


@dataclass(slots=True, frozen=True)
class BatchOutcome:
    successful: int
    failed: int
    total: int


class TaskBoard:
    def __init__(self, api: TaskApi) -> None:
        self._api = api
        self._recent: tuple[Task, ...] = ()
        self._stats: TaskStats | None = None
        self._in_flight: set[int] = set()
        self._last_error: str | None = None
        self._listeners: list[BoardListener] = []
        # Bumped by clear() so fetches started for the previous session are dropped.
        self._epoch = 0

    # ---- read side ----

    @property
    def recent(self) -> tuple[Task, ...]:
        return self._recent

    @property
    def stats(self) -> TaskStats | None:
        return self._stats

    @property
    def last_error(self) -> str | None:
        return self._last_error

    def is_busy(self, task_id: int) -> bool:
        """True while a complete/delete for this task is outstanding; the UI disables the row."""
        return int(task_id) in self._in_flight

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            recent=self._recent,
            stats=self._stats,
            busy=frozenset(self._in_flight),
            last_error=self._last_error,
        )

    def subscribe(self, listener: BoardListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def _notify(self) -> None:
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snap)
            except Exception:
                logger.exception("Board listener failed")

    def clear(self) -> None:
        """Drop cached data (e.g. after logout) so the next identity never sees it."""
        self._epoch += 1
        self._recent = ()
        self._stats = None
        self._last_error = None
        self._notify()

    # ---- fetches ----

    def _stale(self, epoch: int, what: str) -> bool:
        if epoch == self._epoch:
            return False
        logger.debug("Discarding %s fetched before the board was cleared", what)
        return True

    async def load_recent(self) -> Result[tuple[Task, ...]]:
        epoch = self._epoch
        res = await self._api.recent_tasks()
        if self._stale(epoch, "recent tasks"):
            return Result.failure(NetworkOrServerError("Recent tasks discarded: session changed"))
        if not res.ok or res.value is None:
            self._last_error = res.message
            logger.info("Recent tasks fetch failed, keeping %d cached: %s", len(self._recent), res.message)
            self._notify()
            return Result.failure(res.error or NetworkOrServerError("Failed to fetch recent tasks"))

        view = tuple(t for t in res.value if not t.completed)[:RECENT_TASKS_LIMIT]
        self._recent = view
        self._last_error = None
        logger.debug("Recent view replaced: %s", [t.id for t in view])
        self._notify()
        return Result.success(view, message=res.message)

    async def load_stats(self) -> Result[TaskStats]:
        """Best-effort: a failure is logged and the previous stats stay."""
        epoch = self._epoch
        res = await self._api.stats()
        if self._stale(epoch, "stats"):
            return Result.failure(NetworkOrServerError("Statistics discarded: session changed"))
        if not res.ok or res.value is None:
            logger.warning("Failed to load stats: %s", res.message)
            return res
        self._stats = res.value
        self._notify()
        return res

    async def refresh(self) -> None:
        await self.load_recent()
        await self.load_stats()

    # ---- mutations ----

    async def _mutate(self, op: Callable[[], Awaitable[Result[T]]]) -> Result[T]:
        res = await op()
        if not res.ok:
            self._last_error = res.message
            return res
        await self.refresh()
        return res

    async def _guarded(self, task_id: int, op: Callable[[], Awaitable[Result[T]]]) -> Result[T]:
        task_id = int(task_id)
        if task_id in self._in_flight:
            return Result.failure(NetworkOrServerError(f"Task {task_id} is already being updated"))
        self._in_flight.add(task_id)
        self._notify()
        try:
            return await self._mutate(op)
        finally:
            self._in_flight.discard(task_id)
            self._notify()

    async def create_task(self, title: str, description: str = "") -> Result[Task]:
        """No validation here: callers run validate_task_form first."""
        return await self._mutate(lambda: self._api.create_task(title, description))

    async def update_task(self, task_id: int, title: str, description: str = "") -> Result[Task]:
        return await self._guarded(task_id, lambda: self._api.update_task(task_id, title, description))

    async def complete_task(self, task_id: int) -> Result[Task]:
        return await self._guarded(task_id, lambda: self._api.complete_task(task_id))

    async def delete_task(self, task_id: int) -> Result[None]:
        return await self._guarded(task_id, lambda: self._api.delete_task(task_id))

    async def batch_complete(self, task_ids: list[int]) -> Result[BatchOutcome]:
        """
        Complete several tasks concurrently, then refresh once.

        Ids already being updated are skipped and count as failed. The result is ok only if every
        id was completed; the outcome counts are reported either way.
        """
        ids = list(dict.fromkeys(int(t) for t in task_ids))
        claimed = [t for t in ids if t not in self._in_flight]
        self._in_flight.update(claimed)
        self._notify()
        try:
            results = await asyncio.gather(*(self._api.complete_task(t) for t in claimed))
            successful = sum(1 for r in results if r.ok)
            if successful:
                await self.refresh()
        finally:
            self._in_flight.difference_update(claimed)
            self._notify()

        outcome = BatchOutcome(successful=successful, failed=len(ids) - successful, total=len(ids))
        message = f"{successful} of {len(ids)} tasks completed successfully"
        if outcome.failed:
            logger.info("Batch complete: %s (skipped busy: %s)", message, sorted(set(ids) - set(claimed)))
            self._last_error = message
            self._notify()
            return Result(ok=False, value=outcome, error=NetworkOrServerError(message), message=message)
        return Result.success(outcome, message=message)
