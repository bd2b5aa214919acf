# src/taskboard_client/tasks/refresher.py

from __future__ import annotations

"""
Background board refresher.

A small polling loop that, every interval, re-runs load_recent() then load_stats() while the
session is authenticated. It takes no locks: a tick that resolves after a user mutation's own
refresh simply wins, same as any other concurrent refresh.

A 401 on a tick goes through the gateway like any other request and ends the session.

To stop the refresher, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Callable

from .board import TaskBoard

logger = logging.getLogger(__name__)


async def run_board_refresher(
        board: TaskBoard,
        *,
        is_active: Callable[[], bool],
        interval_seconds: float = 30.0,
) -> None:
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await asyncio.sleep(sleep_s)

        if not is_active():
            continue

        try:
            await board.refresh()
            logger.debug("Board refreshed (%d recent)", len(board.recent))
        except Exception:
            logger.exception("Background board refresh failed")
