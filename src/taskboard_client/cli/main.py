# src/taskboard_client/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, restores the saved session, then runs:
- the console REPL,
- the background board refresher (optional, TASKBOARD_REFRESH_INTERVAL_SECONDS > 0).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state, shutdown
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..tasks.refresher import run_board_refresher

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)

    refresher: asyncio.Task | None = None
    try:
        # Protected UI is only shown once restore has completed.
        await state.session.restore_session()
        if state.session.is_authenticated:
            await state.board.refresh()

        interval = float(getattr(settings, "refresh_interval_seconds", 0.0) or 0.0)
        if interval > 0:
            refresher = asyncio.create_task(
                run_board_refresher(
                    state.board,
                    is_active=lambda: state.session.is_authenticated,
                    interval_seconds=interval,
                )
            )

        await run_console_loop(state)
    finally:
        if refresher is not None:
            refresher.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await refresher
        await shutdown(state)


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_dir = getattr(settings, "data_dir", ".local/taskboard")
    setup_logging(log_dir=log_dir, console_level=console_level)

    logger.info("Starting %s...", getattr(settings, "app_name", "taskboard"))

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down...")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
