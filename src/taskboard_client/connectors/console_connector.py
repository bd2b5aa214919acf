# src/taskboard_client/connectors/console_connector.py

from __future__ import annotations

import asyncio
import getpass
import logging
from datetime import datetime

from ..cli.commands import CommandIO, cmd_login, render_board
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _ask(prompt: str, secret: bool) -> str:
    # Blocking reads run in a worker thread so background refreshes keep going.
    if secret:
        return await asyncio.to_thread(getpass.getpass, prompt)
    return await asyncio.to_thread(input, prompt)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    io = CommandIO(emit=_print_ts, ask=_ask)

    if state.session.is_authenticated:
        identity = state.session.identity
        _print_ts(f"Welcome back, {identity.username if identity else '?'}.")
        _print_ts(render_board(state.board.snapshot()))
    else:
        _print_ts("Not logged in. Use /login or /register.")
    _print_ts("Use /help for commands. Use /exit to quit.\n")

    while True:
        # Expired sessions land back on the login prompt before anything else runs.
        if state.login_required:
            state.login_required = False
            _print_ts("Session expired. Please login again.")
            try:
                _print_ts(await cmd_login(state, [], io))
            except (EOFError, KeyboardInterrupt):
                print()
                break
            continue

        try:
            user_input = (await _ask(">>> ", False)).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            reply = await command_registry.handle(state, user_input, io)
        except (EOFError, KeyboardInterrupt):
            print()
            continue
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is None:
            reply = "Commands start with '/'. Use /add <title> to create a task, /help for more."
        _print_ts(reply)

    logger.info("Console connector finished.")
