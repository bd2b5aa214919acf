# src/taskboard_client/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- constructs exactly one gateway / session store / task board and wires them together,
- owns shutdown of the HTTP client.
"""

from __future__ import annotations

import logging

import httpx

from ..config import get_settings
from ..core.ports import KeyValueStorage
from ..core.state import AppState
from ..session.auth_api import AuthApi
from ..session.models import ChangeReason, SessionChange, SessionStatus
from ..session.storage import FileKeyValueStorage
from ..session.store import SessionStore
from ..tasks.board import TaskBoard
from ..tasks.task_api import TaskApi
from ..transport.gateway import RequestGateway

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.session_file_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    storage: KeyValueStorage | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings, storage and transport injectable makes the app easy to test and avoids
    hidden global config reads. If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = FileKeyValueStorage(settings.session_file_path)

    gateway = RequestGateway(
        settings.api_base_url,
        timeout_seconds=float(getattr(settings, "http_timeout_seconds", 15.0)),
        transport=transport,
    )
    auth_api = AuthApi(gateway)
    session = SessionStore(storage, gateway, auth_api)
    task_api = TaskApi(gateway)
    board = TaskBoard(task_api)

    state = AppState(
        settings=settings,
        gateway=gateway,
        auth_api=auth_api,
        session=session,
        task_api=task_api,
        board=board,
    )

    def _on_session_change(change: SessionChange) -> None:
        if change.status is SessionStatus.AUTHENTICATED:
            state.login_required = False
            return
        if change.status is SessionStatus.UNAUTHENTICATED:
            board.clear()
        if change.reason is ChangeReason.EXPIRED:
            state.login_required = True

    state.unsubscribers.append(session.subscribe(_on_session_change))
    logger.info("Client wired for %s", settings.api_base_url)
    return state


async def shutdown(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    for unsubscribe in state.unsubscribers:
        unsubscribe()
    state.unsubscribers.clear()
    try:
        await state.gateway.aclose()
    except Exception:
        logger.debug("HTTP client close failed.", exc_info=True)
