# src/taskboard_client/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..session.auth_api import AuthApi
from ..session.store import SessionStore
from ..tasks.board import TaskBoard
from ..tasks.task_api import TaskApi
from ..transport.gateway import RequestGateway


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: object

    gateway: RequestGateway
    auth_api: AuthApi
    session: SessionStore
    task_api: TaskApi
    board: TaskBoard

    # Set by the session listener on EXPIRED; the console shows the login prompt next.
    login_required: bool = False
    unsubscribers: list = field(default_factory=list)
