# src/taskboard_client/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The session store and task board depend on Protocols instead of concrete implementations.
This keeps durable storage and the UI swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..session.models import SessionChange
    from ..tasks.board import BoardSnapshot


class KeyValueStorage(Protocol):
    """
    Durable client storage with named string slots (browser localStorage semantics).

    Implementations must make set_item/remove_item durable before returning.
    """

    def get_item(self, key: str) -> str | None: ...
    def set_item(self, key: str, value: str) -> None: ...
    def remove_item(self, key: str) -> None: ...


# Called with the token the rejected request carried (None if it carried none).
AuthFailureHandler = Callable[[str | None], None]

SessionListener = Callable[["SessionChange"], None]
BoardListener = Callable[["BoardSnapshot"], None]
