# src/taskboard_client/core/errors.py

"""
Typed failures returned (not raised) by the gateway, session store and task board.

- ValidationError: local and field-scoped; never reaches the network.
- AuthenticationFailure: the server rejected credentials on a public endpoint (login/register).
- SessionExpired: a protected request came back 401; the session is forced out.
- NetworkOrServerError: anything else (transport error, non-2xx, malformed body).
"""

from __future__ import annotations


class TaskboardError(Exception):
    """Base class. `message` is always safe to show to the user."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TaskboardError):
    def __init__(self, errors: dict[str, str]) -> None:
        first = next(iter(errors.values()), "Invalid input")
        super().__init__(first)
        self.errors = dict(errors)


class AuthenticationFailure(TaskboardError):
    pass


class SessionExpired(TaskboardError):
    def __init__(self, message: str = "Session expired. Please login again.") -> None:
        super().__init__(message)


class NetworkOrServerError(TaskboardError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code

    def __repr__(self) -> str:
        return f"NetworkOrServerError(status_code={self.status_code!r}, message={self.message!r})"
