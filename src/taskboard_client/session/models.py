# src/taskboard_client/session/models.py

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class SessionStatus(StrEnum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class ChangeReason(StrEnum):
    """Why the session transitioned. The UI redirects to login on EXPIRED."""

    RESTORED = "restored"
    AUTHENTICATING = "authenticating"
    LOGIN = "login"
    REGISTER = "register"
    FAILED = "failed"
    LOGOUT = "logout"
    EXPIRED = "expired"


@dataclass(slots=True, frozen=True)
class Identity:
    username: str
    email: str = ""

    def to_json(self) -> str:
        return json.dumps({"username": self.username, "email": self.email}, ensure_ascii=False)

    @classmethod
    def from_json(cls, raw: str | None) -> Identity | None:
        """Parse the persisted identity blob; None if it is not well-formed."""
        if not raw:
            return None
        try:
            val = json.loads(raw)
        except ValueError:
            return None
        if not isinstance(val, dict):
            return None
        username = val.get("username")
        if not isinstance(username, str) or not username.strip():
            return None
        email = val.get("email")
        return cls(username=username, email=email if isinstance(email, str) else "")


@dataclass(slots=True, frozen=True)
class Credential:
    token: str
    identity: Identity

    def __repr__(self) -> str:
        # Never leak the bearer token into logs or tracebacks.
        return f"Credential(token=<redacted>, identity={self.identity!r})"

    @classmethod
    def from_auth_payload(cls, data: Any) -> Credential | None:
        """Build from the `data` of an /auth/login or /auth/register envelope."""
        if not isinstance(data, dict):
            return None
        token = data.get("token")
        username = data.get("username")
        if not isinstance(token, str) or not token.strip():
            return None
        if not isinstance(username, str) or not username.strip():
            return None
        email = data.get("email")
        return cls(
            token=token,
            identity=Identity(username=username, email=email if isinstance(email, str) else ""),
        )


@dataclass(slots=True, frozen=True)
class SessionChange:
    status: SessionStatus
    identity: Identity | None
    reason: ChangeReason
