# src/taskboard_client/core/result.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from .errors import TaskboardError

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Result(Generic[T]):
    """
    Value-or-typed-failure returned by every network-facing operation.

    `message` is the server's envelope message on success, or the error message on failure.
    """

    ok: bool
    value: T | None = None
    error: TaskboardError | None = None
    message: str = ""

    @classmethod
    def success(cls, value: T | None = None, message: str = "") -> "Result[T]":
        return cls(ok=True, value=value, message=message)

    @classmethod
    def failure(cls, error: TaskboardError) -> "Result[T]":
        return cls(ok=False, error=error, message=error.message)

    def map(self, value: object, message: str | None = None) -> "Result":
        """Carry a failure through unchanged, or replace the success value."""
        if not self.ok:
            return self
        return Result(ok=True, value=value, message=self.message if message is None else message)
