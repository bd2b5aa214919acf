# src/taskboard_client/tasks/models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any


def _parse_ts(raw: Any) -> datetime | None:
    if not isinstance(raw, str) or not raw.strip():
        return None
    try:
        return datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
    except ValueError:
        return None


def _int(raw: Any, default: int = 0) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


@dataclass(slots=True, frozen=True)
class Task:
    id: int
    title: str
    description: str
    completed: bool
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_json(cls, raw: Any) -> Task | None:
        """Parse one task from the wire; None if it has no usable id."""
        if not isinstance(raw, dict):
            return None
        task_id = raw.get("id")
        if isinstance(task_id, bool) or not isinstance(task_id, int):
            return None
        return cls(
            id=task_id,
            title=str(raw.get("title") or ""),
            description=str(raw.get("description") or ""),
            completed=bool(raw.get("completed", False)),
            created_at=_parse_ts(raw.get("createdAt")),
            updated_at=_parse_ts(raw.get("updatedAt")),
        )


def tasks_from_json(raw: Any) -> list[Task]:
    if not isinstance(raw, list):
        return []
    out: list[Task] = []
    for item in raw:
        task = Task.from_json(item)
        if task is not None:
            out.append(task)
    return out


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    completed: int
    incomplete: int

    @classmethod
    def from_json(cls, raw: Any) -> TaskStats | None:
        if not isinstance(raw, dict):
            return None
        return cls(
            total=_int(raw.get("total")),
            completed=_int(raw.get("completed")),
            incomplete=_int(raw.get("incomplete")),
        )


@dataclass(slots=True, frozen=True)
class TaskPage:
    """One page of the paginated /tasks and /tasks/search endpoints."""

    items: list[Task]
    total_elements: int
    total_pages: int
    page: int
    size: int

    @classmethod
    def from_json(cls, raw: Any) -> TaskPage:
        if not isinstance(raw, dict):
            return cls(items=[], total_elements=0, total_pages=0, page=0, size=0)
        items = tasks_from_json(raw.get("content"))
        return cls(
            items=items,
            total_elements=_int(raw.get("totalElements"), len(items)),
            total_pages=_int(raw.get("totalPages")),
            page=_int(raw.get("number")),
            size=_int(raw.get("size"), len(items)),
        )
