# src/taskboard_client/tasks/task_api.py

"""
Wire-level task endpoints (bearer-authenticated).

Stateless: every method is one gateway round trip turned into a typed Result. Caching and
refresh policy live in TaskBoard, not here.
"""

from __future__ import annotations

from ..core.errors import NetworkOrServerError
from ..core.result import Result
from ..transport.gateway import Envelope, RequestGateway
from .models import Task, TaskPage, TaskStats, tasks_from_json

DEFAULT_PAGE_SIZE = 10


def _task_result(res: Result[Envelope], fallback: str) -> Result[Task]:
    if not res.ok or res.value is None:
        return res  # type: ignore[return-value]
    task = Task.from_json(res.value.data)
    if task is None:
        return Result.failure(NetworkOrServerError(f"{fallback}: malformed task"))
    return Result.success(task, message=res.message)


class TaskApi:
    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def recent_tasks(self) -> Result[list[Task]]:
        res = await self._gateway.request("GET", "/tasks/recent", fallback_message="Failed to fetch recent tasks")
        if not res.ok or res.value is None:
            return res  # type: ignore[return-value]
        if res.value.data is not None and not isinstance(res.value.data, list):
            return Result.failure(NetworkOrServerError("Failed to fetch recent tasks: malformed list"))
        return Result.success(tasks_from_json(res.value.data), message=res.message)

    async def stats(self) -> Result[TaskStats]:
        res = await self._gateway.request("GET", "/tasks/stats", fallback_message="Failed to fetch task statistics")
        if not res.ok or res.value is None:
            return res  # type: ignore[return-value]
        stats = TaskStats.from_json(res.value.data)
        if stats is None:
            return Result.failure(NetworkOrServerError("Failed to fetch task statistics: malformed stats"))
        return Result.success(stats, message=res.message)

    async def create_task(self, title: str, description: str = "") -> Result[Task]:
        res = await self._gateway.request(
            "POST",
            "/tasks",
            json={"title": title, "description": description},
            fallback_message="Failed to create task",
        )
        return _task_result(res, "Failed to create task")

    async def update_task(self, task_id: int, title: str, description: str = "") -> Result[Task]:
        res = await self._gateway.request(
            "PUT",
            f"/tasks/{int(task_id)}",
            json={"title": title, "description": description},
            fallback_message="Failed to update task",
        )
        return _task_result(res, "Failed to update task")

    async def complete_task(self, task_id: int) -> Result[Task]:
        res = await self._gateway.request(
            "PUT", f"/tasks/{int(task_id)}/complete", fallback_message="Failed to mark task as completed"
        )
        return _task_result(res, "Failed to mark task as completed")

    async def delete_task(self, task_id: int) -> Result[None]:
        res = await self._gateway.request("DELETE", f"/tasks/{int(task_id)}", fallback_message="Failed to delete task")
        return res.map(None)

    async def get_task(self, task_id: int) -> Result[Task]:
        res = await self._gateway.request("GET", f"/tasks/{int(task_id)}", fallback_message="Failed to fetch task")
        return _task_result(res, "Failed to fetch task")

    async def list_tasks(self, *, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Result[TaskPage]:
        params = {"page": max(0, int(page)), "size": max(1, int(size))}
        res = await self._gateway.request("GET", "/tasks", params=params, fallback_message="Failed to fetch tasks")
        return res.map(TaskPage.from_json(res.value.data) if res.value is not None else None)

    async def search_tasks(self, query: str, *, page: int = 0, size: int = DEFAULT_PAGE_SIZE) -> Result[TaskPage]:
        params = {"q": query, "page": max(0, int(page)), "size": max(1, int(size))}
        res = await self._gateway.request(
            "GET", "/tasks/search", params=params, fallback_message="Failed to search tasks"
        )
        return res.map(TaskPage.from_json(res.value.data) if res.value is not None else None)

