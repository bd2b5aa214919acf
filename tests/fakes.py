# tests/fakes.py

from __future__ import annotations

import asyncio
import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

import httpx


class MemoryKeyValueStorage:
    """
    In-memory KeyValueStorage (localStorage stand-in).

    `writes` records every mutation so tests can assert what was persisted and when.
    """

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.writes: list[tuple[str, str, str | None]] = []

    def get_item(self, key: str) -> str | None:
        return self.data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.data[key] = value
        self.writes.append(("set", key, value))

    def remove_item(self, key: str) -> None:
        self.data.pop(key, None)
        self.writes.append(("remove", key, None))


@dataclass(slots=True)
class _User:
    password: str
    email: str


def _ok(data: Any = None, message: str = "", status: int = 200) -> httpx.Response:
    return httpx.Response(status, json={"success": True, "message": message, "data": data})


def _err(status: int, message: str) -> httpx.Response:
    return httpx.Response(status, json={"success": False, "message": message, "data": None})


@dataclass
class FakeTaskServer:
    """
    Deterministic in-memory version of the todo REST API, mounted with httpx.MockTransport.

    Knobs for tests:
    - `holds[path]`: an asyncio.Event the handler waits on before answering that path
    - `fail_next[(method, path)]`: one-shot status code to return instead of the real answer
    - `requests`: every request seen, in arrival order
    """

    users: dict[str, _User] = field(default_factory=dict)
    tokens: dict[str, str] = field(default_factory=dict)
    tasks: dict[int, dict[str, Any]] = field(default_factory=dict)
    requests: list[httpx.Request] = field(default_factory=list)
    holds: dict[str, asyncio.Event] = field(default_factory=dict)
    fail_next: dict[tuple[str, str], int] = field(default_factory=dict)
    next_id: int = 1
    token_seq: int = 0
    clock: datetime = field(default_factory=lambda: datetime(2024, 1, 1, 9, 0, 0))

    # ---- setup helpers ----

    def add_user(self, username: str, password: str, email: str = "") -> None:
        self.users[username] = _User(password=password, email=email or f"{username}@example.com")

    def issue_token(self, username: str) -> str:
        self.token_seq += 1
        token = f"eyJhbGciOiJIUzI1NiJ9.{username}.sig{self.token_seq}"
        self.tokens[token] = username
        return token

    def revoke_all_tokens(self) -> None:
        self.tokens.clear()

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def seed_task(self, owner: str, title: str, description: str = "", completed: bool = False) -> int:
        self.clock += timedelta(seconds=1)
        task_id = self.next_id
        self.next_id += 1
        ts = self.clock.isoformat()
        self.tasks[task_id] = {
            "id": task_id,
            "title": title,
            "description": description,
            "completed": completed,
            "createdAt": ts,
            "updatedAt": ts,
            "owner": owner,
        }
        return task_id

    def protected_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.startswith("/tasks")]

    # ---- routing ----

    @staticmethod
    def _public(task: dict[str, Any]) -> dict[str, Any]:
        return {k: v for k, v in task.items() if k != "owner"}

    def _owned(self, owner: str) -> list[dict[str, Any]]:
        rows = [t for t in self.tasks.values() if t["owner"] == owner]
        rows.sort(key=lambda t: (t["createdAt"], t["id"]), reverse=True)
        return rows

    def _page(self, rows: list[dict[str, Any]], page: int, size: int) -> dict[str, Any]:
        start = page * size
        chunk = rows[start : start + size]
        return {
            "content": [self._public(t) for t in chunk],
            "totalElements": len(rows),
            "totalPages": (len(rows) + size - 1) // size if size else 0,
            "number": page,
            "size": size,
        }

    def _auth_response(self, username: str) -> dict[str, Any]:
        return {
            "token": self.issue_token(username),
            "type": "Bearer",
            "username": username,
            "email": self.users[username].email,
        }

    async def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        method = request.method
        path = request.url.path

        hold = self.holds.get(path)
        if hold is not None:
            await hold.wait()

        forced = self.fail_next.pop((method, path), None)
        if forced is not None:
            return _err(forced, f"Forced failure {forced}")

        body: dict[str, Any] = {}
        if request.content:
            body = json.loads(request.content)

        if path == "/auth/health" and method == "GET":
            return _ok(None, "Auth service is running")

        if path == "/auth/login" and method == "POST":
            user = self.users.get(body.get("username", ""))
            if user is None or user.password != body.get("password"):
                return _err(401, "Invalid username or password")
            return _ok(self._auth_response(body["username"]), "Login successful")

        if path == "/auth/register" and method == "POST":
            username = body.get("username", "")
            if username in self.users:
                return _err(400, "Username already exists")
            self.add_user(username, body.get("password", ""), body.get("email", ""))
            return _ok(self._auth_response(username), "User registered successfully", status=201)

        if not path.startswith("/tasks"):
            return _err(404, "Not found")

        header = request.headers.get("Authorization", "")
        owner = self.tokens.get(header.removeprefix("Bearer ")) if header.startswith("Bearer ") else None
        if owner is None:
            return _err(401, "Unauthorized")

        params = request.url.params

        if path == "/tasks/recent" and method == "GET":
            rows = [t for t in self._owned(owner) if not t["completed"]][:5]
            return _ok([self._public(t) for t in rows], "Recent tasks retrieved successfully")

        if path == "/tasks/stats" and method == "GET":
            rows = self._owned(owner)
            done = sum(1 for t in rows if t["completed"])
            return _ok({"total": len(rows), "completed": done, "incomplete": len(rows) - done}, "Task statistics")

        if path == "/tasks/search" and method == "GET":
            q = params.get("q", "").lower()
            rows = [t for t in self._owned(owner) if q in t["title"].lower() or q in t["description"].lower()]
            return _ok(self._page(rows, int(params.get("page", 0)), int(params.get("size", 10))), "Search results")

        if path == "/tasks" and method == "GET":
            # Only page and size are honoured; unknown parameters such as `completed` are ignored.
            rows = self._owned(owner)
            return _ok(self._page(rows, int(params.get("page", 0)), int(params.get("size", 10))), "Tasks retrieved")

        if path == "/tasks" and method == "POST":
            task_id = self.seed_task(owner, body.get("title", ""), body.get("description", ""))
            return _ok(self._public(self.tasks[task_id]), "Task created successfully", status=201)

        m = re.fullmatch(r"/tasks/(\d+)(/complete)?", path)
        if m is None:
            return _err(404, "Not found")
        task = self.tasks.get(int(m.group(1)))
        if task is None or task["owner"] != owner:
            return _err(404, "Task not found")

        if m.group(2) and method == "PUT":
            self.clock += timedelta(seconds=1)
            task["completed"] = True
            task["updatedAt"] = self.clock.isoformat()
            return _ok(self._public(task), "Task marked as completed")

        if method == "GET":
            return _ok(self._public(task), "Task retrieved")

        if method == "PUT":
            self.clock += timedelta(seconds=1)
            task["title"] = body.get("title", task["title"])
            task["description"] = body.get("description", task["description"])
            task["updatedAt"] = self.clock.isoformat()
            return _ok(self._public(task), "Task updated successfully")

        if method == "DELETE":
            del self.tasks[task["id"]]
            return httpx.Response(200, json={"success": True, "message": "Task deleted successfully"})

        return _err(405, "Method not allowed")
