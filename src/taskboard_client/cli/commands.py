# src/taskboard_client/cli/commands.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from ..core.state import AppState
from ..formatters import format_percentage, format_relative_time, format_task_status, truncate_text
from ..tasks.board import BoardSnapshot
from ..tasks.models import Task, TaskPage
from ..validators import validate_login_form, validate_registration_form, validate_task_form

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CommandIO:
    """How a command talks to the user: print a line, or ask for one (optionally hidden)."""

    emit: Callable[[str], None]
    ask: Callable[[str, bool], Awaitable[str]]


CommandHandler = Callable[[AppState, list[str], CommandIO], Awaitable[str]]


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /login, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}
        self._protected: set[str] = set()

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
        *,
        protected: bool = False,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in [key, *(a.lower() for a in aliases)]:
            self._handlers[alias] = handler
            if protected:
                self._protected.add(alias)

    async def handle(self, state: AppState, line: str, io: CommandIO) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        if name in self._protected and not state.session.is_authenticated:
            return "You are not logged in. Use /login or /register first."

        return await handler(state, args, io)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- rendering ----


def _render_task(task: Task, *, busy: bool = False) -> str:
    when = format_relative_time(task.created_at)
    flag = " (updating...)" if busy else ""
    line = f"#{task.id} {task.title} [{format_task_status(task.completed)}, {when}]{flag}"
    if task.description:
        line += f"\n      {truncate_text(task.description, 80)}"
    return line


def render_board(snap: BoardSnapshot) -> str:
    lines = ["Recent tasks:"]
    if not snap.recent:
        lines.append("  (no incomplete tasks)")
    for task in snap.recent:
        lines.append("  " + _render_task(task, busy=task.id in snap.busy))
    if snap.stats is not None:
        s = snap.stats
        lines.append(
            f"Stats: {s.total} total, {s.completed} completed "
            f"({format_percentage(s.completed, s.total)}), {s.incomplete} incomplete"
        )
    if snap.last_error:
        lines.append(f"[!] {snap.last_error}")
    return "\n".join(lines)


def _render_page(page: TaskPage) -> str:
    if not page.items:
        return "No tasks found."
    lines = [f"Page {page.page + 1}/{max(page.total_pages, 1)} ({page.total_elements} tasks):"]
    lines.extend("  " + _render_task(t) for t in page.items)
    return "\n".join(lines)


def _errors_text(errors: dict[str, str]) -> str:
    return "\n".join(f"  {field}: {msg}" for field, msg in errors.items())


def _split_title(args: list[str]) -> tuple[str, str]:
    """'Buy milk | two litres' -> ('Buy milk', 'two litres')."""
    raw = " ".join(args)
    title, _, description = raw.partition("|")
    return title.strip(), description.strip()


def _parse_id(raw: str) -> int | None:
    try:
        return int(raw.lstrip("#"))
    except ValueError:
        return None


# ---- session commands ----


async def cmd_help(state: AppState, args: list[str], io: CommandIO) -> str:
    return registry.build_help()


async def cmd_login(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /login [username]  -> prompts for anything missing, password is hidden
    """
    username = args[0] if args else (await io.ask("Username: ", False)).strip()
    password = await io.ask("Password: ", True)

    errors = validate_login_form({"username": username, "password": password})
    if errors:
        return "Cannot login:\n" + _errors_text(errors)

    res = await state.session.login(username, password)
    if not res.ok:
        return f"Login failed: {res.message}"

    await state.board.refresh()
    return f"{res.message or 'Login successful!'}\n{render_board(state.board.snapshot())}"


async def cmd_register(state: AppState, args: list[str], io: CommandIO) -> str:
    username = args[0] if args else (await io.ask("Username: ", False)).strip()
    email = (await io.ask("Email: ", False)).strip()
    password = await io.ask("Password: ", True)
    confirm = await io.ask("Confirm password: ", True)

    errors = validate_registration_form(
        {"username": username, "email": email, "password": password, "confirm_password": confirm}
    )
    if errors:
        return "Cannot register:\n" + _errors_text(errors)

    res = await state.session.register(username, email, password, confirm)
    if not res.ok:
        return f"Registration failed: {res.message}"

    await state.board.refresh()
    return f"{res.message or 'Registration successful!'}\n{render_board(state.board.snapshot())}"


async def cmd_logout(state: AppState, args: list[str], io: CommandIO) -> str:
    state.session.logout()
    return "Logged out successfully."


async def cmd_whoami(state: AppState, args: list[str], io: CommandIO) -> str:
    identity = state.session.identity
    if identity is None:
        return f"Not logged in ({state.session.status.value})."
    email = f" <{identity.email}>" if identity.email else ""
    return f"Logged in as {identity.username}{email}."


async def cmd_health(state: AppState, args: list[str], io: CommandIO) -> str:
    res = await state.auth_api.health_check()
    return res.message or ("Auth service is running" if res.ok else "Auth service unavailable")


# ---- board commands ----


async def cmd_list(state: AppState, args: list[str], io: CommandIO) -> str:
    return render_board(state.board.snapshot())


async def cmd_refresh(state: AppState, args: list[str], io: CommandIO) -> str:
    await state.board.refresh()
    return render_board(state.board.snapshot())


async def cmd_stats(state: AppState, args: list[str], io: CommandIO) -> str:
    res = await state.board.load_stats()
    stats = state.board.stats
    if stats is None:
        return f"Statistics unavailable: {res.message}"
    return (
        f"Total: {stats.total}\n"
        f"Completed: {stats.completed} ({format_percentage(stats.completed, stats.total)})\n"
        f"Incomplete: {stats.incomplete}"
    )


async def cmd_add(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /add <title> [| description]
    """
    title, description = _split_title(args)
    errors = validate_task_form({"title": title, "description": description})
    if errors:
        return "Cannot create task:\n" + _errors_text(errors)

    res = await state.board.create_task(title, description)
    if not res.ok:
        return f"Failed: {res.message}"
    return f"{res.message or 'Task created successfully!'}\n{render_board(state.board.snapshot())}"


async def cmd_edit(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /edit <id> <title> [| description]
    """
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /edit <id> <title> [| description]"
    title, description = _split_title(args[1:])
    errors = validate_task_form({"title": title, "description": description})
    if errors:
        return "Cannot update task:\n" + _errors_text(errors)

    res = await state.board.update_task(task_id, title, description)
    if not res.ok:
        return f"Failed: {res.message}"
    return f"{res.message or 'Task updated.'}\n{render_board(state.board.snapshot())}"


async def cmd_done(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /done <id> [<id> ...]  -> one id completes through the board, several go as a batch
    """
    ids = [i for i in (_parse_id(a) for a in args) if i is not None]
    if not ids:
        return "Usage: /done <id> [<id> ...]"

    if len(ids) == 1:
        res = await state.board.complete_task(ids[0])
        if not res.ok:
            return f"Failed: {res.message}"
        return f"{res.message or 'Task completed!'}\n{render_board(state.board.snapshot())}"

    batch = await state.board.batch_complete(ids)
    return f"{batch.message}\n{render_board(state.board.snapshot())}"


async def cmd_rm(state: AppState, args: list[str], io: CommandIO) -> str:
    task_id = _parse_id(args[0]) if args else None
    if task_id is None:
        return "Usage: /rm <id>"

    answer = (await io.ask(f"Delete task #{task_id}? [y/N] ", False)).strip().lower()
    if answer not in ("y", "yes"):
        return "Cancelled."

    res = await state.board.delete_task(task_id)
    if not res.ok:
        return f"Failed: {res.message}"
    return f"{res.message or 'Task deleted!'}\n{render_board(state.board.snapshot())}"


async def cmd_all(state: AppState, args: list[str], io: CommandIO) -> str:
    """
    /all [page]
    """
    page = 1
    if args and args[0].isdigit():
        page = max(1, int(args[0]))

    res = await state.task_api.list_tasks(page=page - 1)
    if not res.ok or res.value is None:
        return f"Failed: {res.message}"
    return _render_page(res.value)


async def cmd_search(state: AppState, args: list[str], io: CommandIO) -> str:
    query = " ".join(args).strip()
    if not query:
        return "Usage: /search <text>"
    res = await state.task_api.search_tasks(query)
    if not res.ok or res.value is None:
        return f"Failed: {res.message}"
    return _render_page(res.value)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("login", cmd_login, help_text="Log in: /login [username].")
registry.register("register", cmd_register, help_text="Create an account: /register [username].")
registry.register("logout", cmd_logout, help_text="Log out and forget the saved session.")
registry.register("whoami", cmd_whoami, help_text="Show the current identity.")
registry.register("health", cmd_health, help_text="Check that the auth service is reachable.")
registry.register("list", cmd_list, help_text="Show cached recent tasks and stats.", aliases=["ls"], protected=True)
registry.register("refresh", cmd_refresh, help_text="Reload recent tasks and stats.", protected=True)
registry.register("stats", cmd_stats, help_text="Reload and show task statistics.", protected=True)
registry.register("add", cmd_add, help_text="Create a task: /add <title> [| description].", protected=True)
registry.register("edit", cmd_edit, help_text="Edit a task: /edit <id> <title> [| description].", protected=True)
registry.register("done", cmd_done, help_text="Complete task(s): /done <id> [<id> ...].", protected=True)
registry.register("rm", cmd_rm, help_text="Delete a task: /rm <id>.", aliases=["delete"], protected=True)
registry.register("all", cmd_all, help_text="All tasks, paginated: /all [page].", protected=True)
registry.register("search", cmd_search, help_text="Search tasks: /search <text>.", protected=True)
