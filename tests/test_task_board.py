# tests/test_task_board.py

from __future__ import annotations

import asyncio

import pytest

from taskboard_client.core.errors import NetworkOrServerError, SessionExpired
from taskboard_client.session.models import SessionStatus
from taskboard_client.tasks.board import RECENT_TASKS_LIMIT

from .conftest import USERNAME


@pytest.mark.asyncio
async def test_six_creates_leave_tasks_two_to_six_newest_first(logged_in) -> None:
    board = logged_in.board
    created = []
    for i in range(1, 7):
        res = await board.create_task(f"task {i}", "")
        assert res.ok
        created.append(res.value)

    assert len(board.recent) == RECENT_TASKS_LIMIT
    assert [t.title for t in board.recent] == ["task 6", "task 5", "task 4", "task 3", "task 2"]
    assert created[0].id not in {t.id for t in board.recent}
    assert board.stats is not None and board.stats.total == 6


@pytest.mark.asyncio
async def test_create_refreshes_recent_then_stats_in_order(logged_in, server) -> None:
    before = len(server.requests)
    await logged_in.board.create_task("write report", "by friday")

    paths = [(r.method, r.url.path) for r in server.requests[before:]]
    assert paths == [("POST", "/tasks"), ("GET", "/tasks/recent"), ("GET", "/tasks/stats")]


@pytest.mark.asyncio
async def test_complete_removes_task_and_moves_one_count(logged_in, server) -> None:
    board = logged_in.board
    keep = server.seed_task(USERNAME, "keep")
    finish = server.seed_task(USERNAME, "finish")
    await board.refresh()
    assert board.stats is not None
    before = board.stats

    res = await board.complete_task(finish)

    assert res.ok
    assert [t.id for t in board.recent] == [keep]
    assert board.stats.incomplete == before.incomplete - 1
    assert board.stats.completed == before.completed + 1
    assert board.stats.total == before.total


@pytest.mark.asyncio
async def test_delete_removes_task_from_next_load(logged_in, server) -> None:
    board = logged_in.board
    doomed = server.seed_task(USERNAME, "doomed")
    await board.refresh()
    assert [t.id for t in board.recent] == [doomed]

    res = await board.delete_task(doomed)

    assert res.ok
    assert board.recent == ()
    assert board.stats is not None and board.stats.total == 0


@pytest.mark.asyncio
async def test_failed_recent_fetch_keeps_previous_view(logged_in, server) -> None:
    board = logged_in.board
    server.seed_task(USERNAME, "cached")
    await board.load_recent()
    cached = board.recent

    server.fail_next[("GET", "/tasks/recent")] = 500
    res = await board.load_recent()

    assert not res.ok
    assert isinstance(res.error, NetworkOrServerError)
    assert board.recent == cached
    assert board.last_error == "Forced failure 500"


@pytest.mark.asyncio
async def test_stats_failure_is_non_fatal_and_keeps_previous(logged_in, server) -> None:
    board = logged_in.board
    await board.load_stats()
    previous = board.stats

    server.fail_next[("GET", "/tasks/stats")] = 503
    res = await board.create_task("still works", "")

    assert res.ok
    assert [t.title for t in board.recent] == ["still works"]
    assert board.stats == previous


@pytest.mark.asyncio
async def test_failed_mutation_does_not_refresh(logged_in, server) -> None:
    before = len(server.requests)
    res = await logged_in.board.complete_task(999)

    assert not res.ok
    assert res.message == "Task not found"
    assert [r.url.path for r in server.requests[before:]] == ["/tasks/999/complete"]


@pytest.mark.asyncio
async def test_same_task_guard_refuses_duplicate_but_not_other_tasks(logged_in, server) -> None:
    board = logged_in.board
    a = server.seed_task(USERNAME, "a")
    b = server.seed_task(USERNAME, "b")
    gate = asyncio.Event()
    server.holds[f"/tasks/{a}/complete"] = gate

    first = asyncio.create_task(board.complete_task(a))
    while not board.is_busy(a):
        await asyncio.sleep(0)

    duplicate = await board.delete_task(a)
    other = await board.complete_task(b)

    assert not duplicate.ok
    assert "already being updated" in duplicate.message
    assert other.ok

    gate.set()
    assert (await first).ok
    assert not board.is_busy(a)
    assert board.recent == ()


@pytest.mark.asyncio
async def test_protected_calls_after_logout_send_no_header_and_are_rejected(logged_in, server) -> None:
    board = logged_in.board
    logged_in.session.logout()
    before = len(server.requests)

    res = await board.create_task("sneaky", "")

    assert not res.ok
    assert isinstance(res.error, SessionExpired)
    sent = server.requests[before:]
    assert len(sent) == 1
    assert "Authorization" not in sent[0].headers
    assert server.tasks == {}
    assert logged_in.session.status is SessionStatus.UNAUTHENTICATED


@pytest.mark.asyncio
async def test_logout_clears_cached_board(logged_in, server) -> None:
    server.seed_task(USERNAME, "private")
    await logged_in.board.refresh()
    assert logged_in.board.recent

    logged_in.session.logout()

    assert logged_in.board.recent == ()
    assert logged_in.board.stats is None


@pytest.mark.asyncio
async def test_update_task_refreshes_view(logged_in, server) -> None:
    task_id = server.seed_task(USERNAME, "draft")
    res = await logged_in.board.update_task(task_id, "final", "polished")

    assert res.ok
    assert logged_in.board.recent[0].title == "final"
    assert logged_in.board.recent[0].description == "polished"


@pytest.mark.asyncio
async def test_listeners_see_replaced_view(logged_in, server) -> None:
    snapshots = []
    logged_in.board.subscribe(snapshots.append)
    server.seed_task(USERNAME, "seen")

    await logged_in.board.load_recent()

    assert snapshots[-1].recent[0].title == "seen"


@pytest.mark.asyncio
async def test_batch_complete_reports_partial_failure_and_refreshes_once(logged_in, server) -> None:
    a = server.seed_task(USERNAME, "a")
    b = server.seed_task(USERNAME, "b")
    before = len(server.requests)

    res = await logged_in.board.batch_complete([a, b, 404])

    assert not res.ok
    assert res.value is not None
    assert (res.value.successful, res.value.failed, res.value.total) == (2, 1, 3)
    assert res.message == "2 of 3 tasks completed successfully"
    assert server.tasks[a]["completed"] and server.tasks[b]["completed"]
    paths = [r.url.path for r in server.requests[before:]]
    assert paths.count("/tasks/recent") == 1
    assert paths.count("/tasks/stats") == 1
    assert logged_in.board.recent == ()


@pytest.mark.asyncio
async def test_batch_complete_skips_task_already_in_flight(logged_in, server) -> None:
    board = logged_in.board
    a = server.seed_task(USERNAME, "a")
    b = server.seed_task(USERNAME, "b")
    gate = asyncio.Event()
    server.holds[f"/tasks/{a}/complete"] = gate

    first = asyncio.create_task(board.complete_task(a))
    while not board.is_busy(a):
        await asyncio.sleep(0)

    batch = await board.batch_complete([a, b])

    assert not batch.ok
    assert batch.value is not None
    assert (batch.value.successful, batch.value.failed) == (1, 1)
    assert board.is_busy(a)
    assert not board.is_busy(b)

    gate.set()
    assert (await first).ok
    sent = [r for r in server.requests if r.url.path == f"/tasks/{a}/complete"]
    assert len(sent) == 1


@pytest.mark.asyncio
async def test_batch_complete_marks_rows_busy_while_running(logged_in, server) -> None:
    board = logged_in.board
    a = server.seed_task(USERNAME, "a")
    b = server.seed_task(USERNAME, "b")
    gate = asyncio.Event()
    server.holds[f"/tasks/{b}/complete"] = gate

    batch = asyncio.create_task(board.batch_complete([a, b]))
    while not board.is_busy(b):
        await asyncio.sleep(0)

    assert board.is_busy(a)
    duplicate = await board.complete_task(b)
    assert not duplicate.ok

    gate.set()
    assert (await batch).ok
    assert not board.is_busy(a) and not board.is_busy(b)


@pytest.mark.asyncio
async def test_failed_recent_fetch_notifies_listeners_with_error(logged_in, server) -> None:
    snapshots = []
    logged_in.board.subscribe(snapshots.append)

    server.fail_next[("GET", "/tasks/recent")] = 500
    await logged_in.board.load_recent()

    assert snapshots
    assert snapshots[-1].last_error == "Forced failure 500"


@pytest.mark.asyncio
async def test_fetch_resolving_after_logout_does_not_repopulate_board(logged_in, server) -> None:
    board = logged_in.board
    server.seed_task(USERNAME, "previous user's task")
    gate = asyncio.Event()
    server.holds["/tasks/recent"] = gate
    server.holds["/tasks/stats"] = gate

    pending = asyncio.create_task(board.refresh())
    while not any(r.url.path == "/tasks/recent" for r in server.requests):
        await asyncio.sleep(0)

    logged_in.session.logout()
    gate.set()
    await pending

    assert board.recent == ()
    assert board.stats is None
