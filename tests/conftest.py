# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest
import pytest_asyncio

from taskboard_client.cli.bootstrap import create_initial_state, shutdown
from taskboard_client.core.state import AppState

from .fakes import FakeTaskServer, MemoryKeyValueStorage

USERNAME = "alice"
PASSWORD = "secret1"
EMAIL = "alice@example.com"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_initial_state.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's .env.
    """
    return SimpleNamespace(
        app_name="taskboard-test",
        log_level="DEBUG",
        api_base_url="http://testserver",
        http_timeout_seconds=5.0,
        data_dir=tmp_path,
        session_file_path=tmp_path / "session.json",
        refresh_interval_seconds=0.0,
    )


@pytest.fixture()
def server() -> FakeTaskServer:
    srv = FakeTaskServer()
    srv.add_user(USERNAME, PASSWORD, EMAIL)
    return srv


@pytest.fixture()
def storage() -> MemoryKeyValueStorage:
    return MemoryKeyValueStorage()


@pytest_asyncio.fixture()
async def state(settings: SimpleNamespace, server: FakeTaskServer, storage: MemoryKeyValueStorage):
    """
    AppState wired exactly like the CLI, but with in-memory storage and the fake server.
    """
    app: AppState = create_initial_state(settings=settings, storage=storage, transport=server.transport())
    yield app
    await shutdown(app)


@pytest_asyncio.fixture()
async def logged_in(state: AppState) -> AppState:
    res = await state.session.login(USERNAME, PASSWORD)
    assert res.ok, res.message
    return state
