# src/taskboard_client/session/storage.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Slot names shared with the browser client so a session file maps 1:1 onto localStorage.
TOKEN_KEY = "token"
USER_KEY = "user"


def _load_json(path: Path) -> dict[str, Any]:
    raw = path.read_text("utf-8")
    val = json.loads(raw)
    if isinstance(val, dict):
        return val
    raise ValueError("Expected JSON object")


def _atomic_write_json(path: Path, data: dict[str, Any]) -> None:
    tmp = path.with_suffix(".tmp")
    tmp.write_text(json.dumps(data, ensure_ascii=False), "utf-8")
    os.replace(tmp, path)
    with contextlib.suppress(OSError):
        # Best-effort: the file holds a bearer token, keep it private on disk.
        os.chmod(path, 0o600)


class FileKeyValueStorage:
    """
    KeyValueStorage backed by a single JSON object on disk.

    Every write rewrites the whole file atomically. A corrupt or unreadable file reads as empty
    (the session store then starts unauthenticated); it is replaced on the next write.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            return _load_json(self._path)
        except (OSError, ValueError) as e:
            logger.warning("Session file %s is unreadable, treating as empty: %r", self._path, e)
            return {}

    def get_item(self, key: str) -> str | None:
        val = self._read_all().get(key)
        return val if isinstance(val, str) else None

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value
        self._path.parent.mkdir(parents=True, exist_ok=True)
        _atomic_write_json(self._path, data)

    def remove_item(self, key: str) -> None:
        data = self._read_all()
        if key not in data:
            return
        del data[key]
        if data:
            _atomic_write_json(self._path, data)
        else:
            self._path.unlink(missing_ok=True)
