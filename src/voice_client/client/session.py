"""Session store implementations.

The gateway only ever removes one key from the store (when the server
reports the session as expired). ``get`` and ``set`` exist for the callers
that own the stored session.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import filelock

logger = logging.getLogger(__name__)


@runtime_checkable
class SessionStore(Protocol):
    """Key-value store holding the persisted session identifier."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemorySessionStore:
    """Process-local session store backed by a dict."""

    def __init__(self, initial: dict[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any | None:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._data


class FileSessionStore:
    """Session store persisted as a JSON object in a file.

    The file is re-read on every access so that several processes sharing
    it see each other's writes. Reads and read-modify-write updates hold an
    exclusive lock on a sibling ``.lock`` file. A missing file behaves as an
    empty store.
    """

    LOCK_TIMEOUT = 10.0  # seconds

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock_path = self.path.with_name(self.path.name + ".lock")
        self._lock = filelock.FileLock(str(self._lock_path), timeout=self.LOCK_TIMEOUT)

    def _load(self) -> dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path) as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"Session file {self.path} must hold a JSON object")
        return data

    def _save(self, data: dict[str, Any]) -> None:
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Any | None:
        if not self.path.exists():
            return None
        with self._lock:
            return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self._lock:
            data = self._load()
            data[key] = value
            self._save(data)

    def remove(self, key: str) -> None:
        if not self.path.exists():
            return
        with self._lock:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._save(data)
        logger.debug("Removed %s from session file %s", key, self.path)
