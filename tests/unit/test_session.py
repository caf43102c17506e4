"""Unit tests for session stores."""

import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from voice_client.client import FileSessionStore, MemorySessionStore, SessionStore


class TestMemorySessionStore:
    """Tests for the in-process store."""

    def test_get_set_remove(self) -> None:
        store = MemorySessionStore()
        store.set("userdata", {"userId": "abc"})
        assert store.get("userdata") == {"userId": "abc"}

        store.remove("userdata")
        assert store.get("userdata") is None
        assert "userdata" not in store

    def test_remove_missing_key(self) -> None:
        store = MemorySessionStore({"other": 1})
        store.remove("userdata")
        assert store.get("other") == 1

    def test_initial_data_is_copied(self) -> None:
        initial = {"userdata": 1}
        store = MemorySessionStore(initial)
        store.remove("userdata")
        assert initial == {"userdata": 1}

    def test_satisfies_protocol(self) -> None:
        assert isinstance(MemorySessionStore(), SessionStore)
        assert isinstance(FileSessionStore("unused.json"), SessionStore)


class TestFileSessionStore:
    """Tests for the JSON file store."""

    def test_missing_file_is_empty(self, tmp_path) -> None:
        store = FileSessionStore(tmp_path / "session.json")
        assert store.get("userdata") is None
        store.remove("userdata")
        assert not (tmp_path / "session.json").exists()

    def test_set_persists(self, tmp_path) -> None:
        path = tmp_path / "nested" / "session.json"
        FileSessionStore(path).set("userdata", {"userId": "abc"})

        assert json.loads(path.read_text()) == {"userdata": {"userId": "abc"}}
        assert FileSessionStore(path).get("userdata") == {"userId": "abc"}

    def test_remove_keeps_other_keys(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text(json.dumps({"userdata": {"userId": "abc"}, "theme": "dark"}))

        FileSessionStore(path).remove("userdata")

        assert json.loads(path.read_text()) == {"theme": "dark"}

    def test_non_object_file_rejected(self, tmp_path) -> None:
        path = tmp_path / "session.json"
        path.write_text("[1, 2]")

        with pytest.raises(ValueError):
            FileSessionStore(path).get("userdata")

    def test_concurrent_writers_keep_every_key(self, tmp_path) -> None:
        """Writers sharing one file never overwrite each other's keys."""
        path = tmp_path / "session.json"

        def write(index: int) -> None:
            FileSessionStore(path).set(f"key-{index}", index)

        with ThreadPoolExecutor(max_workers=8) as pool:
            list(pool.map(write, range(40)))

        assert json.loads(path.read_text()) == {f"key-{i}": i for i in range(40)}

