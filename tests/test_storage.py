"""Tests for the persisted slot backends (memory, JSON file, SQLite)."""
import json

import pytest

from todo_agent.config import Settings
from todo_agent.database import SqliteStorage
from todo_agent.storage import JsonFileStorage, MemoryStorage, create_storage
from todo_agent.store import TodoStore

ITEMS = [{"id": 1, "title": "Buy Milk", "completed": False, "createdAt": "2026-10-18T09:00:00.000Z"}]


class TestMemoryStorage:
    def test_empty(self):
        assert MemoryStorage().load() is None

    def test_save_load(self):
        s = MemoryStorage()
        s.save(ITEMS)
        assert s.load() == ITEMS


class TestJsonFileStorage:
    def test_missing_file(self, tmp_path):
        assert JsonFileStorage(str(tmp_path / "none.json")).load() is None

    def test_list_under_fixed_key(self, tmp_path):
        path = tmp_path / "nested" / "todos.json"
        s = JsonFileStorage(str(path))
        s.save(ITEMS)
        assert json.loads(path.read_text(encoding="utf-8")) == {"todos": ITEMS}
        assert s.load() == ITEMS

    def test_other_keys_preserved(self, tmp_path):
        path = tmp_path / "store.json"
        path.write_text(json.dumps({"theme": "dark"}), encoding="utf-8")
        JsonFileStorage(str(path)).save(ITEMS)
        assert json.loads(path.read_text(encoding="utf-8"))["theme"] == "dark"

    def test_corrupt_file_overwritten_on_save(self, tmp_path):
        path = tmp_path / "todos.json"
        path.write_text("{not json", encoding="utf-8")
        s = JsonFileStorage(str(path))
        s.save(ITEMS)
        assert s.load() == ITEMS

    def test_save_failure_is_logged_not_raised(self, tmp_path, caplog):
        # A directory where the file should be makes open() fail
        path = tmp_path / "todos.json"
        path.mkdir()
        JsonFileStorage(str(path)).save(ITEMS)
        assert "Failed to save todos" in caplog.text

    def test_store_survives_corrupt_file(self, tmp_path):
        path = tmp_path / "todos.json"
        path.write_text("{not json", encoding="utf-8")
        store = TodoStore(JsonFileStorage(str(path)))
        store.load()
        assert store.list() == []


class TestSqliteStorage:
    def test_round_trip(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'db' / 'todos.db'}"
        s = SqliteStorage(url)
        assert s.load() is None
        s.save(ITEMS)
        s.save(ITEMS + [{**ITEMS[0], "id": 2}])
        assert [item["id"] for item in SqliteStorage(url).load()] == [1, 2]

    def test_store_on_sqlite(self, tmp_path):
        url = f"sqlite:///{tmp_path / 'todos.db'}"
        store = TodoStore(SqliteStorage(url))
        store.load()
        todo = store.create("Persisted")

        again = TodoStore(SqliteStorage(url))
        again.load()
        assert again.get(todo.id).title == "Persisted"


class TestCreateStorage:
    def test_memory(self):
        assert isinstance(create_storage(Settings(storage_backend="memory")), MemoryStorage)

    def test_json(self, tmp_path):
        s = create_storage(Settings(storage_backend="json", storage_path=str(tmp_path / "t.json")))
        assert isinstance(s, JsonFileStorage)

    def test_sqlite(self, tmp_path):
        s = create_storage(Settings(storage_backend="sqlite", database_url=f"sqlite:///{tmp_path / 't.db'}"))
        assert isinstance(s, SqliteStorage)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_storage(Settings(storage_backend="redis"))
