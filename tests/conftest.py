"""Shared fixtures: a loaded in-memory store and a mocked completion backend."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from todo_agent.storage import MemoryStorage
from todo_agent.store import TodoStore


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def store(storage):
    s = TodoStore(storage)
    s.load()
    return s


@pytest.fixture
def backend():
    b = MagicMock()
    b.complete = AsyncMock()
    return b


@pytest.fixture
def seeded_store(store):
    store.create("Buy Milk", due_date="2026-10-18", priority="high")
    store.create("Groceries", priority="low")
    store.create("Call mom", due_date="2026-10-19")
    return store
