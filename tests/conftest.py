"""Shared test fixtures for todoboard tests."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is importable without an install
sys.path.insert(0, str(Path(__file__).parent.parent))

from todoboard.storage import MemoryLocalStorage, SQLiteLocalStorage
from todoboard.store import TodoStore


@pytest.fixture
def memory_storage():
    return MemoryLocalStorage()


@pytest.fixture
def empty_store(memory_storage):
    """A loaded store with the seed card removed from memory and storage."""
    memory_storage.set_item("todo_app", "{}")
    store = TodoStore(memory_storage)
    store.load()
    return store


@pytest.fixture
def db_path(tmp_path):
    return str(tmp_path / "board.db")


@pytest.fixture
def sqlite_store(db_path):
    store = TodoStore(SQLiteLocalStorage(db_path))
    store.load()
    return store
