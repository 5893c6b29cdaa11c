"""Shared pytest fixtures and helpers for biblio tests."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest

from biblio.config import AppConfig
from biblio.errors import PersistenceError
from biblio.models.book import Book
from biblio.storage.database import SqliteSlot, initialize_database
from biblio.storage.record_store import RecordStore


class MemorySlot:
    """Dict-backed key-value slot that records every write."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})
        self.writes = 0
        self.fail_writes = False

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise PersistenceError("disk full", key=key)
        self.writes += 1
        self.data[key] = value


def make_book(title: str = "Dune", **fields: Any) -> Book:
    """Create a Book with sensible defaults for tests.

    Args:
        title: Book title.
        **fields: Any other Book field, by attribute name.

    Returns:
        A validated Book.
    """
    fields.setdefault("author", "Frank Herbert")
    return Book(title=title, **fields)


@pytest.fixture
def slot() -> MemorySlot:
    return MemorySlot()


@pytest.fixture
def store(slot: MemorySlot) -> RecordStore:
    return RecordStore(slot)


@pytest.fixture
def sqlite_slot(tmp_path: Path) -> SqliteSlot:
    db_path = tmp_path / "db" / "biblio.db"
    initialize_database(db_path)
    return SqliteSlot(db_path)


@pytest.fixture
def config() -> AppConfig:
    return AppConfig()
