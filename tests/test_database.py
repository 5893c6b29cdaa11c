"""Tests for the SQLite key-value slot."""

import sqlite3
from pathlib import Path

import pytest

from biblio.errors import PersistenceError
from biblio.storage.database import SqliteSlot, get_connection, initialize_database


class TestInitializeDatabase:
    def test_creates_kv_table(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        conn = sqlite3.connect(str(db_path))
        cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
        tables = [row[0] for row in cursor.fetchall()]
        conn.close()

        assert "kv_store" in tables

    def test_idempotent(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)
        initialize_database(db_path)  # Should not raise

        conn = sqlite3.connect(str(db_path))
        cursor = conn.execute("PRAGMA table_info(kv_store)")
        columns = {row[1] for row in cursor.fetchall()}
        conn.close()
        assert columns == {"key", "value", "updated_at"}

    def test_creates_parent_directories(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / "dir" / "test.db"
        initialize_database(db_path)
        assert db_path.exists()

    def test_file_that_is_not_a_database_raises_persistence_error(self, tmp_path: Path) -> None:
        db_path = tmp_path / "garbage.db"
        db_path.write_bytes(b"this is not a sqlite database, just some bytes" * 20)
        with pytest.raises(PersistenceError):
            initialize_database(db_path)

    def test_directory_path_raises_persistence_error(self, tmp_path: Path) -> None:
        with pytest.raises(PersistenceError):
            initialize_database(tmp_path)


class TestGetConnection:
    def test_returns_connection_with_row_factory(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        conn = get_connection(db_path)
        assert conn.row_factory == sqlite3.Row
        conn.close()

    def test_wal_mode_enabled(self, tmp_path: Path) -> None:
        db_path = tmp_path / "test.db"
        initialize_database(db_path)

        conn = get_connection(db_path)
        mode = conn.execute("PRAGMA journal_mode").fetchone()[0]
        conn.close()
        assert mode == "wal"


class TestSqliteSlot:
    def test_missing_key_returns_none(self, sqlite_slot: SqliteSlot) -> None:
        assert sqlite_slot.get("biblio-gestor-data") is None

    def test_set_then_get(self, sqlite_slot: SqliteSlot) -> None:
        sqlite_slot.set("k", "[]")
        assert sqlite_slot.get("k") == "[]"

    def test_set_overwrites(self, sqlite_slot: SqliteSlot) -> None:
        sqlite_slot.set("k", "first")
        sqlite_slot.set("k", "second")
        assert sqlite_slot.get("k") == "second"

    def test_keys_are_independent(self, sqlite_slot: SqliteSlot) -> None:
        sqlite_slot.set("a", "1")
        sqlite_slot.set("b", "2")
        assert sqlite_slot.get("a") == "1"
        assert sqlite_slot.get("b") == "2"

    def test_uninitialized_database_raises_persistence_error(self, tmp_path: Path) -> None:
        slot = SqliteSlot(tmp_path / "fresh.db")
        with pytest.raises(PersistenceError):
            slot.get("k")

    def test_unwritable_location_raises_persistence_error(self, tmp_path: Path) -> None:
        slot = SqliteSlot(tmp_path / "missing" / "dir" / "x.db")
        with pytest.raises(PersistenceError) as exc_info:
            slot.set("k", "v")
        assert exc_info.value.key == "k"
