"""SQLite-backed durable key-value slot."""

import logging
import sqlite3
from pathlib import Path

from biblio.errors import PersistenceError

logger = logging.getLogger(__name__)


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode=WAL")
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def initialize_database(db_path: str | Path) -> None:
    """Create the key-value table if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.

    Raises:
        PersistenceError: If the file cannot be created or is not a database.
    """
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        conn = get_connection(db_path)
    except (sqlite3.Error, OSError) as exc:
        raise PersistenceError(f"Cannot open database {db_path}: {exc}") from exc

    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS kv_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );
            """
        )
        conn.commit()
    except sqlite3.Error as exc:
        raise PersistenceError(f"Cannot initialize database {db_path}: {exc}") from exc
    finally:
        conn.close()


class SqliteSlot:
    """Named string entries kept in the ``kv_store`` table.

    Every call opens and closes its own connection; writes are a single
    upsert inside one transaction.

    Args:
        db_path: Path to a database prepared by :func:`initialize_database`.
    """

    def __init__(self, db_path: str | Path) -> None:
        self._db_path = Path(db_path)

    def get(self, key: str) -> str | None:
        """Return the stored value for ``key`` or None if absent.

        Raises:
            PersistenceError: If the database cannot be read.
        """
        try:
            conn = get_connection(self._db_path)
            try:
                row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot read slot {key!r}: {exc}", key=key) from exc
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        """Overwrite the value stored under ``key``.

        Raises:
            PersistenceError: If the write fails.
        """
        try:
            conn = get_connection(self._db_path)
            try:
                with conn:
                    conn.execute(
                        """
                        INSERT INTO kv_store (key, value, updated_at)
                        VALUES (?, ?, CURRENT_TIMESTAMP)
                        ON CONFLICT(key) DO UPDATE SET
                            value = excluded.value,
                            updated_at = CURRENT_TIMESTAMP
                        """,
                        (key, value),
                    )
            finally:
                conn.close()
        except sqlite3.Error as exc:
            raise PersistenceError(f"Cannot write slot {key!r}: {exc}", key=key) from exc
        logger.debug("Wrote %d bytes to slot %r", len(value), key)
