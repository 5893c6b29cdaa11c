"""Durable storage and the record store."""

from biblio.storage.database import SqliteSlot, initialize_database
from biblio.storage.record_store import KeyValueSlot, RecordStore

__all__ = ["KeyValueSlot", "RecordStore", "SqliteSlot", "initialize_database"]
