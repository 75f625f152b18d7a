"""SQLite-backed local durable storage."""

from .sqlite_key_value_storage import SQLiteKeyValueStorage

__all__ = ["SQLiteKeyValueStorage"]
