from __future__ import annotations

import sqlite3

from domain.errors import StorageError

_DEFAULT_NAMESPACE = "default"


class SQLiteKeyValueStorage:
    """
    SQLite-backed implementation of ``KeyValueStoragePort``.

    Plays the role browser ``localStorage`` plays for a web client: a
    durable, string-valued map. ``namespace`` keeps several trackers
    apart inside one database file.
    """

    _SCHEMA_SQL = """\
    CREATE TABLE IF NOT EXISTS local_storage (
        namespace TEXT NOT NULL,
        key       TEXT NOT NULL,
        value     TEXT NOT NULL,
        PRIMARY KEY (namespace, key)
    );
    """

    def __init__(
        self,
        db_path: str = ":memory:",
        namespace: str = _DEFAULT_NAMESPACE,
    ) -> None:
        try:
            self._conn = sqlite3.connect(db_path)
            self._conn.execute("PRAGMA journal_mode=WAL")
            self._conn.executescript(self._SCHEMA_SQL)
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot open local storage at {db_path}: {exc}") from exc
        self._namespace = namespace

    def __enter__(self) -> "SQLiteKeyValueStorage":
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        self.close()

    def get_item(self, key: str) -> str | None:
        try:
            row = self._conn.execute(
                "SELECT value FROM local_storage WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            ).fetchone()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot read {key!r}: {exc}") from exc
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            self._conn.execute(
                "INSERT INTO local_storage (namespace, key, value) VALUES (?, ?, ?) "
                "ON CONFLICT(namespace, key) DO UPDATE SET value=excluded.value",
                (self._namespace, key, value),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot write {key!r}: {exc}") from exc

    def remove_item(self, key: str) -> None:
        try:
            self._conn.execute(
                "DELETE FROM local_storage WHERE namespace = ? AND key = ?",
                (self._namespace, key),
            )
            self._conn.commit()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot remove {key!r}: {exc}") from exc

    def keys(self) -> list[str]:
        try:
            rows = self._conn.execute(
                "SELECT key FROM local_storage WHERE namespace = ? ORDER BY key",
                (self._namespace,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise StorageError(f"Cannot list keys: {exc}") from exc
        return [r[0] for r in rows]

    def close(self) -> None:
        self._conn.close()
