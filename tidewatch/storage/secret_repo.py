"""Persistent and in-memory secret stores (get/set by name)."""

import sqlite3


class SqliteSecretStore:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn

    def get(self, name: str) -> str | None:
        row = self.conn.execute(
            "SELECT value FROM secrets WHERE name = ?", (name,)
        ).fetchone()
        if row is None:
            return None
        return row[0]

    def set(self, name: str, value: str) -> None:
        self.conn.execute(
            "INSERT INTO secrets (name, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP) "
            "ON CONFLICT(name) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP",
            (name, value),
        )
        self.conn.commit()


class MemorySecretStore:
    """Process-lifetime store for when no database is configured."""

    def __init__(self, initial: dict[str, str] | None = None):
        self._values: dict[str, str] = dict(initial or {})

    def get(self, name: str) -> str | None:
        return self._values.get(name)

    def set(self, name: str, value: str) -> None:
        self._values[name] = value
