"""Initial schema: secrets, tide snapshots and widget state."""

import sqlite3

DDL = [
    # Opaque name -> value secret store (provider API keys)
    """
    CREATE TABLE IF NOT EXISTS secrets (
        name TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,

    # Last good tide bundle per location key, shown when a refresh fails
    """
    CREATE TABLE IF NOT EXISTS tide_snapshots (
        location_key TEXT PRIMARY KEY,
        bundle_json TEXT NOT NULL,
        fetched_at TEXT NOT NULL
    )
    """,

    # Payload exported for the home-screen widget
    """
    CREATE TABLE IF NOT EXISTS widget_state (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
    )
    """,
]


def up(conn: sqlite3.Connection) -> None:
    for stmt in DDL:
        conn.execute(stmt)
    conn.commit()
