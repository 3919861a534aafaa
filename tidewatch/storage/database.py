"""SQLite storage for secrets, tide snapshots and the widget payload."""

import importlib
import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_PACKAGE = "tidewatch.storage.migrations"
MIGRATIONS_DIR = Path(__file__).parent / "migrations"
IN_MEMORY = ":memory:"


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open a connection in WAL mode with name-addressable rows.

    The parent directory of a file database is created on first use.
    """
    if str(db_path) != IN_MEMORY:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def open_database(db_path: str | Path) -> sqlite3.Connection:
    """Connect and bring the schema up to date."""
    conn = connect(db_path)
    applied = run_migrations(conn)
    if applied:
        logger.info("Applied migrations to %s: %s", db_path, ", ".join(applied))
    return conn


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply pending ``v###_*`` migrations in name order; returns the ones applied."""
    conn.execute(
        "CREATE TABLE IF NOT EXISTS schema_versions ("
        "  version TEXT PRIMARY KEY,"
        "  applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP"
        ")"
    )
    conn.commit()

    done = {row[0] for row in conn.execute("SELECT version FROM schema_versions")}
    pending = [name for name in _discover_migrations() if name not in done]

    for name in pending:
        importlib.import_module(f"{MIGRATIONS_PACKAGE}.{name}").up(conn)
        conn.execute("INSERT INTO schema_versions (version) VALUES (?)", (name,))
        conn.commit()
    return pending


def _discover_migrations() -> list[str]:
    return sorted(p.stem for p in MIGRATIONS_DIR.glob("v[0-9]*_*.py"))
