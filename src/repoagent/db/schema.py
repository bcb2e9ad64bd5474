"""Database schema initialization."""

from __future__ import annotations

import sqlite3

from repoagent.db.migrations import MIGRATIONS, run_migrations

CURRENT_VERSION = max(version for version, _ in MIGRATIONS)

# Tables every initialized database must contain.
REQUIRED_TABLES: tuple[str, ...] = (
    "schema_version",
    "repos",
    "agent_configs",
    "agent_threads",
    "agent_messages",
    "content_chunks",
)


def initialize(conn: sqlite3.Connection) -> None:
    """Initialize the database schema via the migration runner (idempotent)."""
    run_migrations(conn)


def schema_version(conn: sqlite3.Connection) -> int:
    """Return the highest applied migration version (0 for an empty database)."""
    exists = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
    ).fetchone()
    if exists is None:
        return 0
    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    return row[0] or 0
