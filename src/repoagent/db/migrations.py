"""Forward-only migration runner for the repoagent database schema."""

from __future__ import annotations

import sqlite3

# schema_version is the bootstrap table, created before migrations run.
_CREATE_SCHEMA_VERSION = """
CREATE TABLE IF NOT EXISTS schema_version (
    version     INTEGER NOT NULL,
    applied_at  DATETIME NOT NULL DEFAULT (datetime('now'))
)
"""

_V1_SQL = """
CREATE TABLE IF NOT EXISTS repos (
    id              TEXT PRIMARY KEY,
    owner_handle    TEXT NOT NULL,
    name            TEXT NOT NULL,
    description     TEXT NOT NULL DEFAULT '',
    is_public       INTEGER NOT NULL DEFAULT 1,
    created_at      DATETIME NOT NULL DEFAULT (datetime('now')),
    UNIQUE (owner_handle, name)
);

CREATE TABLE IF NOT EXISTS agent_configs (
    repo_id         TEXT PRIMARY KEY REFERENCES repos(id) ON DELETE CASCADE,
    agent_enabled   INTEGER NOT NULL DEFAULT 1,
    agent_mode      TEXT NOT NULL DEFAULT 'public',
    model_provider  TEXT NOT NULL DEFAULT 'stub',
    system_prompt   TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS agent_threads (
    id              TEXT PRIMARY KEY,
    repo_id         TEXT NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
    visibility      TEXT NOT NULL DEFAULT 'public',
    title           TEXT NOT NULL DEFAULT '',
    created_at      DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE TABLE IF NOT EXISTS agent_messages (
    seq             INTEGER PRIMARY KEY AUTOINCREMENT,
    thread_id       TEXT NOT NULL REFERENCES agent_threads(id) ON DELETE CASCADE,
    repo_id         TEXT NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
    role            TEXT NOT NULL CHECK (role IN ('user', 'assistant', 'system')),
    content         TEXT NOT NULL,
    citations       TEXT NOT NULL DEFAULT '[]',
    created_at      DATETIME NOT NULL DEFAULT (datetime('now'))
);

CREATE INDEX IF NOT EXISTS idx_agent_messages_thread ON agent_messages(thread_id, seq);

CREATE TABLE IF NOT EXISTS content_chunks (
    repo_id         TEXT NOT NULL REFERENCES repos(id) ON DELETE CASCADE,
    content_hash    TEXT NOT NULL,
    text            TEXT NOT NULL,
    file_path       TEXT,
    is_published    INTEGER NOT NULL DEFAULT 1,
    created_at      DATETIME NOT NULL DEFAULT (datetime('now')),
    updated_at      DATETIME NOT NULL DEFAULT (datetime('now')),
    UNIQUE (repo_id, content_hash)
);
"""

# Append-only. Each entry: (version: int, sql: str).
# executescript() issues an implicit COMMIT before running.
MIGRATIONS: list[tuple[int, str]] = [
    (1, _V1_SQL),
]


def run_migrations(conn: sqlite3.Connection) -> None:
    """Apply all pending migrations in ascending version order.

    Idempotent: safe to call on a database at any version.
    """
    conn.execute(_CREATE_SCHEMA_VERSION)
    conn.commit()

    row = conn.execute("SELECT MAX(version) FROM schema_version").fetchone()
    current = row[0] if row[0] is not None else 0

    for version, sql in MIGRATIONS:
        if version > current:
            conn.executescript(sql)
            conn.execute(
                "INSERT INTO schema_version (version) VALUES (?)", (version,)
            )
            conn.commit()
