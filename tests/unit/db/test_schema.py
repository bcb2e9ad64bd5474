"""Tests for database schema initialization."""

from __future__ import annotations

from repoagent.db.connection import Database
from repoagent.db.schema import CURRENT_VERSION, REQUIRED_TABLES, initialize, schema_version


def _table_columns(conn, table: str) -> set[str]:
    rows = conn.execute(f"PRAGMA table_info({table})").fetchall()
    return {row["name"] for row in rows}


def _table_exists(conn, table: str) -> bool:
    row = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' AND name=?", (table,)
    ).fetchone()
    return row is not None


def test_required_tables_exist(tmp_db):
    for table in REQUIRED_TABLES:
        assert _table_exists(tmp_db, table), table


def test_repos_columns(tmp_db):
    cols = _table_columns(tmp_db, "repos")
    assert cols == {"id", "owner_handle", "name", "description", "is_public", "created_at"}


def test_agent_configs_columns(tmp_db):
    cols = _table_columns(tmp_db, "agent_configs")
    assert cols == {"repo_id", "agent_enabled", "agent_mode", "model_provider", "system_prompt"}


def test_agent_messages_columns(tmp_db):
    cols = _table_columns(tmp_db, "agent_messages")
    assert cols == {"seq", "thread_id", "repo_id", "role", "content", "citations", "created_at"}


def test_content_chunks_columns(tmp_db):
    cols = _table_columns(tmp_db, "content_chunks")
    assert cols == {
        "repo_id",
        "content_hash",
        "text",
        "file_path",
        "is_published",
        "created_at",
        "updated_at",
    }


def test_schema_version_recorded(tmp_db):
    assert schema_version(tmp_db) == CURRENT_VERSION


def test_schema_version_zero_for_empty_db(tmp_path):
    conn = Database(tmp_path / "empty.db").connect()
    assert schema_version(conn) == 0
    conn.close()


def test_initialize_idempotent(tmp_db):
    initialize(tmp_db)
    rows = tmp_db.execute("SELECT version FROM schema_version").fetchall()
    assert len(rows) == CURRENT_VERSION
