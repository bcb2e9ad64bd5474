"""Tests for repoagent index."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from repoagent.cli.main import app
from repoagent.db.connection import Database
from repoagent.db.repository import Repository

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("isolated_cli")


def _db(tmp_path: Path) -> str:
    return str(tmp_path / "agent.db")


@pytest.fixture
def repo_id(tmp_path: Path) -> str:
    result = runner.invoke(app, ["repo", "create", "acme", "docs", "--db", _db(tmp_path)])
    assert result.exit_code == 0, result.output
    return result.output.strip().splitlines()[-1].strip()


def _index(tmp_path: Path, *args: str):
    return runner.invoke(app, ["index", *args, "--db", _db(tmp_path)])


def _chunks(tmp_path: Path, repo_id: str, published_only: bool = False):
    with Database(_db(tmp_path)) as conn:
        return Repository(conn).list_chunks(repo_id, published_only)


def test_index_content(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, repo_id, "--content", "Hello world. This is the roadmap.")
    assert result.exit_code == 0, result.output
    assert "indexed successfully" in result.output
    assert len(_chunks(tmp_path, repo_id)) == 1


def test_index_twice_stores_once(tmp_path: Path, repo_id: str) -> None:
    _index(tmp_path, repo_id, "--content", "Hello world.")
    _index(tmp_path, repo_id, "--content", "Hello world.")
    assert len(_chunks(tmp_path, repo_id)) == 1


def test_index_file_records_path(tmp_path: Path, repo_id: str) -> None:
    f = tmp_path / "ROADMAP.md"
    f.write_text("Ship v2. Then v3.", encoding="utf-8")
    result = _index(tmp_path, repo_id, "--file", str(f))
    assert result.exit_code == 0, result.output
    assert _chunks(tmp_path, repo_id)[0].file_path == f.as_posix()


def test_index_file_path_override(tmp_path: Path, repo_id: str) -> None:
    f = tmp_path / "page.html"
    f.write_text("<p>Contributing guide.</p>", encoding="utf-8")
    result = _index(tmp_path, repo_id, "--file", str(f), "--file-path", "docs/contributing.html")
    assert result.exit_code == 0, result.output
    chunk = _chunks(tmp_path, repo_id)[0]
    assert chunk.file_path == "docs/contributing.html"
    assert "<p>" not in chunk.text


def test_index_draft(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, repo_id, "--content", "Secret plan.", "--draft")
    assert result.exit_code == 0, result.output
    assert len(_chunks(tmp_path, repo_id)) == 1
    assert _chunks(tmp_path, repo_id, published_only=True) == []


def test_index_requires_exactly_one_input(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, repo_id)
    assert result.exit_code == 1
    assert "exactly one" in result.output

    f = tmp_path / "a.txt"
    f.write_text("x.", encoding="utf-8")
    result = _index(tmp_path, repo_id, "--content", "x", "--file", str(f))
    assert result.exit_code == 1


def test_index_empty_content(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, repo_id, "--content", "   ")
    assert result.exit_code == 1
    assert "No text content" in result.output


def test_index_missing_file(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, repo_id, "--file", str(tmp_path / "missing.md"))
    assert result.exit_code == 1
    assert "File not found" in result.output


def test_index_error_with_bracketed_path(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, repo_id, "--file", str(tmp_path / "[/]notes.md"))
    assert result.exit_code == 1
    assert "File not found" in result.output
    assert "[/]notes.md" in result.output


def test_index_unknown_repo(tmp_path: Path, repo_id: str) -> None:
    result = _index(tmp_path, "missing", "--content", "Hello.")
    assert result.exit_code == 1
    assert "Repo not found" in result.output


def test_index_storage_failure_hides_cause(tmp_path: Path, repo_id: str) -> None:
    with patch(
        "repoagent.db.repository.Repository.upsert_chunk",
        side_effect=sqlite3.OperationalError("database is locked"),
    ):
        result = _index(tmp_path, repo_id, "--content", "Hello.")
    assert result.exit_code == 1
    assert "Failed to index content" in result.output
    assert "database is locked" not in result.output
