"""Tests for repoagent status."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from repoagent.cli.main import app

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("isolated_cli")


def test_status_without_db(tmp_path: Path) -> None:
    result = runner.invoke(app, ["status", "--db", str(tmp_path / "agent.db")])
    assert result.exit_code == 0, result.output
    assert "No database found" in result.output


def test_status_no_repos(tmp_path: Path) -> None:
    db = str(tmp_path / "agent.db")
    runner.invoke(app, ["init", "--db", db, "--global-config", str(tmp_path / "g.yaml")])
    result = runner.invoke(app, ["status", "--db", db])
    assert result.exit_code == 0, result.output
    assert "Schema:" in result.output
    assert "No repos yet" in result.output


def test_status_lists_repos(tmp_path: Path) -> None:
    db = str(tmp_path / "agent.db")
    runner.invoke(app, ["repo", "create", "acme", "docs", "--db", db])
    result = runner.invoke(app, ["status", "--db", db])
    assert result.exit_code == 0, result.output
    assert "acme/docs" in result.output
