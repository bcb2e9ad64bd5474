"""Shared pytest fixtures."""

from __future__ import annotations

import pytest

from repoagent.cli.common import console
from repoagent.db.connection import Database
from repoagent.db.models import AgentConfig, Repo
from repoagent.db.repository import Repository
from repoagent.db.schema import initialize


@pytest.fixture
def tmp_db(tmp_path):
    """File-based DB in tmp_path with schema initialized, closed after test."""
    db = Database(tmp_path / ".repoagent.db")
    conn = db.connect()
    initialize(conn)
    yield conn
    conn.close()


@pytest.fixture
def store(tmp_db):
    return Repository(tmp_db)


@pytest.fixture
def test_repo(store):
    """A public repo ``test/test-repo`` with the stub agent enabled."""
    repo = Repo(id="repo-1", owner_handle="test", name="test-repo", description="A test repo")
    store.add_repo(repo, AgentConfig(repo_id=repo.id))
    return repo


@pytest.fixture
def isolated_cli(tmp_path, monkeypatch):
    """Run CLI commands in tmp_path with no global config and no REPOAGENT_* env."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("repoagent.config._GLOBAL_CONFIG_PATH", tmp_path / "home" / "config.yaml")
    monkeypatch.setattr(console, "width", 200)
    for var in ("REPOAGENT_DB", "REPOAGENT_PROVIDER", "REPOAGENT_GENERATION_MODEL"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path
