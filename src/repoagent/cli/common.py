"""Helpers shared by the repoagent CLI commands."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import typer
from rich.console import Console

from repoagent.cli.errors import err_config, err_no_db
from repoagent.config import ConfigError, RepoAgentConfig, load_config
from repoagent.db.connection import Database
from repoagent.db.schema import initialize

console = Console()


def load_cli_config() -> RepoAgentConfig:
    """Load config, turning a ConfigError into an actionable exit."""
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)


def resolve_db_path(db: Path | None, cfg: RepoAgentConfig) -> Path:
    """``--db`` wins over ``database.path`` from config / REPOAGENT_DB."""
    return db if db is not None else Path(cfg.database.path)


def open_db(db_path: Path) -> sqlite3.Connection:
    """Open (or create) the database and run migrations."""
    conn = Database(db_path).connect()
    initialize(conn)
    return conn


def open_existing_db(db_path: Path) -> sqlite3.Connection:
    """Open the database, exiting with a hint if it has not been created yet."""
    if not db_path.exists():
        console.print(err_no_db(str(db_path)))
        raise typer.Exit(1)
    return open_db(db_path)
