"""repoagent init: create the project database.

Creates:
  .repoagent.db                empty database with schema (or --db PATH)
  ~/.repoagent/config.yaml     global defaults (created once, mode 0o600)
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from repoagent.cli.common import console, load_cli_config, open_db, resolve_db_path
from repoagent.config import ensure_global_config
from repoagent.db.schema import CURRENT_VERSION


def init_cmd(
    db: Annotated[
        Path | None,
        typer.Option("--db", help="Path to the database (default: database.path from config)."),
    ] = None,
    global_config: Annotated[
        Path | None,
        typer.Option("--global-config", hidden=True, help="Override global config path (for testing)."),
    ] = None,
) -> None:
    """Create the repoagent database and the global config file."""
    cfg = load_cli_config()
    db_path = resolve_db_path(db, cfg)

    existed = db_path.exists()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = open_db(db_path)
    conn.close()

    if existed:
        console.print(
            f"[dim]↷ {escape(str(db_path))} already exists; schema is up to date (v{CURRENT_VERSION}).[/]",
            soft_wrap=True,
        )
    else:
        console.print(f"  [green]✓[/] {escape(str(db_path))} (schema v{CURRENT_VERSION})", soft_wrap=True)

    cfg_path = ensure_global_config(global_config)
    console.print(f"  [green]✓[/] {escape(str(cfg_path))} (global config)", soft_wrap=True)

    console.print("\nNext steps:")
    console.print("  1. repoagent repo create OWNER NAME        (register a repo)")
    console.print("  2. repoagent index REPO_ID --file PATH     (index published content)")
    console.print("  3. repoagent chat REPO_ID -m 'What is this?'")
