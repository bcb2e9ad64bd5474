"""repoagent status command.

Shows a project overview: database location and schema version, and a
per-repo summary of agent settings, indexed content and threads.
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from repoagent.cli.common import console, load_cli_config, open_db, resolve_db_path
from repoagent.config import RepoAgentConfig
from repoagent.db.repository import Repository
from repoagent.db.schema import schema_version


def status_cmd(
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Show database and repo status."""
    cfg = load_cli_config()
    db_path = resolve_db_path(db, cfg)

    if not db_path.exists():
        _show_project_panel(db_path, cfg, None)
        console.print(
            Panel(
                "[yellow]No database found.[/]\n"
                "  Run:  repoagent init",
                title="[bold]Repos[/]",
                expand=False,
            )
        )
        return

    conn = open_db(db_path)
    try:
        _show_project_panel(db_path, cfg, conn)
        _show_repos_panel(Repository(conn))
    finally:
        conn.close()


# ---------------------------------------------------------------------------
# Panel renderers
# ---------------------------------------------------------------------------


def _show_project_panel(
    db_path: Path, cfg: RepoAgentConfig, conn: sqlite3.Connection | None
) -> None:
    db_info = escape(str(db_path))
    if db_path.exists():
        size_mb = db_path.stat().st_size / (1024 * 1024)
        db_info = f"{escape(str(db_path))} ({size_mb:.1f} MB)"

    lines = [f"Database:  {db_info}"]
    if conn is not None:
        lines.append(f"Schema:    v{schema_version(conn)}")
    lines.append(
        f"Defaults:  provider={escape(cfg.agent.default_provider)}  "
        f"mode={cfg.agent.default_mode}  top_k={cfg.retrieval.top_k}"
    )
    lines.append(f"Model:     [dim]{escape(cfg.generation.model)}[/] (litellm/ollama providers)")

    console.print(Panel("\n".join(lines), title="[bold]Project[/]", expand=False))


def _show_repos_panel(repo: Repository) -> None:
    repos = repo.list_repos()
    if not repos:
        console.print(
            Panel(
                "[dim]No repos yet.[/]\n"
                "  Run:  repoagent repo create OWNER NAME",
                title="[bold]Repos[/]",
                expand=False,
            )
        )
        return

    table = Table(show_header=True, header_style="bold", box=None, padding=(0, 1))
    table.add_column("Repo", style="bold")
    table.add_column("Agent")
    table.add_column("Mode", style="dim")
    table.add_column("Published", justify="right")
    table.add_column("Drafts", justify="right")
    table.add_column("Threads", justify="right")

    for r in repos:
        agent = repo.get_agent_config(r.id)
        total = repo.count_chunks(r.id)
        published = repo.count_chunks(r.id, published_only=True)
        table.add_row(
            escape(r.full_name),
            "[green]✓ on[/]" if agent and agent.agent_enabled else "[red]✗ off[/]",
            agent.agent_mode if agent else "-",
            str(published),
            str(total - published),
            str(len(repo.list_threads(r.id))),
        )

    console.print(
        Panel(table, title=f"[bold]Repos[/] [dim]({len(repos)})[/]", expand=False)
    )
