"""repoagent thread CLI commands.

Commands:
  repoagent thread list REPO_ID                threads of a repo, newest first
  repoagent thread show REPO_ID THREAD_ID      replay one thread
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from repoagent.agent.service import ChatResult
from repoagent.cli.chat import print_thread
from repoagent.cli.common import console, load_cli_config, open_existing_db, resolve_db_path
from repoagent.cli.errors import err_repo_not_found
from repoagent.db.repository import Repository

thread_app = typer.Typer(
    name="thread",
    help="Inspect conversation threads (list, show).",
    add_completion=False,
)


@thread_app.command("list")
def thread_list_cmd(
    repo_id: Annotated[str, typer.Argument(help="Repo ID.")],
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """List the threads of a repo."""
    cfg = load_cli_config()
    conn = open_existing_db(resolve_db_path(db, cfg))
    repo = Repository(conn)
    try:
        if repo.get_repo(repo_id) is None:
            console.print(err_repo_not_found(repo_id))
            raise typer.Exit(1)

        threads = repo.list_threads(repo_id)
        if not threads:
            console.print("[dim]No threads yet.[/]")
            return

        table = Table(show_header=True, header_style="bold")
        table.add_column("ID", no_wrap=True)
        table.add_column("Title")
        table.add_column("Visibility")
        table.add_column("Messages", justify="right")
        table.add_column("Created", style="dim")
        for t in threads:
            table.add_row(
                t.id,
                escape(t.title),
                t.visibility,
                str(len(repo.list_messages(t.id))),
                (t.created_at or "")[:16],
            )
        console.print(table)
    finally:
        conn.close()


@thread_app.command("show")
def thread_show_cmd(
    repo_id: Annotated[str, typer.Argument(help="Repo ID.")],
    thread_id: Annotated[str, typer.Argument(help="Thread ID.")],
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Print every message of a thread."""
    cfg = load_cli_config()
    conn = open_existing_db(resolve_db_path(db, cfg))
    repo = Repository(conn)
    try:
        thread = repo.get_thread(thread_id, repo_id)
        if thread is None:
            console.print(
                f"[red]Error:[/] Thread '{escape(thread_id)}' "
                f"not found in repo '{escape(repo_id)}'."
            )
            console.print("  Run:  repoagent thread list REPO_ID")
            raise typer.Exit(1)
        messages = repo.list_messages(thread.id)
    finally:
        conn.close()

    print_thread(ChatResult(thread_id=thread.id, messages=messages))
