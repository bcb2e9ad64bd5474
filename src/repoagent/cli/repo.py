"""repoagent repo CLI commands.

Commands:
  repoagent repo create OWNER NAME     register a repo with its agent config
  repoagent repo list                  show all repos
  repoagent repo config REPO_ID        change agent settings
"""

from __future__ import annotations

import sqlite3
import uuid
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from repoagent.agent.permissions import AGENT_MODES
from repoagent.cli.common import (
    console,
    load_cli_config,
    open_db,
    open_existing_db,
    resolve_db_path,
)
from repoagent.cli.errors import err_invalid_mode, err_repo_exists, err_repo_not_found
from repoagent.db.models import AgentConfig, Repo
from repoagent.db.repository import Repository

repo_app = typer.Typer(
    name="repo",
    help="Manage repos and their agent settings (create, list, config).",
    add_completion=False,
)


@repo_app.command("create")
def repo_create_cmd(
    owner: Annotated[str, typer.Argument(help="Owner handle.")],
    name: Annotated[str, typer.Argument(help="Repo name.")],
    description: Annotated[
        str, typer.Option("--description", "-d", help="Repo description.")
    ] = "",
    private: Annotated[
        bool, typer.Option("--private", help="Mark the repo as not publicly visible.")
    ] = False,
    mode: Annotated[
        str | None,
        typer.Option("--mode", help="Agent mode: public | private | draft-assistant."),
    ] = None,
    provider: Annotated[
        str | None, typer.Option("--provider", help="Agent provider name (see: repoagent providers).")
    ] = None,
    system_prompt: Annotated[
        str | None, typer.Option("--system-prompt", help="System prompt for the agent.")
    ] = None,
    disabled: Annotated[
        bool, typer.Option("--disabled", help="Create the repo with its agent switched off.")
    ] = False,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Register a repo and print its ID."""
    cfg = load_cli_config()
    agent_mode = mode or cfg.agent.default_mode
    _check_mode(agent_mode)

    conn = open_db(resolve_db_path(db, cfg))
    repo = Repository(conn)
    try:
        new = Repo(
            id=str(uuid.uuid4()),
            owner_handle=owner,
            name=name,
            description=description,
            is_public=not private,
        )
        try:
            repo.add_repo(
                new,
                AgentConfig(
                    repo_id=new.id,
                    agent_enabled=not disabled,
                    agent_mode=agent_mode,
                    model_provider=provider or cfg.agent.default_provider,
                    system_prompt=cfg.agent.system_prompt if system_prompt is None else system_prompt,
                ),
            )
        except sqlite3.IntegrityError:
            console.print(err_repo_exists(new.full_name))
            raise typer.Exit(1)
    finally:
        conn.close()

    console.print(f"[green]✓[/] Created {escape(new.full_name)}")
    console.print(new.id)


@repo_app.command("list")
def repo_list_cmd(
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """List all repos with their agent settings."""
    cfg = load_cli_config()
    conn = open_existing_db(resolve_db_path(db, cfg))
    repo = Repository(conn)
    try:
        repos = repo.list_repos()
        if not repos:
            console.print("[yellow]No repos yet.[/]  Run:  repoagent repo create OWNER NAME")
            raise typer.Exit(0)

        table = Table(title="Repos", show_header=True, header_style="bold")
        table.add_column("ID", no_wrap=True)
        table.add_column("Repo", style="bold")
        table.add_column("Visibility")
        table.add_column("Agent")
        table.add_column("Mode")
        table.add_column("Provider")
        table.add_column("Chunks", justify="right")

        for r in repos:
            agent = repo.get_agent_config(r.id)
            table.add_row(
                r.id,
                escape(r.full_name),
                "public" if r.is_public else "private",
                "[green]on[/]" if agent and agent.agent_enabled else "[red]off[/]",
                agent.agent_mode if agent else "-",
                escape(agent.model_provider) if agent else "-",
                str(repo.count_chunks(r.id)),
            )
        console.print(table)
    finally:
        conn.close()


@repo_app.command("config")
def repo_config_cmd(
    repo_id: Annotated[str, typer.Argument(help="Repo ID.")],
    enable: Annotated[
        bool | None,
        typer.Option("--enable/--disable", help="Switch the agent on or off."),
    ] = None,
    mode: Annotated[
        str | None,
        typer.Option("--mode", help="Agent mode: public | private | draft-assistant."),
    ] = None,
    provider: Annotated[str | None, typer.Option("--provider", help="Agent provider name.")] = None,
    system_prompt: Annotated[
        str | None, typer.Option("--system-prompt", help="System prompt for the agent.")
    ] = None,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Show or change the agent settings of a repo."""
    if mode is not None:
        _check_mode(mode)

    cfg = load_cli_config()
    conn = open_existing_db(resolve_db_path(db, cfg))
    repo = Repository(conn)
    try:
        if repo.get_repo(repo_id) is None:
            console.print(err_repo_not_found(repo_id))
            raise typer.Exit(1)

        agent = repo.get_agent_config(repo_id) or AgentConfig(repo_id=repo_id)
        if enable is not None:
            agent.agent_enabled = enable
        if mode is not None:
            agent.agent_mode = mode
        if provider is not None:
            agent.model_provider = provider
        if system_prompt is not None:
            agent.system_prompt = system_prompt
        repo.save_agent_config(agent)
    finally:
        conn.close()

    console.print(
        f"Agent: {'[green]on[/]' if agent.agent_enabled else '[red]off[/]'}  |  "
        f"Mode: {agent.agent_mode}  |  Provider: {escape(agent.model_provider)}"
    )
    if agent.system_prompt:
        console.print(f"System prompt: [dim]{escape(agent.system_prompt)}[/]")


def _check_mode(mode: str) -> None:
    if mode not in AGENT_MODES:
        console.print(err_invalid_mode(mode, AGENT_MODES))
        raise typer.Exit(1)
