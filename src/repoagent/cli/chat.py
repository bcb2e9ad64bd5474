"""repoagent chat: send one message to a repo's agent.

Usage:
  repoagent chat REPO_ID -m "What is this?"
  repoagent chat REPO_ID -m "Show me the content" --thread THREAD_ID
  repoagent chat REPO_ID -m "..." --json

The message must be 1–4000 characters. Without --thread (or with a thread
ID that does not belong to the repo) a new thread is started.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape
from rich.panel import Panel

from repoagent.agent.service import AgentService, ChatResult
from repoagent.cli.common import console, load_cli_config, open_existing_db, resolve_db_path
from repoagent.cli.errors import (
    MAX_MESSAGE_CHARS,
    err_agent_disabled,
    err_invalid_message,
    err_no_api_key,
    err_provider_not_implemented,
    err_repo_not_found,
)
from repoagent.db.repository import Repository
from repoagent.errors import AgentDisabledError, ProviderNotImplementedError, RepoNotFoundError
from repoagent.rag.retriever import RetrieverConfig

_ROLE_STYLE = {"user": "cyan", "assistant": "green", "system": "magenta"}


def chat_cmd(
    repo_id: Annotated[str, typer.Argument(help="Repo ID.")],
    message: Annotated[str, typer.Option("--message", "-m", help="Message text (1–4000 chars).")],
    thread: Annotated[
        str | None, typer.Option("--thread", "-t", help="Continue an existing thread.")
    ] = None,
    owner: Annotated[
        bool,
        typer.Option("--owner", help="Chat as the repo owner (may see drafts in private modes)."),
    ] = False,
    as_json: Annotated[
        bool, typer.Option("--json", help="Print the thread as JSON.")
    ] = False,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Send a message to the repo agent and print the thread."""
    if not 1 <= len(message) <= MAX_MESSAGE_CHARS:
        console.print(err_invalid_message(len(message)))
        raise typer.Exit(1)

    cfg = load_cli_config()
    conn = open_existing_db(resolve_db_path(db, cfg))
    service = AgentService(
        Repository(conn),
        retriever=RetrieverConfig(top_k=cfg.retrieval.top_k),
        max_chunk_size=cfg.indexing.max_chunk_size,
        generation=cfg.generation.to_provider_config(),
    )
    try:
        result = service.chat(
            repo_id, message, thread_id=thread, is_owner=True if owner else None
        )
    except RepoNotFoundError:
        console.print(err_repo_not_found(repo_id))
        raise typer.Exit(1)
    except AgentDisabledError:
        console.print(err_agent_disabled(repo_id))
        raise typer.Exit(1)
    except ProviderNotImplementedError as exc:
        console.print(err_provider_not_implemented(str(exc), repo_id))
        raise typer.Exit(1)
    except EnvironmentError as exc:
        console.print(err_no_api_key(str(exc)))
        raise typer.Exit(1)
    finally:
        conn.close()

    if as_json:
        typer.echo(json.dumps(result.to_dict(), indent=2))
        return
    print_thread(result)


def print_thread(result: ChatResult) -> None:
    """Render every message of a thread, oldest first."""
    console.print(f"[dim]Thread {result.thread_id}[/]")
    for m in result.messages:
        body = escape(m.content)
        if m.citations:
            cites = "\n".join(f"  [{i + 1}] {c}" for i, c in enumerate(m.citations))
            body = f"{body}\n\n[dim]Citations:\n{cites}[/]"
        style = _ROLE_STYLE.get(m.role, "white")
        console.print(Panel(body, title=f"[bold {style}]{m.role}[/]", title_align="left"))
