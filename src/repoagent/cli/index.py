"""repoagent index: index published content into a repo.

Input (exactly one):
  --content TEXT   raw text
  --file PATH      .pdf (pypdf), .html/.htm (html2text), anything else as UTF-8

Identical content indexed twice is stored once per distinct chunk.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from repoagent.agent.service import AgentService
from repoagent.cli.common import console, load_cli_config, open_existing_db, resolve_db_path
from repoagent.cli.errors import (
    err_empty_content,
    err_index_failed,
    err_no_content,
    err_repo_not_found,
)
from repoagent.db.repository import Repository
from repoagent.errors import RepoNotFoundError
from repoagent.ingest.extract import extract_text

logger = logging.getLogger(__name__)


def index_cmd(
    repo_id: Annotated[str, typer.Argument(help="Repo ID to index into.")],
    content: Annotated[
        str | None, typer.Option("--content", "-c", help="Raw text to index.")
    ] = None,
    file: Annotated[
        Path | None, typer.Option("--file", "-f", help="File to extract and index.")
    ] = None,
    file_path: Annotated[
        str | None,
        typer.Option("--file-path", help="Path recorded on the chunks (defaults to --file)."),
    ] = None,
    draft: Annotated[
        bool, typer.Option("--draft", help="Index as unpublished (draft) content.")
    ] = False,
    db: Annotated[Path | None, typer.Option("--db", help="Path to the database.")] = None,
) -> None:
    """Chunk content and store it for retrieval."""
    if (content is None) == (file is None):
        console.print(err_no_content())
        raise typer.Exit(1)

    if file is not None:
        try:
            text = extract_text(file)
        except (OSError, ValueError) as exc:
            console.print(f"[red]Error:[/] {escape(str(exc))}")
            raise typer.Exit(1)
        source = str(file)
        recorded_path = file_path or file.as_posix()
    else:
        text = content or ""
        source = "--content"
        recorded_path = file_path

    if not text.strip():
        console.print(err_empty_content(source))
        raise typer.Exit(1)

    cfg = load_cli_config()
    conn = open_existing_db(resolve_db_path(db, cfg))
    service = AgentService(Repository(conn), max_chunk_size=cfg.indexing.max_chunk_size)
    try:
        result = service.index(
            repo_id, text, file_path=recorded_path, is_published=not draft
        )
    except RepoNotFoundError:
        console.print(err_repo_not_found(repo_id))
        raise typer.Exit(1)
    except sqlite3.Error:
        logger.exception("Indexing failed for repo %s", repo_id)
        console.print(err_index_failed())
        raise typer.Exit(1)
    finally:
        conn.close()

    state = "draft" if draft else "published"
    console.print(
        f"[green]✓[/] Content indexed successfully: {result.chunk_count} chunk(s), {state}"
    )
    for content_hash in dict.fromkeys(result.content_hashes):
        console.print(f"  [dim]{content_hash}[/]")
