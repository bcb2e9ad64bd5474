"""repoagent rich error messages: actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from repoagent.cli.errors import err_repo_not_found
    console.print(err_repo_not_found(repo_id))
    raise typer.Exit(1)
"""

from __future__ import annotations

from rich.markup import escape

MAX_MESSAGE_CHARS = 4000


def err_no_db(db_path: str = ".repoagent.db") -> str:
    """No database found at *db_path*."""
    return (
        f"[red]Error:[/] No database found at '{escape(db_path)}'.\n"
        "  Run:  repoagent init"
    )


def err_repo_not_found(repo_id: str) -> str:
    """Referenced repo does not exist."""
    return (
        f"[red]Error:[/] Repo not found: '{escape(repo_id)}'.\n"
        "  Run:  repoagent repo list  to see all repos."
    )


def err_repo_exists(full_name: str) -> str:
    """A repo with the same owner/name is already registered."""
    return (
        f"[red]Error:[/] Repo '{escape(full_name)}' already exists.\n"
        "  Choose another name or run:  repoagent repo list"
    )


def err_agent_disabled(repo_id: str) -> str:
    """Agent is switched off for the repo."""
    return (
        f"[red]Error:[/] Agent disabled for repo '{escape(repo_id)}'.\n"
        f"  Enable it:  repoagent repo config {escape(repo_id)} --enable"
    )


def err_provider_not_implemented(detail: str, repo_id: str) -> str:
    """Configured provider is a placeholder."""
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        f"  Switch provider:  repoagent repo config {escape(repo_id)} --provider stub\n"
        "  Run:  repoagent providers  to see available providers."
    )


def err_no_api_key(detail: str) -> str:
    """API key for the generation model is missing."""
    return (
        f"[red]Error:[/] {escape(detail)}\n"
        "  Or switch the repo to the 'stub' provider."
    )


def err_invalid_message(length: int) -> str:
    """Chat message outside the 1..4000 character range."""
    if length == 0:
        cause = "Message is empty."
    else:
        cause = f"Message is {length:,} characters (max {MAX_MESSAGE_CHARS:,})."
    return (
        f"[red]Error:[/] Invalid input. {cause}\n"
        f"  Send a message between 1 and {MAX_MESSAGE_CHARS:,} characters."
    )


def err_invalid_mode(mode: str, modes: tuple[str, ...]) -> str:
    """Unknown agent mode on the command line."""
    return (
        f"[red]Error:[/] Unknown agent mode '{escape(mode)}'.\n"
        f"  Use one of: {', '.join(modes)}"
    )


def err_no_content() -> str:
    """Index command given neither --content nor --file, or both."""
    return (
        "[red]Error:[/] Invalid input. Provide exactly one of --content or --file.\n"
        "  Example:  repoagent index <repo-id> --file docs/readme.md"
    )


def err_empty_content(source: str) -> str:
    """Content to index is empty after extraction."""
    return (
        f"[red]Error:[/] Invalid input. No text content in {escape(source)}.\n"
        "  Index a non-empty file or pass --content TEXT."
    )


def err_index_failed() -> str:
    """Storage failure while indexing; the cause is not shown."""
    return (
        "[red]Error:[/] Failed to index content.\n"
        "  Re-run with --verbose for details; indexing the same content again is safe."
    )


def err_config(detail: str) -> str:
    """Configuration file problem."""
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {escape(detail)}"
    )
