"""repoagent CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from repoagent.cli.chat import chat_cmd
from repoagent.cli.common import console
from repoagent.cli.index import index_cmd
from repoagent.cli.init import init_cmd
from repoagent.cli.repo import repo_app
from repoagent.cli.status import status_cmd
from repoagent.cli.threads import thread_app
from repoagent.providers import available_providers


def _installed_version() -> str:
    try:
        return importlib.metadata.version("repoagent")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"repoagent {_installed_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


app = typer.Typer(
    name="repoagent",
    help=(
        "Repo Agent: chat with a repository's published content.\n\n"
        "  repoagent index   Chunk and store content for a repo.\n"
        "  repoagent chat    Ask the repo's agent; answers cite the chunks they used."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Enable debug logging on stderr.")
    ] = False,
) -> None:
    """Repo Agent: chat with a repository's published content."""
    _configure_logging(verbose)


app.command("init")(init_cmd)
app.command("index")(index_cmd)
app.command("chat")(chat_cmd)
app.command("status")(status_cmd)
app.add_typer(repo_app, name="repo")
app.add_typer(thread_app, name="thread")


@app.command("providers")
def providers_cmd() -> None:
    """List the agent providers a repo can be configured with."""
    table = Table(show_header=True, header_style="bold")
    table.add_column("Name", style="bold")
    table.add_column("Status")
    table.add_column("Description")
    for info in available_providers():
        status = "[green]available[/]" if info.implemented else "[yellow]not implemented[/]"
        table.add_row(info.name, status, info.description)
    console.print(table)


@app.command("version")
def version_cmd() -> None:
    """Show the installed repoagent version."""
    typer.echo(f"repoagent {_installed_version()}")


if __name__ == "__main__":
    app()
