"""repoagent database layer."""

from repoagent.db.connection import Database
from repoagent.db.migrations import MIGRATIONS, run_migrations
from repoagent.db.repository import Repository
from repoagent.db.schema import initialize

__all__ = [
    "Database",
    "Repository",
    "initialize",
    "run_migrations",
    "MIGRATIONS",
]
