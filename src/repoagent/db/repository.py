"""Repository pattern for all repoagent database operations.

Single interface for: repos, agent configs, threads, messages, content chunks.
Implements both storage ports in ``repoagent.db.ports``.
"""

from __future__ import annotations

import json
import sqlite3

from repoagent.db.models import AgentConfig, Message, Repo, StoredChunk, Thread


class Repository:
    """Data access layer for all repoagent database entities.

    Wraps an open sqlite3.Connection and provides typed methods for repos,
    agent configs, threads, messages and content chunks. The connection is
    owned by the caller and must be closed after use.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialise with an open database connection.

        Args:
            conn: An open sqlite3.Connection with the schema initialised
                (see repoagent.db.schema.initialize).
        """
        self._conn = conn

    # ------------------------------------------------------------------
    # Repos
    # ------------------------------------------------------------------

    def add_repo(self, repo: Repo, config: AgentConfig | None = None) -> None:
        """Insert a new repo together with its agent config.

        Args:
            repo: Repo dataclass instance to persist.
            config: Agent settings; defaults to an enabled public stub agent.
        """
        config = config or AgentConfig(repo_id=repo.id)
        self._conn.execute(
            """
            INSERT INTO repos (id, owner_handle, name, description, is_public)
            VALUES (?, ?, ?, ?, ?)
            """,
            (repo.id, repo.owner_handle, repo.name, repo.description, int(repo.is_public)),
        )
        self._conn.execute(
            """
            INSERT INTO agent_configs (repo_id, agent_enabled, agent_mode, model_provider, system_prompt)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                repo.id,
                int(config.agent_enabled),
                config.agent_mode,
                config.model_provider,
                config.system_prompt,
            ),
        )
        self._conn.commit()

    def get_repo(self, repo_id: str) -> Repo | None:
        """Return a repo by ID, or None if not found."""
        row = self._conn.execute(
            "SELECT id, owner_handle, name, description, is_public, created_at FROM repos WHERE id = ?",
            (repo_id,),
        ).fetchone()
        return _row_to_repo(row) if row else None

    def list_repos(self) -> list[Repo]:
        """Return all repos ordered by creation time (oldest first)."""
        rows = self._conn.execute(
            "SELECT id, owner_handle, name, description, is_public, created_at FROM repos ORDER BY created_at, rowid"
        ).fetchall()
        return [_row_to_repo(r) for r in rows]

    # ------------------------------------------------------------------
    # Agent configs
    # ------------------------------------------------------------------

    def get_agent_config(self, repo_id: str) -> AgentConfig | None:
        """Return the agent config for *repo_id*, or None if the repo has none."""
        row = self._conn.execute(
            """
            SELECT repo_id, agent_enabled, agent_mode, model_provider, system_prompt
            FROM agent_configs WHERE repo_id = ?
            """,
            (repo_id,),
        ).fetchone()
        return _row_to_agent_config(row) if row else None

    def save_agent_config(self, config: AgentConfig) -> None:
        """Upsert the agent config for ``config.repo_id``."""
        self._conn.execute(
            """
            INSERT INTO agent_configs (repo_id, agent_enabled, agent_mode, model_provider, system_prompt)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(repo_id) DO UPDATE SET
                agent_enabled = excluded.agent_enabled,
                agent_mode = excluded.agent_mode,
                model_provider = excluded.model_provider,
                system_prompt = excluded.system_prompt
            """,
            (
                config.repo_id,
                int(config.agent_enabled),
                config.agent_mode,
                config.model_provider,
                config.system_prompt,
            ),
        )
        self._conn.commit()

    # ------------------------------------------------------------------
    # Threads
    # ------------------------------------------------------------------

    def get_thread(self, thread_id: str, repo_id: str) -> Thread | None:
        """Return a thread by ID scoped to *repo_id*, or None if not found.

        A thread that exists under a different repo is treated as missing.
        """
        row = self._conn.execute(
            """
            SELECT id, repo_id, visibility, title, created_at
            FROM agent_threads WHERE id = ? AND repo_id = ?
            """,
            (thread_id, repo_id),
        ).fetchone()
        return _row_to_thread(row) if row else None

    def create_thread(self, thread: Thread) -> Thread:
        """Insert *thread* and return it as stored (with created_at)."""
        self._conn.execute(
            "INSERT INTO agent_threads (id, repo_id, visibility, title) VALUES (?, ?, ?, ?)",
            (thread.id, thread.repo_id, thread.visibility, thread.title),
        )
        self._conn.commit()
        stored = self.get_thread(thread.id, thread.repo_id)
        if stored is None:
            raise sqlite3.DatabaseError(f"Thread {thread.id} was not stored")
        return stored

    def list_threads(self, repo_id: str) -> list[Thread]:
        """Return all threads for *repo_id*, newest first."""
        rows = self._conn.execute(
            """
            SELECT id, repo_id, visibility, title, created_at
            FROM agent_threads WHERE repo_id = ? ORDER BY created_at DESC, rowid DESC
            """,
            (repo_id,),
        ).fetchall()
        return [_row_to_thread(r) for r in rows]

    # ------------------------------------------------------------------
    # Messages
    # ------------------------------------------------------------------

    def add_message(self, message: Message) -> Message:
        """Append *message* to its thread. Returns it with ``seq`` set.

        ``seq`` is an AUTOINCREMENT key assigned under SQLite's write lock,
        so appends within a thread replay in creation order.
        """
        cur = self._conn.execute(
            """
            INSERT INTO agent_messages (thread_id, repo_id, role, content, citations)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                message.thread_id,
                message.repo_id,
                message.role,
                message.content,
                message.citations_json(),
            ),
        )
        self._conn.commit()
        message.seq = cur.lastrowid
        return message

    def list_messages(self, thread_id: str) -> list[Message]:
        """Return all messages of *thread_id* in creation order."""
        rows = self._conn.execute(
            """
            SELECT seq, thread_id, repo_id, role, content, citations, created_at
            FROM agent_messages WHERE thread_id = ? ORDER BY seq
            """,
            (thread_id,),
        ).fetchall()
        return [_row_to_message(r) for r in rows]

    # ------------------------------------------------------------------
    # Content chunks
    # ------------------------------------------------------------------

    def upsert_chunk(
        self,
        repo_id: str,
        content_hash: str,
        text: str,
        file_path: str | None = None,
        is_published: bool = True,
    ) -> None:
        """Create or refresh the chunk keyed by (*repo_id*, *content_hash*).

        On conflict the text, file path and published flag are overwritten
        and updated_at is reset. Safe to call repeatedly with the same
        arguments.
        """
        self._conn.execute(
            """
            INSERT INTO content_chunks (repo_id, content_hash, text, file_path, is_published)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(repo_id, content_hash) DO UPDATE SET
                text = excluded.text,
                file_path = excluded.file_path,
                is_published = excluded.is_published,
                updated_at = datetime('now')
            """,
            (repo_id, content_hash, text, file_path, int(is_published)),
        )
        self._conn.commit()

    def get_chunk(self, repo_id: str, content_hash: str) -> StoredChunk | None:
        """Return the chunk stored under (*repo_id*, *content_hash*), or None."""
        row = self._conn.execute(
            f"SELECT {_CHUNK_COLUMNS} FROM content_chunks WHERE repo_id = ? AND content_hash = ?",
            (repo_id, content_hash),
        ).fetchone()
        return _row_to_chunk(row) if row else None

    def list_chunks(self, repo_id: str, published_only: bool) -> list[StoredChunk]:
        """Return every chunk of *repo_id* in insertion order.

        Args:
            repo_id: Owning repo.
            published_only: If True, drafts (is_published = 0) are excluded.
        """
        sql = f"SELECT {_CHUNK_COLUMNS} FROM content_chunks WHERE repo_id = ?"
        if published_only:
            sql += " AND is_published = 1"
        sql += " ORDER BY rowid"
        rows = self._conn.execute(sql, (repo_id,)).fetchall()
        return [_row_to_chunk(r) for r in rows]

    def list_recent_chunks(
        self, repo_id: str, published_only: bool, limit: int
    ) -> list[StoredChunk]:
        """Return at most *limit* chunks of *repo_id*, newest first."""
        sql = f"SELECT {_CHUNK_COLUMNS} FROM content_chunks WHERE repo_id = ?"
        if published_only:
            sql += " AND is_published = 1"
        sql += " ORDER BY created_at DESC, rowid DESC LIMIT ?"
        rows = self._conn.execute(sql, (repo_id, limit)).fetchall()
        return [_row_to_chunk(r) for r in rows]

    def count_chunks(self, repo_id: str, published_only: bool = False) -> int:
        """Return the number of chunks stored for *repo_id*."""
        sql = "SELECT COUNT(*) FROM content_chunks WHERE repo_id = ?"
        if published_only:
            sql += " AND is_published = 1"
        return self._conn.execute(sql, (repo_id,)).fetchone()[0]


# ------------------------------------------------------------------
# Row → model helpers
# ------------------------------------------------------------------

_CHUNK_COLUMNS = (
    "rowid, repo_id, content_hash, text, file_path, is_published, created_at, updated_at"
)


def _row_to_repo(row: sqlite3.Row) -> Repo:
    return Repo(
        id=row["id"],
        owner_handle=row["owner_handle"],
        name=row["name"],
        description=row["description"],
        is_public=bool(row["is_public"]),
        created_at=row["created_at"],
    )


def _row_to_agent_config(row: sqlite3.Row) -> AgentConfig:
    return AgentConfig(
        repo_id=row["repo_id"],
        agent_enabled=bool(row["agent_enabled"]),
        agent_mode=row["agent_mode"],
        model_provider=row["model_provider"],
        system_prompt=row["system_prompt"],
    )


def _row_to_thread(row: sqlite3.Row) -> Thread:
    return Thread(
        id=row["id"],
        repo_id=row["repo_id"],
        visibility=row["visibility"],
        title=row["title"],
        created_at=row["created_at"],
    )


def _row_to_message(row: sqlite3.Row) -> Message:
    return Message(
        seq=row["seq"],
        thread_id=row["thread_id"],
        repo_id=row["repo_id"],
        role=row["role"],
        content=row["content"],
        citations=json.loads(row["citations"]),
        created_at=row["created_at"],
    )


def _row_to_chunk(row: sqlite3.Row) -> StoredChunk:
    return StoredChunk(
        rowid=row["rowid"],
        repo_id=row["repo_id"],
        content_hash=row["content_hash"],
        text=row["text"],
        file_path=row["file_path"],
        is_published=bool(row["is_published"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
