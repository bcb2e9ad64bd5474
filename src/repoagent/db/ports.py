"""Storage ports consumed by the indexing, retrieval and chat core.

The core never opens a connection itself: callers inject an object that
satisfies these protocols. ``repoagent.db.repository.Repository`` is the
SQLite implementation; tests may substitute an in-memory fake.
"""

from __future__ import annotations

from typing import Protocol

from repoagent.db.models import AgentConfig, Message, Repo, StoredChunk, Thread


class ChunkStore(Protocol):
    def upsert_chunk(
        self,
        repo_id: str,
        content_hash: str,
        text: str,
        file_path: str | None = None,
        is_published: bool = True,
    ) -> None: ...

    def list_chunks(self, repo_id: str, published_only: bool) -> list[StoredChunk]: ...

    def list_recent_chunks(
        self, repo_id: str, published_only: bool, limit: int
    ) -> list[StoredChunk]: ...


class ChatStore(Protocol):
    def get_repo(self, repo_id: str) -> Repo | None: ...

    def get_agent_config(self, repo_id: str) -> AgentConfig | None: ...

    def get_thread(self, thread_id: str, repo_id: str) -> Thread | None: ...

    def create_thread(self, thread: Thread) -> Thread: ...

    def add_message(self, message: Message) -> Message: ...

    def list_messages(self, thread_id: str) -> list[Message]: ...
