"""Agent service: the chat and indexing flows over an injected store.

Chat flow:
  1. Load repo + agent config      (RepoNotFoundError / AgentDisabledError)
  2. Resolve thread, or create one lazily
  3. Append the user message
  4. Permission gate → published_only filter
  5. Retrieve top-k context chunks
  6. Replay the full thread history to the configured provider
  7. Append the assistant message with its citations
  8. Return the thread with all messages in creation order

A provider failure (including ProviderNotImplementedError) propagates after
step 3; the user message stays stored and no assistant message is written.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Protocol

from repoagent.agent.permissions import PermissionContext, should_filter_by_published
from repoagent.db.models import AgentConfig, Message, Repo, Thread
from repoagent.db.ports import ChatStore, ChunkStore
from repoagent.errors import AgentDisabledError, RepoNotFoundError
from repoagent.ingest.indexer import IndexResult, index_repo_content
from repoagent.ingest.sentence import SentenceChunker
from repoagent.providers import LiteLLMProviderConfig, create_agent_provider
from repoagent.providers.types import ChatMessage, GenerateRequest, RepoMetadata
from repoagent.rag.retriever import RetrieverConfig, retrieve

logger = logging.getLogger(__name__)


class AgentStore(ChatStore, ChunkStore, Protocol):
    """A store that serves both the chat and the chunk ports."""


@dataclass
class ChatResult:
    """Response shape returned after a chat turn."""

    thread_id: str
    messages: list[Message] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "threadId": self.thread_id,
            "messages": [
                {"role": m.role, "content": m.content, "citations": list(m.citations)}
                for m in self.messages
            ],
        }


class AgentService:
    """Run chat turns and index content for repos held in *store*.

    Args:
        store: Storage implementation (e.g. ``Repository``).
        retriever: Retrieval settings (top_k).
        max_chunk_size: Character budget for the sentence chunker.
        generation: Model settings for LiteLLM-backed providers.
    """

    def __init__(
        self,
        store: AgentStore,
        retriever: RetrieverConfig | None = None,
        max_chunk_size: int = 1000,
        generation: LiteLLMProviderConfig | None = None,
    ) -> None:
        self._store = store
        self._retriever = retriever or RetrieverConfig()
        self._chunker = SentenceChunker(max_chunk_size=max_chunk_size)
        self._generation = generation
        # thread id -> (lock, number of turns holding or waiting on it)
        self._thread_locks: dict[str, tuple[threading.Lock, int]] = {}
        self._locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def chat(
        self,
        repo_id: str,
        message: str,
        thread_id: str | None = None,
        user_id: str | None = None,
        is_owner: bool | None = None,
    ) -> ChatResult:
        """Run one chat turn and return the updated thread.

        Raises:
            RepoNotFoundError: If *repo_id* does not exist.
            AgentDisabledError: If the repo's agent is disabled.
            ProviderNotImplementedError: If the configured provider is a placeholder.
        """
        repo, config = self._load_repo(repo_id)
        if not config.agent_enabled:
            raise AgentDisabledError(repo_id)

        thread = self._resolve_thread(repo, thread_id)

        with self._thread_lock(thread.id):
            self._store.add_message(
                Message(thread_id=thread.id, repo_id=repo.id, role="user", content=message)
            )

            published_only = should_filter_by_published(
                PermissionContext(
                    agent_mode=config.agent_mode,
                    repo_is_public=repo.is_public,
                    user_id=user_id,
                    is_owner=is_owner,
                )
            )
            context_chunks = retrieve(
                repo.id,
                message,
                self._store,
                limit=self._retriever.top_k,
                published_only=published_only,
            )

            history = self._store.list_messages(thread.id)
            provider = create_agent_provider(config.model_provider, self._generation)
            logger.info(
                "Generating reply for repo %s thread %s with provider '%s' (%d chunk(s), published_only=%s)",
                repo.id,
                thread.id,
                provider.name,
                len(context_chunks),
                published_only,
            )
            response = provider.generate_response(
                GenerateRequest(
                    system_prompt=config.system_prompt or "",
                    messages=tuple(ChatMessage(role=m.role, content=m.content) for m in history),
                    context_chunks=tuple(context_chunks),
                    repo_metadata=RepoMetadata(
                        owner_handle=repo.owner_handle,
                        repo_name=repo.name,
                        description=repo.description,
                    ),
                )
            )

            self._store.add_message(
                Message(
                    thread_id=thread.id,
                    repo_id=repo.id,
                    role="assistant",
                    content=response.content,
                    citations=list(response.citations),
                )
            )
            return ChatResult(thread_id=thread.id, messages=self._store.list_messages(thread.id))

    # ------------------------------------------------------------------
    # Indexing
    # ------------------------------------------------------------------

    def index(
        self,
        repo_id: str,
        content: str,
        file_path: str | None = None,
        is_published: bool = True,
    ) -> IndexResult:
        """Index *content* into *repo_id*.

        Raises:
            RepoNotFoundError: If *repo_id* does not exist.
        """
        if self._store.get_repo(repo_id) is None:
            raise RepoNotFoundError(repo_id)
        return index_repo_content(
            repo_id,
            content,
            self._store,
            file_path=file_path,
            is_published=is_published,
            chunker=self._chunker,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _load_repo(self, repo_id: str) -> tuple[Repo, AgentConfig]:
        repo = self._store.get_repo(repo_id)
        if repo is None:
            raise RepoNotFoundError(repo_id)
        config = self._store.get_agent_config(repo_id)
        if config is None:
            raise AgentDisabledError(repo_id)
        return repo, config

    def _resolve_thread(self, repo: Repo, thread_id: str | None) -> Thread:
        if thread_id:
            thread = self._store.get_thread(thread_id, repo.id)
            if thread is not None:
                return thread
            logger.info("Thread %s not found in repo %s; starting a new one", thread_id, repo.id)
        return self._store.create_thread(
            Thread(
                id=str(uuid.uuid4()),
                repo_id=repo.id,
                visibility="public",
                title=f"Chat with {repo.full_name}",
            )
        )

    @contextmanager
    def _thread_lock(self, thread_id: str) -> Iterator[None]:
        """Serialize turns on *thread_id*; the lock is dropped once no turn uses it."""
        with self._locks_guard:
            lock, users = self._thread_locks.get(thread_id, (threading.Lock(), 0))
            self._thread_locks[thread_id] = (lock, users + 1)
        try:
            with lock:
                yield
        finally:
            with self._locks_guard:
                lock, users = self._thread_locks[thread_id]
                if users == 1:
                    del self._thread_locks[thread_id]
                else:
                    self._thread_locks[thread_id] = (lock, users - 1)
