"""Agent provider interface.

Providers turn a system prompt, the replayed conversation, retrieved context
chunks and repo metadata into a response with citations. Swapping the
provider (stub, LiteLLM-backed, HiveMind) never changes the chat flow.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from repoagent.rag.retriever import ContextChunk

ROLES: tuple[str, ...] = ("user", "assistant", "system")


@dataclass(frozen=True)
class ChatMessage:
    role: str  # user | assistant | system
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(
                f"Unknown message role '{self.role}' (expected one of: {', '.join(ROLES)})"
            )


@dataclass(frozen=True)
class RepoMetadata:
    owner_handle: str
    repo_name: str
    description: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.owner_handle}/{self.repo_name}"


@dataclass(frozen=True)
class GenerateRequest:
    """Everything a provider may use to answer.

    Sequences are stored as tuples so providers cannot mutate the caller's
    history or context.

    Attributes:
        system_prompt: Repo-configured system prompt (may be empty).
        messages: Conversation history in creation order.
        context_chunks: Retrieved chunks, best-first.
        repo_metadata: Owner handle, repo name and description.
    """

    system_prompt: str
    messages: tuple[ChatMessage, ...]
    context_chunks: tuple[ContextChunk, ...]
    repo_metadata: RepoMetadata

    def __post_init__(self) -> None:
        object.__setattr__(self, "messages", tuple(self.messages))
        object.__setattr__(self, "context_chunks", tuple(self.context_chunks))

    def last_user_message(self) -> str:
        """Return the content of the most recent user message ('' if none)."""
        for message in reversed(self.messages):
            if message.role == "user":
                return message.content
        return ""


@dataclass
class GenerateResult:
    """Generated text plus the content hashes of the chunks it drew on."""

    content: str
    citations: list[str] = field(default_factory=list)


class AgentProvider(ABC):
    """Abstract base for response-generation backends.

    Implementations must accept an empty history and an empty context
    without raising.
    """

    name: str = ""

    @abstractmethod
    def generate_response(self, request: GenerateRequest) -> GenerateResult:
        """Generate a response for *request*."""
