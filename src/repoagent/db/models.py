"""Domain models for the repoagent database layer."""

from __future__ import annotations

import json
from dataclasses import dataclass, field


@dataclass
class Repo:
    id: str
    owner_handle: str
    name: str
    description: str = ""
    is_public: bool = True
    created_at: str | None = None

    @property
    def full_name(self) -> str:
        return f"{self.owner_handle}/{self.name}"


@dataclass
class AgentConfig:
    """Per-repository agent settings (one row per repo)."""

    repo_id: str
    agent_enabled: bool = True
    agent_mode: str = "public"  # public | private | draft-assistant
    model_provider: str = "stub"
    system_prompt: str = ""


@dataclass
class Thread:
    id: str
    repo_id: str
    visibility: str = "public"
    title: str = ""
    created_at: str | None = None


@dataclass
class Message:
    thread_id: str
    repo_id: str
    role: str  # user | assistant | system
    content: str
    citations: list[str] = field(default_factory=list)
    created_at: str | None = None
    seq: int | None = None  # set after insert; defines replay order

    def citations_json(self) -> str:
        return json.dumps(self.citations)


@dataclass
class StoredChunk:
    """A content chunk as persisted in the content_chunks table."""

    repo_id: str
    content_hash: str
    text: str
    file_path: str | None = None
    is_published: bool = True
    created_at: str | None = None
    updated_at: str | None = None
    rowid: int | None = None
