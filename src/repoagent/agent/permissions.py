"""Agent permissions: which content an agent may retrieve.

Decision inputs:
  - agent mode (public | private | draft-assistant)
  - repo visibility (is_public)
  - caller identity and owner flag (supplied by the caller; no identity
    check is performed here)

Unknown modes fail closed: only published content is retrievable.
"""

from __future__ import annotations

from dataclasses import dataclass

MODE_PUBLIC = "public"
MODE_PRIVATE = "private"
MODE_DRAFT_ASSISTANT = "draft-assistant"

AGENT_MODES: tuple[str, ...] = (MODE_PUBLIC, MODE_PRIVATE, MODE_DRAFT_ASSISTANT)

# Modes in which the repo owner may see unpublished content.
_OWNER_PRIVATE_MODES = frozenset({MODE_PRIVATE, MODE_DRAFT_ASSISTANT})


@dataclass(frozen=True)
class PermissionContext:
    """Per-request permission input. Never persisted.

    Attributes:
        agent_mode: Agent mode configured for the repo.
        repo_is_public: Whether the repo itself is publicly visible.
        user_id: Caller identity, if known.
        is_owner: Whether the caller owns the repo. ``None`` means unknown
            and is treated as not owner.
    """

    agent_mode: str
    repo_is_public: bool
    user_id: str | None = None
    is_owner: bool | None = None


def can_access_private_content(context: PermissionContext) -> bool:
    """Return True if the agent may retrieve unpublished (draft) content."""
    if context.agent_mode == MODE_PUBLIC:
        return False
    if context.agent_mode in _OWNER_PRIVATE_MODES:
        return context.is_owner is True
    return False


def should_filter_by_published(context: PermissionContext) -> bool:
    """Return True if retrieval must be restricted to published content."""
    return not can_access_private_content(context)
