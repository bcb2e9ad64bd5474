"""Exceptions raised by the repoagent core.

Collaborator failures (``sqlite3.Error``, LiteLLM API errors) are not wrapped;
they propagate unchanged to the caller.
"""

from __future__ import annotations


class RepoAgentError(Exception):
    """Base class for terminal request failures."""


class RepoNotFoundError(RepoAgentError):
    """Raised when the referenced repository does not exist."""

    def __init__(self, repo_id: str) -> None:
        super().__init__(f"Repo not found: '{repo_id}'")
        self.repo_id = repo_id


class AgentDisabledError(RepoAgentError):
    """Raised when the agent is not enabled for a repository."""

    def __init__(self, repo_id: str) -> None:
        super().__init__(f"Agent disabled for repo '{repo_id}'")
        self.repo_id = repo_id


class ProviderNotImplementedError(RepoAgentError, NotImplementedError):
    """Raised by a provider whose backend is not available yet."""

    def __init__(self, provider: str, hint: str = "") -> None:
        message = f"{provider} provider not yet implemented."
        if hint:
            message = f"{message} {hint}"
        super().__init__(message)
        self.provider = provider
