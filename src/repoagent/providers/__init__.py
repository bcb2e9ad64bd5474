"""Agent provider registry.

Maps the ``model_provider`` string stored in a repo's agent config to a
provider implementation. Unknown names resolve to the stub so a
misconfigured repo still answers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from repoagent.providers.hivemind import HiveMindAgentProvider
from repoagent.providers.litellm_provider import LiteLLMAgentProvider, LiteLLMProviderConfig
from repoagent.providers.stub import StubAgentProvider
from repoagent.providers.types import (
    AgentProvider,
    ChatMessage,
    GenerateRequest,
    GenerateResult,
    RepoMetadata,
)

logger = logging.getLogger(__name__)

DEFAULT_PROVIDER = "stub"
_OLLAMA_DEFAULT_MODEL = "ollama/llama3"


@dataclass(frozen=True)
class ProviderInfo:
    name: str
    description: str
    implemented: bool = True


def _litellm(config: LiteLLMProviderConfig | None) -> AgentProvider:
    return LiteLLMAgentProvider(config)


def _ollama(config: LiteLLMProviderConfig | None) -> AgentProvider:
    cfg = config or LiteLLMProviderConfig()
    if not cfg.model.startswith(("ollama/", "ollama_chat/")):
        cfg = LiteLLMProviderConfig(
            model=_OLLAMA_DEFAULT_MODEL,
            max_tokens=cfg.max_tokens,
            temperature=cfg.temperature,
            num_retries=cfg.num_retries,
        )
    return LiteLLMAgentProvider(cfg)


_FACTORIES: dict[str, Callable[[LiteLLMProviderConfig | None], AgentProvider]] = {
    "stub": lambda _cfg: StubAgentProvider(),
    "random_llm": lambda _cfg: StubAgentProvider(),  # legacy default
    "hivemind": lambda _cfg: HiveMindAgentProvider(),
    "litellm": _litellm,
    "ollama": _ollama,
}

_INFO: tuple[ProviderInfo, ...] = (
    ProviderInfo("stub", "Deterministic keyword-triggered responses (default)."),
    ProviderInfo("random_llm", "Legacy alias for 'stub'."),
    ProviderInfo("litellm", "Any LiteLLM model (generation.model in config)."),
    ProviderInfo("ollama", f"Local Ollama model via LiteLLM (default {_OLLAMA_DEFAULT_MODEL})."),
    ProviderInfo("hivemind", "HiveMind network provider.", implemented=False),
)


def create_agent_provider(
    model_provider: str,
    generation: LiteLLMProviderConfig | None = None,
) -> AgentProvider:
    """Return the provider registered under *model_provider*.

    Args:
        model_provider: Provider name from the repo's agent config.
        generation: Model settings for LiteLLM-backed providers.

    Returns:
        A provider instance; the stub for unknown names.
    """
    key = (model_provider or "").strip().lower()
    factory = _FACTORIES.get(key)
    if factory is None:
        logger.warning(
            "Unknown model provider %r; falling back to '%s'", model_provider, DEFAULT_PROVIDER
        )
        factory = _FACTORIES[DEFAULT_PROVIDER]
    return factory(generation)


def available_providers() -> list[ProviderInfo]:
    """Return the registered providers in display order."""
    return list(_INFO)


__all__ = [
    "AgentProvider",
    "ChatMessage",
    "DEFAULT_PROVIDER",
    "GenerateRequest",
    "GenerateResult",
    "HiveMindAgentProvider",
    "LiteLLMAgentProvider",
    "LiteLLMProviderConfig",
    "ProviderInfo",
    "RepoMetadata",
    "StubAgentProvider",
    "available_providers",
    "create_agent_provider",
]
