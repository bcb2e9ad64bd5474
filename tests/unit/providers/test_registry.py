"""Tests for the provider registry."""

from __future__ import annotations

import logging

import pytest

from repoagent.errors import ProviderNotImplementedError
from repoagent.providers import (
    HiveMindAgentProvider,
    LiteLLMAgentProvider,
    LiteLLMProviderConfig,
    StubAgentProvider,
    available_providers,
    create_agent_provider,
)
from repoagent.providers.types import GenerateRequest, RepoMetadata


@pytest.mark.parametrize("name", ["stub", "random_llm", "STUB", "  stub  "])
def test_stub_names(name):
    assert isinstance(create_agent_provider(name), StubAgentProvider)


def test_hivemind():
    assert isinstance(create_agent_provider("hivemind"), HiveMindAgentProvider)


def test_litellm_uses_generation_config():
    cfg = LiteLLMProviderConfig(model="anthropic/claude-3-5-haiku-20241022")
    provider = create_agent_provider("litellm", cfg)
    assert isinstance(provider, LiteLLMAgentProvider)
    assert provider.model == "anthropic/claude-3-5-haiku-20241022"


def test_ollama_defaults_to_local_model():
    provider = create_agent_provider("ollama", LiteLLMProviderConfig(model="openai/gpt-4o-mini"))
    assert provider.model == "ollama/llama3"


def test_ollama_keeps_ollama_model():
    provider = create_agent_provider("ollama", LiteLLMProviderConfig(model="ollama/mistral"))
    assert provider.model == "ollama/mistral"


def test_unknown_falls_back_to_stub(caplog):
    with caplog.at_level(logging.WARNING, logger="repoagent.providers"):
        provider = create_agent_provider("does-not-exist")
    assert isinstance(provider, StubAgentProvider)
    assert "does-not-exist" in caplog.text


def test_empty_name_falls_back_to_stub():
    assert isinstance(create_agent_provider(""), StubAgentProvider)


def test_hivemind_raises_not_implemented():
    req = GenerateRequest(
        system_prompt="",
        messages=[],
        context_chunks=[],
        repo_metadata=RepoMetadata(owner_handle="o", repo_name="r"),
    )
    with pytest.raises(ProviderNotImplementedError, match="HiveMind"):
        create_agent_provider("hivemind").generate_response(req)


def test_available_providers_lists_every_name():
    names = {p.name for p in available_providers()}
    assert names == {"stub", "random_llm", "litellm", "ollama", "hivemind"}
    hivemind = next(p for p in available_providers() if p.name == "hivemind")
    assert hivemind.implemented is False
