"""Tests for the stub agent provider."""

from __future__ import annotations

from repoagent.providers.stub import StubAgentProvider
from repoagent.providers.types import ChatMessage, GenerateRequest, RepoMetadata
from repoagent.rag.retriever import ContextChunk

_META = RepoMetadata(owner_handle="test", repo_name="test-repo", description="A test repo")


def _request(text="What is this?", chunks=(), history=None):
    messages = history if history is not None else [ChatMessage(role="user", content=text)]
    return GenerateRequest(
        system_prompt="",
        messages=messages,
        context_chunks=chunks,
        repo_metadata=_META,
    )


def _chunk(hash_="abc123", content="Roadmap: ship the agent.", file_path=None):
    return ContextChunk(content=content, content_hash=hash_, file_path=file_path)


def test_identity_answer_names_repo():
    result = StubAgentProvider().generate_response(_request())
    assert "test/test-repo" in result.content
    assert "A test repo" in result.content
    assert result.citations == []


def test_identity_answer_without_description():
    meta = RepoMetadata(owner_handle="o", repo_name="r")
    req = GenerateRequest(
        system_prompt="", messages=[ChatMessage("user", "explain")], context_chunks=[], repo_metadata=meta
    )
    assert "(no description yet)" in StubAgentProvider().generate_response(req).content


def test_cites_first_chunk():
    result = StubAgentProvider().generate_response(_request(chunks=[_chunk()]))
    assert "abc123" in result.citations


def test_identity_answer_counts_chunks():
    chunks = [_chunk("h1"), _chunk("h2")]
    result = StubAgentProvider().generate_response(_request(chunks=chunks))
    assert "I found 2 relevant content chunks" in result.content
    assert result.citations == ["h1"]


def test_empty_history_gets_identity_answer():
    result = StubAgentProvider().generate_response(_request(history=[]))
    assert "test/test-repo" in result.content


def test_content_preview_with_chunks():
    chunk = _chunk(content="x" * 300, file_path="docs/a.md")
    result = StubAgentProvider().generate_response(_request("show me the content", [chunk]))
    assert "I found 1 relevant content chunk(s)" in result.content
    assert "x" * 200 + "..." in result.content
    assert "x" * 201 not in result.content
    assert "(from docs/a.md)" in result.content
    assert result.citations == ["abc123"]


def test_content_without_chunks():
    result = StubAgentProvider().generate_response(_request("any chunk here?"))
    assert "don't have any indexed content" in result.content
    assert result.citations == []


def test_status_branch():
    result = StubAgentProvider().generate_response(_request("are you learning?"))
    assert "stub provider" in result.content


def test_echo_branch():
    result = StubAgentProvider().generate_response(_request("hello there"))
    assert '"hello there"' in result.content


def test_uses_last_user_message():
    history = [
        ChatMessage("user", "hello"),
        ChatMessage("assistant", "Got it."),
        ChatMessage("user", "What is this?"),
    ]
    result = StubAgentProvider().generate_response(_request(history=history))
    assert "test/test-repo" in result.content


def test_deterministic():
    req = _request("hello there", [_chunk()])
    provider = StubAgentProvider()
    assert provider.generate_response(req) == provider.generate_response(req)
