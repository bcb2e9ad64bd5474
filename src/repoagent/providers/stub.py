"""Stub agent provider: deterministic, keyword-triggered responses.

Used for development and tests, and as the fail-safe default when a repo is
configured with an unknown provider name.
"""

from __future__ import annotations

from repoagent.providers.types import AgentProvider, GenerateRequest, GenerateResult

_PREVIEW_CHARS = 200

_IDENTITY_TRIGGERS = ("what is this", "explain")
_CONTEXT_TRIGGERS = ("context", "content", "chunk")
_STATUS_TRIGGERS = ("learning", "hivemind")


class StubAgentProvider(AgentProvider):
    """Answer from canned templates chosen by keywords in the last user message.

    Branches, checked in order on the lower-cased last user message:
      - empty, "what is this", "explain"   → repo identity + description
      - "context", "content", "chunk"      → preview of the top chunk
      - "learning", "hivemind"             → provider status report
      - anything else                       → echo + capability statement

    Whenever context chunks are supplied the first chunk's hash is cited,
    except in the "no indexed content" answer which has nothing to cite.
    """

    name = "stub"

    def generate_response(self, request: GenerateRequest) -> GenerateResult:
        last = request.last_user_message()
        lower = last.lower()
        chunks = request.context_chunks
        citations = [chunks[0].content_hash] if chunks else []

        if not lower.strip() or any(t in lower for t in _IDENTITY_TRIGGERS):
            return GenerateResult(content=self._identity(request), citations=citations)

        if any(t in lower for t in _CONTEXT_TRIGGERS):
            if not chunks:
                return GenerateResult(
                    content=(
                        "I don't have any indexed content for this repo yet. "
                        "Content will be indexed when you publish."
                    ),
                    citations=[],
                )
            top = chunks[0]
            source = f"\n\n(from {top.file_path})" if top.file_path else ""
            return GenerateResult(
                content=(
                    f"I found {len(chunks)} relevant content chunk(s). Here's a preview:\n\n"
                    f'"{top.content[:_PREVIEW_CHARS]}..."{source}'
                ),
                citations=citations,
            )

        if any(t in lower for t in _STATUS_TRIGGERS):
            return GenerateResult(
                content=(
                    "This repo's agent is currently using a **stub provider**.\n\n"
                    "- Current provider: Stub (deterministic responses)\n"
                    "- Future: HiveMind provider integration\n\n"
                    "The agent can access published content chunks for context."
                ),
                citations=citations,
            )

        return GenerateResult(
            content=(
                f'Got it. You said:\n"{last}"\n\n'
                "Right now I'm a stubbed agent with RAG support. I can search through "
                "indexed content chunks from this repo. A real model provider can be "
                "configured without changing the chat flow."
            ),
            citations=citations,
        )

    @staticmethod
    def _identity(request: GenerateRequest) -> str:
        meta = request.repo_metadata
        lines = [
            f"I'm the Repo Agent for {meta.full_name}.",
            f"Description: {meta.description or '(no description yet)'}",
        ]
        if request.context_chunks:
            lines.append(
                f"I found {len(request.context_chunks)} relevant content chunks in this repo."
            )
        lines.append("Ask me about the roadmap, changes, or how to contribute.")
        return "\n\n".join(lines)
