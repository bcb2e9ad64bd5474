"""Keyword retriever: substring keyword overlap with a recency fallback.

Scoring:
  keywords  = lower-cased whitespace tokens of the query, length >= 3
  score(c)  = number of keywords occurring anywhere in lower(c.text)

Chunks with score 0 are dropped; the rest are ranked by score, ties keeping
store order. If the query has no keywords, or no chunk matches any keyword,
the most recently created chunks are returned instead.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from repoagent.db.models import StoredChunk
from repoagent.db.ports import ChunkStore

logger = logging.getLogger(__name__)

_MIN_KEYWORD_LEN = 3


@dataclass
class RetrieverConfig:
    """Configuration for the keyword retriever.

    Attributes:
        top_k: Maximum number of chunks returned per query.
    """

    top_k: int = 5


@dataclass(frozen=True)
class ContextChunk:
    """Read-only retrieval view of a stored chunk."""

    content: str
    content_hash: str
    file_path: str | None = None


@dataclass
class ScoredChunk:
    """A stored chunk together with its keyword-match count."""

    chunk: StoredChunk
    score: int


def retrieve(
    repo_id: str,
    query: str,
    store: ChunkStore,
    limit: int = 5,
    published_only: bool = True,
) -> list[ContextChunk]:
    """Return up to *limit* chunks of *repo_id* relevant to *query*, best-first.

    Args:
        repo_id: Repo to search.
        query: Free-text user query.
        store: Chunk store implementation.
        limit: Maximum number of results (must be > 0).
        published_only: Exclude unpublished chunks (see agent.permissions).

    Raises:
        ValueError: If *limit* < 1.
    """
    if limit < 1:
        raise ValueError(f"limit must be >= 1, got {limit}")

    keywords = extract_keywords(query)
    if not keywords:
        logger.debug("No keywords in query; using recency fallback for repo %s", repo_id)
        return _recent(repo_id, store, limit, published_only)

    candidates = store.list_chunks(repo_id, published_only)
    ranked = rank_chunks(candidates, keywords)[:limit]

    if not ranked:
        logger.debug(
            "No chunk matched %d keyword(s); using recency fallback for repo %s",
            len(keywords),
            repo_id,
        )
        return _recent(repo_id, store, limit, published_only)

    logger.debug(
        "Retrieved %d/%d chunk(s) for repo %s (top score %d)",
        len(ranked),
        len(candidates),
        repo_id,
        ranked[0].score,
    )
    return [_to_context(sc.chunk) for sc in ranked]


def extract_keywords(query: str) -> list[str]:
    """Return the distinct lower-cased query tokens of length >= 3, in query order."""
    seen: dict[str, None] = {}
    for token in query.lower().split():
        if len(token) >= _MIN_KEYWORD_LEN:
            seen.setdefault(token, None)
    return list(seen)


def score_chunk(text: str, keywords: list[str]) -> int:
    """Count the keywords occurring as substrings of *text* (case-insensitive).

    Each keyword contributes at most 1 regardless of how often it occurs.
    """
    lowered = text.lower()
    return sum(1 for kw in keywords if kw in lowered)


def rank_chunks(chunks: list[StoredChunk], keywords: list[str]) -> list[ScoredChunk]:
    """Score *chunks*, drop zero scores and sort by descending score (stable)."""
    scored = [ScoredChunk(chunk=c, score=score_chunk(c.text, keywords)) for c in chunks]
    matched = [sc for sc in scored if sc.score > 0]
    matched.sort(key=lambda sc: sc.score, reverse=True)
    return matched


# ------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------


def _recent(
    repo_id: str, store: ChunkStore, limit: int, published_only: bool
) -> list[ContextChunk]:
    return [
        _to_context(c)
        for c in store.list_recent_chunks(repo_id, published_only, limit)
    ]


def _to_context(chunk: StoredChunk) -> ContextChunk:
    return ContextChunk(
        content=chunk.text,
        content_hash=chunk.content_hash,
        file_path=chunk.file_path or None,
    )
