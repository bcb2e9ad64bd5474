"""Tests for the keyword retriever."""

from __future__ import annotations

import pytest

from repoagent.db.models import StoredChunk
from repoagent.ingest.base import hash_content
from repoagent.rag.retriever import extract_keywords, rank_chunks, retrieve, score_chunk


class _MemoryStore:
    """In-memory chunk store; insertion order doubles as creation order."""

    def __init__(self):
        self.chunks: list[StoredChunk] = []

    def add(self, text, repo_id="r1", published=True, file_path=None):
        self.chunks.append(
            StoredChunk(
                repo_id=repo_id,
                content_hash=hash_content(text),
                text=text,
                file_path=file_path,
                is_published=published,
            )
        )

    def upsert_chunk(self, repo_id, content_hash, text, file_path=None, is_published=True):
        raise AssertionError("retrieval must not write")

    def list_chunks(self, repo_id, published_only):
        return [
            c for c in self.chunks
            if c.repo_id == repo_id and (c.is_published or not published_only)
        ]

    def list_recent_chunks(self, repo_id, published_only, limit):
        return list(reversed(self.list_chunks(repo_id, published_only)))[:limit]


@pytest.fixture
def mem():
    return _MemoryStore()


# ------------------------------------------------------------------
# Keywords and scoring
# ------------------------------------------------------------------

def test_extract_keywords_drops_short_tokens():
    assert extract_keywords("How do I fix the API?") == ["how", "fix", "the", "api?"]


def test_extract_keywords_dedupes():
    assert extract_keywords("Roadmap roadmap ROADMAP") == ["roadmap"]


def test_extract_keywords_empty():
    assert extract_keywords("") == []
    assert extract_keywords("a an of") == []


def test_score_counts_each_keyword_once():
    assert score_chunk("roadmap roadmap roadmap", ["roadmap"]) == 1


def test_score_is_substring_and_case_insensitive():
    assert score_chunk("The ROADMAPS are ready", ["roadmap", "ready", "nope"]) == 2


def test_rank_drops_zero_scores_and_keeps_ties_stable(mem):
    mem.add("alpha beta")
    mem.add("nothing here")
    mem.add("alpha only")
    mem.add("beta alpha again")
    ranked = rank_chunks(mem.chunks, ["alpha", "beta"])
    assert [sc.chunk.text for sc in ranked] == ["alpha beta", "beta alpha again", "alpha only"]
    assert [sc.score for sc in ranked] == [2, 2, 1]


# ------------------------------------------------------------------
# retrieve()
# ------------------------------------------------------------------

def test_retrieve_ranks_by_overlap(mem):
    mem.add("Contributing guide for new people", file_path="CONTRIBUTING.md")
    mem.add("The roadmap lists the next release", file_path="ROADMAP.md")
    result = retrieve("r1", "what is on the roadmap", mem)
    assert result[0].file_path == "ROADMAP.md"
    assert result[0].content_hash == hash_content("The roadmap lists the next release")


def test_retrieve_respects_limit(mem):
    for i in range(10):
        mem.add(f"release note {i}")
    assert len(retrieve("r1", "release", mem, limit=3)) == 3


def test_retrieve_published_only_hides_drafts(mem):
    mem.add("draft release plan", published=False)
    mem.add("public release plan")
    result = retrieve("r1", "release plan", mem, published_only=True)
    assert [c.content for c in result] == ["public release plan"]


def test_retrieve_includes_drafts_when_allowed(mem):
    mem.add("draft release plan", published=False)
    result = retrieve("r1", "release plan", mem, published_only=False)
    assert [c.content for c in result] == ["draft release plan"]


def test_retrieve_scoped_to_repo(mem):
    mem.add("release plan", repo_id="other")
    assert retrieve("r1", "release plan", mem) == []


def test_retrieve_no_keywords_falls_back_to_recent(mem):
    mem.add("oldest")
    mem.add("middle")
    mem.add("newest")
    result = retrieve("r1", "hi", mem, limit=2)
    assert [c.content for c in result] == ["newest", "middle"]


def test_retrieve_no_match_falls_back_to_recent(mem):
    mem.add("first chunk")
    mem.add("second chunk")
    result = retrieve("r1", "zebra", mem)
    assert [c.content for c in result] == ["second chunk", "first chunk"]


def test_retrieve_empty_store(mem):
    assert retrieve("r1", "anything at all", mem) == []


def test_retrieve_invalid_limit(mem):
    with pytest.raises(ValueError):
        retrieve("r1", "query", mem, limit=0)


def test_retrieve_against_sqlite_store(store, test_repo):
    store.upsert_chunk(test_repo.id, hash_content("How to contribute"), "How to contribute")
    store.upsert_chunk(test_repo.id, hash_content("Release notes"), "Release notes")
    result = retrieve(test_repo.id, "contribute please", store)
    assert [c.content for c in result] == ["How to contribute"]
