"""Tests for SentenceChunker."""

from __future__ import annotations

import pytest

from repoagent.ingest.base import hash_content
from repoagent.ingest.sentence import SentenceChunker


def test_small_budget_yields_multiple_chunks():
    chunks = SentenceChunker(max_chunk_size=20).chunk(
        "Sentence one. Sentence two. Sentence three.", file_path="test.txt"
    )
    assert len(chunks) > 1
    for c in chunks:
        assert c.content_hash
        assert c.file_path == "test.txt"


def test_default_budget_packs_into_one_chunk():
    chunks = SentenceChunker().chunk("First sentence. Second sentence. Third one!")
    assert len(chunks) == 1
    assert chunks[0].text == "First sentence. Second sentence. Third one!"


def test_terminators_replaced_by_period_joiner():
    chunks = SentenceChunker().chunk("Is it? Yes! Done.")
    assert chunks[0].text == "Is it. Yes. Done."


def test_empty_content_yields_no_chunks():
    assert SentenceChunker().chunk("") == []
    assert SentenceChunker().chunk("   \n  ") == []


def test_whitespace_normalized_before_splitting():
    chunks = SentenceChunker().chunk("Line one.\n\nLine   two.")
    assert chunks[0].text == "Line one. Line two."


def test_oversized_sentence_kept_whole():
    long_sentence = "word " * 50
    chunks = SentenceChunker(max_chunk_size=20).chunk(long_sentence.strip())
    assert len(chunks) == 1
    assert len(chunks[0].text) > 20


def test_chunk_digest_matches_text():
    for c in SentenceChunker(max_chunk_size=15).chunk("Alpha beta. Gamma delta. Epsilon."):
        assert c.content_hash == hash_content(c.text)


def test_chunks_preserve_sentence_order():
    chunks = SentenceChunker(max_chunk_size=10).chunk("One one. Two two. Three three.")
    assert [c.text for c in chunks] == ["One one", "Two two", "Three three."]


def test_file_path_defaults_to_none():
    chunks = SentenceChunker().chunk("Hello there.")
    assert chunks[0].file_path is None


def test_split_sentences_drops_empty_segments():
    assert SentenceChunker.split_sentences("A. . B.") == ["A", "B."]


_PROSE = (
    "The agent answers from published content.  Drafts stay hidden!\n"
    "Why would anyone index twice? Digests keep storage stable. "
    "A very long sentence that keeps going well past any small budget without a single stop "
    "still becomes exactly one chunk. Short. End."
)


@pytest.mark.parametrize("max_chunk_size", [1, 10, 40, 80, 1000])
def test_chunks_cover_every_sentence_in_order(max_chunk_size):
    sentences = SentenceChunker.split_sentences(_PROSE)
    chunks = SentenceChunker(max_chunk_size=max_chunk_size).chunk(_PROSE)
    assert ". ".join(c.text for c in chunks) == ". ".join(sentences)