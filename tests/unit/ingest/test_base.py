"""Tests for the text primitives shared by all chunkers."""

from __future__ import annotations

import hashlib

import pytest

from repoagent.ingest.base import BaseChunker, ContentChunk, hash_content, normalize_text


# ------------------------------------------------------------------
# normalize_text
# ------------------------------------------------------------------

def test_normalize_collapses_whitespace():
    assert normalize_text("  Hello \n\n  world\t again  ") == "Hello world again"


def test_normalize_empty_and_blank():
    assert normalize_text("") == ""
    assert normalize_text(" \n\t ") == ""


@pytest.mark.parametrize("raw", ["a  b", "\n x \r\n y \n", "already clean", ""])
def test_normalize_idempotent(raw):
    once = normalize_text(raw)
    assert normalize_text(once) == once


# ------------------------------------------------------------------
# hash_content
# ------------------------------------------------------------------

def test_hash_is_sha256_hex():
    digest = hash_content("hello")
    assert digest == hashlib.sha256(b"hello").hexdigest()
    assert len(digest) == 64


def test_hash_deterministic():
    assert hash_content("same text") == hash_content("same text")


def test_hash_does_not_normalize():
    assert hash_content("a b") != hash_content("a  b")


def test_hash_unicode():
    assert hash_content("café") == hashlib.sha256("café".encode("utf-8")).hexdigest()


# ------------------------------------------------------------------
# ContentChunk / BaseChunker
# ------------------------------------------------------------------

def test_content_chunk_from_text_sets_digest():
    chunk = ContentChunk.from_text("Some text", file_path="a.md")
    assert chunk.content_hash == hash_content("Some text")
    assert chunk.file_path == "a.md"


def test_base_chunker_rejects_non_positive_size():
    class _Noop(BaseChunker):
        def chunk(self, content, file_path=None):
            return []

    with pytest.raises(ValueError):
        _Noop(max_chunk_size=0)
