"""Sentence chunker: greedy sentence packing up to a character budget."""

from __future__ import annotations

import re

from repoagent.ingest.base import BaseChunker, ContentChunk, normalize_text

# Sentence terminator followed by whitespace; the terminator is consumed.
_SENTENCE_SPLIT_RE = re.compile(r"[.!?]\s+")

_JOINER = ". "


class SentenceChunker(BaseChunker):
    """Split normalized text on sentence boundaries and pack sentences greedily.

    Strategy:
    - Normalize whitespace, then split on ``.``/``!``/``?`` followed by
      whitespace. Empty segments are dropped.
    - Append segments to a buffer joined by ``". "``. When the next segment
      would push the buffer past ``max_chunk_size`` and the buffer is not
      empty, the buffer is sealed as a chunk and a new one starts with that
      segment.
    - A single segment longer than ``max_chunk_size`` becomes its own
      oversized chunk; sentences are never split.

    Default: 1000 characters.
    """

    def chunk(self, content: str, file_path: str | None = None) -> list[ContentChunk]:
        segments = self.split_sentences(content)
        if not segments:
            return []

        texts: list[str] = []
        buffer = ""
        for segment in segments:
            if buffer and len(buffer) + len(segment) > self.max_chunk_size:
                texts.append(buffer)
                buffer = segment
            else:
                buffer = f"{buffer}{_JOINER}{segment}" if buffer else segment

        if buffer:
            texts.append(buffer)

        return self._make_chunks(texts, file_path)

    @staticmethod
    def split_sentences(content: str) -> list[str]:
        """Return the non-empty sentence segments of normalized *content*."""
        normalized = normalize_text(content)
        if not normalized:
            return []
        return [s for s in _SENTENCE_SPLIT_RE.split(normalized) if s]
