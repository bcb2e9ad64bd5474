"""Base chunker interface plus the text primitives every chunker shares."""

from __future__ import annotations

import hashlib
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass

_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class ContentChunk:
    """A unit of indexed text, content-addressed by its SHA-256 digest.

    Build instances with ``ContentChunk.from_text()`` so the digest always
    matches the text.
    """

    text: str
    content_hash: str
    file_path: str | None = None

    @classmethod
    def from_text(cls, text: str, file_path: str | None = None) -> ContentChunk:
        return cls(text=text, content_hash=hash_content(text), file_path=file_path)


def normalize_text(raw: str) -> str:
    """Trim *raw* and collapse every whitespace run (newlines included) to one space.

    Idempotent: ``normalize_text(normalize_text(x)) == normalize_text(x)``.
    """
    return _WHITESPACE_RE.sub(" ", raw.strip())


def hash_content(text: str) -> str:
    """Return the SHA-256 hex digest (64 chars) of *text*'s UTF-8 bytes.

    No normalization happens here; callers normalize upstream.
    """
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


class BaseChunker(ABC):
    """Abstract base for all chunkers.

    Subclasses implement ``chunk()`` and may use ``_make_chunks()`` to turn
    sealed text buffers into digest-carrying ``ContentChunk`` objects.
    """

    def __init__(self, max_chunk_size: int = 1000) -> None:
        if max_chunk_size < 1:
            raise ValueError("max_chunk_size must be >= 1")
        self.max_chunk_size = max_chunk_size

    @abstractmethod
    def chunk(self, content: str, file_path: str | None = None) -> list[ContentChunk]:
        """Split *content* into ContentChunk objects.

        Args:
            content: Raw text of the document (normalized by the chunker).
            file_path: Originating path, copied onto every chunk.

        Returns:
            Ordered list of chunks; empty for blank content.
        """

    @staticmethod
    def _make_chunks(texts: list[str], file_path: str | None) -> list[ContentChunk]:
        return [ContentChunk.from_text(t, file_path=file_path) for t in texts]
