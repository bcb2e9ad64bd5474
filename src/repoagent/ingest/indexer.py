"""Content indexer: chunk published content and upsert it into the chunk store.

Pipeline:
  raw content → normalize_text → SentenceChunker → ChunkStore.upsert_chunk

Chunks are keyed by (repo_id, content_hash), so indexing the same content
twice leaves exactly one stored row per distinct chunk.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from repoagent.db.ports import ChunkStore
from repoagent.ingest.base import BaseChunker
from repoagent.ingest.sentence import SentenceChunker

logger = logging.getLogger(__name__)


@dataclass
class IndexResult:
    """Outcome of one indexing call.

    Attributes:
        repo_id: Repo the content was indexed into.
        content_hashes: Digests of the upserted chunks, in chunk order.
            Identical chunks within one call appear once per occurrence.
    """

    repo_id: str
    content_hashes: list[str] = field(default_factory=list)

    @property
    def chunk_count(self) -> int:
        return len(self.content_hashes)


def index_repo_content(
    repo_id: str,
    content: str,
    store: ChunkStore,
    file_path: str | None = None,
    is_published: bool = True,
    chunker: BaseChunker | None = None,
) -> IndexResult:
    """Chunk *content* and upsert every chunk for *repo_id*.

    Storage errors propagate unchanged; chunks upserted before the failure
    stay stored (re-running the call is safe).

    Args:
        repo_id: Owning repo.
        content: Raw text to index.
        store: Chunk store implementation (e.g. ``Repository``).
        file_path: Originating file path recorded on each chunk.
        is_published: Published flag written to each chunk.
        chunker: Chunker to use; defaults to ``SentenceChunker()``.

    Returns:
        IndexResult listing the upserted digests.
    """
    chunker = chunker or SentenceChunker()
    chunks = chunker.chunk(content, file_path=file_path)

    result = IndexResult(repo_id=repo_id)
    for chunk in chunks:
        store.upsert_chunk(
            repo_id,
            chunk.content_hash,
            chunk.text,
            file_path=chunk.file_path,
            is_published=is_published,
        )
        result.content_hashes.append(chunk.content_hash)

    logger.info(
        "Indexed %d chunk(s) into repo %s (published=%s, file=%s)",
        result.chunk_count,
        repo_id,
        is_published,
        file_path or "-",
    )
    return result
