"""repoagent ingest pipeline: normalization, chunking, extraction, indexing."""

from repoagent.ingest.base import BaseChunker, ContentChunk, hash_content, normalize_text
from repoagent.ingest.indexer import IndexResult, index_repo_content
from repoagent.ingest.sentence import SentenceChunker

__all__ = [
    "BaseChunker",
    "ContentChunk",
    "IndexResult",
    "SentenceChunker",
    "hash_content",
    "index_repo_content",
    "normalize_text",
]
