"""Chunking and scoring strategies."""
from .chunking import (
    DEFAULT_CHUNKING_CONFIG,
    INDEXING_CHUNKING_CONFIG,
    ChunkingConfig,
    chunk_text,
)
from .scoring import hit_similarity, normalize_score

__all__ = [
    "DEFAULT_CHUNKING_CONFIG",
    "INDEXING_CHUNKING_CONFIG",
    "ChunkingConfig",
    "chunk_text",
    "hit_similarity",
    "normalize_score",
]
