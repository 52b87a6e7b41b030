"""Domain models."""
from .document import (
    ChunkMetadata,
    Document,
    DocumentChunk,
    SearchResult,
    VectorHit,
)
from .collection import CollectionSchema, PropertySpec, PropertyType
from .analysis import (
    BulkAnalysisResult,
    Question,
    QuestionAnalysisResult,
    QuestionAnswer,
)

__all__ = [
    "ChunkMetadata",
    "Document",
    "DocumentChunk",
    "SearchResult",
    "VectorHit",
    "CollectionSchema",
    "PropertySpec",
    "PropertyType",
    "BulkAnalysisResult",
    "Question",
    "QuestionAnalysisResult",
    "QuestionAnswer",
]
