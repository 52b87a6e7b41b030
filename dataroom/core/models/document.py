"""Document domain models."""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional


def _parse_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


@dataclass
class Document:
    """Uploaded document as supplied by the document source."""
    id: str
    raw_text: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    category: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "Document":
        created_at = _parse_datetime(data.get("createdAt"))
        return cls(
            id=str(data["id"]),
            raw_text=data.get("rawText") or "",
            created_at=created_at or datetime.now(timezone.utc),
            category=data.get("category"),
        )


@dataclass(frozen=True)
class ChunkMetadata:
    """Provenance copied from the source document at index time."""
    created_at: Optional[datetime] = None
    category: Optional[str] = None


@dataclass(frozen=True)
class DocumentChunk:
    """Contiguous span of a document's text in a project's index."""
    id: str
    content: str
    chunk_index: int
    total_chunks: int
    document_id: str
    metadata: ChunkMetadata = field(default_factory=ChunkMetadata)

    @staticmethod
    def make_id(document_id: str, chunk_index: int) -> str:
        return f"{document_id}_chunk_{chunk_index}"

    def to_record(self) -> dict:
        """Storage properties written to the vector collection."""
        created_at = self.metadata.created_at
        return {
            "chunkId": self.id,
            "content": self.content,
            "chunkIndex": self.chunk_index,
            "totalChunks": self.total_chunks,
            "createdAt": created_at.isoformat() if created_at else None,
            "category": self.metadata.category,
            "documentId": self.document_id,
        }

    @classmethod
    def from_record(cls, properties: dict) -> "DocumentChunk":
        """Rebuild a chunk from stored properties; missing fields get defaults."""
        document_id = str(properties.get("documentId") or "")
        chunk_index = int(properties.get("chunkIndex") or 0)
        return cls(
            id=properties.get("chunkId") or cls.make_id(document_id, chunk_index),
            content=properties.get("content") or "",
            chunk_index=chunk_index,
            total_chunks=int(properties.get("totalChunks") or 0),
            document_id=document_id,
            metadata=ChunkMetadata(
                created_at=_parse_datetime(properties.get("createdAt")),
                category=properties.get("category"),
            ),
        )

    @classmethod
    def from_dict(cls, data: dict) -> "DocumentChunk":
        """Parse the camelCase JSON shape used by the HTTP surface."""
        metadata = data.get("metadata") or {}
        document_id = str(data["documentId"])
        chunk_index = int(data["chunkIndex"])
        return cls(
            id=data.get("id") or cls.make_id(document_id, chunk_index),
            content=data["content"],
            chunk_index=chunk_index,
            total_chunks=int(data["totalChunks"]),
            document_id=document_id,
            metadata=ChunkMetadata(
                created_at=_parse_datetime(metadata.get("createdAt")),
                category=metadata.get("category"),
            ),
        )

    def to_dict(self) -> dict:
        created_at = self.metadata.created_at
        return {
            "id": self.id,
            "content": self.content,
            "chunkIndex": self.chunk_index,
            "totalChunks": self.total_chunks,
            "documentId": self.document_id,
            "metadata": {
                "createdAt": created_at.isoformat() if created_at else None,
                "category": self.metadata.category,
            },
        }


@dataclass
class VectorHit:
    """Raw object returned by a vector store query."""
    properties: dict
    distance: Optional[float] = None
    score: Optional[float] = None


@dataclass
class SearchResult:
    """Search result mapped from a vector hit."""
    chunk: DocumentChunk
    score: float
    highlights: Optional[list[str]] = None

    def to_dict(self) -> dict:
        data = {"chunk": self.chunk.to_dict(), "score": self.score}
        if self.highlights is not None:
            data["highlights"] = self.highlights
        return data
