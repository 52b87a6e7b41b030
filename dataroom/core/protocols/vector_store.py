"""Vector store protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.collection import CollectionSchema
from ..models.document import VectorHit


@runtime_checkable
class VectorStoreProtocol(Protocol):
    """Protocol for a multi-collection vector store."""

    name: str

    async def ensure_collection(self, name: str, schema: CollectionSchema) -> bool:
        """Create the collection if it does not exist.

        Args:
            name: Collection name.
            schema: Properties the collection stores.

        Returns:
            True if the collection was created, False if it already existed.
        """
        ...

    async def insert_batch(self, name: str, records: list[dict]) -> None:
        """Insert all records in a single batch call.

        Args:
            name: Collection name.
            records: Object properties; each must carry a "content" text.
        """
        ...

    async def query_near_text(
        self,
        name: str,
        text: str,
        limit: int = 5
    ) -> list[VectorHit]:
        """Semantic nearest-neighbour search.

        Args:
            name: Collection name.
            text: Free-text query.
            limit: Maximum number of hits.

        Returns:
            Hits ordered best match first, with distance and/or score.
        """
        ...

    async def delete_by_document(self, name: str, document_id: str) -> int:
        """Delete every object whose documentId matches.

        Returns:
            Number of deleted objects.
        """
        ...

    async def close(self) -> None:
        """Release the backend connection."""
        ...
