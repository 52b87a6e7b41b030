"""Embedder protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbedderProtocol(Protocol):
    """Protocol for client-side embedding service."""

    async def embed_passages(self, texts: list[str]) -> list[list[float]]:
        """Encode stored passages to embeddings.

        Args:
            texts: Passages to encode.

        Returns:
            One vector per passage.
        """
        ...

    async def embed_query(self, text: str) -> list[float]:
        """Encode a search query to an embedding."""
        ...
