"""Project RAG facade - per-project indexing and search."""

import logging

from ..errors import IndexingError, RagError, RemovalError, SearchError
from ..models.document import ChunkMetadata, Document, DocumentChunk, SearchResult
from ..protocols.vector_store import VectorStoreProtocol
from ..strategies.chunking import INDEXING_CHUNKING_CONFIG, ChunkingConfig, chunk_text
from ..strategies.scoring import hit_similarity
from .provisioning import (
    ANSWER_DOC_COLLECTION_SUFFIX,
    ANSWER_DOC_SCHEMA,
    maybe_create_collection,
    to_collection_name,
)

logger = logging.getLogger(__name__)


class ProjectRag:
    """Indexing and search over one project's collection."""

    def __init__(
        self,
        vector_store: VectorStoreProtocol,
        project_id: str,
        chunking_config: ChunkingConfig = INDEXING_CHUNKING_CONFIG,
        collection_suffix: str = ANSWER_DOC_COLLECTION_SUFFIX,
    ):
        """Initialize facade.

        Args:
            vector_store: Backend the collection lives in.
            project_id: Project the collection belongs to.
            chunking_config: Chunk size policy for index_answer.
            collection_suffix: Collection kind appended to the project id.
        """
        self._vector_store = vector_store
        self._project_id = project_id
        self._chunking_config = chunking_config
        self._collection_name = to_collection_name(project_id, collection_suffix)

    @property
    def project_id(self) -> str:
        return self._project_id

    @property
    def collection_name(self) -> str:
        return self._collection_name

    @property
    def chunking_config(self) -> ChunkingConfig:
        return self._chunking_config

    def build_chunks(self, document: Document) -> list[DocumentChunk]:
        """Chunk a document into indexable pieces."""
        texts = chunk_text(document.raw_text, self._chunking_config)
        metadata = ChunkMetadata(
            created_at=document.created_at, category=document.category
        )
        return [
            DocumentChunk(
                id=DocumentChunk.make_id(document.id, i),
                content=text,
                chunk_index=i,
                total_chunks=len(texts),
                document_id=document.id,
                metadata=metadata,
            )
            for i, text in enumerate(texts)
        ]

    async def index_answer(self, document: Document) -> list[DocumentChunk]:
        """Chunk a document and store all chunks in one batch.

        Returns:
            The stored chunks.

        Raises:
            IndexingError: Document has no text or the backend failed.
        """
        if not document.raw_text or not document.raw_text.strip():
            raise IndexingError(f"document {document.id} has no text content")

        chunks = self.build_chunks(document)
        await self.index_chunks(chunks)
        return chunks

    async def index_chunks(self, chunks: list[DocumentChunk]) -> int:
        """Store pre-built chunks in one batch.

        Returns:
            Number of chunks submitted.
        """
        if not chunks:
            return 0

        records = [chunk.to_record() for chunk in chunks]
        try:
            await self._vector_store.insert_batch(self._collection_name, records)
        except RagError:
            raise
        except Exception as e:
            logger.error(f"Error indexing answer chunks: {e}")
            raise IndexingError(e) from e

        logger.info(
            f"Indexed {len(records)} chunks into {self._collection_name}"
        )
        return len(records)

    async def search(self, query: str, limit: int = 5) -> list[SearchResult]:
        """Semantic search over the project's chunks.

        Args:
            query: Free-text query.
            limit: Maximum number of results.

        Returns:
            Results in backend ranking order, best match first.
        """
        if limit < 1:
            raise ValueError("limit must be at least 1")

        try:
            hits = await self._vector_store.query_near_text(
                self._collection_name, query, limit
            )
        except RagError:
            raise
        except Exception as e:
            logger.error(f"Error searching chunks: {e}")
            raise SearchError(e) from e

        results = [
            SearchResult(
                chunk=DocumentChunk.from_record(hit.properties),
                score=hit_similarity(hit),
            )
            for hit in hits
        ]

        logger.info(
            f"Search: returned {len(results)}/{limit} chunks for '{query[:50]}...'"
        )
        return results

    async def remove_document(self, document_id: str) -> int:
        """Delete every chunk of a document.

        Returns:
            Number of deleted chunks.
        """
        try:
            deleted = await self._vector_store.delete_by_document(
                self._collection_name, document_id
            )
        except RagError:
            raise
        except Exception as e:
            logger.error(f"Error removing document {document_id}: {e}")
            raise RemovalError(e) from e

        logger.info(
            f"Removed {deleted} chunks of {document_id} from {self._collection_name}"
        )
        return deleted


async def connect(
    project_id: str,
    vector_store: VectorStoreProtocol,
    chunking_config: ChunkingConfig = INDEXING_CHUNKING_CONFIG,
    collection_suffix: str = ANSWER_DOC_COLLECTION_SUFFIX,
) -> ProjectRag:
    """Provision the project's collection and return a ready facade.

    Raises:
        ConfigurationError: Backend settings are missing.
        VectorStoreConnectionError: Backend unreachable.
        CollectionCreationError: Collection could not be provisioned.
    """
    rag = ProjectRag(
        vector_store,
        project_id,
        chunking_config=chunking_config,
        collection_suffix=collection_suffix,
    )
    await maybe_create_collection(vector_store, rag.collection_name, ANSWER_DOC_SCHEMA)
    return rag
