import logging
from typing import Optional

import httpx

from dataroom.core.errors import VectorStoreConnectionError
from dataroom.core.models.collection import CollectionSchema
from dataroom.core.models.document import VectorHit
from dataroom.core.protocols.embedder import EmbedderProtocol

logger = logging.getLogger(__name__)


class ChromaVectorStore:
    """Vector store using ChromaDB HTTP API with client-side embeddings."""

    name = "Chroma"

    def __init__(
        self,
        embedder: EmbedderProtocol,
        host: str = "localhost",
        port: int = 8001,
        tenant: str = "default_tenant",
        database: str = "default_database",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize ChromaDB client.

        Args:
            embedder: Embedding service for passages and queries.
            host: ChromaDB host.
            port: ChromaDB port.
            tenant: Tenant name.
            database: Database name.
            transport: Custom httpx transport (tests).
        """
        self._embedder = embedder
        self._base_url = f"http://{host}:{port}/api/v2"
        self._tenant = tenant
        self._database = database
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None
        self._collection_ids: dict[str, str] = {}

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url, transport=self._transport
            )
        return self._client

    @property
    def _collections_path(self) -> str:
        return f"/tenants/{self._tenant}/databases/{self._database}/collections"

    async def _find_collection(self, name: str) -> Optional[str]:
        resp = await self.client.get(self._collections_path)
        resp.raise_for_status()
        for col in resp.json():
            if col["name"] == name:
                return col["id"]
        return None

    async def _collection_id(self, name: str) -> str:
        col_id = self._collection_ids.get(name)
        if col_id is None:
            col_id = await self._find_collection(name)
            if col_id is None:
                raise LookupError(f"Collection not found: {name}")
            self._collection_ids[name] = col_id
        return col_id

    async def ensure_collection(self, name: str, schema: CollectionSchema) -> bool:
        """Get or create collection; Chroma is schemaless so only the name is used."""
        if name in self._collection_ids:
            return False

        try:
            col_id = await self._find_collection(name)
            if col_id is not None:
                self._collection_ids[name] = col_id
                return False

            resp = await self.client.post(
                self._collections_path,
                json={"name": name, "metadata": {"hnsw:space": "cosine"}},
            )
        except httpx.TransportError as e:
            logger.error(f"Error connecting to Chroma: {e}")
            raise VectorStoreConnectionError(self.name, e) from e

        resp.raise_for_status()
        self._collection_ids[name] = resp.json()["id"]
        logger.info(f"Created Chroma collection: {name} ({len(schema.properties)} fields)")
        return True

    async def insert_batch(self, name: str, records: list[dict]) -> None:
        """Embed and add all records in one request."""
        col_id = await self._collection_id(name)
        documents = [r["content"] for r in records]
        embeddings = await self._embedder.embed_passages(documents)
        # Chroma rejects null metadata values
        metadatas = [
            {k: v for k, v in r.items() if k != "content" and v is not None}
            for r in records
        ]

        resp = await self.client.post(
            f"{self._collections_path}/{col_id}/add",
            json={
                "ids": [r["chunkId"] for r in records],
                "embeddings": embeddings,
                "documents": documents,
                "metadatas": metadatas,
            },
        )
        resp.raise_for_status()

    async def query_near_text(
        self, name: str, text: str, limit: int = 5
    ) -> list[VectorHit]:
        """Search by query embedding."""
        col_id = await self._collection_id(name)
        query_embedding = await self._embedder.embed_query(text)

        resp = await self.client.post(
            f"{self._collections_path}/{col_id}/query",
            json={
                "query_embeddings": [query_embedding],
                "n_results": limit,
                "include": ["documents", "metadatas", "distances"],
            },
        )
        resp.raise_for_status()

        data = resp.json()
        hits = []

        if data.get("ids") and data["ids"][0]:
            for i in range(len(data["ids"][0])):
                properties = dict(data["metadatas"][0][i] or {})
                properties["content"] = data["documents"][0][i]
                hits.append(
                    VectorHit(
                        properties=properties,
                        distance=data["distances"][0][i],
                    )
                )

        return hits

    async def delete_by_document(self, name: str, document_id: str) -> int:
        col_id = await self._collection_id(name)
        where = {"documentId": document_id}

        resp = await self.client.post(
            f"{self._collections_path}/{col_id}/get",
            json={"where": where, "include": []},
        )
        resp.raise_for_status()
        matched = len(resp.json().get("ids", []))
        if not matched:
            return 0

        resp = await self.client.post(
            f"{self._collections_path}/{col_id}/delete", json={"where": where}
        )
        resp.raise_for_status()
        return matched

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
