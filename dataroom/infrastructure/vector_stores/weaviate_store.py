import asyncio
import logging
from typing import Optional

import weaviate
from weaviate.classes.config import Configure, DataType, Property
from weaviate.classes.init import Auth
from weaviate.classes.query import Filter, MetadataQuery

from dataroom.core.errors import (
    ConfigurationError,
    VectorStoreConnectionError,
    VectorStoreError,
)
from dataroom.core.models.collection import CollectionSchema, PropertyType
from dataroom.core.models.document import VectorHit

logger = logging.getLogger(__name__)

_DATA_TYPES = {
    PropertyType.TEXT: DataType.TEXT,
    PropertyType.INT: DataType.INT,
}


class WeaviateVectorStore:
    """Vector store backed by Weaviate Cloud with server-side vectorization."""

    name = "Weaviate"

    def __init__(
        self,
        url: str,
        api_key: str,
        openai_api_key: str = "",
        vectorizer: str = "text2vec-openai",
        embedding_model: str = "text-embedding-ada-002",
    ):
        """Initialize Weaviate store. The connection opens on first use.

        Args:
            url: Weaviate Cloud cluster URL.
            api_key: Weaviate API key.
            openai_api_key: Key forwarded to the OpenAI vectorizer module.
            vectorizer: "text2vec-openai" or "none".
            embedding_model: Model used by the vectorizer module.
        """
        self._url = url
        self._api_key = api_key
        self._openai_api_key = openai_api_key
        self._vectorizer = vectorizer
        self._embedding_model = embedding_model
        self._client: Optional[weaviate.WeaviateAsyncClient] = None
        self._lock = asyncio.Lock()

    def _vectorizer_config(self):
        if self._vectorizer == "text2vec-openai":
            return Configure.Vectorizer.text2vec_openai(model=self._embedding_model)
        if self._vectorizer == "none":
            return Configure.Vectorizer.none()
        raise ConfigurationError(f"Unsupported Weaviate vectorizer: {self._vectorizer}")

    async def _get_client(self) -> weaviate.WeaviateAsyncClient:
        async with self._lock:
            if self._client is not None:
                return self._client

            if not self._url or not self._api_key:
                raise ConfigurationError(
                    "Weaviate URL and API key are required "
                    "(set WEAVIATE_URL and WEAVIATE_API_KEY)"
                )

            headers = (
                {"X-OpenAI-Api-Key": self._openai_api_key}
                if self._openai_api_key
                else None
            )
            try:
                client = weaviate.use_async_with_weaviate_cloud(
                    cluster_url=self._url,
                    auth_credentials=Auth.api_key(self._api_key),
                    headers=headers,
                )
                await client.connect()
            except Exception as e:
                logger.error(f"Error connecting to Weaviate: {e}")
                raise VectorStoreConnectionError(self.name, e) from e

            logger.info(f"Connected to Weaviate: {self._url}")
            self._client = client
            return client

    async def ensure_collection(self, name: str, schema: CollectionSchema) -> bool:
        client = await self._get_client()
        if await client.collections.exists(name):
            return False

        await client.collections.create(
            name=name,
            properties=[
                Property(name=p.name, data_type=_DATA_TYPES[p.data_type])
                for p in schema.properties
            ],
            vectorizer_config=self._vectorizer_config(),
        )
        return True

    async def insert_batch(self, name: str, records: list[dict]) -> None:
        client = await self._get_client()
        collection = client.collections.get(name)
        objects = [{k: v for k, v in r.items() if v is not None} for r in records]

        result = await collection.data.insert_many(objects)
        if result.has_errors:
            first = next(iter(result.errors.values()))
            raise VectorStoreError(
                f"{len(result.errors)} of {len(objects)} objects rejected: "
                f"{first.message}"
            )

    async def query_near_text(
        self, name: str, text: str, limit: int = 5
    ) -> list[VectorHit]:
        client = await self._get_client()
        collection = client.collections.get(name)

        response = await collection.query.near_text(
            query=text,
            limit=limit,
            return_metadata=MetadataQuery(score=True, distance=True),
        )

        return [
            VectorHit(
                properties=dict(obj.properties),
                distance=obj.metadata.distance if obj.metadata else None,
                score=obj.metadata.score if obj.metadata else None,
            )
            for obj in response.objects
        ]

    async def delete_by_document(self, name: str, document_id: str) -> int:
        client = await self._get_client()
        collection = client.collections.get(name)

        result = await collection.data.delete_many(
            where=Filter.by_property("documentId").equal(document_id)
        )
        if result.failed:
            raise VectorStoreError(
                f"{result.failed} of {result.matches} objects could not be deleted"
            )
        return result.successful

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
