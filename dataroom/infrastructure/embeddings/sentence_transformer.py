import asyncio
import logging
from functools import cached_property

import numpy as np
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Local embeddings; e5 models expect "passage: " / "query: " prefixes."""

    def __init__(
        self,
        model_name: str = "intfloat/multilingual-e5-base",
        passage_prefix: str = "passage: ",
        query_prefix: str = "query: ",
    ):
        self._model_name = model_name
        self._passage_prefix = passage_prefix
        self._query_prefix = query_prefix

    @cached_property
    def model(self) -> SentenceTransformer:
        logger.info(f"Loading embedding model: {self._model_name}")
        return SentenceTransformer(self._model_name)

    def _encode(self, texts: list[str]) -> np.ndarray:
        return self.model.encode(texts, convert_to_numpy=True, normalize_embeddings=True)

    async def embed_passages(self, texts: list[str]) -> list[list[float]]:
        prefixed = [f"{self._passage_prefix}{t}" for t in texts]
        embeddings = await asyncio.to_thread(self._encode, prefixed)
        return embeddings.tolist()

    async def embed_query(self, text: str) -> list[float]:
        embeddings = await asyncio.to_thread(self._encode, [f"{self._query_prefix}{text}"])
        return embeddings[0].tolist()
