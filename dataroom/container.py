import logging
from dataclasses import dataclass, field
from functools import partial
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        self._singletons.pop(interface, None)
        if singleton:
            self._singleton_flags.add(interface)
        else:
            self._singleton_flags.discard(interface)

    def resolve(self, interface: type[T]) -> T:
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance


container = Container()


def build_chunking_config(settings: Settings):
    from .core.strategies.chunking import ChunkingConfig

    return ChunkingConfig(
        max_chunk_size=settings.chunk_max_size,
        overlap_size=settings.chunk_overlap_size,
        min_chunk_size=settings.chunk_min_size,
    )


def configure_container(settings: Settings) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.

    Returns:
        Configured container.
    """
    from .core.errors import ConfigurationError
    from .core.protocols.embedder import EmbedderProtocol
    from .core.protocols.llm import LLMProtocol
    from .core.protocols.vector_store import VectorStoreProtocol
    from .core.services.ingest_service import IngestService
    from .core.services.project_rag import connect
    from .core.services.question_analyzer import QuestionAnalyzerService
    from .core.services.registry import RagRegistry

    def make_vector_store() -> VectorStoreProtocol:
        if settings.vector_backend == "weaviate":
            from .infrastructure.vector_stores.weaviate_store import WeaviateVectorStore

            return WeaviateVectorStore(
                url=settings.weaviate_url,
                api_key=settings.weaviate_api_key,
                openai_api_key=settings.openai_api_key,
                vectorizer=settings.weaviate_vectorizer,
                embedding_model=settings.openai_embedding_model,
            )
        if settings.vector_backend == "chroma":
            from .infrastructure.vector_stores.chroma_store import ChromaVectorStore

            return ChromaVectorStore(
                embedder=container.resolve(EmbedderProtocol),
                host=settings.chroma_host,
                port=settings.chroma_port,
            )
        raise ConfigurationError(f"Unknown vector backend: {settings.vector_backend}")

    def make_embedder() -> EmbedderProtocol:
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.embedding_model)

    def make_llm() -> LLMProtocol:
        from .infrastructure.llm.openai_client import OpenAIClient

        return OpenAIClient(
            api_key=settings.openai_api_key,
            model=settings.llm_model,
            max_tokens=settings.llm_max_tokens,
            temperature=settings.llm_temperature,
        )

    container.register(EmbedderProtocol, make_embedder, singleton=True)
    container.register(VectorStoreProtocol, make_vector_store, singleton=True)
    container.register(LLMProtocol, make_llm, singleton=True)

    container.register(
        RagRegistry,
        lambda: RagRegistry(
            partial(
                connect,
                vector_store=container.resolve(VectorStoreProtocol),
                chunking_config=build_chunking_config(settings),
                collection_suffix=settings.collection_suffix,
            )
        ),
        singleton=True,
    )

    container.register(
        QuestionAnalyzerService,
        lambda: QuestionAnalyzerService(
            llm=container.resolve(LLMProtocol),
            limit=settings.analysis_limit,
        ),
        singleton=True,
    )

    container.register(IngestService, IngestService, singleton=True)

    logger.info(f"Container configured (vector backend: {settings.vector_backend})")
    return container
