"""Pytest configuration and fixtures."""

import asyncio
import re
from functools import partial

import pytest
from httpx import ASGITransport, AsyncClient

from dataroom.core.models.analysis import QuestionAnswer
from dataroom.core.models.collection import CollectionSchema
from dataroom.core.models.document import Document, VectorHit
from dataroom.core.services.project_rag import ProjectRag, connect
from dataroom.core.services.question_analyzer import QuestionAnalyzerService
from dataroom.core.services.registry import RagRegistry
from dataroom.core.strategies.chunking import ChunkingConfig

_WORD_RE = re.compile(r"\w+")


def _words(text: str) -> set[str]:
    return set(_WORD_RE.findall(text.lower()))


# -------------------------------------------------------------------------
# Fakes
# -------------------------------------------------------------------------


class FakeVectorStore:
    """In-memory store ranking by word overlap with the query."""

    name = "Fake"

    def __init__(self):
        self.collections: dict[str, list[dict]] = {}
        self.schemas: dict[str, CollectionSchema] = {}
        self.ensure_calls = 0
        self.insert_calls: list[tuple[str, list[dict]]] = []
        self.fail_on: set[str] = set()
        self.closed = False

    def _maybe_fail(self, operation: str) -> None:
        if operation in self.fail_on:
            raise RuntimeError(f"backend {operation} unavailable")

    async def ensure_collection(self, name: str, schema: CollectionSchema) -> bool:
        self.ensure_calls += 1
        await asyncio.sleep(0)
        self._maybe_fail("ensure")
        if name in self.collections:
            return False
        self.collections[name] = []
        self.schemas[name] = schema
        return True

    async def insert_batch(self, name: str, records: list[dict]) -> None:
        self._maybe_fail("insert")
        self.insert_calls.append((name, records))
        self.collections[name].extend(dict(r) for r in records)

    async def query_near_text(self, name: str, text: str, limit: int = 5) -> list[VectorHit]:
        self._maybe_fail("query")
        query_words = _words(text)
        hits = []
        for record in self.collections.get(name, []):
            overlap = len(query_words & _words(record["content"]))
            ratio = overlap / len(query_words) if query_words else 0.0
            hits.append(VectorHit(properties=dict(record), distance=1.0 - ratio))
        hits.sort(key=lambda h: h.distance)
        return hits[:limit]

    async def delete_by_document(self, name: str, document_id: str) -> int:
        self._maybe_fail("delete")
        records = self.collections.get(name, [])
        kept = [r for r in records if r["documentId"] != document_id]
        self.collections[name] = kept
        return len(records) - len(kept)

    async def close(self) -> None:
        self.closed = True


class FakeLLM:
    """Answers with retrieved chunks sharing a keyword with the question."""

    def __init__(self, keyword: str | None = None, error: Exception | None = None):
        self.keyword = keyword
        self.error = error
        self.calls: list[tuple[str, int]] = []

    async def extract_answers(self, question, results):
        self.calls.append((question, len(results)))
        if self.error is not None:
            raise self.error
        return [
            QuestionAnswer(content=r.chunk.content, document_id=r.chunk.document_id)
            for r in results
            if self.keyword
            and self.keyword in question.lower()
            and self.keyword in r.chunk.content.lower()
        ]


# -------------------------------------------------------------------------
# Core fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def store() -> FakeVectorStore:
    return FakeVectorStore()


@pytest.fixture
def small_config() -> ChunkingConfig:
    return ChunkingConfig(max_chunk_size=40, overlap_size=20, min_chunk_size=10)


@pytest.fixture
async def rag(store) -> ProjectRag:
    return await connect("project-1", store)


@pytest.fixture
def registry(store) -> RagRegistry:
    return RagRegistry(partial(connect, vector_store=store))


@pytest.fixture
def llm() -> FakeLLM:
    return FakeLLM(keyword="revenue")


@pytest.fixture
def failing_llm() -> FakeLLM:
    return FakeLLM(error=RuntimeError("rate limited"))


@pytest.fixture
def analyzer(llm) -> QuestionAnalyzerService:
    return QuestionAnalyzerService(llm=llm, limit=10)


@pytest.fixture
def sample_document() -> Document:
    return Document(
        id="doc-1",
        raw_text="Sentence one. Sentence two. Sentence three.",
        category="financial",
    )


# -------------------------------------------------------------------------
# API fixtures
# -------------------------------------------------------------------------


@pytest.fixture
def app(registry, analyzer, store):
    from dataroom.presentation.api import create_app

    return create_app(registry=registry, analyzer=analyzer, vector_store=store)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
