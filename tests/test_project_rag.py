"""Tests for the project RAG facade."""

import math
from datetime import datetime, timezone

import pytest

from dataroom.core.errors import (
    CollectionCreationError,
    IndexingError,
    RemovalError,
    SearchError,
)
from dataroom.core.models.document import ChunkMetadata, Document, DocumentChunk
from dataroom.core.services.project_rag import connect
from dataroom.core.strategies.chunking import ChunkingConfig


@pytest.mark.asyncio
async def test_connect_provisions_collection(store):
    rag = await connect("acme/deal 7", store)

    assert rag.collection_name == "AnswerDoc_acme_deal_7"
    assert "AnswerDoc_acme_deal_7" in store.collections


@pytest.mark.asyncio
async def test_connect_fails_without_partial_facade(store):
    store.fail_on.add("ensure")

    with pytest.raises(CollectionCreationError):
        await connect("project-1", store)


@pytest.mark.asyncio
async def test_index_and_search_single_chunk(store, sample_document):
    rag = await connect("project-1", store, chunking_config=ChunkingConfig(500, 50, 10))

    chunks = await rag.index_answer(sample_document)

    assert len(chunks) == 1
    assert chunks[0].chunk_index == 0
    assert chunks[0].total_chunks == 1
    assert chunks[0].id == "doc-1_chunk_0"

    results = await rag.search("sentence two", limit=5)

    assert results
    assert results[0].chunk.document_id == "doc-1"
    assert results[0].chunk.metadata.category == "financial"


@pytest.mark.asyncio
async def test_index_invariants_for_multiple_chunks(store, small_config):
    rag = await connect("project-1", store, chunking_config=small_config)
    document = Document(
        id="doc-2",
        raw_text="The cat sat down. The dog ran off. Birds sang loudly. "
        "Rain fell softly. Night came fast.",
    )

    chunks = await rag.index_answer(document)

    n = len(chunks)
    assert n > 1
    assert [c.chunk_index for c in chunks] == list(range(n))
    assert all(c.total_chunks == n for c in chunks)
    assert all(c.document_id == "doc-2" for c in chunks)


@pytest.mark.asyncio
async def test_all_chunks_submitted_in_one_batch(store, small_config):
    rag = await connect("project-1", store, chunking_config=small_config)
    created_at = datetime(2024, 5, 1, tzinfo=timezone.utc)
    document = Document(
        id="doc-3",
        raw_text="The cat sat down. The dog ran off. Birds sang loudly.",
        created_at=created_at,
        category="legal",
    )

    chunks = await rag.index_answer(document)

    assert len(store.insert_calls) == 1
    name, records = store.insert_calls[0]
    assert name == rag.collection_name
    assert len(records) == len(chunks)
    assert records[0] == {
        "chunkId": "doc-3_chunk_0",
        "content": chunks[0].content,
        "chunkIndex": 0,
        "totalChunks": len(chunks),
        "createdAt": created_at.isoformat(),
        "category": "legal",
        "documentId": "doc-3",
    }


@pytest.mark.asyncio
async def test_indexing_failure_propagates(rag, store, sample_document):
    store.fail_on.add("insert")

    with pytest.raises(IndexingError) as exc_info:
        await rag.index_answer(sample_document)

    assert str(exc_info.value).startswith("Failed to index answer:")
    assert "insert unavailable" in str(exc_info.value)


@pytest.mark.asyncio
async def test_empty_document_is_rejected(rag, store):
    with pytest.raises(IndexingError):
        await rag.index_answer(Document(id="empty", raw_text="   "))

    assert store.insert_calls == []


@pytest.mark.asyncio
async def test_index_prebuilt_chunks(rag, store):
    chunks = [
        DocumentChunk(
            id=f"doc-4_chunk_{i}",
            content=text,
            chunk_index=i,
            total_chunks=2,
            document_id="doc-4",
            metadata=ChunkMetadata(category="hr"),
        )
        for i, text in enumerate(["Holiday policy.", "Sick leave policy."])
    ]

    assert await rag.index_chunks(chunks) == 2
    assert await rag.index_chunks([]) == 0
    assert len(store.insert_calls) == 1


@pytest.mark.asyncio
async def test_search_scores_are_finite_similarities(rag, sample_document):
    await rag.index_answer(sample_document)

    results = await rag.search("sentence two")

    for result in results:
        assert math.isfinite(result.score)
        assert 0.0 <= result.score <= 1.0
        assert result.highlights is None


@pytest.mark.asyncio
async def test_search_keeps_backend_order(rag, store):
    await rag.index_answer(Document(id="a", raw_text="Revenue grew in the third quarter."))
    await rag.index_answer(Document(id="b", raw_text="Office plants need water weekly."))

    results = await rag.search("third quarter revenue", limit=2)

    assert [r.chunk.document_id for r in results] == ["a", "b"]
    assert results[0].score > results[1].score


@pytest.mark.asyncio
async def test_search_failure_propagates(rag, store):
    store.fail_on.add("query")

    with pytest.raises(SearchError) as exc_info:
        await rag.search("anything")

    assert str(exc_info.value).startswith("Failed to search:")


@pytest.mark.asyncio
async def test_search_rejects_non_positive_limit(rag):
    with pytest.raises(ValueError):
        await rag.search("anything", limit=0)


@pytest.mark.asyncio
async def test_remove_document(rag, store):
    await rag.index_answer(Document(id="keep", raw_text="Keep this one around."))
    await rag.index_answer(Document(id="drop", raw_text="Drop this one please."))

    assert await rag.remove_document("drop") == 1
    assert await rag.remove_document("missing") == 0

    remaining = {r["documentId"] for r in store.collections[rag.collection_name]}
    assert remaining == {"keep"}


@pytest.mark.asyncio
async def test_remove_failure_propagates(rag, store):
    store.fail_on.add("delete")

    with pytest.raises(RemovalError) as exc_info:
        await rag.remove_document("doc-1")

    assert str(exc_info.value).startswith("Failed to remove document:")


def test_chunk_from_record_defaults():
    chunk = DocumentChunk.from_record({"content": "text", "documentId": "d"})

    assert chunk.id == "d_chunk_0"
    assert chunk.chunk_index == 0
    assert chunk.total_chunks == 0
    assert chunk.metadata.created_at is None
