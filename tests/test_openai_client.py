"""Tests for the OpenAI answer extractor."""

from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest

from dataroom.core.models.document import DocumentChunk, SearchResult
from dataroom.infrastructure.llm.openai_client import OpenAIClient, parse_answers


def _result(document_id: str, content: str, score: float = 0.9) -> SearchResult:
    chunk = DocumentChunk(
        id=DocumentChunk.make_id(document_id, 0),
        content=content,
        chunk_index=0,
        total_chunks=1,
        document_id=document_id,
    )
    return SearchResult(chunk=chunk, score=score)


def _completion(text: str):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=text))])


def test_parse_answers_filters_unknown_documents():
    text = '[{"content": "12 million", "documentId": "fin"}, {"content": "x", "documentId": "nope"}]'

    answers = parse_answers(text, {"fin"})

    assert [(a.content, a.document_id) for a in answers] == [("12 million", "fin")]


def test_parse_answers_accepts_code_fence():
    text = '```json\n[{"content": "two shifts", "documentId": "ops"}]\n```'

    assert parse_answers(text, {"ops"})[0].content == "two shifts"


@pytest.mark.parametrize("text", ["not json", "{}", "[1, 2]", '[{"content": ""}]'])
def test_parse_answers_invalid_output_yields_nothing(text):
    assert parse_answers(text, {"fin"}) == []


@pytest.mark.asyncio
async def test_extract_answers_calls_model():
    client = OpenAIClient(api_key="sk-test", model="gpt-4o-mini")
    create = AsyncMock(
        return_value=_completion('[{"content": "12 million euros", "documentId": "fin"}]')
    )
    client._client.chat.completions.create = create

    answers = await client.extract_answers(
        "What was the revenue?", [_result("fin", "Revenue reached 12 million euros.")]
    )

    assert answers[0].document_id == "fin"
    kwargs = create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert "What was the revenue?" in kwargs["messages"][1]["content"]
    assert "Document ID: fin" in kwargs["messages"][1]["content"]


@pytest.mark.asyncio
async def test_extract_answers_without_results_skips_model():
    client = OpenAIClient(api_key="sk-test")
    client._client.chat.completions.create = AsyncMock()

    assert await client.extract_answers("q", []) == []
    client._client.chat.completions.create.assert_not_called()
