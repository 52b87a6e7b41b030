
import json
import logging

from openai import AsyncOpenAI

from dataroom.core.models.analysis import QuestionAnswer
from dataroom.core.models.document import SearchResult

logger = logging.getLogger(__name__)

EXTRACT_SYSTEM_PROMPT = """You are an expert at analyzing whether document chunks contain answers to specific questions.

Your task is to analyze the provided question and document chunks to determine which chunks (if any) contain answers to the question.

For each chunk that contains an answer, extract the relevant content that answers the question.

Return your response as a JSON array of objects with the following structure:
[
  {
    "content": "The specific content from the document that answers the question",
    "documentId": "The document ID from the search result"
  }
]

If no chunks contain answers to the question, return an empty array [].

Guidelines:
- Only include chunks that directly answer the question or provide relevant information
- Extract the most relevant portion of the chunk content
- Be precise and concise in your extracted content
- If a chunk only partially answers the question, still include it but extract only the relevant part"""

EXTRACT_USER_PROMPT = """Question: "{question}"

Document chunks to analyze:
{chunks}

Please analyze these chunks and return the JSON array of answers as specified."""

CHUNK_TEMPLATE = """Chunk {index}:
Document ID: {document_id}
Content: {content}
Relevance Score: {score:.3f}
"""


def _strip_code_fence(text: str) -> str:
    text = text.strip()
    if text.startswith("```"):
        text = text.split("\n", 1)[1] if "\n" in text else ""
        text = text.rsplit("```", 1)[0]
    return text.strip()


def parse_answers(text: str, known_documents: set[str]) -> list[QuestionAnswer]:
    """Parse the model's JSON array; unknown document ids are dropped."""
    try:
        data = json.loads(_strip_code_fence(text))
    except json.JSONDecodeError:
        logger.warning(f"[extract] Unparsable model output: '{text[:80]}...'")
        return []

    if not isinstance(data, list):
        return []

    answers = []
    for item in data:
        if not isinstance(item, dict):
            continue
        content = str(item.get("content") or "").strip()
        document_id = str(item.get("documentId") or "")
        if content and document_id in known_documents:
            answers.append(QuestionAnswer(content=content, document_id=document_id))
    return answers


class OpenAIClient:
    """LLM client for OpenAI chat completions."""

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4o-mini",
        max_tokens: int = 2000,
        temperature: float = 0.1,
        base_url: str | None = None,
    ):
        """Initialize OpenAI client.

        Args:
            api_key: OpenAI API key.
            model: Model name.
            max_tokens: Max response tokens.
            temperature: Sampling temperature.
            base_url: Alternative OpenAI-compatible endpoint.
        """
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url)
        self._model = model
        self._max_tokens = max_tokens
        self._temperature = temperature

    async def extract_answers(
        self,
        question: str,
        results: list[SearchResult],
    ) -> list[QuestionAnswer]:
        """Ask the model which chunks answer the question.

        Args:
            question: Question text.
            results: Retrieved chunks.

        Returns:
            Answers whose document id appears in the results.
        """
        if not results:
            return []

        chunks = "\n".join(
            CHUNK_TEMPLATE.format(
                index=i,
                document_id=r.chunk.document_id,
                content=r.chunk.content,
                score=r.score,
            )
            for i, r in enumerate(results, 1)
        )

        response = await self._client.chat.completions.create(
            model=self._model,
            messages=[
                {"role": "system", "content": EXTRACT_SYSTEM_PROMPT},
                {
                    "role": "user",
                    "content": EXTRACT_USER_PROMPT.format(question=question, chunks=chunks),
                },
            ],
            max_tokens=self._max_tokens,
            temperature=self._temperature,
        )

        text = response.choices[0].message.content or ""
        answers = parse_answers(text, {r.chunk.document_id for r in results})
        logger.info(
            f"[extract] {len(answers)} answers from {len(results)} chunks for: "
            f"'{question[:60]}...'"
        )
        return answers
