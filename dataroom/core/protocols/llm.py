"""LLM protocol for dependency injection."""
from typing import Protocol, runtime_checkable

from ..models.analysis import QuestionAnswer
from ..models.document import SearchResult


@runtime_checkable
class LLMProtocol(Protocol):
    """Protocol for LLM client."""

    async def extract_answers(
        self,
        question: str,
        results: list[SearchResult],
    ) -> list[QuestionAnswer]:
        """Decide which retrieved chunks answer the question.

        Args:
            question: Question text.
            results: Retrieved chunks, best match first.

        Returns:
            Relevant passages; empty if nothing answers the question.
        """
        ...
