"""Question analysis - match questions to evidence passages."""

import logging

from ..errors import AnalysisError
from ..models.analysis import (
    BulkAnalysisResult,
    Question,
    QuestionAnalysisResult,
)
from ..protocols.llm import LLMProtocol
from .project_rag import ProjectRag

logger = logging.getLogger(__name__)


class QuestionAnalyzerService:
    """Resolves questions to answering chunks of a project's documents."""

    def __init__(self, llm: LLMProtocol, limit: int = 10):
        """Initialize analyzer.

        Args:
            llm: Model deciding which chunks answer a question.
            limit: Number of chunks retrieved per question.
        """
        self._llm = llm
        self._limit = limit

    async def analyze_question(
        self, question: Question, rag: ProjectRag, limit: int | None = None
    ) -> QuestionAnalysisResult:
        """Search for evidence and extract answers.

        Raises:
            AnalysisError: Search or answer extraction failed.
        """
        try:
            results = await rag.search(question.content, limit or self._limit)
            if not results:
                logger.info(f"No evidence found for question {question.id}")
                return QuestionAnalysisResult(question_id=question.id)

            answers = await self._llm.extract_answers(question.content, results)
        except Exception as e:
            logger.error(f"Error analyzing question {question.id}: {e}")
            raise AnalysisError(e) from e

        return QuestionAnalysisResult(question_id=question.id, answers=answers)

    async def analyze_questions(
        self, questions: list[Question], rag: ProjectRag
    ) -> BulkAnalysisResult:
        """Analyze questions in order; a failed question counts as unanswered."""
        bulk = BulkAnalysisResult()

        for question in questions:
            try:
                result = await self.analyze_question(question, rag)
            except AnalysisError as e:
                logger.warning(f"Question {question.id} left unanswered: {e}")
                result = QuestionAnalysisResult(question_id=question.id)
            bulk.results.append(result)

        logger.info(
            f"Analyzed {bulk.total_analyzed} questions: "
            f"{bulk.answered_count} answered, {bulk.unanswered_count} unanswered"
        )
        return bulk
