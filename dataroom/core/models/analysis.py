"""Question analysis domain models."""
from dataclasses import dataclass, field


@dataclass
class Question:
    """Question extracted from a document or entered by a user."""
    id: str
    content: str

    @classmethod
    def from_dict(cls, data: dict) -> "Question":
        return cls(id=str(data["id"]), content=data["content"])


@dataclass
class QuestionAnswer:
    """Passage of a document that answers a question."""
    content: str
    document_id: str

    def to_dict(self) -> dict:
        return {"content": self.content, "documentId": self.document_id}


@dataclass
class QuestionAnalysisResult:
    question_id: str
    answers: list[QuestionAnswer] = field(default_factory=list)

    @property
    def is_answered(self) -> bool:
        return bool(self.answers)

    def to_dict(self) -> dict:
        return {
            "questionId": self.question_id,
            "answers": [a.to_dict() for a in self.answers],
            "isAnswered": self.is_answered,
        }


@dataclass
class BulkAnalysisResult:
    results: list[QuestionAnalysisResult] = field(default_factory=list)

    @property
    def total_analyzed(self) -> int:
        return len(self.results)

    @property
    def answered_count(self) -> int:
        return sum(1 for r in self.results if r.is_answered)

    @property
    def unanswered_count(self) -> int:
        return self.total_analyzed - self.answered_count
