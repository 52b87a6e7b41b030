"""Core business services."""
from .project_rag import ProjectRag, connect
from .registry import RagRegistry
from .question_analyzer import QuestionAnalyzerService
from .ingest_service import IngestService

__all__ = [
    "ProjectRag",
    "connect",
    "RagRegistry",
    "QuestionAnalyzerService",
    "IngestService",
]
