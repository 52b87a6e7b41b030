"""
Dataroom RAG - HTTP API
-----------------------
FastAPI server fronting the per-project RAG facades.

Endpoints:
  GET  /                      -> service info
  GET  /api/health            -> status and connected projects
  POST /api/index             -> index a document or pre-built chunks
  POST /api/search            -> semantic search in a project
  POST /api/documents/delete  -> remove a document's chunks
  POST /api/analyze           -> match a question to answering passages

Run from the project root:
    uvicorn dataroom.presentation.api:create_app --factory --port 3001
"""
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from dataroom.config.settings import Settings, settings as default_settings
from dataroom.core.errors import RagError
from dataroom.core.models.analysis import Question
from dataroom.core.models.document import Document, DocumentChunk
from dataroom.core.protocols.vector_store import VectorStoreProtocol
from dataroom.core.services.question_analyzer import QuestionAnalyzerService
from dataroom.core.services.registry import RagRegistry

logger = logging.getLogger(__name__)

APP_NAME = "Dataroom RAG"
APP_VERSION = "1.0.0"


class IndexRequest(BaseModel):
    projectId: Optional[str] = None
    chunks: Optional[list[dict[str, Any]]] = None
    document: Optional[dict[str, Any]] = None


class SearchRequest(BaseModel):
    projectId: Optional[str] = None
    query: Optional[str] = None
    limit: Optional[int] = None


class RemoveDocumentRequest(BaseModel):
    projectId: Optional[str] = None
    documentId: Optional[str] = None


class AnalyzeRequest(BaseModel):
    projectId: Optional[str] = None
    question: Optional[dict[str, Any]] = None
    limit: Optional[int] = None


def _ok(data: dict) -> dict:
    return {"success": True, "data": data}


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "error": message}
    )


def create_app(
    registry: Optional[RagRegistry] = None,
    analyzer: Optional[QuestionAnalyzerService] = None,
    vector_store: Optional[VectorStoreProtocol] = None,
    settings: Settings = default_settings,
) -> FastAPI:
    """Build the API app.

    Args:
        registry: Project facade registry; wired from the container if None.
        analyzer: Question analyzer; resolved lazily from the container if None.
        vector_store: Store closed on shutdown.
        settings: Application settings.
    """
    container = None
    if registry is None:
        from dataroom.container import configure_container

        container = configure_container(settings)
        registry = container.resolve(RagRegistry)
        vector_store = vector_store or container.resolve(VectorStoreProtocol)

    def get_analyzer() -> Optional[QuestionAnalyzerService]:
        if analyzer is None and container is not None:
            return container.resolve(QuestionAnalyzerService)
        return analyzer

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(f"[Server] {APP_NAME} {APP_VERSION} starting")
        yield
        if vector_store is not None:
            await vector_store.close()
        logger.info("[Server] Shut down")

    app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)
    app.state.registry = registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RagError)
    async def rag_error_handler(request: Request, exc: RagError):
        logger.error(f"[Server] {request.url.path} failed: {exc}")
        return _error(500, str(exc))

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        error = exc.errors()[0]
        field = ".".join(str(part) for part in error["loc"] if part != "body")
        return _error(400, f"Invalid {field or 'request'}: {error['msg']}")

    @app.get("/")
    async def root():
        return {
            "message": f"{APP_NAME} Server",
            "version": APP_VERSION,
            "endpoints": {
                "POST /api/index": "Index documents for a project",
                "POST /api/search": "Search indexed documents",
                "POST /api/documents/delete": "Remove an indexed document",
                "POST /api/analyze": "Find answers to a question",
                "GET /api/health": "Health check",
            },
        }

    @app.get("/api/health")
    async def health():
        return {
            "success": True,
            "status": "healthy",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "activeProjects": registry.active_projects(),
        }

    @app.post("/api/index")
    async def index(body: IndexRequest):
        if not body.projectId:
            return _error(400, "Project ID is required")
        if body.chunks is None and body.document is None:
            return _error(400, "Document with id and rawText, or chunks, is required")

        try:
            chunks = [DocumentChunk.from_dict(c) for c in body.chunks or []]
            document = Document.from_dict(body.document) if body.document else None
        except (KeyError, TypeError, ValueError) as e:
            return _error(400, f"Invalid index payload: {e}")

        rag = await registry.get_or_create(body.projectId)
        if document is not None:
            chunks_created = len(await rag.index_answer(document))
        else:
            chunks_created = await rag.index_chunks(chunks)

        return _ok(
            {
                "chunksCreated": chunks_created,
                "message": "Document indexed successfully",
            }
        )

    @app.post("/api/search")
    async def search(body: SearchRequest):
        if not body.projectId:
            return _error(400, "Project ID is required")
        if not body.query:
            return _error(400, "Search query is required")

        limit = body.limit if body.limit is not None else settings.search_limit
        if limit < 1:
            return _error(400, "Limit must be at least 1")

        rag = await registry.get_or_create(body.projectId)
        results = await rag.search(body.query, limit)

        return _ok(
            {
                "query": body.query,
                "results": [r.to_dict() for r in results],
                "totalResults": len(results),
            }
        )

    @app.post("/api/documents/delete")
    async def remove_document(body: RemoveDocumentRequest):
        if not body.projectId:
            return _error(400, "Project ID is required")
        if not body.documentId:
            return _error(400, "Document ID is required")

        rag = await registry.get_or_create(body.projectId)
        deleted = await rag.remove_document(body.documentId)

        return _ok({"documentId": body.documentId, "chunksDeleted": deleted})

    @app.post("/api/analyze")
    async def analyze(body: AnalyzeRequest):
        if not body.projectId:
            return _error(400, "Project ID is required")
        if (
            not body.question
            or not body.question.get("id")
            or not body.question.get("content")
        ):
            return _error(400, "Question with id and content is required")
        if body.limit is not None and body.limit < 1:
            return _error(400, "Limit must be at least 1")

        question_analyzer = get_analyzer()
        if question_analyzer is None:
            return _error(503, "Question analysis is not configured")

        question = Question.from_dict(body.question)
        rag = await registry.get_or_create(body.projectId)
        result = await question_analyzer.analyze_question(question, rag, body.limit)

        return _ok(result.to_dict())

    return app
