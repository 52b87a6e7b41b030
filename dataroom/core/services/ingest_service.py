"""Ingest service - file indexing into a project."""

import hashlib
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from ..errors import IndexingError
from ..models.document import Document
from .project_rag import ProjectRag

logger = logging.getLogger(__name__)


class IngestService:
    """Service for indexing files from disk into a project's collection."""

    def __init__(self, category: Optional[str] = None):
        """Initialize ingest service.

        Args:
            category: Category stamped on every ingested document.
        """
        self._category = category
        self._loader: Optional["CompositeLoader"] = None

    @property
    def loader(self):
        """Lazy load document loader."""
        if self._loader is None:
            from dataroom.infrastructure.document_loaders import CompositeLoader

            self._loader = CompositeLoader()
        return self._loader

    def _compute_hash(self, content: str) -> str:
        """Compute content hash."""
        return hashlib.md5(content.encode()).hexdigest()[:12]

    def _iter_files(self, path: Path) -> list[Path]:
        if path.is_file():
            return [path]
        return sorted(p for p in path.iterdir() if p.is_file())

    def load_document(self, file_path: Path) -> Optional[Document]:
        """Read a file into a Document; None if unsupported or empty."""
        if not self.loader.supports(file_path):
            return None

        content = self.loader.load(file_path)
        if not content or not content.strip():
            return None

        return Document(
            id=self._compute_hash(content),
            raw_text=content,
            created_at=datetime.now(timezone.utc),
            category=self._category,
        )

    async def run(self, rag: ProjectRag, path: str | Path) -> int:
        """Index a file or every supported file in a directory.

        Args:
            rag: Project to index into.
            path: File or directory.

        Returns:
            Number of chunks indexed.
        """
        path = Path(path)
        if not path.exists():
            logger.error(f"Docs path not found: {path}")
            return 0

        total_indexed = 0
        indexed_files = 0

        for file_path in self._iter_files(path):
            document = self.load_document(file_path)
            if document is None:
                logger.debug(f"Skip: {file_path.name}")
                continue

            try:
                chunks = await rag.index_answer(document)
            except IndexingError as e:
                logger.error(f"Failed to index {file_path.name}: {e}")
                continue

            total_indexed += len(chunks)
            indexed_files += 1
            logger.info(
                f"Indexed {file_path.name} as {document.id}: {len(chunks)} chunks"
            )

        logger.info(
            f"Indexing complete: {total_indexed} chunks from {indexed_files} files"
        )
        return total_indexed
