import logging
from pathlib import Path
from typing import Optional

from .pdf_loader import PDFLoader
from .docx_loader import DocxLoader
from .text_loader import TextLoader

logger = logging.getLogger(__name__)


class CompositeLoader:
    """Dispatches a file to the first loader that supports its extension."""

    def __init__(self, loaders: Optional[list] = None):
        self._loaders = loaders or [
            PDFLoader(),
            DocxLoader(),
            TextLoader(),
        ]

    @property
    def extensions(self) -> set[str]:
        return set().union(*(loader.EXTENSIONS for loader in self._loaders))

    def supports(self, file_path: Path) -> bool:
        return any(loader.supports(file_path) for loader in self._loaders)

    def load(self, file_path: Path) -> Optional[str]:
        """Extract text; None if unsupported or unreadable."""
        for loader in self._loaders:
            if loader.supports(file_path):
                try:
                    return loader.load(file_path)
                except Exception as e:
                    logger.error(f"Failed to load {file_path}: {e}")
                    return None
        return None
