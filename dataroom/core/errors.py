"""Domain errors raised by the RAG layer."""


class RagError(Exception):
    """Base class for errors surfaced to callers of the RAG layer."""

    prefix = "RAG operation failed"

    def __init__(self, cause: object):
        self.cause = cause
        super().__init__(f"{self.prefix}: {cause}")


class ConfigurationError(RagError):
    """Missing or invalid backend configuration."""

    def __init__(self, message: str):
        self.cause = None
        Exception.__init__(self, message)


class VectorStoreConnectionError(RagError):
    """Backend could not be reached."""

    def __init__(self, backend: str, cause: object):
        self.backend = backend
        self.cause = cause
        Exception.__init__(self, f"Failed to connect to {backend}: {cause}")


class CollectionCreationError(RagError):
    prefix = "Failed to create collection"


class IndexingError(RagError):
    prefix = "Failed to index answer"


class SearchError(RagError):
    prefix = "Failed to search"


class RemovalError(RagError):
    prefix = "Failed to remove document"


class AnalysisError(RagError):
    prefix = "Failed to analyze question"


class VectorStoreError(Exception):
    """Backend accepted the call but reported a failure (e.g. rejected objects)."""
