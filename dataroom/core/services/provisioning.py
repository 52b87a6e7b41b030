"""Per-project collection naming and provisioning."""

import logging
import re

from ..errors import CollectionCreationError, RagError
from ..models.collection import CollectionSchema, PropertySpec, PropertyType
from ..protocols.vector_store import VectorStoreProtocol

logger = logging.getLogger(__name__)

ANSWER_DOC_COLLECTION_SUFFIX = "AnswerDoc"

ANSWER_DOC_SCHEMA = CollectionSchema(
    properties=(
        PropertySpec("chunkId", PropertyType.TEXT),
        PropertySpec("content", PropertyType.TEXT),
        PropertySpec("answerId", PropertyType.TEXT),
        PropertySpec("questionId", PropertyType.TEXT),
        PropertySpec("chunkIndex", PropertyType.INT),
        PropertySpec("totalChunks", PropertyType.INT),
        PropertySpec("createdAt", PropertyType.TEXT),
        PropertySpec("category", PropertyType.TEXT),
        PropertySpec("documentId", PropertyType.TEXT),
    )
)

_UNSAFE_CHARS_RE = re.compile(r"[^A-Za-z0-9_]")


def to_collection_name(
    project_id: str, suffix: str = ANSWER_DOC_COLLECTION_SUFFIX
) -> str:
    """Backend-safe collection name: ``{suffix}_{project_id}`` sanitized.

    Weaviate class names must start with a letter; project ids are often
    timestamp-prefixed, so the suffix leads. A name still starting with a
    non-letter gets a ``C`` prefix.
    """
    name = _UNSAFE_CHARS_RE.sub("_", f"{suffix}_{project_id}")
    if not name[:1].isalpha():
        name = f"C{name}"
    return name


async def maybe_create_collection(
    vector_store: VectorStoreProtocol,
    name: str,
    schema: CollectionSchema = ANSWER_DOC_SCHEMA,
) -> bool:
    """Ensure collection exists.

    Returns:
        True if the collection was created by this call.

    Raises:
        CollectionCreationError: Existence check or creation failed.
    """
    try:
        created = await vector_store.ensure_collection(name, schema)
    except RagError:
        raise
    except Exception as e:
        logger.error(f"Error creating collection {name}: {e}")
        raise CollectionCreationError(e) from e

    if created:
        logger.info(f"Created collection: {name}")
    return created
