"""Registry of connected project facades."""

import asyncio
import logging
from typing import Awaitable, Callable

from .project_rag import ProjectRag

logger = logging.getLogger(__name__)

RagFactory = Callable[[str], Awaitable[ProjectRag]]


class RagRegistry:
    """Get-or-create cache of ProjectRag instances keyed by project id.

    Concurrent callers for the same project share one in-flight connect,
    so the collection is provisioned at most once per key. A failed
    connect is not cached and the next call tries again.
    """

    def __init__(self, factory: RagFactory):
        """Initialize registry.

        Args:
            factory: Coroutine function connecting a project id.
        """
        self._factory = factory
        self._rags: dict[str, ProjectRag] = {}
        self._pending: dict[str, asyncio.Future] = {}

    async def get_or_create(self, project_id: str) -> ProjectRag:
        rag = self._rags.get(project_id)
        if rag is not None:
            return rag

        future = self._pending.get(project_id)
        if future is None:
            future = asyncio.ensure_future(self._factory(project_id))
            self._pending[project_id] = future
            logger.info(f"Connecting project: {project_id}")

        try:
            rag = await asyncio.shield(future)
        finally:
            if future.done() and self._pending.get(project_id) is future:
                del self._pending[project_id]

        return self._rags.setdefault(project_id, rag)

    def get(self, project_id: str) -> ProjectRag | None:
        return self._rags.get(project_id)

    def active_projects(self) -> list[str]:
        return list(self._rags)

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._rags

    def __len__(self) -> int:
        return len(self._rags)
