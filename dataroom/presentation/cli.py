
import asyncio
import logging
import sys

from dataroom.config.settings import settings
from dataroom.container import configure_container, container
from dataroom.core.errors import RagError
from dataroom.core.protocols.vector_store import VectorStoreProtocol
from dataroom.core.services.ingest_service import IngestService
from dataroom.core.services.registry import RagRegistry

logging.basicConfig(level=settings.log_level, format="%(message)s")
logger = logging.getLogger(__name__)

USAGE = """Usage: python -m dataroom.presentation.cli <command>
Commands:
  serve                              run the HTTP API
  ingest <project_id> <path>         index a file or directory
  search <project_id> <query> [n]    search a project"""


async def _ingest(project_id: str, path: str) -> int:
    registry = container.resolve(RagRegistry)
    try:
        rag = await registry.get_or_create(project_id)
        return await container.resolve(IngestService).run(rag, path)
    finally:
        await container.resolve(VectorStoreProtocol).close()


async def _search(project_id: str, query: str, limit: int) -> None:
    registry = container.resolve(RagRegistry)
    try:
        rag = await registry.get_or_create(project_id)
        results = await rag.search(query, limit)
    finally:
        await container.resolve(VectorStoreProtocol).close()

    if not results:
        logger.info("No results")
    for i, r in enumerate(results, 1):
        logger.info(
            f"[{i}] {r.score:.3f} {r.chunk.document_id} "
            f"({r.chunk.chunk_index + 1}/{r.chunk.total_chunks})\n{r.chunk.content}\n"
        )


def _parse_limit(value: str) -> int | None:
    try:
        limit = int(value)
    except ValueError:
        return None
    return limit if limit >= 1 else None


def cmd_serve():
    """Serve command - run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "dataroom.presentation.api:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


def cmd_ingest(project_id: str, path: str):
    """Ingest command - index documents only."""
    configure_container(settings)
    count = asyncio.run(_ingest(project_id, path))
    logger.info(f"Indexed {count} chunks")


def cmd_search(project_id: str, query: str, limit: int):
    configure_container(settings)
    asyncio.run(_search(project_id, query, limit))


def main():
    """CLI entry point."""
    args = sys.argv[1:]
    if not args:
        print(USAGE)
        sys.exit(1)

    command = args[0]

    try:
        if command == "serve":
            cmd_serve()
        elif command == "ingest" and len(args) == 3:
            cmd_ingest(args[1], args[2])
        elif command == "search" and len(args) in (3, 4):
            limit = _parse_limit(args[3]) if len(args) == 4 else settings.search_limit
            if limit is None:
                print(f"Limit must be a positive integer: {args[3]}")
                print(USAGE)
                sys.exit(1)
            cmd_search(args[1], args[2], limit)
        else:
            print(f"Unknown command or arguments: {' '.join(args)}")
            print(USAGE)
            sys.exit(1)
    except RagError as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
