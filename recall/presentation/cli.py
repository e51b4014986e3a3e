import argparse
import asyncio
import json
import logging
import sys

from recall.config.settings import settings
from recall.container import configure_container, container
from recall.core.exceptions import RecallError
from recall.core.protocols.corpus import CorpusLoaderProtocol
from recall.core.services.chunk_service import ChunkService
from recall.core.services.semantic_service import SemanticScorer
from recall.core.services.tool_service import RetrievalTools

logger = logging.getLogger(__name__)


def _print(payload: dict) -> None:
    print(json.dumps(payload, indent=2, ensure_ascii=False))


async def cmd_tool(name: str, arguments: dict) -> int:
    """Run one retrieval tool and print its result."""
    tools = container.resolve(RetrievalTools)
    result = await tools.call(name, arguments)
    _print(result.model_dump(exclude_none=True))
    return 0 if result.ok else 1


async def cmd_warm_cache() -> int:
    """Warm-cache command - embed every chunk of the corpus."""
    documents = container.resolve(CorpusLoaderProtocol).load_documents()
    chunks = container.resolve(ChunkService).chunk_all(documents)
    count = await container.resolve(SemanticScorer).ensure_embeddings(chunks)
    logger.info(f"Embeddings cached for {count} chunks")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recall", description="Hybrid search over a personal email or notes corpus"
    )
    parser.add_argument(
        "--no-cache", action="store_true", help="Keep embeddings in memory only"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    search = sub.add_parser("search", help="BM25 + embedding search with reranking")
    search.add_argument("-k", "--keyword", action="append", dest="keywords")
    search.add_argument("-q", "--query", dest="search_query")
    search.add_argument("-n", "--limit", type=int, default=settings.search_limit)

    filt = sub.add_parser("filter", help="Exact predicate filtering")
    filt.add_argument("--from", dest="sender")
    filt.add_argument("--to", dest="recipient")
    filt.add_argument("--subject")
    filt.add_argument("--contains")
    filt.add_argument("--before")
    filt.add_argument("--after")
    filt.add_argument("-n", "--limit", type=int, default=settings.search_limit)

    get = sub.add_parser("get", help="Fetch full items by id")
    get.add_argument("ids", nargs="+")
    get.add_argument("--thread", action="store_true", dest="include_thread")

    sub.add_parser("warm-cache", help="Precompute embeddings for the whole corpus")
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format="%(message)s", stream=sys.stderr)

    if args.no_cache:
        settings.embedding_cache_enabled = False
    configure_container(settings)

    try:
        if args.command == "warm-cache":
            return asyncio.run(cmd_warm_cache())

        arguments = {
            key: value
            for key, value in vars(args).items()
            if key not in ("command", "no_cache") and value is not None
        }
        tool_name = "get_by_ids" if args.command == "get" else args.command
        return asyncio.run(cmd_tool(tool_name, arguments))
    except RecallError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
