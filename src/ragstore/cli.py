"""CLI entry point for ragstore."""

import argparse
import logging
import sys
from pathlib import Path

from ragstore.config import StoreSettings, create_vector_store
from ragstore.indexer import index_source
from ragstore.models import RagQuery
from ragstore.protocols import VectorStore

logger = logging.getLogger(__name__)


def index(store: VectorStore, source: str, prune: bool = False) -> int:
    """Index a folder or zip file, reprocessing only changed documents.

    Returns:
        Process exit code (1 if any document failed)
    """
    source_path = Path(source)
    if not source_path.exists():
        logger.error(f"Source not found: {source}")
        return 1

    try:
        result = index_source(store, source_path, prune=prune)
    except ValueError as exc:
        logger.error(str(exc))
        return 1

    for failed in result.failed_files:
        logger.error(f"  failed: {failed.file_path}: {failed.error}")
    logger.info("")
    logger.info(
        f"Indexed {len(result.indexed_files)} files, "
        f"{len(result.unchanged_files)} unchanged, "
        f"{len(result.skipped_files)} skipped, "
        f"{len(result.removed_files)} removed -> {store.get_chunk_count()} chunks"
    )
    return 1 if result.failed_files else 0


def search(
    store: VectorStore,
    query: str,
    top_k: int = 5,
    min_similarity: float = 0.0,
    filters: list[str] | None = None,
) -> int:
    results = store.search(
        RagQuery(query=query, top_k=top_k, min_similarity=min_similarity, file_filters=filters or [])
    )
    if not results:
        print(f"No results found for: {query}")
        return 0

    for i, r in enumerate(results, 1):
        # Truncate long text snippets
        text = r.chunk.content[:200].replace("\n", " ")
        if len(r.chunk.content) > 200:
            text += "..."
        print(f"{i}. [{r.similarity:.3f}] {r.chunk.source_file} #{r.chunk.chunk_index}")
        print(f"   {text}")
        print("")
    return 0


def info(store: VectorStore, settings: StoreSettings) -> int:
    files = store.get_indexed_files()
    print(f"Store: {settings.db_path} ({settings.store_type})")
    db_path = Path(settings.db_path)
    if settings.store_type != "memory" and db_path.exists():
        print(f"  Size: {db_path.stat().st_size / 1024:.1f} KB")
    chunk_store = getattr(store, "chunk_store", None)
    if chunk_store is not None:
        print(f"  Embedding model: {chunk_store.get_info('embedding_model') or 'unknown'}")
    print(f"  Files: {len(files)}")
    print(f"  Chunks: {store.get_chunk_count()}")
    return 0


def files(store: VectorStore) -> int:
    for path in sorted(store.get_indexed_files()):
        print(path)
    return 0


def check(store: VectorStore, paths: list[str]) -> int:
    """Print which files would be reindexed."""
    try:
        results = store.batch_check_files_for_changes(paths)
    except OSError as exc:
        logger.error(f"Cannot check files: {exc}")
        return 1
    for path, changed in results.items():
        print(f"{'changed' if changed else 'unchanged':<10} {path}")
    return 0


def clear(store: VectorStore) -> int:
    store.clear_index()
    logger.info("Index cleared")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ragstore",
        description="ragstore - incremental document vector store",
    )
    parser.add_argument("--db", help="Path to the index database (default: ragstore.db)")
    parser.add_argument(
        "--store-type",
        choices=["memory", "sqlite", "optimized"],
        help="Vector store variant (default: optimized)",
    )
    parser.add_argument(
        "--embedder",
        choices=["sentence-transformers", "hash"],
        help="Embedding provider (default: sentence-transformers)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    index_parser = subparsers.add_parser("index", help="Index a folder or zip file")
    index_parser.add_argument("source", help="Input folder or zip file path")
    index_parser.add_argument(
        "--prune",
        action="store_true",
        help="Remove indexed files of this source that no longer exist",
    )

    search_parser = subparsers.add_parser("search", help="Semantic search across the index")
    search_parser.add_argument("query", help="Natural language query")
    search_parser.add_argument("-k", "--top-k", type=int, default=5, help="Maximum results (default: 5)")
    search_parser.add_argument(
        "--min-similarity", type=float, default=0.0, help="Minimum similarity (default: 0.0)"
    )
    search_parser.add_argument(
        "-f", "--filter", action="append", default=[], help="Only files whose path contains this"
    )

    subparsers.add_parser("info", help="Show information about the index")
    subparsers.add_parser("files", help="List indexed files")

    check_parser = subparsers.add_parser("check", help="Report which files changed since indexing")
    check_parser.add_argument("paths", nargs="+", help="Files to check")

    subparsers.add_parser("clear", help="Remove every chunk from the index")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
    )

    try:
        settings = StoreSettings.from_env(
            db_path=args.db,
            store_type=args.store_type,
            embedding_provider=args.embedder,
        )
    except ValueError as exc:
        logger.error(f"Invalid configuration: {exc}")
        sys.exit(2)

    with create_vector_store(settings) as store:
        if args.command == "index":
            code = index(store, args.source, args.prune)
        elif args.command == "search":
            code = search(store, args.query, args.top_k, args.min_similarity, args.filter)
        elif args.command == "info":
            code = info(store, settings)
        elif args.command == "files":
            code = files(store)
        elif args.command == "check":
            code = check(store, args.paths)
        else:
            code = clear(store)

    sys.exit(code)


if __name__ == "__main__":
    main()
