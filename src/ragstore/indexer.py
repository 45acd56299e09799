"""Bulk indexing of a folder or zip archive into a vector store."""

import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Optional

from ragstore.errors import RagStoreError
from ragstore.ingesters import get_ingester
from ragstore.models import Document, FailedFile, IndexingResult, SkippedFile
from ragstore.protocols import Ingester, VectorStore

logger = logging.getLogger(__name__)


def _changed_files(store: VectorStore, documents: list[Document]) -> dict[str, bool]:
    """Ask the store once which on-disk documents need reindexing."""
    on_disk = [doc.info.path for doc in documents if Path(doc.info.path).is_file()]
    if not on_disk:
        return {}
    try:
        return store.batch_check_files_for_changes(on_disk)
    except OSError as exc:
        # index_document repeats the check per file, so nothing is lost
        logger.warning(f"Batch change check failed, checking files one by one: {exc}")
        return {}


def index_source(
    store: VectorStore,
    source: Path | str,
    ingester: Optional[Ingester] = None,
    prune: bool = False,
) -> IndexingResult:
    """Index every text document of a source, reprocessing only what changed.

    Args:
        store: Vector store to index into
        source: Folder or zip file
        ingester: Ingester to use; looked up from the source if None
        prune: Remove indexed documents of this source that no longer exist

    Returns:
        IndexingResult listing indexed, unchanged, skipped, failed and
        removed documents

    Raises:
        ValueError: if no ingester can handle the source
    """
    source_path = Path(source)
    ingester = ingester or get_ingester(source_path)
    if ingester is None:
        raise ValueError(f"Cannot process {source}: supported inputs are folders and .zip files")

    result = IndexingResult()
    documents: list[Document] = []
    for doc in ingester.ingest(source_path):
        if doc.content is None:
            result.skipped_files.append(
                SkippedFile(doc.info.path, "binary file", doc.info.extension, doc.info.size_bytes)
            )
        elif not doc.content.strip():
            result.skipped_files.append(
                SkippedFile(doc.info.path, "empty file", doc.info.extension, doc.info.size_bytes)
            )
        else:
            documents.append(doc)

    changed = _changed_files(store, documents)
    logger.info(f"Indexing {len(documents)} documents from {source_path} ({ingester.source_type})")

    for doc in documents:
        path = doc.info.path
        if changed.get(path) is False:
            result.unchanged_files.append(path)
            continue

        try:
            store.index_document(
                path,
                doc.content,
                {
                    "file_size": doc.info.size_bytes,
                    "source_type": ingester.source_type,
                },
            )
        except (RagStoreError, sqlite3.Error, OSError) as exc:
            logger.error(f"Failed to index {path}: {exc}")
            result.failed_files.append(FailedFile(path, str(exc)))
            continue
        result.indexed_files.append(path)

    if prune:
        result.removed_files = _prune(store, source_path, {doc.info.path for doc in documents})

    result.completed_at = datetime.now()
    logger.info(
        f"Indexed {len(result.indexed_files)}, unchanged {len(result.unchanged_files)}, "
        f"skipped {len(result.skipped_files)}, failed {len(result.failed_files)} "
        f"in {result.duration:.1f}s"
    )
    return result


def _prune(store: VectorStore, source_path: Path, present: set[str]) -> list[str]:
    """Remove documents indexed under this source that were not ingested now."""
    root = str(source_path.resolve())
    prefixes = (root + "/", root + os.sep)
    stale = sorted(
        path
        for path in store.get_indexed_files()
        if path.startswith(prefixes) and path not in present
    )
    for path in stale:
        store.remove_document(path)
    return stale
