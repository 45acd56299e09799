"""Asyncio front end for any vector store."""

import asyncio
from typing import Any, Iterable, Optional

from ragstore.models import RagQuery, SearchResult
from ragstore.protocols import VectorStore


class AsyncVectorStore:
    """Runs a blocking VectorStore's operations in worker threads.

    Embedding and database calls block, so each call is pushed to
    ``asyncio.to_thread``. A timed-out or cancelled ``index_document``
    stops waiting but cannot leave a half-replaced file: embeddings are
    computed before the write transaction, and the transaction either
    commits whole or not at all.
    """

    def __init__(self, store: VectorStore):
        self.store = store

    async def index_document(
        self,
        source_file: str,
        content: str,
        metadata: Optional[dict[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Index a document, optionally bounded by `timeout` seconds.

        Raises:
            asyncio.TimeoutError: if the timeout elapses first
        """
        call = asyncio.to_thread(self.store.index_document, source_file, content, metadata)
        await asyncio.wait_for(call, timeout=timeout)

    async def search(self, query: RagQuery) -> list[SearchResult]:
        return await asyncio.to_thread(self.store.search, query)

    async def get_chunk_count(self) -> int:
        return await asyncio.to_thread(self.store.get_chunk_count)

    async def get_indexed_files(self) -> set[str]:
        return await asyncio.to_thread(self.store.get_indexed_files)

    async def remove_document(self, source_file: str) -> None:
        await asyncio.to_thread(self.store.remove_document, source_file)

    async def clear_index(self) -> None:
        await asyncio.to_thread(self.store.clear_index)

    async def batch_check_files_for_changes(self, file_paths: Iterable[str]) -> dict[str, bool]:
        return await asyncio.to_thread(self.store.batch_check_files_for_changes, list(file_paths))

    async def close(self) -> None:
        await asyncio.to_thread(self.store.close)
