"""Protocol for vector store implementations."""

from typing import Any, Iterable, Optional, Protocol, runtime_checkable

from ragstore.models import DocumentChunk, RagQuery, SearchResult


@runtime_checkable
class VectorStore(Protocol):
    """Public contract shared by every vector store variant.

    Implementations are interchangeable; pick one with
    ``ragstore.config.create_vector_store``.
    """

    def index_document(
        self,
        source_file: str,
        content: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Chunk, embed and persist a document, replacing any older version."""
        ...

    def search(self, query: RagQuery) -> list[SearchResult]:
        """Return the chunks most similar to the query, best first."""
        ...

    def get_chunk_count(self) -> int:
        ...

    def get_indexed_files(self) -> set[str]:
        ...

    def get_file_chunks(self, source_file: str) -> list[DocumentChunk]:
        ...

    def remove_document(self, source_file: str) -> None:
        ...

    def clear_index(self) -> None:
        ...

    def batch_check_files_for_changes(self, file_paths: Iterable[str]) -> dict[str, bool]:
        """Report which files would be reindexed, without indexing them."""
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "VectorStore":
        ...

    def __exit__(self, *exc_info) -> None:
        ...
