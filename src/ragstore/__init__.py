"""ragstore - document vector store with incremental indexing."""

from ragstore.config import StoreSettings, create_vector_store
from ragstore.errors import (
    DimensionMismatchError,
    EmbeddingError,
    RagStoreError,
    StoreClosedError,
)
from ragstore.models import DocumentChunk, FileMetadata, RagQuery, SearchResult
from ragstore.vectorstores import AsyncVectorStore, InMemoryVectorStore, SqliteVectorStore

__version__ = "0.1.0"

__all__ = [
    "StoreSettings",
    "create_vector_store",
    "InMemoryVectorStore",
    "SqliteVectorStore",
    "AsyncVectorStore",
    "DocumentChunk",
    "FileMetadata",
    "RagQuery",
    "SearchResult",
    "RagStoreError",
    "EmbeddingError",
    "StoreClosedError",
    "DimensionMismatchError",
]
