"""Data models for ragstore."""

from ragstore.models.document import (
    Document,
    DocumentChunk,
    DocumentInfo,
    FileMetadata,
    RagQuery,
    SearchResult,
    utc_now,
)
from ragstore.models.indexing import FailedFile, IndexingResult, SkippedFile

__all__ = [
    "Document",
    "DocumentInfo",
    "DocumentChunk",
    "FileMetadata",
    "RagQuery",
    "SearchResult",
    "IndexingResult",
    "SkippedFile",
    "FailedFile",
    "utc_now",
]
