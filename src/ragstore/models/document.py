"""Core data models for documents, chunks and search."""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional

import numpy as np


def utc_now() -> str:
    """Return the current UTC time as an ISO-8601 string."""
    return datetime.now(timezone.utc).isoformat()


@dataclass(frozen=True)
class DocumentInfo:
    """Descriptive information about an ingested file (text or binary)."""

    path: str
    size_bytes: int
    extension: str
    is_binary: bool


@dataclass
class Document:
    """A document extracted from an input source."""

    info: DocumentInfo
    content: Optional[str] = None  # None for binary files


@dataclass
class DocumentChunk:
    """A unit of retrievable text with its embedding and provenance.

    All chunks of one source file share the same ``file_hash`` and carry
    consecutive ``chunk_index`` values starting at 0.
    """

    source_file: str
    chunk_index: int
    content: str
    embedding: np.ndarray
    metadata: dict[str, Any] = field(default_factory=dict)
    file_hash: str = ""
    indexed_at: str = field(default_factory=utc_now)
    id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class FileMetadata:
    """Side record used to decide whether a file needs reindexing."""

    file_path: str
    hash: str
    size: int
    last_modified: Optional[float] = None  # None when not a file on disk
    last_checked: str = field(default_factory=utc_now)
    chunk_count: int = 0


@dataclass
class RagQuery:
    """A similarity search request."""

    query: str
    top_k: int = 5
    min_similarity: float = 0.0  # inclusive
    file_filters: list[str] = field(default_factory=list)


@dataclass
class SearchResult:
    """A chunk paired with its similarity to one query."""

    chunk: DocumentChunk
    similarity: float
