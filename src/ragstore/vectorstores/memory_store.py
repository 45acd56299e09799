"""Non-persistent vector store kept in process memory."""

import logging
import threading
from typing import Any, Iterable, Optional

from ragstore.chunkers import WordChunker
from ragstore.detection import FileChangeDetector
from ragstore.errors import EmbeddingError, StoreClosedError
from ragstore.models import DocumentChunk, FileMetadata, RagQuery, SearchResult, utc_now
from ragstore.protocols import ChangeDetector, ChunkingStrategy, EmbeddingProvider
from ragstore.search import rank
from ragstore.vectorstores.common import chunk_metadata, embed_texts

logger = logging.getLogger(__name__)


class InMemoryVectorStore:
    """Vector store holding chunks in a list guarded by a lock.

    Same contract and failure policy as SqliteVectorStore; contents are lost
    when the process exits. Useful for tests and one-off sessions.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        chunker: Optional[ChunkingStrategy] = None,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        change_detector: Optional[ChangeDetector] = None,
        embedding_batch_size: int = 32,
    ):
        self.embedder = embedder
        self.chunker = chunker or WordChunker()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.change_detector = change_detector or FileChangeDetector()
        self.embedding_batch_size = embedding_batch_size
        self._chunks: list[DocumentChunk] = []
        self._files: dict[str, FileMetadata] = {}
        self._lock = threading.Lock()
        self._closed = False

    def __enter__(self) -> "InMemoryVectorStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Vector store is closed")

    def index_document(
        self,
        source_file: str,
        content: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        self._check_open()
        if not content or not content.strip():
            return

        file_hash = self.change_detector.hash_text(content)
        with self._lock:
            stored = self._files.get(source_file)
        if stored is not None and stored.hash == file_hash:
            logger.info(f"{source_file} is already up to date, skipping")
            return

        texts = self.chunker.split(content, self.chunk_size, self.chunk_overlap)
        if not texts:
            return

        try:
            embeddings = embed_texts(self.embedder, texts, self.embedding_batch_size)
        except EmbeddingError:
            logger.exception(f"Error embedding {source_file}, keeping previous index")
            raise

        indexed_at = utc_now()
        chunk_meta = chunk_metadata(source_file, metadata, len(texts))
        chunks = [
            DocumentChunk(
                source_file=source_file,
                chunk_index=i,
                content=text,
                embedding=embedding,
                metadata=dict(chunk_meta),
                file_hash=file_hash,
                indexed_at=indexed_at,
            )
            for i, (text, embedding) in enumerate(zip(texts, embeddings))
        ]

        with self._lock:
            self._chunks = [c for c in self._chunks if c.source_file != source_file] + chunks
            self._files[source_file] = FileMetadata(
                file_path=source_file,
                hash=file_hash,
                size=len(content.encode("utf-8")),
                chunk_count=len(chunks),
            )
        logger.info(f"Indexed {len(chunks)} chunks from {source_file}")

    def search(self, query: RagQuery) -> list[SearchResult]:
        if self._closed or not query.query or not query.query.strip() or query.top_k <= 0:
            return []

        filters = [f.lower() for f in query.file_filters or []]
        with self._lock:
            candidates = [
                c
                for c in self._chunks
                if not filters or any(f in c.source_file.lower() for f in filters)
            ]
        if not candidates:
            return []

        try:
            query_embedding = embed_texts(self.embedder, [query.query])[0]
        except EmbeddingError:
            logger.exception(f"Error embedding search query: {query.query}")
            return []

        return rank(query_embedding, candidates, query.min_similarity, query.top_k)

    def get_chunk_count(self) -> int:
        if self._closed:
            return 0
        with self._lock:
            return len(self._chunks)

    def get_indexed_files(self) -> set[str]:
        if self._closed:
            return set()
        with self._lock:
            return {c.source_file for c in self._chunks}

    def get_file_chunks(self, source_file: str) -> list[DocumentChunk]:
        if self._closed:
            return []
        with self._lock:
            return [c for c in self._chunks if c.source_file == source_file]

    def remove_document(self, source_file: str) -> None:
        self._check_open()
        with self._lock:
            self._chunks = [c for c in self._chunks if c.source_file != source_file]
            self._files.pop(source_file, None)

    def clear_index(self) -> None:
        self._check_open()
        with self._lock:
            self._chunks = []
            self._files.clear()
        self.change_detector.clear_cache()
        logger.info("Vector store index cleared")

    def batch_check_files_for_changes(self, file_paths: Iterable[str]) -> dict[str, bool]:
        self._check_open()
        paths = [str(p) for p in file_paths]
        with self._lock:
            stored = {p: self._files[p] for p in paths if p in self._files}
        return self.change_detector.batch_check(paths, stored)

    def close(self) -> None:
        with self._lock:
            self._chunks = []
            self._files.clear()
        self._closed = True
