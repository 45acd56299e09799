"""Persistent vector store backed by a single SQLite file."""

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Optional

from ragstore.chunkers import WordChunker
from ragstore.detection import FileChangeDetector
from ragstore.errors import EmbeddingError, StoreClosedError
from ragstore.models import DocumentChunk, FileMetadata, RagQuery, SearchResult, utc_now
from ragstore.protocols import ChangeDetector, ChunkingStrategy, EmbeddingProvider
from ragstore.search import rank
from ragstore.storage import ChunkStore
from ragstore.vectorstores.common import chunk_metadata, embed_texts

logger = logging.getLogger(__name__)


class SqliteVectorStore:
    """Vector store persisting chunks through a ChunkStore.

    Incremental indexing: a document whose hash matches the stored one is
    skipped without calling the embedding provider. With
    ``track_file_changes`` enabled and a source_file that exists on disk,
    the hash is taken over the file's bytes and checked mtime-first by the
    change detector; otherwise it is the hash of the supplied text.

    Failure policy: embedding errors while indexing propagate as
    EmbeddingError and leave the file's previous chunks in place. Search and
    the read-only counters degrade to empty results instead of raising.
    """

    def __init__(
        self,
        chunk_store: ChunkStore | Path | str,
        embedder: EmbeddingProvider,
        chunker: Optional[ChunkingStrategy] = None,
        chunk_size: int = 1000,
        chunk_overlap: int = 200,
        change_detector: Optional[ChangeDetector] = None,
        track_file_changes: bool = False,
        embedding_batch_size: int = 32,
        owns_store: Optional[bool] = None,
    ):
        """Initialize the store.

        Args:
            chunk_store: A ChunkStore to share, or a database path to open
            embedder: Embedding provider used for chunks and queries
            chunker: Chunking strategy; WordChunker if None
            chunk_size: Chunk size in the chunker's unit
            chunk_overlap: Overlap between consecutive chunks
            change_detector: Detector for on-disk change checks
            track_file_changes: Hash files on disk instead of supplied text
            embedding_batch_size: Texts sent to the provider per call
            owns_store: Close the ChunkStore on close(); defaults to True
                only when the store was opened from a path
        """
        if isinstance(chunk_store, ChunkStore):
            self.chunk_store = chunk_store
        else:
            self.chunk_store = ChunkStore(chunk_store)
        if owns_store is None:
            owns_store = not isinstance(chunk_store, ChunkStore)
        self._owns_store = owns_store

        self.embedder = embedder
        self.chunker = chunker or WordChunker()
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.change_detector = change_detector or FileChangeDetector()
        self.track_file_changes = track_file_changes
        self.embedding_batch_size = embedding_batch_size
        self._closed = False
        self._model_recorded = False

    def __enter__(self) -> "SqliteVectorStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _check_open(self) -> None:
        if self._closed:
            raise StoreClosedError("Vector store is closed")

    def _current_state(self, source_file: str, content: str) -> FileMetadata:
        """Compute the hash/size/mtime that would be recorded for this document."""
        path = Path(source_file)
        if self.track_file_changes and path.is_file():
            stat = path.stat()
            return FileMetadata(
                file_path=source_file,
                hash=self.change_detector.compute_hash(path),
                size=stat.st_size,
                last_modified=stat.st_mtime,
            )
        return FileMetadata(
            file_path=source_file,
            hash=self.change_detector.hash_text(content),
            size=len(content.encode("utf-8")),
        )

    def _is_unchanged(self, source_file: str, content: str, stored: Optional[FileMetadata]) -> bool:
        if stored is None:
            return False
        if self.track_file_changes and Path(source_file).is_file():
            return not self.change_detector.has_changed(
                source_file, stored.hash, stored.last_modified
            )
        return stored.hash == self.change_detector.hash_text(content)

    def index_document(
        self,
        source_file: str,
        content: str,
        metadata: Optional[dict[str, Any]] = None,
    ) -> None:
        """Chunk, embed and persist a document, replacing its older version.

        Args:
            source_file: Identifier of the document (path or URI)
            content: Extracted text; blank text is a no-op
            metadata: Extra JSON-serializable keys stored on every chunk

        Raises:
            EmbeddingError: if the provider fails; prior chunks are kept
            sqlite3.Error: if the write fails; prior chunks are kept
        """
        self._check_open()
        if not content or not content.strip():
            logger.debug(f"Nothing to index in {source_file}")
            return

        stored = self.chunk_store.get_file_metadata(source_file)
        if self._is_unchanged(source_file, content, stored):
            logger.info(f"{source_file} is already up to date, skipping")
            return

        state = self._current_state(source_file, content)
        texts = self.chunker.split(content, self.chunk_size, self.chunk_overlap)
        if not texts:
            return

        # Embed everything before touching the database so a provider
        # failure cannot leave a half-written file behind
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
                file_hash=state.hash,
                indexed_at=indexed_at,
            )
            for i, (text, embedding) in enumerate(zip(texts, embeddings))
        ]

        try:
            self.chunk_store.replace_file(source_file, chunks, state)
        except sqlite3.Error:
            logger.exception(f"Error writing chunks for {source_file}")
            raise

        self._record_model(embeddings.shape[1])
        logger.info(f"Indexed {source_file} with {len(chunks)} chunks (hash: {state.hash[:8]})")

    def _record_model(self, dimension: int) -> None:
        if self._model_recorded:
            return
        self.chunk_store.set_info("embedding_model", self.embedder.model_name)
        self.chunk_store.set_info("embedding_dimension", str(dimension))
        self._model_recorded = True

    def search(self, query: RagQuery) -> list[SearchResult]:
        """Return the chunks most similar to the query, best first.

        Provider or storage failures are logged and yield an empty list.

        Raises:
            DimensionMismatchError: if the query and stored vectors differ in
                length (index built with another embedding model)
        """
        if self._closed:
            logger.warning("Search on a closed vector store")
            return []
        if not query.query or not query.query.strip() or query.top_k <= 0:
            return []

        try:
            candidates = self.chunk_store.load_all(query.file_filters)
        except (sqlite3.Error, StoreClosedError):
            logger.exception("Error loading chunks for search")
            return []
        if not candidates:
            return []

        try:
            query_embedding = embed_texts(self.embedder, [query.query])[0]
        except EmbeddingError:
            logger.exception(f"Error embedding search query: {query.query}")
            return []

        return rank(query_embedding, candidates, query.min_similarity, query.top_k)

    def get_chunk_count(self) -> int:
        try:
            self._check_open()
            return self.chunk_store.count()
        except (sqlite3.Error, StoreClosedError):
            logger.exception("Error getting chunk count")
            return 0

    def get_indexed_files(self) -> set[str]:
        try:
            self._check_open()
            return self.chunk_store.list_source_files()
        except (sqlite3.Error, StoreClosedError):
            logger.exception("Error getting indexed files")
            return set()

    def get_file_chunks(self, source_file: str) -> list[DocumentChunk]:
        try:
            self._check_open()
            return self.chunk_store.load_file(source_file)
        except (sqlite3.Error, StoreClosedError):
            logger.exception(f"Error loading chunks for {source_file}")
            return []

    def remove_document(self, source_file: str) -> None:
        self._check_open()
        removed = self.chunk_store.delete_file(source_file)
        logger.info(f"Removed {removed} chunks for {source_file}")

    def clear_index(self) -> None:
        self._check_open()
        self.chunk_store.clear_all()
        self.change_detector.clear_cache()
        logger.info("Vector store index cleared")

    def batch_check_files_for_changes(self, file_paths: Iterable[str]) -> dict[str, bool]:
        """Report which files need reindexing, using one metadata query.

        Hashes are compared against the file bytes on disk, so a document
        indexed from text that differs from its file (e.g. extracted from a
        PDF) reports as changed unless ``track_file_changes`` was on.
        """
        self._check_open()
        paths = [str(p) for p in file_paths]
        stored = self.chunk_store.get_file_metadata_many(paths)
        return self.change_detector.batch_check(paths, stored)

    def close(self) -> None:
        self._closed = True
        if self._owns_store:
            self.chunk_store.close()
