"""SQLite-backed persistence for document chunks."""

import json
import logging
import sqlite3
import threading
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator, Optional

import numpy as np

from ragstore.errors import StoreClosedError
from ragstore.models import DocumentChunk, FileMetadata, utc_now
from ragstore.storage.schema import SCHEMA

logger = logging.getLogger(__name__)

MEMORY_PATH = ":memory:"

# Stay well under SQLite's default host-parameter limit
_MAX_PARAMS = 500

_CHUNK_COLUMNS = (
    "id, source_file, chunk_index, content, embedding, metadata, file_hash, indexed_at"
)


def encode_embedding(embedding: np.ndarray) -> bytes:
    return np.asarray(embedding, dtype="<f4").tobytes()


def decode_embedding(blob: bytes) -> np.ndarray:
    return np.frombuffer(blob, dtype="<f4")


class ChunkStore:
    """SQLite-backed storage for chunks, file metadata and store info.

    A connection is opened per operation, so one instance may be used from
    many threads, and several instances may share one database file. Writers
    are serialized by SQLite's own locking (``BEGIN IMMEDIATE`` plus a busy
    timeout), never by an in-process mutex.
    """

    def __init__(self, path: Path | str, busy_timeout: float = 30.0):
        """Initialize the store.

        Args:
            path: Database file, created on first use. ":memory:" gives a
                private in-memory database that lives as long as this store.
            busy_timeout: Seconds to wait for another writer's lock
        """
        self.busy_timeout = busy_timeout
        self._closed = False
        self._initialized = False
        self._init_lock = threading.Lock()
        self._anchor: Optional[sqlite3.Connection] = None

        if str(path) == MEMORY_PATH:
            self.path = None
            self._uri = f"file:ragstore-{uuid.uuid4().hex}?mode=memory&cache=shared"
            # The in-memory database is dropped when its last connection closes
            self._anchor = self._connect()
        else:
            self.path = Path(path)
            self._uri = None

    @property
    def closed(self) -> bool:
        return self._closed

    def _connect(self) -> sqlite3.Connection:
        if self._uri is not None:
            conn = sqlite3.connect(self._uri, uri=True, timeout=self.busy_timeout,
                                   isolation_level=None, check_same_thread=False)
        else:
            conn = sqlite3.connect(self.path, timeout=self.busy_timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        return conn

    def _ensure_initialized(self) -> None:
        if self._initialized:
            return
        with self._init_lock:
            if self._initialized:
                return
            if self.path is not None:
                self.path.parent.mkdir(parents=True, exist_ok=True)
            conn = self._connect()
            try:
                conn.executescript(SCHEMA)
            finally:
                conn.close()
            self._initialized = True
            logger.debug(f"Chunk store schema ready at {self.path or 'memory'}")

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Context manager for an autocommit connection (single statements)."""
        if self._closed:
            raise StoreClosedError("Chunk store is closed")
        self._ensure_initialized()
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    @contextmanager
    def transaction(self) -> Iterator[sqlite3.Connection]:
        """Context manager for a write transaction.

        Takes SQLite's write lock up front so concurrent writers queue
        instead of failing on lock upgrade. Commits on success, rolls back
        on any exception.
        """
        with self.connection() as conn:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
                conn.execute("COMMIT")
            except BaseException:
                conn.execute("ROLLBACK")
                raise

    def initialize(self) -> None:
        """Create schema if not exists."""
        if self._closed:
            raise StoreClosedError("Chunk store is closed")
        self._ensure_initialized()

    def close(self) -> None:
        self._closed = True
        if self._anchor is not None:
            self._anchor.close()
            self._anchor = None

    # Writes

    def replace_file(
        self,
        source_file: str,
        chunks: list[DocumentChunk],
        file_metadata: Optional[FileMetadata] = None,
    ) -> None:
        """Atomically swap every chunk of a file for a new set.

        Raises:
            ValueError: if a chunk belongs to another file or the chunk
                indexes are not 0..n-1
        """
        indexes = sorted(chunk.chunk_index for chunk in chunks)
        if indexes != list(range(len(chunks))):
            raise ValueError(f"Chunk indexes for {source_file} must be 0..{len(chunks) - 1}")
        if any(chunk.source_file != source_file for chunk in chunks):
            raise ValueError(f"All chunks must belong to {source_file}")

        with self.transaction() as conn:
            conn.execute("DELETE FROM document_chunks WHERE source_file = ?", (source_file,))
            conn.executemany(
                f"INSERT INTO document_chunks ({_CHUNK_COLUMNS}) VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
                [
                    (
                        chunk.id,
                        chunk.source_file,
                        chunk.chunk_index,
                        chunk.content,
                        encode_embedding(chunk.embedding),
                        json.dumps(chunk.metadata, default=str),
                        chunk.file_hash,
                        chunk.indexed_at,
                    )
                    for chunk in chunks
                ],
            )
            if file_metadata is not None:
                conn.execute(
                    """INSERT OR REPLACE INTO file_metadata
                       (file_path, file_hash, file_size, file_modified, last_indexed, chunk_count)
                       VALUES (?, ?, ?, ?, ?, ?)""",
                    (
                        source_file,
                        file_metadata.hash,
                        file_metadata.size,
                        file_metadata.last_modified,
                        file_metadata.last_checked,
                        len(chunks),
                    ),
                )

    def delete_file(self, source_file: str) -> int:
        """Delete a file's chunks and metadata; return the chunk rows removed."""
        with self.transaction() as conn:
            cursor = conn.execute(
                "DELETE FROM document_chunks WHERE source_file = ?", (source_file,)
            )
            conn.execute("DELETE FROM file_metadata WHERE file_path = ?", (source_file,))
            return cursor.rowcount

    def clear_all(self) -> None:
        with self.transaction() as conn:
            conn.execute("DELETE FROM document_chunks")
            conn.execute("DELETE FROM file_metadata")

    def set_info(self, key: str, value: str) -> None:
        with self.transaction() as conn:
            conn.execute(
                "INSERT OR REPLACE INTO store_info (key, value) VALUES (?, ?)",
                (key, value),
            )

    # Reads

    def get_info(self, key: str) -> Optional[str]:
        with self.connection() as conn:
            row = conn.execute(
                "SELECT value FROM store_info WHERE key = ?", (key,)
            ).fetchone()
            return row["value"] if row else None

    def load_all(self, file_filters: Optional[Iterable[str]] = None) -> list[DocumentChunk]:
        """Load candidate chunks in (source_file, chunk_index) order.

        Args:
            file_filters: Substrings; a chunk is kept if its source_file
                contains any of them, ignoring ASCII case. Empty means all.
        """
        filters = list(file_filters or [])
        sql = f"SELECT {_CHUNK_COLUMNS} FROM document_chunks"
        if filters:
            sql += " WHERE " + " OR ".join("instr(lower(source_file), lower(?)) > 0" for _ in filters)
        sql += " ORDER BY source_file, chunk_index"

        with self.connection() as conn:
            return [self._row_to_chunk(row) for row in conn.execute(sql, filters)]

    def load_file(self, source_file: str) -> list[DocumentChunk]:
        with self.connection() as conn:
            cursor = conn.execute(
                f"""SELECT {_CHUNK_COLUMNS} FROM document_chunks
                    WHERE source_file = ? ORDER BY chunk_index""",
                (source_file,),
            )
            return [self._row_to_chunk(row) for row in cursor]

    def count(self) -> int:
        with self.connection() as conn:
            return conn.execute("SELECT COUNT(*) FROM document_chunks").fetchone()[0]

    def list_source_files(self) -> set[str]:
        with self.connection() as conn:
            cursor = conn.execute("SELECT DISTINCT source_file FROM document_chunks")
            return {row["source_file"] for row in cursor}

    def get_file_metadata(self, file_path: str) -> Optional[FileMetadata]:
        with self.connection() as conn:
            row = conn.execute(
                """SELECT file_path, file_hash, file_size, file_modified, last_indexed, chunk_count
                   FROM file_metadata WHERE file_path = ?""",
                (file_path,),
            ).fetchone()
            return self._row_to_metadata(row) if row else None

    def get_file_metadata_many(self, file_paths: Iterable[str]) -> dict[str, FileMetadata]:
        """Fetch stored metadata for many files with as few queries as possible."""
        paths = list(dict.fromkeys(file_paths))
        found: dict[str, FileMetadata] = {}
        with self.connection() as conn:
            for start in range(0, len(paths), _MAX_PARAMS):
                batch = paths[start : start + _MAX_PARAMS]
                placeholders = ", ".join("?" for _ in batch)
                cursor = conn.execute(
                    f"""SELECT file_path, file_hash, file_size, file_modified, last_indexed, chunk_count
                        FROM file_metadata WHERE file_path IN ({placeholders})""",
                    batch,
                )
                for row in cursor:
                    found[row["file_path"]] = self._row_to_metadata(row)
        return found

    @staticmethod
    def _row_to_chunk(row: sqlite3.Row) -> DocumentChunk:
        metadata: dict[str, Any] = json.loads(row["metadata"]) if row["metadata"] else {}
        return DocumentChunk(
            id=row["id"],
            source_file=row["source_file"],
            chunk_index=row["chunk_index"],
            content=row["content"],
            embedding=decode_embedding(row["embedding"]),
            metadata=metadata,
            file_hash=row["file_hash"],
            indexed_at=row["indexed_at"],
        )

    @staticmethod
    def _row_to_metadata(row: sqlite3.Row) -> FileMetadata:
        return FileMetadata(
            file_path=row["file_path"],
            hash=row["file_hash"],
            size=row["file_size"],
            last_modified=row["file_modified"],
            last_checked=row["last_indexed"] or utc_now(),
            chunk_count=row["chunk_count"],
        )
