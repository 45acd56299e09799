"""Settings and component factories.

Every setting has a default and can be overridden through a ``RAGSTORE_*``
environment variable, e.g. ``RAGSTORE_CHUNK_SIZE=500``.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

from ragstore.chunkers import CharacterChunker, WordChunker
from ragstore.detection import FileChangeDetector
from ragstore.embedders import HashingEmbedder
from ragstore.protocols import ChunkingStrategy, EmbeddingProvider, VectorStore
from ragstore.storage import ChunkStore
from ragstore.vectorstores import InMemoryVectorStore, SqliteVectorStore

ENV_PREFIX = "RAGSTORE_"

STORE_TYPES = ("memory", "sqlite", "optimized")
CHUNK_UNITS = ("word", "char")
EMBEDDING_PROVIDERS = ("sentence-transformers", "hash")


@dataclass
class StoreSettings:
    db_path: str = "ragstore.db"
    store_type: str = "optimized"  # memory | sqlite | optimized
    chunk_unit: str = "word"  # word | char
    chunk_size: int = 1000
    chunk_overlap: int = 200
    embedding_provider: str = "sentence-transformers"  # sentence-transformers | hash
    embedding_model: str = "all-MiniLM-L6-v2"
    embedding_dimension: int = 384  # hash provider only
    embedding_batch_size: int = 32
    busy_timeout: float = 30.0
    hash_algorithm: str = "md5"

    def __post_init__(self) -> None:
        if self.store_type not in STORE_TYPES:
            raise ValueError(f"store_type must be one of {STORE_TYPES}, got {self.store_type!r}")
        if self.chunk_unit not in CHUNK_UNITS:
            raise ValueError(f"chunk_unit must be one of {CHUNK_UNITS}, got {self.chunk_unit!r}")
        if self.embedding_provider not in EMBEDDING_PROVIDERS:
            raise ValueError(
                f"embedding_provider must be one of {EMBEDDING_PROVIDERS}, "
                f"got {self.embedding_provider!r}"
            )
        if self.chunk_size <= 0 or not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError(
                f"Invalid chunking: size={self.chunk_size}, overlap={self.chunk_overlap}"
            )

    @classmethod
    def from_env(cls, environ: Optional[dict[str, str]] = None, **overrides) -> "StoreSettings":
        """Build settings from RAGSTORE_* variables, then apply overrides.

        Args:
            environ: Mapping to read instead of os.environ
            **overrides: Explicit values; None values are ignored
        """
        environ = os.environ if environ is None else environ
        values = {}
        for f in fields(cls):
            raw = environ.get(ENV_PREFIX + f.name.upper())
            if raw is None:
                continue
            if f.type in (int, "int"):
                values[f.name] = int(raw)
            elif f.type in (float, "float"):
                values[f.name] = float(raw)
            else:
                values[f.name] = raw
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def create_chunker(settings: StoreSettings) -> ChunkingStrategy:
    if settings.chunk_unit == "char":
        return CharacterChunker()
    return WordChunker()


def create_embedder(settings: StoreSettings) -> EmbeddingProvider:
    """Build the configured embedding provider."""
    if settings.embedding_provider == "hash":
        return HashingEmbedder(settings.embedding_dimension)

    # Import here to avoid loading torch unless needed
    from ragstore.embedders.sentence_transformer import SentenceTransformerEmbedder

    return SentenceTransformerEmbedder(
        settings.embedding_model, batch_size=settings.embedding_batch_size
    )


def create_vector_store(
    settings: StoreSettings,
    embedder: Optional[EmbeddingProvider] = None,
    chunk_store: Optional[ChunkStore] = None,
) -> VectorStore:
    """Build the store variant named by ``settings.store_type``.

    Args:
        settings: Store settings
        embedder: Provider to use; built from settings if None
        chunk_store: Existing ChunkStore to share; opened from
            ``settings.db_path`` if None
    """
    embedder = embedder or create_embedder(settings)
    chunker = create_chunker(settings)
    detector = FileChangeDetector(settings.hash_algorithm)

    if settings.store_type == "memory":
        return InMemoryVectorStore(
            embedder,
            chunker=chunker,
            chunk_size=settings.chunk_size,
            chunk_overlap=settings.chunk_overlap,
            change_detector=detector,
            embedding_batch_size=settings.embedding_batch_size,
        )

    store = chunk_store or ChunkStore(Path(settings.db_path), busy_timeout=settings.busy_timeout)
    return SqliteVectorStore(
        store,
        embedder,
        chunker=chunker,
        chunk_size=settings.chunk_size,
        chunk_overlap=settings.chunk_overlap,
        change_detector=detector,
        track_file_changes=settings.store_type == "optimized",
        embedding_batch_size=settings.embedding_batch_size,
        owns_store=chunk_store is None,
    )
