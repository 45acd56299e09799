"""Protocol definitions for extensible components."""

from ragstore.protocols.change_detector import ChangeDetector
from ragstore.protocols.chunker import ChunkingStrategy
from ragstore.protocols.embedder import EmbeddingProvider
from ragstore.protocols.ingester import Ingester
from ragstore.protocols.vector_store import VectorStore

__all__ = [
    "Ingester",
    "EmbeddingProvider",
    "ChunkingStrategy",
    "ChangeDetector",
    "VectorStore",
]
