"""Vector store implementations sharing the VectorStore protocol."""

from ragstore.vectorstores.async_store import AsyncVectorStore
from ragstore.vectorstores.memory_store import InMemoryVectorStore
from ragstore.vectorstores.sqlite_store import SqliteVectorStore

__all__ = ["InMemoryVectorStore", "SqliteVectorStore", "AsyncVectorStore"]
