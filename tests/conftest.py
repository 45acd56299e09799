"""Shared fixtures for ragstore tests."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import pytest

from ragstore.embedders import HashingEmbedder
from ragstore.storage import ChunkStore
from ragstore.vectorstores import InMemoryVectorStore, SqliteVectorStore


class CountingEmbedder:
    """HashingEmbedder wrapper that records calls and can be told to fail."""

    def __init__(self, dimension: int = 256):
        self.inner = HashingEmbedder(dimension)
        self.calls = 0
        self.texts: list[str] = []
        self.fail = False
        self.fail_on: Optional[str] = None

    @property
    def dimension(self) -> int:
        return self.inner.dimension

    @property
    def model_name(self) -> str:
        return "counting-" + self.inner.model_name

    def embed(self, texts: list[str]) -> np.ndarray:
        self.calls += 1
        if self.fail or (self.fail_on and any(self.fail_on in t for t in texts)):
            raise RuntimeError("embedding service unavailable")
        self.texts.extend(texts)
        return self.inner.embed(texts)


@pytest.fixture
def embedder() -> CountingEmbedder:
    return CountingEmbedder()


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "index" / "ragstore.db"


@pytest.fixture
def chunk_store(db_path: Path) -> ChunkStore:
    store = ChunkStore(db_path)
    yield store
    store.close()


@pytest.fixture
def sqlite_store(db_path: Path, embedder: CountingEmbedder) -> SqliteVectorStore:
    store = SqliteVectorStore(db_path, embedder, chunk_size=50, chunk_overlap=10)
    yield store
    store.close()


@pytest.fixture(params=["memory", "sqlite"])
def vector_store(request, db_path: Path, embedder: CountingEmbedder):
    """Each store variant, configured with small chunks."""
    if request.param == "memory":
        store = InMemoryVectorStore(embedder, chunk_size=50, chunk_overlap=10)
    else:
        store = SqliteVectorStore(db_path, embedder, chunk_size=50, chunk_overlap=10)
    yield store
    store.close()
