"""Exact cosine-similarity ranking over stored chunks."""

from typing import Iterable

import numpy as np

from ragstore.errors import DimensionMismatchError
from ragstore.models import DocumentChunk, SearchResult


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Compute cosine similarity between two vectors.

    Zero-length (all-zero) vectors have similarity 0.0 with everything.

    Raises:
        DimensionMismatchError: if the vectors differ in length
    """
    a = np.asarray(a, dtype=np.float32).ravel()
    b = np.asarray(b, dtype=np.float32).ravel()
    if a.shape != b.shape:
        raise DimensionMismatchError(
            f"Cannot compare embeddings of length {a.shape[0]} and {b.shape[0]}"
        )

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 0.0
    return float(np.dot(a, b) / (norm_a * norm_b))


def rank(
    query_embedding: np.ndarray,
    chunks: Iterable[DocumentChunk],
    min_similarity: float = 0.0,
    top_k: int = 5,
) -> list[SearchResult]:
    """Score chunks against a query and return the best `top_k`.

    Chunks scoring below `min_similarity` are dropped (the bound itself
    passes). Ties keep the order in which chunks were given.
    """
    if top_k <= 0:
        return []

    results = []
    for chunk in chunks:
        similarity = cosine_similarity(query_embedding, chunk.embedding)
        if similarity >= min_similarity:
            results.append(SearchResult(chunk=chunk, similarity=similarity))

    # list.sort is stable, so equal scores stay in load order
    results.sort(key=lambda r: r.similarity, reverse=True)
    return results[:top_k]
