"""Helpers shared by the vector store variants."""

from pathlib import Path
from typing import Any, Optional

import numpy as np

from ragstore.errors import EmbeddingError
from ragstore.protocols import EmbeddingProvider


def chunk_metadata(
    source_file: str, metadata: Optional[dict[str, Any]], chunk_count: int
) -> dict[str, Any]:
    """Merge caller metadata with the keys the store injects for every chunk."""
    merged = dict(metadata or {})
    merged["file_name"] = Path(source_file).name
    merged["file_extension"] = Path(source_file).suffix
    merged["chunk_count"] = chunk_count
    return merged


def embed_texts(
    embedder: EmbeddingProvider, texts: list[str], batch_size: int = 32
) -> np.ndarray:
    """Embed texts in batches, checking the provider's output shape.

    Returns:
        float32 array of shape (len(texts), dimension)

    Raises:
        EmbeddingError: if the provider raises or returns the wrong shape
    """
    batches = []
    for start in range(0, len(texts), max(batch_size, 1)):
        batch = texts[start : start + max(batch_size, 1)]
        try:
            vectors = embedder.embed(batch)
        except Exception as exc:
            name = getattr(embedder, "model_name", type(embedder).__name__)
            raise EmbeddingError(f"Embedding provider {name} failed: {exc}") from exc

        vectors = np.asarray(vectors, dtype=np.float32)
        if vectors.ndim != 2 or vectors.shape[0] != len(batch):
            raise EmbeddingError(
                f"Expected {len(batch)} embeddings, provider returned shape {vectors.shape}"
            )
        if batches and vectors.shape[1] != batches[0].shape[1]:
            raise EmbeddingError(
                f"Provider changed dimension mid-document: {batches[0].shape[1]} -> {vectors.shape[1]}"
            )
        batches.append(vectors)

    if not batches:
        return np.zeros((0, 0), dtype=np.float32)
    return np.vstack(batches)
