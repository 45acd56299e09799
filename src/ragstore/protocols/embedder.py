"""Protocol for embedding model providers."""

from typing import Protocol, runtime_checkable

import numpy as np


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Turns texts into fixed-length vectors for similarity search.

    Implementations: SentenceTransformerEmbedder (local model) and
    HashingEmbedder (offline, deterministic). Any exception raised by
    ``embed`` is reported by the stores as an EmbeddingError.
    """

    @property
    def dimension(self) -> int:
        """Length of every vector this provider returns."""
        ...

    @property
    def model_name(self) -> str:
        """Identifier recorded in the index alongside its vectors."""
        ...

    def embed(self, texts: list[str]) -> np.ndarray:
        """Embed a batch of texts.

        Returns: float32 array of shape (len(texts), dimension), rows in
        input order
        """
        ...
