"""Deterministic hashing embedder that needs no model download."""

import hashlib
import re

import numpy as np

_TOKEN_RE = re.compile(r"\w+")


class HashingEmbedder:
    """Bag-of-words embedding via the hashing trick.

    Each lowercase token is hashed into one of `dimension` buckets and
    counted, then the vector is L2-normalized. Texts sharing words get
    positive cosine similarity, which is enough for offline use and tests.
    Text without any word characters maps to the zero vector.
    """

    def __init__(self, dimension: int = 384):
        if dimension <= 0:
            raise ValueError(f"dimension must be positive, got {dimension}")
        self._dimension = dimension

    @property
    def dimension(self) -> int:
        return self._dimension

    @property
    def model_name(self) -> str:
        return f"hashing-{self._dimension}"

    def _bucket(self, token: str) -> int:
        digest = hashlib.md5(token.encode("utf-8")).digest()
        return int.from_bytes(digest[:8], "little") % self._dimension

    def embed_one(self, text: str) -> np.ndarray:
        vector = np.zeros(self._dimension, dtype=np.float32)
        for token in _TOKEN_RE.findall(text.lower()):
            vector[self._bucket(token)] += 1.0

        norm = np.linalg.norm(vector)
        if norm > 0:
            vector /= norm
        return vector

    def embed(self, texts: list[str]) -> np.ndarray:
        if not texts:
            return np.zeros((0, self._dimension), dtype=np.float32)
        return np.vstack([self.embed_one(text) for text in texts])
