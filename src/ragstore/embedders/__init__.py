"""Embedding providers for vector generation.

SentenceTransformerEmbedder lives in ``ragstore.embedders.sentence_transformer``
and is imported on demand so that torch is only loaded when it is used.
"""

from ragstore.embedders.hashing import HashingEmbedder

__all__ = ["HashingEmbedder"]
