"""Similarity scoring and ranking."""

from ragstore.search.similarity import cosine_similarity, rank

__all__ = ["cosine_similarity", "rank"]
