"""Chunking strategies for splitting documents."""

from ragstore.chunkers.window_chunker import CharacterChunker, WordChunker

__all__ = ["WordChunker", "CharacterChunker"]
