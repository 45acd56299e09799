"""SQLite persistence for ragstore."""

from ragstore.storage.store import ChunkStore, decode_embedding, encode_embedding

__all__ = ["ChunkStore", "encode_embedding", "decode_embedding"]
