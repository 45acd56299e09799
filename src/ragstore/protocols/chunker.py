"""Protocol for text chunking strategies."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ChunkingStrategy(Protocol):
    """Protocol for text chunking strategies.

    The size unit (words, characters) is up to the implementation.
    """

    @property
    def unit(self) -> str:
        """Return the unit chunk sizes are measured in (e.g., 'word')."""
        ...

    def split(self, content: str, chunk_size: int, overlap: int) -> list[str]:
        """Split content into overlapping windows of at most chunk_size units."""
        ...
