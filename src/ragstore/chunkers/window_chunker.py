"""Sliding-window chunking strategies."""


def _window_starts(length: int, chunk_size: int, overlap: int) -> list[int]:
    """Return the start offsets of each window over a sequence of `length` units."""
    if chunk_size <= 0:
        raise ValueError(f"chunk_size must be positive, got {chunk_size}")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError(
            f"overlap must be in [0, chunk_size), got {overlap} for chunk_size {chunk_size}"
        )

    starts = []
    step = chunk_size - overlap
    for start in range(0, length, step):
        starts.append(start)
        # Last window reached the end; a further one would be pure overlap
        if start + chunk_size >= length:
            break
    return starts


class WordChunker:
    """Default chunking: windows of `chunk_size` whitespace-separated words.

    Consecutive windows share `overlap` words so a phrase crossing a
    boundary is still whole in at least one chunk. Words are split on any
    whitespace and re-joined with single spaces, so line and paragraph
    breaks are not kept in the chunk text.
    """

    unit = "word"

    def split(self, content: str, chunk_size: int, overlap: int) -> list[str]:
        """Split content into overlapping word windows.

        Args:
            content: The text to split
            chunk_size: Maximum words per chunk
            overlap: Words shared between consecutive chunks

        Returns:
            Ordered list of chunk texts; empty for blank content
        """
        words = content.split()
        if not words:
            return []

        return [
            " ".join(words[start : start + chunk_size])
            for start in _window_starts(len(words), chunk_size, overlap)
        ]


class CharacterChunker:
    """Windows of `chunk_size` characters, for text without word spacing."""

    unit = "char"

    def split(self, content: str, chunk_size: int, overlap: int) -> list[str]:
        if not content or not content.strip():
            return []

        return [
            content[start : start + chunk_size]
            for start in _window_starts(len(content), chunk_size, overlap)
        ]
