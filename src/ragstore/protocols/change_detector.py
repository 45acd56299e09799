"""Protocol for file change detection."""

from pathlib import Path
from typing import Iterable, Mapping, Optional, Protocol, runtime_checkable

from ragstore.models import FileMetadata


@runtime_checkable
class ChangeDetector(Protocol):
    """Decides whether a file differs from what was last indexed."""

    def compute_hash(self, file_path: Path | str) -> str:
        """Return a content digest of the file's bytes. I/O errors propagate."""
        ...

    def hash_text(self, content: str) -> str:
        """Return the same digest computed over UTF-8 text."""
        ...

    def has_changed(
        self,
        file_path: Path | str,
        stored_hash: Optional[str] = None,
        stored_modified: Optional[float] = None,
    ) -> bool:
        """Check a single file against its stored hash and mtime."""
        ...

    def batch_check(
        self,
        file_paths: Iterable[str],
        stored_metadata: Optional[Mapping[str, FileMetadata]] = None,
    ) -> dict[str, bool]:
        """Check many files in one call."""
        ...

    def clear_cache(self) -> None:
        """Forget any cached file state."""
        ...
