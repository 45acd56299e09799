"""Protocol for document sources feeding bulk indexing."""

from pathlib import Path
from typing import Iterator, Protocol, runtime_checkable

from ragstore.models import Document


@runtime_checkable
class Ingester(Protocol):
    """Protocol for input source handlers (folders, zip archives).

    The ``info.path`` of each yielded document becomes the store's
    ``source_file`` identifier, so it must be stable across runs.
    """

    @property
    def source_type(self) -> str:
        """Return identifier for this source type (e.g., "zip", "folder")."""
        ...

    def can_handle(self, source: Path) -> bool:
        ...

    def ingest(self, source: Path) -> Iterator[Document]:
        """Yield documents from the source; binary files have content=None."""
        ...
