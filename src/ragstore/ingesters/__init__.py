"""Document sources for bulk indexing."""

from pathlib import Path
from typing import Optional

from ragstore.ingesters.folder_ingester import FolderIngester
from ragstore.ingesters.zip_ingester import ZipIngester
from ragstore.protocols import Ingester

# Checked in order; the first ingester that can handle a source wins
_INGESTERS: list[Ingester] = [
    ZipIngester(),
    FolderIngester(),
]


def get_ingester(source: Path | str) -> Optional[Ingester]:
    """Find an ingester for a folder or zip file, or None if unsupported."""
    source_path = Path(source)
    for ingester in _INGESTERS:
        if ingester.can_handle(source_path):
            return ingester
    return None


def register_ingester(ingester: Ingester) -> None:
    """Register a custom ingester, tried before the built-in ones."""
    _INGESTERS.insert(0, ingester)


__all__ = ["get_ingester", "register_ingester", "ZipIngester", "FolderIngester"]
