"""Ingester for local folders."""

import logging
import os
from pathlib import Path
from typing import Iterator

from ragstore.models import Document, DocumentInfo
from ragstore.utils.binary import decode_text

logger = logging.getLogger(__name__)

# Directory and file names never descended into or ingested
SKIP_NAMES = {
    "__pycache__",
    "node_modules",
    "venv",
    "env",
    "dist",
    "build",
}


class FolderIngester:
    """Ingester for local filesystem folders.

    Documents are identified by their absolute path so the store can stat
    and hash the file for change detection.
    """

    source_type = "folder"

    def can_handle(self, source: Path) -> bool:
        return source.is_dir()

    def ingest(self, source: Path) -> Iterator[Document]:
        """Yield documents from a folder recursively, in sorted order."""
        root_dir = source.resolve()
        for root, dirs, files in os.walk(root_dir):
            dirs[:] = sorted(d for d in dirs if not self._should_skip(d))
            for filename in sorted(files):
                if self._should_skip(filename):
                    continue

                full_path = Path(root) / filename
                try:
                    raw_content = full_path.read_bytes()
                except OSError as exc:
                    logger.warning(f"Cannot read {full_path}: {exc}")
                    continue

                content = decode_text(full_path, raw_content)
                yield Document(
                    info=DocumentInfo(
                        path=str(full_path),
                        size_bytes=len(raw_content),
                        extension=full_path.suffix.lower(),
                        is_binary=content is None,
                    ),
                    content=content,
                )

    @staticmethod
    def _should_skip(name: str) -> bool:
        """Skip hidden entries (.git, .venv, ...) and common build artifacts."""
        return name.startswith(".") or name in SKIP_NAMES or name.endswith(".egg-info")
