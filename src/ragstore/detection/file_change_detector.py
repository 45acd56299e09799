"""Checksum-based file change detection.

Avoids re-embedding files whose bytes are unchanged since they were last
indexed. Checks run cheapest first: modification time, then a cached
(size, mtime, hash) triple, and only then a full streaming hash.
"""

import hashlib
import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Mapping, Optional

from ragstore.models import FileMetadata

logger = logging.getLogger(__name__)

_READ_BLOCK = 64 * 1024


class FileChangeDetector:
    """Detects file changes using content digests and file metadata."""

    def __init__(self, algorithm: str = "md5", max_workers: int = 8):
        """Initialize the detector.

        Args:
            algorithm: Any hashlib algorithm name (md5, sha256, ...)
            max_workers: Thread pool size used by batch_check
        """
        hashlib.new(algorithm)  # fail fast on unknown algorithms
        self.algorithm = algorithm
        self.max_workers = max_workers
        self._cache: dict[str, FileMetadata] = {}
        self._cache_lock = threading.Lock()

    def compute_hash(self, file_path: Path | str) -> str:
        """Hash a file in fixed-size blocks without loading it whole.

        Raises:
            OSError: if the file cannot be read
        """
        digest = hashlib.new(self.algorithm)
        try:
            with open(file_path, "rb") as f:
                for block in iter(lambda: f.read(_READ_BLOCK), b""):
                    digest.update(block)
        except OSError:
            logger.error(f"Error computing file hash: {file_path}")
            raise
        return digest.hexdigest()

    def hash_text(self, content: str) -> str:
        return hashlib.new(self.algorithm, content.encode("utf-8")).hexdigest()

    def get_file_metadata(self, file_path: Path | str) -> FileMetadata:
        """Stat a file; the hash is left empty and computed separately."""
        stat = Path(file_path).stat()
        return FileMetadata(
            file_path=str(file_path),
            hash="",
            size=stat.st_size,
            last_modified=stat.st_mtime,
        )

    def has_changed(
        self,
        file_path: Path | str,
        stored_hash: Optional[str] = None,
        stored_modified: Optional[float] = None,
    ) -> bool:
        """Check whether a file differs from its recorded hash and mtime.

        A file with no recorded hash or mtime has never been indexed and
        counts as changed, as does a file that no longer exists.
        """
        key = str(file_path)
        if stored_hash is None and stored_modified is None:
            logger.debug(f"No stored state for {key}, treating as changed")
            return True

        path = Path(file_path)
        if not path.is_file():
            logger.warning(f"File not found for change detection: {key}")
            return True

        current = self.get_file_metadata(path)

        if stored_modified is not None and current.last_modified != stored_modified:
            logger.debug(f"File modification time changed: {key}")
            return True

        if not stored_hash:
            logger.debug(f"No stored hash for {key}, assuming changed")
            return True

        with self._cache_lock:
            cached = self._cache.get(key)
        if (
            cached is not None
            and cached.size == current.size
            and cached.last_modified == current.last_modified
            and cached.hash.lower() == stored_hash.lower()
        ):
            logger.debug(f"File unchanged (cached hash match): {key}")
            return False

        current_hash = self.compute_hash(path)
        with self._cache_lock:
            self._cache[key] = FileMetadata(
                file_path=key,
                hash=current_hash,
                size=current.size,
                last_modified=current.last_modified,
            )

        changed = current_hash.lower() != stored_hash.lower()
        logger.debug(f"File hash comparison for {key}: changed={changed}")
        return changed

    def batch_check(
        self,
        file_paths: Iterable[str],
        stored_metadata: Optional[Mapping[str, FileMetadata]] = None,
    ) -> dict[str, bool]:
        """Check many files concurrently.

        Args:
            file_paths: Files to check
            stored_metadata: Previously recorded state keyed by path

        Returns:
            Mapping of each path to True if it needs reindexing

        Raises:
            OSError: if any file cannot be hashed
        """
        paths = list(dict.fromkeys(str(p) for p in file_paths))
        stored_metadata = stored_metadata or {}
        if not paths:
            return {}

        def check(path: str) -> bool:
            known = stored_metadata.get(path)
            if known is None:
                return self.has_changed(path)
            return self.has_changed(path, known.hash, known.last_modified)

        with ThreadPoolExecutor(max_workers=min(self.max_workers, len(paths))) as pool:
            results = dict(zip(paths, pool.map(check, paths)))

        changed = sum(1 for value in results.values() if value)
        logger.info(
            f"Batch checked {len(results)} files: "
            f"{changed} changed, {len(results) - changed} unchanged"
        )
        return results

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()
        logger.debug("File metadata cache cleared")

    def cache_stats(self) -> tuple[int, int]:
        """Return (cached file count, total size in bytes of cached files)."""
        with self._cache_lock:
            return len(self._cache), sum(m.size for m in self._cache.values())
