"""Change detection for incremental indexing."""

from ragstore.detection.file_change_detector import FileChangeDetector

__all__ = ["FileChangeDetector"]
