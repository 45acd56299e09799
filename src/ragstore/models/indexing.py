"""Reports produced by bulk indexing runs."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass
class SkippedFile:
    file_path: str
    reason: str
    file_extension: Optional[str] = None
    file_size: int = 0


@dataclass
class FailedFile:
    file_path: str
    error: str


@dataclass
class IndexingResult:
    """Outcome of indexing every document of one source."""

    indexed_files: list[str] = field(default_factory=list)
    unchanged_files: list[str] = field(default_factory=list)
    removed_files: list[str] = field(default_factory=list)
    skipped_files: list[SkippedFile] = field(default_factory=list)
    failed_files: list[FailedFile] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.now)
    completed_at: Optional[datetime] = None

    @property
    def duration(self) -> float:
        """Elapsed seconds, or 0.0 while the run is still in progress."""
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()
