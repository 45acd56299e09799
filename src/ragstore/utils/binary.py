"""Binary file detection and text decoding for ingestion."""

from pathlib import Path
from typing import Optional

# Extensions never worth decoding as text
BINARY_EXTENSIONS = {
    # Images
    ".png", ".jpg", ".jpeg", ".gif", ".bmp", ".ico", ".webp", ".tiff",
    # Office and help formats (need a dedicated extractor)
    ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx", ".odt", ".ods", ".chm",
    # Archives
    ".zip", ".tar", ".gz", ".rar", ".7z", ".bz2", ".xz",
    # Executables and compiled code
    ".exe", ".dll", ".so", ".dylib", ".bin", ".pyc", ".pyo", ".class", ".o", ".obj", ".wasm",
    # Media
    ".mp3", ".mp4", ".avi", ".mov", ".wav", ".flac", ".mkv", ".webm",
    # Fonts
    ".ttf", ".otf", ".woff", ".woff2", ".eot",
    # Databases, including our own index files
    ".db", ".sqlite", ".sqlite3", ".db-wal", ".db-shm",
}

# Printable ASCII plus tab, LF, CR
_TEXT_BYTES = frozenset(range(32, 127)) | {9, 10, 13}


def is_binary_extension(path: str | Path) -> bool:
    return Path(path).suffix.lower() in BINARY_EXTENSIONS


def is_binary_content(content: bytes, sample_size: int = 8192) -> bool:
    """Detect binary content by null bytes or a high share of control bytes.

    Bytes >= 0x80 count as text so UTF-8 documents are not rejected.
    """
    if not content:
        return False

    sample = content[:sample_size]
    if b"\x00" in sample:
        return True

    control = sum(1 for byte in sample if byte < 128 and byte not in _TEXT_BYTES)
    return (control / len(sample)) > 0.30


def detect_binary(path: str | Path, content: bytes) -> bool:
    """Detect if a file is binary, checking the extension before the bytes."""
    return is_binary_extension(path) or is_binary_content(content)


def decode_text(path: str | Path, content: bytes) -> Optional[str]:
    """Return the file's text, or None if it is binary."""
    if detect_binary(path, content):
        return None
    return content.decode("utf-8", errors="replace")
