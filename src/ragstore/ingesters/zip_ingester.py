"""Ingester for ZIP archive files."""

import zipfile
from pathlib import Path
from typing import Iterator

from ragstore.models import Document, DocumentInfo
from ragstore.utils.binary import decode_text


class ZipIngester:
    """Ingester for ZIP archive files.

    Entries are identified as ``<archive path>/<entry name>``; they are not
    files on disk, so change detection falls back to hashing their text.
    """

    source_type = "zip"

    def can_handle(self, source: Path) -> bool:
        return source.suffix.lower() == ".zip" and source.is_file()

    def ingest(self, source: Path) -> Iterator[Document]:
        archive = source.resolve()
        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue

                raw_content = zf.read(info.filename)
                content = decode_text(info.filename, raw_content)
                yield Document(
                    info=DocumentInfo(
                        path=f"{archive}/{info.filename}",
                        size_bytes=info.file_size,
                        extension=Path(info.filename).suffix.lower(),
                        is_binary=content is None,
                    ),
                    content=content,
                )
