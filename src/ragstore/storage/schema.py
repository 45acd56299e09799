"""Database schema for the chunk store."""

SCHEMA = """
-- Chunks table: one row per chunk with its vector and provenance
CREATE TABLE IF NOT EXISTS document_chunks (
    id TEXT PRIMARY KEY,
    source_file TEXT NOT NULL,
    chunk_index INTEGER NOT NULL,
    content TEXT NOT NULL,
    embedding BLOB NOT NULL,   -- little-endian float32
    metadata TEXT,             -- JSON object
    file_hash TEXT NOT NULL,   -- digest of the whole source document
    indexed_at TEXT NOT NULL,
    UNIQUE (source_file, chunk_index)
);

-- File metadata table: last indexed state per file, for change detection
CREATE TABLE IF NOT EXISTS file_metadata (
    file_path TEXT PRIMARY KEY,
    file_hash TEXT NOT NULL,
    file_size INTEGER NOT NULL,
    file_modified REAL,        -- NULL when the document is not a file on disk
    last_indexed TEXT NOT NULL,
    chunk_count INTEGER NOT NULL
);

-- Store info table: key/value facts about the index (embedding model, ...)
CREATE TABLE IF NOT EXISTS store_info (
    key TEXT PRIMARY KEY,
    value TEXT
);

CREATE INDEX IF NOT EXISTS idx_chunks_source_file ON document_chunks(source_file);
CREATE INDEX IF NOT EXISTS idx_chunks_file_hash ON document_chunks(file_hash);
"""
