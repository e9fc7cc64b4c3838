"""Database module for the notehub cache - schema, connection, migrations."""

import sqlite3
from pathlib import Path

import structlog

from notehub.configuration.env import get_notehub_home

logger = structlog.get_logger(__name__)

DB_FILE_NAME = "notehub.db"
LOCK_FILE_NAME = ".lock"

# Current schema version
SCHEMA_VERSION = 1

DOCUMENTS_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS documents (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    repo TEXT NOT NULL,
    kind TEXT NOT NULL,
    external_id TEXT NOT NULL,
    title TEXT NOT NULL,
    body TEXT NOT NULL DEFAULT '',
    updated_at TEXT NOT NULL,
    synced_at TEXT NOT NULL,
    UNIQUE (repo, kind, external_id)
);
"""

ISSUE_META_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS issue_meta (
    document_id INTEGER PRIMARY KEY,
    number INTEGER NOT NULL,
    state TEXT,
    labels TEXT,
    FOREIGN KEY (document_id) REFERENCES documents(id) ON DELETE CASCADE
);
"""

NOTES_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS notes (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    document_id INTEGER NOT NULL,
    anchor TEXT,
    body TEXT NOT NULL,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    FOREIGN KEY (document_id) REFERENCES documents(id) ON DELETE CASCADE
);
"""

SYNC_STATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS sync_state (
    repo TEXT NOT NULL,
    resource TEXT NOT NULL,
    cursor TEXT,
    updated_at TEXT NOT NULL,
    PRIMARY KEY (repo, resource)
);
"""

METADATA_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""

INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_issue_meta_number ON issue_meta(number);
CREATE INDEX IF NOT EXISTS idx_notes_document ON notes(document_id);
"""


def get_db_path() -> Path:
    """Get the cache database path."""
    return get_notehub_home() / DB_FILE_NAME


def get_lock_path() -> Path:
    """Get the file lock path guarding the cache database."""
    return get_notehub_home() / LOCK_FILE_NAME


def connect(db_path: Path | str) -> sqlite3.Connection:
    """Open a connection with write-ahead logging and foreign keys enabled."""
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    try:
        conn.execute("PRAGMA journal_mode = WAL")
        conn.execute("PRAGMA foreign_keys = ON")
    except sqlite3.Error:
        conn.close()
        raise
    return conn


def migrate(conn: sqlite3.Connection) -> None:
    """Create any missing tables and indexes.

    Safe to call on every open: each statement is a no-op when the object exists.
    """
    conn.executescript(
        f"""
        -- Documents: cached remote items, one row per (repo, kind, external_id)
        {DOCUMENTS_TABLE_SQL}

        -- Issue metadata: one row per document of kind 'issue'
        {ISSUE_META_TABLE_SQL}

        -- Notes: local-only annotations attached to documents
        {NOTES_TABLE_SQL}

        -- Sync state: per (repo, resource) cursor bookkeeping
        {SYNC_STATE_TABLE_SQL}

        -- Metadata: system state
        {METADATA_TABLE_SQL}

        {INDEXES_SQL}
        """
    )
    cursor = conn.execute("SELECT value FROM metadata WHERE key = 'schema_version'")
    row = cursor.fetchone()
    if row is None:
        conn.execute(
            "INSERT INTO metadata (key, value) VALUES ('schema_version', ?)",
            (str(SCHEMA_VERSION),),
        )
        conn.commit()
        logger.debug("Initialized cache schema", schema_version=SCHEMA_VERSION)
    elif int(row[0]) > SCHEMA_VERSION:
        raise sqlite3.DatabaseError(f"cache schema version {row[0]} is newer than supported version {SCHEMA_VERSION}")
