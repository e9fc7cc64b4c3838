"""Local cache store for GitHub issues, backed by SQLite."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from types import TracebackType
from typing import Any, Generator, Self

import structlog

from notehub.schemas.issue import IssueState, RemoteIssue
from notehub.storage import db
from notehub.storage.exceptions import DocumentNotFoundError, PersistenceError, StorageUnavailableError
from notehub.storage.models import (
    DocumentKind,
    DocumentMetadata,
    DocumentRecord,
    IssueMetadata,
    StoredIssueDetail,
    StoredIssueSummary,
    StoredNote,
    SyncCursor,
    issue_to_records,
)
from notehub.utils.timestamps import format_timestamp, parse_timestamp, utc_now

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)


class CacheStore:
    """Durable cache of documents, their metadata, notes and sync cursors.

    The store is the only writer of the cache tables. It holds one connection for
    its lifetime and assumes a single writing process; callers that may run
    concurrently should hold notehub.storage.locking.file_lock around it.
    """

    def __init__(self, conn: sqlite3.Connection, path: Path | str) -> None:
        """Wrap an already-migrated connection."""
        self.conn = conn
        self.path = path

    @classmethod
    def open(cls, path: Path | str | None = None) -> Self:
        """Open the store, creating its directory and schema when missing.

        Args:
            path: Database file; defaults to notehub.db under the notehub home.

        Raises:
            StorageUnavailableError: If the location cannot be created or opened.
        """
        db_path = Path(path) if path is not None else db.get_db_path()
        try:
            db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(str(db_path.parent), str(exc)) from exc
        try:
            conn = db.connect(db_path)
        except sqlite3.Error as exc:
            raise StorageUnavailableError(str(db_path), str(exc)) from exc
        try:
            db.migrate(conn)
        except sqlite3.Error as exc:
            conn.close()
            raise StorageUnavailableError(str(db_path), str(exc)) from exc
        logger.debug("Opened cache store", path=str(db_path))
        return cls(conn, db_path)

    def close(self) -> None:
        """Close the underlying connection."""
        self.conn.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    @contextmanager
    def _transaction(self, action: str, **context: Any) -> Generator[sqlite3.Connection, None, None]:
        """Run a block of statements atomically, translating storage failures."""
        try:
            with self.conn:
                yield self.conn
        except (sqlite3.Error, OverflowError) as exc:
            logger.error("Cache write failed", action=action, error=str(exc), **context)
            raise PersistenceError(f"Failed to {action}: {exc}") from exc

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[sqlite3.Row]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except (sqlite3.Error, OverflowError) as exc:
            # OverflowError: an integer parameter beyond SQLite's 64-bit range
            raise PersistenceError(f"Cache query failed: {exc}") from exc

    # Documents
    def upsert_document(self, document: DocumentRecord, metadata: DocumentMetadata) -> int:
        """Insert or overwrite a document together with its kind-specific metadata.

        Both rows are written in one transaction, so a failure never leaves a
        document without its metadata. The synchronization timestamp advances on
        every call, whether or not the content changed.

        Returns:
            The internal id of the document row.
        """
        if metadata.kind != document.kind:
            raise ValueError(f"{type(metadata).__name__} cannot describe a document of kind {document.kind.value!r}")
        context = {"repo": document.repo, "kind": document.kind.value, "external_id": document.external_id}
        with self._transaction("upsert document", **context) as conn:
            conn.execute(
                """INSERT INTO documents (repo, kind, external_id, title, body, updated_at, synced_at)
                   VALUES (?, ?, ?, ?, ?, ?, ?)
                   ON CONFLICT (repo, kind, external_id) DO UPDATE SET
                       title = excluded.title,
                       body = excluded.body,
                       updated_at = excluded.updated_at,
                       synced_at = excluded.synced_at""",
                (
                    document.repo,
                    document.kind.value,
                    document.external_id,
                    document.title,
                    document.body,
                    format_timestamp(document.updated_at),
                    format_timestamp(utc_now()),
                ),
            )
            document_id: int = conn.execute(
                "SELECT id FROM documents WHERE repo = ? AND kind = ? AND external_id = ?",
                (document.repo, document.kind.value, document.external_id),
            ).fetchone()[0]
            if isinstance(metadata, IssueMetadata):
                conn.execute(
                    """INSERT INTO issue_meta (document_id, number, state, labels)
                       VALUES (?, ?, ?, ?)
                       ON CONFLICT (document_id) DO UPDATE SET
                           number = excluded.number,
                           state = excluded.state,
                           labels = excluded.labels""",
                    (document_id, metadata.number, metadata.state.value, metadata.labels),
                )
        return document_id

    def upsert_issue(self, repo: str, issue: RemoteIssue) -> int:
        """Insert or overwrite the cached copy of a remote issue."""
        document, metadata = issue_to_records(repo, issue)
        return self.upsert_document(document, metadata)

    def list_issues(self, repo: str) -> list[StoredIssueSummary]:
        """List cached issues for a repository, highest number first."""
        rows = self._query(
            """SELECT issue_meta.number, documents.title
               FROM documents
               JOIN issue_meta ON issue_meta.document_id = documents.id
               WHERE documents.repo = ? AND documents.kind = ?
               ORDER BY issue_meta.number DESC""",
            (repo, DocumentKind.ISSUE.value),
        )
        return [StoredIssueSummary(number=row["number"], title=row["title"]) for row in rows]

    def get_issue(self, repo: str, number: int) -> StoredIssueDetail | None:
        """Get a cached issue, or None when it is not in the cache."""
        rows = self._query(
            """SELECT documents.title, documents.body, documents.updated_at,
                      issue_meta.state, issue_meta.labels
               FROM documents
               JOIN issue_meta ON issue_meta.document_id = documents.id
               WHERE documents.repo = ? AND documents.kind = ? AND issue_meta.number = ?""",
            (repo, DocumentKind.ISSUE.value, number),
        )
        if not rows:
            return None
        row = rows[0]
        return StoredIssueDetail(
            number=number,
            title=row["title"],
            body=row["body"] or "",
            updated_at=parse_timestamp(row["updated_at"]),
            state=IssueState.from_remote(row["state"]),
            labels=row["labels"] or "",
        )

    def _issue_document_id(self, repo: str, number: int) -> int:
        rows = self._query(
            """SELECT documents.id
               FROM documents
               JOIN issue_meta ON issue_meta.document_id = documents.id
               WHERE documents.repo = ? AND documents.kind = ? AND issue_meta.number = ?""",
            (repo, DocumentKind.ISSUE.value, number),
        )
        if not rows:
            raise DocumentNotFoundError(repo, number)
        return int(rows[0]["id"])

    # Notes
    def add_note(self, repo: str, number: int, body: str, anchor: str | None = None) -> StoredNote:
        """Attach a local note to a cached issue.

        Raises:
            DocumentNotFoundError: If the issue is not cached.
        """
        document_id = self._issue_document_id(repo, number)
        now = utc_now()
        with self._transaction("add note", repo=repo, number=number) as conn:
            cursor = conn.execute(
                """INSERT INTO notes (document_id, anchor, body, created_at, updated_at)
                   VALUES (?, ?, ?, ?, ?)""",
                (document_id, anchor, body, format_timestamp(now), format_timestamp(now)),
            )
        return StoredNote(
            id=int(cursor.lastrowid or 0),
            document_id=document_id,
            anchor=anchor,
            body=body,
            created_at=now,
            updated_at=now,
        )

    def list_notes(self, repo: str, number: int) -> list[StoredNote]:
        """List the notes attached to a cached issue, oldest first."""
        document_id = self._issue_document_id(repo, number)
        rows = self._query(
            """SELECT id, document_id, anchor, body, created_at, updated_at
               FROM notes WHERE document_id = ? ORDER BY created_at, id""",
            (document_id,),
        )
        return [
            StoredNote(
                id=row["id"],
                document_id=row["document_id"],
                anchor=row["anchor"],
                body=row["body"],
                created_at=parse_timestamp(row["created_at"]),
                updated_at=parse_timestamp(row["updated_at"]),
            )
            for row in rows
        ]

    # Sync state
    def get_sync_cursor(self, repo: str, resource: str) -> SyncCursor | None:
        """Get the sync bookkeeping row for a repository resource, if any."""
        rows = self._query(
            "SELECT cursor, updated_at FROM sync_state WHERE repo = ? AND resource = ?",
            (repo, resource),
        )
        if not rows:
            return None
        return SyncCursor(
            repo=repo,
            resource=resource,
            cursor=rows[0]["cursor"],
            updated_at=parse_timestamp(rows[0]["updated_at"]),
        )

    def set_sync_cursor(self, repo: str, resource: str, cursor: str | None) -> None:
        """Record the sync bookkeeping row for a repository resource."""
        with self._transaction("record sync cursor", repo=repo, resource=resource) as conn:
            conn.execute(
                """INSERT INTO sync_state (repo, resource, cursor, updated_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT (repo, resource) DO UPDATE SET
                       cursor = excluded.cursor,
                       updated_at = excluded.updated_at""",
                (repo, resource, cursor, format_timestamp(utc_now())),
            )
