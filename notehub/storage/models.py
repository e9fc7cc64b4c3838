"""Records read from and written to the local cache."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import ClassVar, TypeAlias

from notehub.schemas.issue import IssueState, RemoteIssue

LABEL_SEPARATOR = ", "


class DocumentKind(str, Enum):
    """Enum for the kinds of cached documents."""

    ISSUE = "issue"


@dataclass(frozen=True)
class DocumentRecord:
    """Kind-independent columns of a cached document."""

    repo: str
    kind: DocumentKind
    external_id: str
    title: str
    body: str
    updated_at: datetime


@dataclass(frozen=True)
class IssueMetadata:
    """Metadata stored alongside documents of kind 'issue'."""

    kind: ClassVar[DocumentKind] = DocumentKind.ISSUE

    number: int
    state: IssueState
    labels: str


# Kind-specific metadata; one member per DocumentKind.
DocumentMetadata: TypeAlias = IssueMetadata


def issue_to_records(repo: str, issue: RemoteIssue) -> tuple[DocumentRecord, IssueMetadata]:
    """Split a remote issue into its document row and issue metadata row."""
    document = DocumentRecord(
        repo=repo,
        kind=DocumentKind.ISSUE,
        external_id=str(issue.number),
        title=issue.title,
        body=issue.body or "",
        updated_at=issue.updated_at,
    )
    metadata = IssueMetadata(
        number=issue.number,
        state=issue.state,
        labels=LABEL_SEPARATOR.join(issue.labels),
    )
    return document, metadata


@dataclass(frozen=True)
class StoredIssueSummary:
    """An issue as shown in listings."""

    number: int
    title: str


@dataclass(frozen=True)
class StoredIssueDetail:
    """A fully cached issue."""

    number: int
    title: str
    body: str
    updated_at: datetime
    state: IssueState = IssueState.UNKNOWN
    labels: str = ""


@dataclass(frozen=True)
class StoredNote:
    """A local annotation attached to a cached document."""

    id: int
    document_id: int
    anchor: str | None
    body: str
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class SyncCursor:
    """Bookkeeping for the last synchronization of a resource."""

    repo: str
    resource: str
    cursor: str | None
    updated_at: datetime
