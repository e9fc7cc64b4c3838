"""Pydantic schema for GitHub issues as consumed by the local cache."""

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class IssueState(str, Enum):
    """Enum for the state of a GitHub issue."""

    OPEN = "open"
    CLOSED = "closed"
    UNKNOWN = "unknown"

    @classmethod
    def from_remote(cls, value: Any) -> "IssueState":
        """Map a remote state value onto a known state, falling back to UNKNOWN."""
        raw = getattr(value, "value", value)
        try:
            return cls(str(raw).lower())
        except ValueError:
            return cls.UNKNOWN


class RemoteIssue(BaseModel):
    """Pydantic model for a GitHub issue fetched from the remote API."""

    number: int
    title: str
    body: str | None = None
    state: IssueState = IssueState.UNKNOWN
    labels: list[str] = Field(default_factory=list)
    updated_at: datetime

    @classmethod
    def from_github(cls, issue: Any) -> "RemoteIssue":
        """Build a RemoteIssue from a githubkit Issue model.

        Labels may be delivered either as plain strings or as label objects with a
        name; both are flattened to names in remote order, dropping unnamed labels.
        """
        labels: list[str] = []
        for label in getattr(issue, "labels", None) or []:
            name = label if isinstance(label, str) else getattr(label, "name", None)
            if isinstance(name, str) and name:
                labels.append(name)
        body = getattr(issue, "body", None)
        return cls(
            number=issue.number,
            title=issue.title,
            body=body if isinstance(body, str) else None,
            state=IssueState.from_remote(getattr(issue, "state", None)),
            labels=labels,
            updated_at=issue.updated_at,
        )


class IssuePage(BaseModel):
    """A single page of a paginated issue listing.

    next_page is the continuation token for the following page, or None when
    this is the last page.
    """

    page: int
    items: list[RemoteIssue]
    next_page: int | None = None
