"""Base ABC for remote issue sources."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

import structlog

from notehub.schemas.issue import IssuePage, RemoteIssue

logger = structlog.get_logger(__name__)


class IssueSourceBase(ABC):
    """Base ABC for a source of remote issues scoped to one repository."""

    @property
    @abstractmethod
    def repo(self) -> str:
        """The 'owner/name' repository this source reads from."""
        pass

    @abstractmethod
    async def get_issue(self, number: int) -> RemoteIssue:
        """Fetch a single issue by number."""
        pass

    @abstractmethod
    def iter_issue_pages(self) -> AsyncIterator[IssuePage]:
        """Yield every page of the issue listing, in order."""
        pass

    async def list_issues(self) -> list[RemoteIssue]:
        """Fetch the complete issue collection for the repository.

        The listing is all-or-nothing: every page is drained before anything is
        returned, and a failing page propagates its error with no partial result.
        Issues created mid-traversal shift later pages, so an issue number seen
        again on a later page is dropped in favour of its first occurrence.
        """
        issues: dict[int, RemoteIssue] = {}
        duplicates = 0
        async for page in self.iter_issue_pages():
            for issue in page.items:
                if issue.number in issues:
                    duplicates += 1
                    continue
                issues[issue.number] = issue
        if duplicates:
            logger.debug("Dropped repeated issues from listing", repo=self.repo, duplicate_count=duplicates)
        return list(issues.values())
