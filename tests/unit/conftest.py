"""Fixtures for unit tests."""

from datetime import datetime, timezone
from pathlib import Path
from typing import AsyncIterator, Callable, Generator

import pytest
import structlog

from notehub.github.abc import IssueSourceBase
from notehub.github.exceptions import RemoteFetchError
from notehub.schemas.issue import IssuePage, IssueState, RemoteIssue
from notehub.storage.store import CacheStore


@pytest.fixture(autouse=True)
def configure_structlog_for_caplog() -> Generator[None, None, None]:
    """Configure structlog for use with caplog."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
    yield
    structlog.reset_defaults()


@pytest.fixture
def notehub_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point NOTEHUB_HOME at a temporary directory so tests never touch real user data."""
    home = tmp_path / ".notehub"
    monkeypatch.setenv("NOTEHUB_HOME", str(home))
    monkeypatch.delenv("GITHUB_PAT_TOKEN", raising=False)
    return home


@pytest.fixture
def store(tmp_path: Path) -> Generator[CacheStore, None, None]:
    """A cache store backed by a fresh database file."""
    cache = CacheStore.open(tmp_path / "cache" / "notehub.db")
    yield cache
    cache.close()


@pytest.fixture
def make_issue() -> Callable[..., RemoteIssue]:
    """Factory for remote issues with sensible defaults."""

    def _make_issue(
        number: int,
        title: str | None = None,
        body: str | None = "Body",
        state: IssueState = IssueState.OPEN,
        labels: list[str] | None = None,
        updated_at: datetime | None = None,
    ) -> RemoteIssue:
        return RemoteIssue(
            number=number,
            title=title or f"Issue {number}",
            body=body,
            state=state,
            labels=labels or [],
            updated_at=updated_at or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        )

    return _make_issue


class FakeIssueSource(IssueSourceBase):
    """In-memory issue source serving pre-built pages and records every call."""

    def __init__(
        self,
        repo: str,
        pages: list[list[RemoteIssue]] | None = None,
        issues: dict[int, RemoteIssue] | None = None,
        fail_on_page: int | None = None,
    ) -> None:
        self._repo = repo
        self.pages = pages or [[]]
        self.issues = issues or {}
        self.fail_on_page = fail_on_page
        self.get_issue_calls: list[int] = []
        self.fetched_pages: list[int] = []

    @property
    def repo(self) -> str:
        return self._repo

    async def get_issue(self, number: int) -> RemoteIssue:
        self.get_issue_calls.append(number)
        if number not in self.issues:
            raise RemoteFetchError(self.repo, "Not Found", number=number, status_code=404)
        return self.issues[number]

    async def iter_issue_pages(self) -> AsyncIterator[IssuePage]:
        for index, items in enumerate(self.pages, start=1):
            self.fetched_pages.append(index)
            if index == self.fail_on_page:
                raise RemoteFetchError(self.repo, "Server Error", page=index, status_code=500)
            next_page = index + 1 if index < len(self.pages) else None
            yield IssuePage(page=index, items=items, next_page=next_page)


@pytest.fixture
def fake_source_class() -> type[FakeIssueSource]:
    """The in-memory issue source class."""
    return FakeIssueSource
