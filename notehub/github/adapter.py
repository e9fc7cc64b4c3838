"""GitHub issue source adapter for the githubkit library."""

from functools import wraps
from typing import Any, AsyncIterator, Awaitable, Callable, Self, TypeVar

import structlog
from githubkit import Response
from githubkit.exception import GitHubException
from githubkit.versions.latest.models import Issue
from pydantic import ValidationError

from notehub.schemas.issue import IssuePage, RemoteIssue
from notehub.utils.github import parse_next_page, split_repository
from notehub.utils.retry import retry_on_rate_limit

from .abc import IssueSourceBase
from .client import DEFAULT_GITHUB_API_URL, DEFAULT_REQUEST_TIMEOUT, get_github_client
from .exceptions import RemoteFetchError

logger = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])

DEFAULT_PAGE_SIZE = 50


def handle_github_errors(context: str) -> Callable[[F], F]:
    """Decorator translating githubkit failures into RemoteFetchError.

    The first positional argument of the wrapped method (or the keyword named by
    context) identifies what was being fetched, and is carried on the raised error.
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(self: "GitHubKitAdapter", *args: Any, **kwargs: Any) -> Any:
            try:
                return await func(self, *args, **kwargs)
            except (GitHubException, ValidationError) as exc:
                target = kwargs.get(context, args[0] if args else None)
                status_code = getattr(getattr(exc, "response", None), "status_code", None)
                logger.error(
                    "GitHub request failed",
                    function=func.__name__,
                    repo=self.repo,
                    status_code=status_code,
                    error_type=type(exc).__name__,
                    error=str(exc),
                    **{context: target},
                )
                raise RemoteFetchError(
                    self.repo,
                    str(exc) or type(exc).__name__,
                    status_code=status_code,
                    **{context: target},
                ) from exc

        return wrapper  # type: ignore

    return decorator


class GitHubKitAdapter(IssueSourceBase):
    """Issue source backed by the githubkit REST client."""

    def __init__(self, client: Any, owner: str, repo_name: str, per_page: int = DEFAULT_PAGE_SIZE) -> None:
        """Initialize the adapter with an already-initialized client."""
        self.client = client
        self.owner = owner
        self.repo_name = repo_name
        self.per_page = per_page

    @property
    def repo(self) -> str:
        """The 'owner/name' repository this adapter reads from."""
        return f"{self.owner}/{self.repo_name}"

    @classmethod
    async def create(
        cls,
        repo: str,
        github_pat_token: str,
        github_api_url: str = DEFAULT_GITHUB_API_URL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ) -> Self:
        """Create a new adapter for a repository in 'owner/name' format."""
        owner, repo_name = split_repository(repo)
        logger.debug(
            "Creating client for GitHub instance and repository",
            github_api_url=github_api_url,
            owner=owner,
            repo_name=repo_name,
        )
        client = await get_github_client(
            github_pat_token=github_pat_token,
            github_api_url=github_api_url,
            request_timeout=request_timeout,
        )
        return cls(client, owner, repo_name)

    @handle_github_errors("number")
    @retry_on_rate_limit()
    async def get_issue(self, number: int) -> RemoteIssue:
        """Get a single issue from the repository."""
        response: Response[Issue] = await self.client.rest.issues.async_get(
            owner=self.owner,
            repo=self.repo_name,
            issue_number=number,
        )
        return RemoteIssue.from_github(response.parsed_data)

    @handle_github_errors("page")
    @retry_on_rate_limit()
    async def fetch_issue_page(self, page: int) -> IssuePage:
        """Fetch one page of the repository's issues, open and closed, newest first."""
        response: Response[list[Issue]] = await self.client.rest.issues.async_list_for_repo(
            owner=self.owner,
            repo=self.repo_name,
            state="all",
            sort="created",
            direction="desc",
            per_page=self.per_page,
            page=page,
        )
        items = [RemoteIssue.from_github(issue) for issue in response.parsed_data]
        next_page = parse_next_page(response.headers.get("link"))
        logger.debug("Fetched issue page", repo=self.repo, page=page, item_count=len(items), next_page=next_page)
        return IssuePage(page=page, items=items, next_page=next_page)

    async def iter_issue_pages(self) -> AsyncIterator[IssuePage]:
        """Walk the issue listing page by page until no continuation page is advertised."""
        page: int | None = 1
        while page is not None:
            current = await self.fetch_issue_page(page)
            yield current
            if current.next_page is not None and current.next_page <= page:
                raise RemoteFetchError(self.repo, f"continuation page {current.next_page} does not advance", page=page)
            page = current.next_page

    async def list_issues(self) -> list[RemoteIssue]:
        """List every issue of the repository, draining all pages before returning."""
        issues = await super().list_issues()
        logger.info("Fetched all issues", repo=self.repo, issue_count=len(issues))
        return issues
