"""Orchestrates synchronization of GitHub issues into the local cache."""

import time
from typing import Awaitable, Callable

import structlog

from notehub.github.abc import IssueSourceBase
from notehub.github.exceptions import RemoteFetchError
from notehub.storage.exceptions import PersistenceError
from notehub.storage.models import StoredIssueDetail
from notehub.storage.store import CacheStore
from notehub.synchronize.results import RepositorySyncResult, SyncWorkflowResult
from notehub.utils.timestamps import format_timestamp

logger: structlog.stdlib.BoundLogger = structlog.get_logger(__name__)

ISSUES_RESOURCE = "issues"

SourceFactory = Callable[[str], Awaitable[IssueSourceBase]]


async def sync_repository(store: CacheStore, source: IssueSourceBase) -> RepositorySyncResult:
    """Fully re-sync one repository's issues into the cache.

    The complete remote listing is fetched before anything is written. If the
    listing fails the error propagates and the cache is left exactly as it was.
    Each issue is then upserted on its own, so issues written before a storage
    failure stay committed.
    """
    start_time = time.time()
    logger.info("Fetching issues", repo=source.repo)
    issues = await source.list_issues()

    for issue in issues:
        store.upsert_issue(source.repo, issue)

    # Bookkeeping only: every sync is still a full re-traversal.
    latest = max((issue.updated_at for issue in issues), default=None)
    store.set_sync_cursor(source.repo, ISSUES_RESOURCE, format_timestamp(latest) if latest else None)

    duration = round(time.time() - start_time, 2)
    logger.info("Synced repository", repo=source.repo, cached_count=len(issues), duration=duration)
    return RepositorySyncResult(source.repo, len(issues), duration)


async def run_sync_workflow(store: CacheStore, repos: list[str], source_factory: SourceFactory) -> SyncWorkflowResult:
    """Sync each repository in order.

    A remote failure for one repository is recorded and does not stop, or roll
    back, the repositories around it. Storage failures are fatal and propagate.
    """
    workflow_result = SyncWorkflowResult()
    for repo in repos:
        try:
            source = await source_factory(repo)
            workflow_result.results.append(await sync_repository(store, source))
        except RemoteFetchError as exc:
            logger.error("Repository sync failed", repo=repo, error=str(exc))
            workflow_result.errors[repo] = exc
    return workflow_result


async def view_issue(store: CacheStore, repo: str, number: int, source_factory: SourceFactory) -> StoredIssueDetail:
    """Return an issue from the cache, fetching and caching it on a miss.

    On a cache hit no remote source is created. On a miss the issue is fetched,
    upserted, and read back so the result matches what was persisted.
    """
    cached = store.get_issue(repo, number)
    if cached is not None:
        logger.debug("Cache hit", repo=repo, number=number)
        return cached

    logger.info("Issue not cached, fetching from GitHub", repo=repo, number=number)
    source = await source_factory(repo)
    issue = await source.get_issue(number)
    store.upsert_issue(repo, issue)

    stored = store.get_issue(repo, number)
    if stored is None:
        raise PersistenceError(f"Issue #{number} of {repo} was not readable after caching it")
    return stored
