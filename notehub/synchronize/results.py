"""Contains results of synchronization runs."""

from notehub.github.exceptions import RemoteFetchError


class RepositorySyncResult:
    """Contains the result of a full sync of one repository."""

    def __init__(self, repo: str, cached_count: int, duration: float = 0.0) -> None:
        """Initialize the result with the repository and the number of issues cached."""
        self.repo = repo
        self.cached_count = cached_count
        self.duration = duration


class SyncWorkflowResult:
    """Contains results of a sync across one or more repositories."""

    def __init__(
        self,
        results: list[RepositorySyncResult] | None = None,
        errors: dict[str, RemoteFetchError] | None = None,
    ) -> None:
        """Initialize with per-repository successes and failures."""
        self.results = results or []
        self.errors = errors or {}

    @property
    def total_cached(self) -> int:
        """Total number of issues cached across successful repositories."""
        return sum(result.cached_count for result in self.results)

    @property
    def succeeded(self) -> bool:
        """Whether every repository synced without error."""
        return not self.errors
