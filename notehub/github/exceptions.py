"""Contains exceptions raised when talking to the GitHub API."""


class RemoteFetchError(Exception):
    """Raised when a GitHub issue or issue page cannot be fetched."""

    def __init__(
        self,
        repo: str,
        reason: str,
        number: int | None = None,
        page: int | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initializes the exception with the repository and the item or page that failed."""
        if number is not None:
            target = f"issue #{number} of {repo}"
        elif page is not None:
            target = f"page {page} of issues for {repo}"
        else:
            target = f"issues for {repo}"
        super().__init__(f"Failed to fetch {target}: {reason}")
        self.repo = repo
        self.reason = reason
        self.number = number
        self.page = page
        self.status_code = status_code
