"""Custom exceptions for the local cache store."""


class StorageUnavailableError(Exception):
    """Raised when the cache database cannot be created or opened."""

    def __init__(self, path: str, reason: str) -> None:
        """Initializes the exception with the database location and the cause."""
        super().__init__(f"Unable to open cache database at {path}: {reason}")
        self.path = path
        self.reason = reason


class PersistenceError(Exception):
    """Raised when a cache read or write fails at the storage layer."""

    pass


class DocumentNotFoundError(Exception):
    """Raised when an operation needs a cached document that does not exist."""

    def __init__(self, repo: str, number: int) -> None:
        """Initializes the exception with the repository and issue number."""
        super().__init__(f"Issue #{number} of {repo} is not in the local cache")
        self.repo = repo
        self.number = number


class LockError(Exception):
    """Raised when unable to acquire the cache file lock."""

    pass
