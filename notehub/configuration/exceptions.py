"""Contains exceptions raised when reconciling application configuration."""


class ConfigurationError(Exception):
    """Raised when the configuration file cannot be read or written."""

    pass


class ConfigurationMissingError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, message: str, cli_name: str | None = None, env_name: str | None = None) -> None:
        """Initializes the exception with how the missing element can be supplied."""
        super().__init__(message)
        self.cli_name = cli_name
        self.env_name = env_name


class NoRepositorySelectedError(ConfigurationMissingError):
    """Raised when a command needs a repository and none was selected."""

    def __init__(self) -> None:
        """Initializes the exception with remediation hints."""
        super().__init__(
            "No repository selected. Pass --repo, use --all, or set an active repository with 'notehub repo use'.",
            cli_name="--repo",
        )


class UnknownRepositoryError(ConfigurationMissingError):
    """Raised when a requested repository has not been registered."""

    def __init__(self, repo: str) -> None:
        """Initializes the exception with the unregistered repository."""
        super().__init__(f"Repository {repo} is not registered. Add it with 'notehub repo add {repo}'.")
        self.repo = repo
