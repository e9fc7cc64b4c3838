"""Reconciles CLI arguments, environment variables and the configuration file."""

from notehub.configuration.exceptions import (
    ConfigurationMissingError,
    NoRepositorySelectedError,
    UnknownRepositoryError,
)
from notehub.configuration.models import NotehubConfig
from notehub.utils.github import normalize_repository


def resolve_github_token(cli_github_pat_token: str | None, config: NotehubConfig) -> str:
    """Pick the GitHub token, preferring the CLI option or environment over the config file.

    Raises:
        ConfigurationMissingError: If no token is configured anywhere.
    """
    token = cli_github_pat_token or config.github_token
    if not token:
        raise ConfigurationMissingError(
            "No GitHub token configured. Run 'notehub init --token ...' or set GITHUB_PAT_TOKEN.",
            cli_name="--token",
            env_name="GITHUB_PAT_TOKEN",
        )
    return token


def resolve_repositories(
    config: NotehubConfig,
    requested: list[str] | None = None,
    all_repos: bool = False,
    fallback_to_active: bool = True,
) -> list[str]:
    """Resolve which repositories a command operates over.

    Args:
        config: The loaded configuration holding the registered repositories.
        requested: Repositories named explicitly on the command line.
        all_repos: Operate over every registered repository.
        fallback_to_active: Use the active repository when nothing else was requested.

    Raises:
        UnknownRepositoryError: If an explicitly requested repository is not registered.
        NoRepositorySelectedError: If the request resolves to no repository.
        ValueError: If a requested repository is not in 'owner/name' form.

    Returns:
        Ordered, duplicate-free list of normalized repositories.
    """
    selected: list[str] = []
    if all_repos:
        selected.extend(config.repos)

    for repo in requested or []:
        repo = normalize_repository(repo)
        if repo not in config.repos:
            raise UnknownRepositoryError(repo)
        if repo not in selected:
            selected.append(repo)

    if not selected and not all_repos and fallback_to_active and config.active_repo:
        selected.append(config.active_repo)

    if not selected:
        raise NoRepositorySelectedError()
    return selected
