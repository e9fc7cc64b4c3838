"""Unit tests for the configuration.reconcile module."""

import pytest

from notehub.configuration.exceptions import (
    ConfigurationMissingError,
    NoRepositorySelectedError,
    UnknownRepositoryError,
)
from notehub.configuration.models import NotehubConfig
from notehub.configuration.reconcile import resolve_github_token, resolve_repositories


@pytest.fixture
def config() -> NotehubConfig:
    """A configuration with three registered repositories, the second active."""
    return NotehubConfig(repos=["acme/a", "acme/b", "acme/c"], active_repo="acme/b")


def test_resolve_github_token_prefers_cli() -> None:
    """A token given on the command line wins over the configured one."""
    assert resolve_github_token("cli-token", NotehubConfig(github_token="config-token")) == "cli-token"


def test_resolve_github_token_falls_back_to_config() -> None:
    """The configured token is used when none is passed."""
    assert resolve_github_token(None, NotehubConfig(github_token="config-token")) == "config-token"


def test_resolve_github_token_missing() -> None:
    """A missing token names how to supply it."""
    with pytest.raises(ConfigurationMissingError) as exc_info:
        resolve_github_token(None, NotehubConfig())
    assert exc_info.value.cli_name == "--token"
    assert exc_info.value.env_name == "GITHUB_PAT_TOKEN"


def test_resolve_repositories_all(config: NotehubConfig) -> None:
    """--all selects every registered repository in registration order."""
    assert resolve_repositories(config, all_repos=True) == ["acme/a", "acme/b", "acme/c"]


def test_resolve_repositories_all_with_explicit_has_no_duplicates(config: NotehubConfig) -> None:
    """Explicit repositories on top of --all are not repeated."""
    assert resolve_repositories(config, requested=["acme/c"], all_repos=True) == ["acme/a", "acme/b", "acme/c"]


def test_resolve_repositories_explicit(config: NotehubConfig) -> None:
    """Explicit repositories are normalized, deduplicated and kept in the given order."""
    assert resolve_repositories(config, requested=["acme/c/", " acme/a", "acme/c"]) == ["acme/c", "acme/a"]


def test_resolve_repositories_unknown(config: NotehubConfig) -> None:
    """Requesting an unregistered repository fails instead of silently fetching it."""
    with pytest.raises(UnknownRepositoryError) as exc_info:
        resolve_repositories(config, requested=["acme/zzz"])
    assert exc_info.value.repo == "acme/zzz"


def test_resolve_repositories_malformed(config: NotehubConfig) -> None:
    """A repository not in owner/name form is rejected."""
    with pytest.raises(ValueError):
        resolve_repositories(config, requested=["just-a-name"])


def test_resolve_repositories_falls_back_to_active(config: NotehubConfig) -> None:
    """With nothing requested the active repository is used."""
    assert resolve_repositories(config) == ["acme/b"]


def test_resolve_repositories_without_fallback(config: NotehubConfig) -> None:
    """The active repository is not used when fallback is disabled."""
    with pytest.raises(NoRepositorySelectedError):
        resolve_repositories(config, fallback_to_active=False)


def test_resolve_repositories_nothing_selected() -> None:
    """With no active repository and nothing requested, selection fails."""
    with pytest.raises(NoRepositorySelectedError):
        resolve_repositories(NotehubConfig(repos=["acme/a"]))


def test_resolve_repositories_all_with_nothing_registered() -> None:
    """--all over an empty registry fails rather than syncing nothing."""
    with pytest.raises(NoRepositorySelectedError):
        resolve_repositories(NotehubConfig(), all_repos=True)
