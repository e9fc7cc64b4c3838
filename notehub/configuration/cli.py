"""Defines the Command Line Interface (CLI) using Typer."""

import asyncio
from contextlib import contextmanager
from typing import Generator, NoReturn

import typer
from dotenv import load_dotenv
from typer import Argument, Option
from typing_extensions import Annotated

from notehub.configuration.config import load_config, save_config
from notehub.configuration.env import get_settings
from notehub.configuration.exceptions import ConfigurationError, ConfigurationMissingError
from notehub.configuration.models import NotehubConfig
from notehub.configuration.reconcile import resolve_github_token, resolve_repositories
from notehub.github.abc import IssueSourceBase
from notehub.github.adapter import GitHubKitAdapter
from notehub.github.exceptions import RemoteFetchError
from notehub.storage.db import get_lock_path
from notehub.storage.exceptions import DocumentNotFoundError, LockError, PersistenceError, StorageUnavailableError
from notehub.storage.locking import file_lock
from notehub.storage.store import CacheStore
from notehub.synchronize.driver import SourceFactory, run_sync_workflow, view_issue
from notehub.utils.log import configure_logging

load_dotenv()

# Largest value a SQLite INTEGER column can hold
MAX_ISSUE_NUMBER = 2**63 - 1

CLI_ERRORS = (
    ConfigurationError,
    ConfigurationMissingError,
    RemoteFetchError,
    PersistenceError,
    StorageUnavailableError,
    DocumentNotFoundError,
    LockError,
    ValueError,
)

typer_app = typer.Typer(pretty_exceptions_show_locals=False, help="Interact with GitHub issues as local notes.")
repo_app = typer.Typer(help="Manage registered repositories.")
issue_app = typer.Typer(help="Inspect cached GitHub issues.")
note_app = typer.Typer(help="Manage local-only notes tied to issues.")


@typer_app.callback()
def main_callback(
    debug: Annotated[bool, Option("--debug", envvar="DEBUG", help="Enable debug logging.")] = False,
) -> None:
    """Interact with GitHub issues as local notes."""
    configure_logging(debug)


def fail(message: str) -> NoReturn:
    """Report an error on stderr and stop the command."""
    typer.echo(message, err=True)
    raise typer.Exit(1)


@contextmanager
def open_store() -> Generator[CacheStore, None, None]:
    """Open the cache store while holding the single-writer lock."""
    with file_lock(get_lock_path()):
        with CacheStore.open() as store:
            yield store


def make_source_factory(cli_github_pat_token: str | None, config: NotehubConfig) -> SourceFactory:
    """Build a factory creating a GitHub issue source per repository.

    The token is resolved when the first source is created, so commands served
    from the cache alone never need credentials.
    """
    settings = get_settings()

    async def create_source(repo: str) -> IssueSourceBase:
        token = resolve_github_token(cli_github_pat_token or settings.GITHUB_PAT_TOKEN, config)
        return await GitHubKitAdapter.create(
            repo=repo,
            github_pat_token=token,
            github_api_url=settings.GITHUB_API_URL,
            request_timeout=settings.NOTEHUB_REQUEST_TIMEOUT,
        )

    return create_source


def resolve_single_repository(config: NotehubConfig, repo: str | None) -> str:
    """Resolve the one repository a command operates on."""
    return resolve_repositories(config, [repo] if repo else None)[0]


@typer_app.command(name="init")
def init_cli(
    token: Annotated[str | None, Option("--token", help="GitHub personal access token used for API calls.")] = None,
    repo: Annotated[str | None, Option("--repo", help="Default repository to work with (owner/name).")] = None,
) -> None:
    """Configure the GitHub token and default repository."""
    try:
        config = load_config()
        if token:
            config.github_token = token
        if repo:
            config.register_repo(repo, make_active=True)
    except CLI_ERRORS as exc:
        fail(str(exc))

    if not (config.github_token and config.active_repo):
        fail("init requires both --token and --repo")

    try:
        path = save_config(config)
    except ConfigurationError as exc:
        fail(f"Failed to write config: {exc}")
    typer.echo(f"Configuration saved to {path}")


@typer_app.command(name="sync")
def sync_cli(
    repo: Annotated[list[str] | None, Option("--repo", "-r", help="Repository to sync (owner/name). Repeatable.")] = None,
    all_repos: Annotated[bool, Option("--all", help="Sync every registered repository.")] = False,
    token: Annotated[str | None, Option("--token", envvar="GITHUB_PAT_TOKEN", help="GitHub personal access token.")] = None,
) -> None:
    """Synchronize GitHub issues into the local cache."""
    try:
        config = load_config()
        repos = resolve_repositories(config, repo, all_repos=all_repos)
        github_pat_token = resolve_github_token(token, config)
        with open_store() as store:
            result = asyncio.run(run_sync_workflow(store, repos, make_source_factory(github_pat_token, config)))
    except CLI_ERRORS as exc:
        fail(str(exc))

    for repo_result in result.results:
        typer.echo(f"Cached {repo_result.cached_count} issues for {repo_result.repo}")
    for error in result.errors.values():
        typer.echo(str(error), err=True)
    if not result.succeeded:
        raise typer.Exit(1)


@issue_app.command(name="list")
def issue_list_cli(
    repo: Annotated[str | None, Option("--repo", "-r", help="Repository (owner/name). Defaults to the active one.")] = None,
) -> None:
    """List issues currently in the cache."""
    try:
        config = load_config()
        target = resolve_single_repository(config, repo)
        with open_store() as store:
            issues = store.list_issues(target)
    except CLI_ERRORS as exc:
        fail(str(exc))

    if not issues:
        typer.echo(f"No cached issues for {target}. Run 'notehub sync' first.")
        return
    for issue in issues:
        typer.echo(f"#{issue.number}\t{issue.title}")


@issue_app.command(name="view")
def issue_view_cli(
    number: Annotated[int, Argument(min=1, max=MAX_ISSUE_NUMBER, help="Issue number to display.")],
    repo: Annotated[str | None, Option("--repo", "-r", help="Repository (owner/name). Defaults to the active one.")] = None,
    token: Annotated[str | None, Option("--token", envvar="GITHUB_PAT_TOKEN", help="GitHub personal access token.")] = None,
) -> None:
    """View a single issue, fetching it from GitHub when it is not cached."""
    try:
        config = load_config()
        target = resolve_single_repository(config, repo)
        with open_store() as store:
            detail = asyncio.run(view_issue(store, target, number, make_source_factory(token, config)))
    except CLI_ERRORS as exc:
        fail(str(exc))

    typer.echo(f"#{detail.number} {detail.title}")
    typer.echo(f"State: {detail.state.value}")
    if detail.labels:
        typer.echo(f"Labels: {detail.labels}")
    typer.echo(f"Updated: {detail.updated_at.isoformat()}")
    typer.echo("")
    typer.echo(detail.body or "(no description)")


@note_app.command(name="add")
def note_add_cli(
    number: Annotated[int, Argument(min=1, max=MAX_ISSUE_NUMBER, help="Target issue number.")],
    text: Annotated[str, Argument(help="Text for the note.")],
    anchor: Annotated[str | None, Option("--anchor", help="Location within the issue the note refers to.")] = None,
    repo: Annotated[str | None, Option("--repo", "-r", help="Repository (owner/name). Defaults to the active one.")] = None,
) -> None:
    """Attach a note to a cached issue."""
    try:
        config = load_config()
        target = resolve_single_repository(config, repo)
        with open_store() as store:
            note = store.add_note(target, number, text, anchor=anchor)
    except CLI_ERRORS as exc:
        fail(str(exc))
    typer.echo(f"Added note {note.id} to issue #{number} of {target}")


@note_app.command(name="list")
def note_list_cli(
    number: Annotated[int, Argument(min=1, max=MAX_ISSUE_NUMBER, help="Target issue number.")],
    repo: Annotated[str | None, Option("--repo", "-r", help="Repository (owner/name). Defaults to the active one.")] = None,
) -> None:
    """List notes for a cached issue."""
    try:
        config = load_config()
        target = resolve_single_repository(config, repo)
        with open_store() as store:
            notes = store.list_notes(target, number)
    except CLI_ERRORS as exc:
        fail(str(exc))

    if not notes:
        typer.echo(f"No notes for issue #{number} of {target}")
        return
    for note in notes:
        location = f" [{note.anchor}]" if note.anchor else ""
        typer.echo(f"{note.id}{location} ({note.created_at.isoformat()}): {note.body}")


@repo_app.command(name="add")
def repo_add_cli(
    repo: Annotated[str, Argument(help="Repository name (owner/name).")],
    activate: Annotated[bool, Option("--activate", help="Make this the active repository.")] = False,
) -> None:
    """Register a repository."""
    try:
        config = load_config()
        added = config.register_repo(repo, make_active=activate)
        save_config(config)
    except CLI_ERRORS as exc:
        fail(str(exc))
    suffix = " (active)" if config.active_repo == added else ""
    typer.echo(f"Registered {added}{suffix}")


@repo_app.command(name="remove")
def repo_remove_cli(
    repo: Annotated[str, Argument(help="Repository name (owner/name).")],
) -> None:
    """Unregister a repository. Cached issues are kept."""
    try:
        config = load_config()
        removed = config.unregister_repo(repo)
        save_config(config)
    except CLI_ERRORS as exc:
        fail(str(exc))
    typer.echo(f"Unregistered {removed}")


@repo_app.command(name="use")
def repo_use_cli(
    repo: Annotated[str, Argument(help="Repository name (owner/name).")],
) -> None:
    """Set the active repository."""
    try:
        config = load_config()
        active = config.set_active(repo)
        save_config(config)
    except CLI_ERRORS as exc:
        fail(str(exc))
    typer.echo(f"Active repository is now {active}")


@repo_app.command(name="list")
def repo_list_cli() -> None:
    """List registered repositories, marking the active one."""
    try:
        config = load_config()
    except CLI_ERRORS as exc:
        fail(str(exc))

    if not config.repos:
        typer.echo("No repositories registered. Add one with 'notehub repo add owner/name'.")
        return
    for registered in config.repos:
        marker = "*" if registered == config.active_repo else " "
        typer.echo(f"{marker} {registered}")


typer_app.add_typer(repo_app, name="repo")
typer_app.add_typer(issue_app, name="issue")
typer_app.add_typer(note_app, name="note")


if __name__ == "__main__":
    typer_app()
