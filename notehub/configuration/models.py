"""Models for the persisted notehub configuration."""

from pydantic import BaseModel, Field, field_validator, model_validator

from notehub.utils.github import normalize_repository


class NotehubConfig(BaseModel):
    """Pydantic model for the notehub configuration file."""

    github_token: str | None = None
    repos: list[str] = Field(default_factory=list)
    active_repo: str | None = None

    @field_validator("repos")
    @classmethod
    def normalize_repos(cls, repos: list[str]) -> list[str]:
        """Normalize registered repositories and drop duplicates, keeping order."""
        normalized: list[str] = []
        for repo in repos:
            repo = normalize_repository(repo)
            if repo not in normalized:
                normalized.append(repo)
        return normalized

    @field_validator("active_repo")
    @classmethod
    def normalize_active_repo(cls, repo: str | None) -> str | None:
        """Normalize the active repository."""
        return normalize_repository(repo) if repo else None

    @model_validator(mode="after")
    def register_active_repo(self) -> "NotehubConfig":
        """The active repository is always one of the registered repositories."""
        if self.active_repo and self.active_repo not in self.repos:
            self.repos.append(self.active_repo)
        return self

    def register_repo(self, repo: str, make_active: bool = False) -> str:
        """Register a repository, optionally making it active.

        The first repository registered becomes active automatically.
        """
        repo = normalize_repository(repo)
        if repo not in self.repos:
            self.repos.append(repo)
        if make_active or self.active_repo is None:
            self.active_repo = repo
        return repo

    def unregister_repo(self, repo: str) -> str:
        """Remove a registered repository, clearing it as active if needed."""
        repo = normalize_repository(repo)
        if repo not in self.repos:
            raise ValueError(f"Repository {repo} is not registered.")
        self.repos.remove(repo)
        if self.active_repo == repo:
            self.active_repo = None
        return repo

    def set_active(self, repo: str) -> str:
        """Make an already registered repository the active one."""
        repo = normalize_repository(repo)
        if repo not in self.repos:
            raise ValueError(f"Repository {repo} is not registered.")
        self.active_repo = repo
        return repo
