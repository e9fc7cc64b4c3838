"""Pydantic Settings model for environment configuration."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment variable settings for the application."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # Generic application-wide settings
    DEBUG: bool = False
    # Root directory for the cache database, config file and lock file
    NOTEHUB_HOME: Path | None = None

    # GitHub API settings
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_PAT_TOKEN: str | None = None
    NOTEHUB_REQUEST_TIMEOUT: float = 30.0


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()


def get_notehub_home() -> Path:
    """Get the notehub home directory (~/.notehub unless NOTEHUB_HOME is set)."""
    home = get_settings().NOTEHUB_HOME
    if home is not None:
        return Path(home).expanduser()
    return Path.home() / ".notehub"
