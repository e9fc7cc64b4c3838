"""Loads and saves the notehub configuration file."""

from pathlib import Path

import structlog
from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from notehub.configuration.env import get_notehub_home
from notehub.configuration.exceptions import ConfigurationError
from notehub.configuration.models import NotehubConfig

logger = structlog.get_logger(__name__)

CONFIG_FILE_NAME = "config.yaml"


def get_config_path() -> Path:
    """Get the configuration file path."""
    return get_notehub_home() / CONFIG_FILE_NAME


def create_yaml_dumper() -> YAML:
    """Creates a YAML object for writing the configuration file."""
    yaml_dumper = YAML()
    yaml_dumper.default_flow_style = False
    yaml_dumper.explicit_start = True
    yaml_dumper.indent(mapping=2, sequence=4, offset=2)
    return yaml_dumper


def load_config(path: Path | None = None) -> NotehubConfig:
    """Load the configuration file, returning defaults when it does not exist.

    Raises:
        ConfigurationError: If the file exists but cannot be read or is invalid.
    """
    path = path or get_config_path()
    if not path.exists():
        logger.debug("No configuration file found, using defaults", path=str(path))
        return NotehubConfig()
    try:
        with open(path, encoding="utf-8") as f:
            data = YAML(typ="safe").load(f) or {}
        return NotehubConfig.model_validate(data)
    except (OSError, YAMLError, ValidationError) as exc:
        raise ConfigurationError(f"Invalid configuration file {path}: {exc}") from exc


def save_config(config: NotehubConfig, path: Path | None = None) -> Path:
    """Write the configuration file, creating its directory when needed."""
    path = path or get_config_path()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            create_yaml_dumper().dump(config.model_dump(mode="python"), f)
    except OSError as exc:
        raise ConfigurationError(f"Failed to write configuration file {path}: {exc}") from exc
    logger.debug("Saved configuration", path=str(path))
    return path
