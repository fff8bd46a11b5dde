"""Configuration for dropmodules."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError

from dropmodules.cleaner import DEFAULT_MAX_CONCURRENT
from dropmodules.recursive_scanner import DEFAULT_SIZE_WORKERS, DEFAULT_TARGET
from dropmodules.scanner import expand_path

log = logging.getLogger(__name__)

CONFIG_DIR = expand_path("~/.dropmodules")
CONFIG_FILE = CONFIG_DIR / "config.json"


class ConfigError(Exception):
    """The configuration file holds invalid values."""


class Settings(BaseModel):
    """User-tunable settings."""

    target_name: str = Field(DEFAULT_TARGET, min_length=1, description="Directory name to look for")
    max_concurrent_deletions: int = Field(
        DEFAULT_MAX_CONCURRENT, ge=1, description="Deletions allowed in progress at once"
    )
    max_size_workers: int = Field(
        DEFAULT_SIZE_WORKERS, ge=1, description="Threads used to measure found directories"
    )
    page_size: int = Field(50, ge=1, description="Rows shown per page in the selection list")

    def with_overrides(self, **overrides) -> "Settings":
        """Return a copy with every non-None override applied and validated."""
        data = self.model_dump()
        data.update({k: v for k, v in overrides.items() if v is not None})
        try:
            return Settings(**data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e


def load_settings(path: Optional[Path] = None) -> Settings:
    """
    Load settings from the config file.

    A missing or unreadable file gives the defaults.

    Args:
        path: Config file to read (default: ~/.dropmodules/config.json)

    Returns:
        Settings

    Raises:
        ConfigError: If the file contains invalid values
    """
    config_file = path or CONFIG_FILE
    if not config_file.exists():
        return Settings()

    try:
        with open(config_file) as f:
            data = json.load(f)
    except (json.JSONDecodeError, OSError) as e:
        log.warning("Ignoring unreadable config %s: %s", config_file, e)
        return Settings()

    if not isinstance(data, dict):
        log.warning("Ignoring config %s: expected a JSON object", config_file)
        return Settings()

    try:
        return Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"invalid config {config_file}: {e}") from e
