"""Configuration loading and validation for cryptofuncs."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, field_validator

from cryptofuncs.core.digests import DEFAULT_DIGEST, query_digest_size
from cryptofuncs.exceptions import ConfigError


class HashConfig(BaseModel):
    """Configuration for the hash template functions."""

    default_digest: str = DEFAULT_DIGEST

    @field_validator("default_digest")
    @classmethod
    def _check_digest(cls, value: str) -> str:
        value = value.lower()
        if query_digest_size(value) is None:
            raise ValueError(f"unknown digest type: {value}")
        return value


class RenderConfig(BaseModel):
    """Configuration for the render command."""

    jobs: int = Field(default=1, ge=1)
    output_format: Literal["text", "json"] = "text"


class Config(BaseModel):
    """Main configuration for cryptofuncs."""

    version: int = 1
    hash: HashConfig = Field(default_factory=HashConfig)
    render: RenderConfig = Field(default_factory=RenderConfig)
    templates: dict[str, str] = Field(default_factory=dict)


def get_xdg_config_home() -> Path:
    """Get the XDG config home directory.

    Returns:
        Path to the XDG config home (respects XDG_CONFIG_HOME env var).
    """
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def find_config_file(config_path: Path | None = None) -> Path | None:
    """Find the configuration file using XDG conventions.

    Search order (first found wins):
    1. --config PATH (command line override)
    2. ./config.yaml (current directory)
    3. ./.cryptofuncs/config.yaml (project directory)
    4. $XDG_CONFIG_HOME/cryptofuncs/config.yaml

    Args:
        config_path: Optional explicit config path from command line.

    Returns:
        Path to config file if found, None otherwise.
    """
    if config_path is not None:
        if config_path.exists():
            return config_path
        raise ConfigError(f"Config file not found: {config_path}")

    cwd_config = Path("config.yaml")
    if cwd_config.exists():
        return cwd_config

    project_config = Path(".cryptofuncs/config.yaml")
    if project_config.exists():
        return project_config

    xdg_config = get_xdg_config_home() / "cryptofuncs" / "config.yaml"
    if xdg_config.exists():
        return xdg_config

    return None


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from file or return defaults.

    Args:
        config_path: Optional explicit config path.

    Returns:
        Config object with loaded or default values.

    Raises:
        ConfigError: If config file exists but is invalid.
    """
    found_path = find_config_file(config_path)

    if found_path is None:
        return Config()

    try:
        with found_path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}") from e
    except OSError as e:
        raise ConfigError(f"Could not read config file: {e}") from e

    if data is None:
        return Config()

    try:
        return Config.model_validate(data)
    except ValueError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e
