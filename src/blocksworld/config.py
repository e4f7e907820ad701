"""
Run configuration for the command driver.

Settings come from an optional YAML file and are validated by a pydantic
model; a missing file or an empty document means all defaults.

Example config.yaml:

    comment_prefix: "#"
    echo_prints: true
    stop_on_quit: false
    results_dir: results
    send_telegram_updates: false
    log_level: INFO
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ConfigError(ValueError):
    """Raised when a configuration file cannot be read or validated."""


class RunConfig(BaseModel):
    """All tuneable parameters for a single command-file run."""

    model_config = ConfigDict(extra="forbid")

    comment_prefix: str = Field(default="#", min_length=1)
    echo_prints: bool = True
    stop_on_quit: bool = False
    results_dir: Optional[Path] = None
    send_telegram_updates: bool = False
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"


def load_config(path: Path | str | None = None) -> RunConfig:
    """
    Load a RunConfig from a YAML file.

    Args:
        path: YAML file to read. None returns the defaults.

    Returns:
        Validated RunConfig.

    Raises:
        FileNotFoundError: If the file does not exist.
        ConfigError: If the YAML is malformed or fails validation.
    """
    if path is None:
        return RunConfig()

    path = Path(path)
    with path.open("r") as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML config {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config {path} must be a mapping, got {type(data).__name__}")

    try:
        return RunConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {path}: {e}") from e
