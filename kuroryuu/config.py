"""Kuroryuu configuration — environment variables and the optional config file.

Settings are read from ``<global data dir>/config.yaml`` when it exists.
``KURORYUU_LOG_LEVEL`` overrides the file's log level.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Mapping, Optional

import yaml

ENV_GLOBAL_DATA = "KURORYUU_GLOBAL_DATA"
ENV_XDG_DATA_HOME = "XDG_DATA_HOME"
ENV_LOCALAPPDATA = "LOCALAPPDATA"
ENV_LOG_LEVEL = "KURORYUU_LOG_LEVEL"

APP_NAME = "kuroryuu"
CONFIG_FILE = "config.yaml"
DEFAULT_DATA_DIR_NAME = ".kuroryuu"


class ConfigError(Exception):
    """Invalid configuration file."""


@dataclass
class Settings:
    """User-tunable settings."""

    data_dir_name: str = DEFAULT_DATA_DIR_NAME
    recent_limit: int = 10
    log_level: str = "WARNING"


def load_settings(
    env: Optional[Mapping[str, str]] = None,
    config_path: Optional[str | Path] = None,
) -> Settings:
    """Load settings from the config file, then apply environment overrides."""
    from kuroryuu.projects.paths import global_data_dir

    env = os.environ if env is None else env
    path = Path(config_path) if config_path else global_data_dir(env) / CONFIG_FILE

    settings = Settings()
    if path.exists():
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except (yaml.YAMLError, OSError) as e:
            raise ConfigError(f"Failed to read {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at the top level")
        _apply(settings, data, path)

    level = env.get(ENV_LOG_LEVEL, "").strip()
    if level:
        settings.log_level = level.upper()
    return settings


def _apply(settings: Settings, data: dict, source: Path) -> None:
    for f in fields(Settings):
        if f.name not in data:
            continue
        value = data[f.name]
        expected = type(getattr(settings, f.name))
        # bool is an int subclass; reject it for numeric settings
        if not isinstance(value, expected) or isinstance(value, bool):
            raise ConfigError(
                f"{source}: {f.name} must be {expected.__name__}, got {type(value).__name__}"
            )
        setattr(settings, f.name, value)

    if settings.recent_limit < 1:
        raise ConfigError(f"{source}: recent_limit must be at least 1")
    if not settings.data_dir_name or os.sep in settings.data_dir_name:
        raise ConfigError(f"{source}: data_dir_name must be a plain directory name")
    settings.log_level = settings.log_level.upper()
