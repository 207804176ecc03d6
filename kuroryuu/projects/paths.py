"""Where the registry lives and where a project keeps its data.

Resolution is a pure function of the environment mapping passed in, so it is
recomputed on every store operation and never cached.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Mapping, Optional

from kuroryuu.config import (
    APP_NAME,
    DEFAULT_DATA_DIR_NAME,
    ENV_GLOBAL_DATA,
    ENV_LOCALAPPDATA,
    ENV_XDG_DATA_HOME,
)

PROJECTS_FILE = "projects.json"


def global_data_dir(
    env: Optional[Mapping[str, str]] = None,
    platform: Optional[str] = None,
) -> Path:
    """Return the application-wide data directory.

    Precedence: ``KURORYUU_GLOBAL_DATA``, then ``$XDG_DATA_HOME/kuroryuu``,
    then the platform default (``%LOCALAPPDATA%`` on Windows,
    ``~/.local/share`` elsewhere).
    """
    env = os.environ if env is None else env
    platform = platform or sys.platform

    override = env.get(ENV_GLOBAL_DATA)
    if override:
        return Path(override)

    xdg = env.get(ENV_XDG_DATA_HOME)
    if xdg:
        return Path(xdg) / APP_NAME

    if platform == "win32":
        local = env.get(ENV_LOCALAPPDATA)
        base = Path(local) if local else Path.home() / "AppData" / "Local"
        return base / APP_NAME

    return Path.home() / ".local" / "share" / APP_NAME


def resolve_store_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Return the path of the registry's backing file."""
    return global_data_dir(env) / PROJECTS_FILE


def find_data_dir(start: str | Path, name: str = DEFAULT_DATA_DIR_NAME) -> Path | None:
    """Walk up from ``start`` and return the first existing data directory."""
    current = Path(start).absolute()
    for directory in (current, *current.parents):
        candidate = directory / name
        if candidate.is_dir():
            return candidate
    return None


def default_data_dir(project_path: str | Path, name: str = DEFAULT_DATA_DIR_NAME) -> Path:
    """Data directory to register for a project with no explicit one."""
    found = find_data_dir(project_path, name)
    if found is not None:
        return found
    return Path(project_path).absolute() / name
