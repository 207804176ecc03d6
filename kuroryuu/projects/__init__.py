"""Recent-projects registry.

Remembers which project directories the tool has been run against and where
each project's data directory lives:
- register: upsert by project path, refreshing the access time
- list: every record, most recently accessed first
"""

from kuroryuu.projects.exceptions import MalformedStoreError, StoreError, StoreIOError
from kuroryuu.projects.models import ProjectRecord
from kuroryuu.projects.paths import default_data_dir, global_data_dir, resolve_store_path
from kuroryuu.projects.store import (
    ProjectStore,
    list_projects,
    register,
    store_path,
    try_register,
)

__all__ = [
    "MalformedStoreError",
    "ProjectRecord",
    "ProjectStore",
    "StoreError",
    "StoreIOError",
    "default_data_dir",
    "global_data_dir",
    "list_projects",
    "register",
    "resolve_store_path",
    "store_path",
    "try_register",
]
