"""File-based recent-projects registry.

One JSON file, ``projects.json``, holds a list of project records keyed by
path. Writers hold an exclusive lock on ``projects.json.lock`` (``flock``, or
``msvcrt.locking`` on Windows) for the whole load/modify/save cycle and
replace the file atomically, so readers never see a partial document and
concurrent writers never lose an update.
"""

from __future__ import annotations

import contextlib
import json
import logging
import os
import tempfile
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Iterator

from kuroryuu.projects.exceptions import MalformedStoreError, StoreError, StoreIOError
from kuroryuu.projects.models import ProjectRecord
from kuroryuu.projects.paths import resolve_store_path

logger = logging.getLogger(__name__)


class ProjectStore:
    """Recent-projects registry backed by a single JSON file."""

    LOCK_SUFFIX = ".lock"

    def __init__(self, store_path: str | Path | None = None):
        self.store_path = Path(store_path) if store_path else resolve_store_path()
        self.lock_path = self.store_path.with_name(self.store_path.name + self.LOCK_SUFFIX)

    def register(self, path: str, data_dir: str) -> ProjectRecord:
        """Insert or refresh the record for ``path``.

        An existing record gets the new ``data_dir`` and a fresh timestamp even
        when nothing else changed. Neither path is checked for existence.
        """
        self._ensure_parent()
        with self._locked():
            records = self._load()
            now = datetime.now(timezone.utc)

            record = next((r for r in records if r.path == path), None)
            if record is None:
                record = ProjectRecord(path=path, data_dir=data_dir, last_accessed=now)
                records.append(record)
                logger.debug("Registered new project %s (data dir %s)", path, data_dir)
            else:
                # Timestamps are monotonic per path even if the clock steps back.
                if now <= record.last_accessed:
                    try:
                        now = record.last_accessed + timedelta(microseconds=1)
                    except OverflowError as e:
                        raise MalformedStoreError(
                            self.store_path, f"timestamp for {path} cannot be advanced"
                        ) from e
                record.data_dir = data_dir
                record.last_accessed = now
                logger.debug("Refreshed project %s (data dir %s)", path, data_dir)

            self._save(records)
        return record

    def list(self) -> list[ProjectRecord]:
        """All records, most recently accessed first."""
        records = self._load()
        records.sort(key=lambda r: r.last_accessed, reverse=True)
        return records

    def get(self, path: str) -> ProjectRecord | None:
        """Look up one record by exact path."""
        for record in self._load():
            if record.path == path:
                return record
        return None

    def recent(self, limit: int) -> list[ProjectRecord]:
        """The ``limit`` most recently accessed records."""
        return self.list()[:limit]

    # -- internals -----------------------------------------------------------

    def _ensure_parent(self) -> None:
        try:
            self.store_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreIOError(self.store_path.parent, "mkdir", e) from e

    @contextlib.contextmanager
    def _locked(self) -> Iterator[None]:
        """Hold an exclusive advisory lock on the sidecar lock file."""
        try:
            handle = open(self.lock_path, "a+")
        except OSError as e:
            raise StoreIOError(self.lock_path, "lock", e) from e

        with handle:
            if os.name == "posix":
                import fcntl

                try:
                    fcntl.flock(handle, fcntl.LOCK_EX)
                except OSError as e:
                    raise StoreIOError(self.lock_path, "lock", e) from e
                try:
                    yield
                finally:
                    fcntl.flock(handle, fcntl.LOCK_UN)
            else:
                import msvcrt

                # LK_LOCK retries for about ten seconds before giving up.
                handle.seek(0)
                try:
                    msvcrt.locking(handle.fileno(), msvcrt.LK_LOCK, 1)
                except OSError as e:
                    raise StoreIOError(self.lock_path, "lock", e) from e
                try:
                    yield
                finally:
                    handle.seek(0)
                    msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)

    def _load(self) -> list[ProjectRecord]:
        # A missing file is the one case that means "empty"; anything else
        # that fails to parse is reported.
        if not self.store_path.exists():
            logger.debug("No projects store at %s", self.store_path)
            return []

        try:
            raw = self.store_path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            raise StoreIOError(self.store_path, "read", e) from e

        try:
            data = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as e:
            raise MalformedStoreError(self.store_path, str(e)) from e

        if not isinstance(data, list):
            raise MalformedStoreError(
                self.store_path, f"expected a list, got {type(data).__name__}"
            )

        records = []
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise MalformedStoreError(self.store_path, f"entry {i} is not an object")
            try:
                records.append(ProjectRecord.from_dict(item))
            except KeyError as e:
                raise MalformedStoreError(self.store_path, f"entry {i} missing {e}") from e
            except (ValueError, OverflowError) as e:
                raise MalformedStoreError(self.store_path, f"entry {i}: {e}") from e
        return _dedupe(records)

    def _save(self, records: list[ProjectRecord]) -> None:
        payload = json.dumps([r.to_dict() for r in records], indent=2)
        tmp_path = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=str(self.store_path.parent),
                prefix=f".{self.store_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_path = Path(tmp.name)
                tmp.write(payload + "\n")
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_path, self.store_path)
        except OSError as e:
            if tmp_path is not None:
                tmp_path.unlink(missing_ok=True)
            raise StoreIOError(self.store_path, "write", e) from e


def _dedupe(records: list[ProjectRecord]) -> list[ProjectRecord]:
    """Collapse repeated paths into one record, keeping the newest values.

    The surviving record stays at the position of the first occurrence.
    """
    by_path: dict[str, ProjectRecord] = {}
    for record in records:
        seen = by_path.get(record.path)
        if seen is None:
            by_path[record.path] = record
        elif record.last_accessed > seen.last_accessed:
            seen.data_dir = record.data_dir
            seen.last_accessed = record.last_accessed
    if len(by_path) < len(records):
        logger.debug("Collapsed %d duplicate project entries", len(records) - len(by_path))
    return list(by_path.values())


def store_path() -> Path:
    """Backing file for the current environment."""
    return resolve_store_path()


def register(path: str, data_dir: str) -> ProjectRecord:
    """Register ``path`` in the store resolved from the current environment."""
    return ProjectStore().register(path, data_dir)


def list_projects() -> list[ProjectRecord]:
    """List projects from the store resolved from the current environment."""
    return ProjectStore().list()


def try_register(path: str, data_dir: str) -> bool:
    """Register at session start without letting registry trouble stop the session."""
    try:
        register(path, data_dir)
    except StoreError as e:
        logger.warning("Could not record recent project %s: %s", path, e)
        return False
    return True
