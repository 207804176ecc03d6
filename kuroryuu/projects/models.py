"""Registry data models — one record per project directory.

Timestamps are held as aware UTC datetimes with microsecond precision. A
record read and written back keeps the same instant, but its text is
normalized: offsets become ``+00:00`` and fractions past microseconds are
dropped.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from datetime import datetime, timezone


@dataclass
class ProjectRecord:
    """A project the tool has been run against."""

    path: str  # Absolute project path, unique within the store
    data_dir: str  # Where the project's private state lives
    last_accessed: datetime  # UTC, bumped on every register

    @property
    def exists(self) -> bool:
        """Whether the project directory is still on disk (advisory only)."""
        return os.path.isdir(self.path)

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "data_dir": self.data_dir,
            "last_accessed": self.last_accessed.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> ProjectRecord:
        """Build a record from its on-disk mapping.

        Raises KeyError for a missing field and ValueError for a field of the
        wrong type or an unparseable timestamp.
        """
        path = data["path"]
        data_dir = data["data_dir"]
        stamp = data["last_accessed"]
        for key, value in (("path", path), ("data_dir", data_dir), ("last_accessed", stamp)):
            if not isinstance(value, str):
                raise ValueError(f"{key} must be a string, got {type(value).__name__}")
        return cls(path=path, data_dir=data_dir, last_accessed=parse_timestamp(stamp))


_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_timestamp(value: str) -> datetime:
    """Parse an RFC 3339 / ISO 8601 timestamp into an aware UTC datetime."""
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    # RFC 3339 allows nanoseconds; datetime holds microseconds.
    text = _FRACTION.sub(r"\1", text, count=1)
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)
