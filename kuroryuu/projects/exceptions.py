"""Registry store exceptions."""

from __future__ import annotations

from pathlib import Path


class StoreError(Exception):
    """Base exception for the projects registry."""

    def __init__(self, message: str, path: str | Path):
        super().__init__(message)
        self.path = Path(path)


class MalformedStoreError(StoreError):
    """The backing file exists but could not be decoded."""

    def __init__(self, path: str | Path, reason: str):
        super().__init__(f"malformed projects store {path}: {reason}", path)
        self.reason = reason


class StoreIOError(StoreError):
    """A filesystem operation on the store failed."""

    def __init__(self, path: str | Path, operation: str, error: OSError):
        super().__init__(f"projects store {operation} failed for {path}: {error}", path)
        self.operation = operation
        self.error = error
