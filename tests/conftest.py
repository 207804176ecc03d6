"""Shared fixtures: every test gets its own registry location."""

import pytest


@pytest.fixture(autouse=True)
def global_data(tmp_path, monkeypatch):
    """Point the registry at a fresh temp directory and return it."""
    data = tmp_path / "kuroryuu"
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    monkeypatch.setenv("KURORYUU_GLOBAL_DATA", str(data))
    monkeypatch.delenv("KURORYUU_LOG_LEVEL", raising=False)
    return data
