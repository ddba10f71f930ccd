"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from dotcache.storage.backends import MemoryBackend, NullBackend
from dotcache.storage.chain import BackendChain


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch, tmp_path):
    """Keep tests away from the real config and data directories."""
    for var in ("DOTCACHE_DATA_DIR", "DOTCACHE_DOMAIN", "DOTCACHE_BACKENDS"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "xdg-data"))
    monkeypatch.chdir(tmp_path)
    yield


@pytest.fixture
def temp_dir():
    """Temporary directory for test data."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def memory_backend():
    return MemoryBackend()


@pytest.fixture
def memory_chain(memory_backend):
    """Chain backed by a single shared in-memory store."""
    return BackendChain([memory_backend])


@pytest.fixture
def dead_chain():
    """Chain where every backend is unavailable."""
    return BackendChain([NullBackend(), NullBackend()])
