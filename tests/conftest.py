"""Shared test fixtures for settings, storages and attachers."""

import io
from collections.abc import Iterator

import pytest

from attachment_kit.core.config import Settings, get_settings
from attachment_kit.lib.attachments import Attacher
from attachment_kit.lib.storage import MemoryStorage, get_storages


class FailingStorage(MemoryStorage):
    """Memory storage whose writes always fail."""

    def upload(self, io, id, *, move=False, metadata=None):
        raise OSError("quota exceeded")


@pytest.fixture(autouse=True)
def _clear_cached_config() -> Iterator[None]:
    """Rebuild settings and storages from the environment for every test."""
    get_settings.cache_clear()
    get_storages.cache_clear()
    yield
    get_settings.cache_clear()
    get_storages.cache_clear()


@pytest.fixture
def settings() -> Settings:
    """Test application settings backed by in-memory storages."""
    return Settings(_env_file=None, storage_backend="memory")  # type: ignore[call-arg]


@pytest.fixture
def storages() -> dict[str, MemoryStorage]:
    """A fresh cache/store pair of memory storages."""
    return {"cache": MemoryStorage(), "store": MemoryStorage()}


@pytest.fixture
def failing_storages() -> dict[str, MemoryStorage]:
    """A cache/store pair that rejects every write."""
    return {"cache": FailingStorage(), "store": FailingStorage()}


@pytest.fixture
def attacher(storages) -> Attacher:
    """An empty attacher over the memory storages."""
    return Attacher(storages)


@pytest.fixture
def make_io():
    """Factory for named in-memory binary streams."""

    def _make(content: bytes = b"abc", name: str | None = "file.txt") -> io.BytesIO:
        stream = io.BytesIO(content)
        if name is not None:
            stream.name = name
        return stream

    return _make
