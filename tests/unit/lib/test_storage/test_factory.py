"""Unit tests for building storages from settings."""

import pytest

from attachment_kit.core.config import Settings
from attachment_kit.lib.storage import (
    FileSystemStorage,
    MemoryStorage,
    S3Storage,
    build_storages,
    get_storages,
)


class TestBuildStorages:
    def test_memory_backend(self) -> None:
        storages = build_storages(Settings(_env_file=None, storage_backend="memory"))  # type: ignore[call-arg]
        assert set(storages) == {"cache", "store"}
        assert isinstance(storages["cache"], MemoryStorage)
        assert storages["cache"] is not storages["store"]

    def test_filesystem_backend(self, tmp_path) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            storage_backend="filesystem",
            storage_cache_dir=str(tmp_path / "cache"),
            storage_store_dir=str(tmp_path / "store"),
        )
        storages = build_storages(settings)
        assert isinstance(storages["store"], FileSystemStorage)
        assert storages["store"].base_dir == tmp_path / "store"

    def test_s3_backend(self) -> None:
        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
            storage_backend="s3",
            s3_bucket="uploads",
            s3_access_key_id="key",
            s3_secret_access_key="secret",
            s3_cache_prefix="tmp",
        )
        storages = build_storages(settings)
        assert isinstance(storages["cache"], S3Storage)
        assert storages["cache"].bucket == "uploads"
        assert storages["cache"].prefix == "tmp"
        assert storages["store"].prefix == "store"
        assert storages["cache"].client is storages["store"].client

    def test_s3_backend_requires_bucket(self) -> None:
        with pytest.raises(ValueError, match="S3_BUCKET"):
            build_storages(Settings(_env_file=None, storage_backend="s3"))  # type: ignore[call-arg]


class TestGetStorages:
    def test_cached_from_environment(self, monkeypatch) -> None:
        monkeypatch.setenv("STORAGE_BACKEND", "memory")
        first = get_storages()
        assert first is get_storages()
        assert isinstance(first["cache"], MemoryStorage)
