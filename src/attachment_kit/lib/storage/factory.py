"""Build the cache/store storage pair from application settings."""

from functools import lru_cache

from loguru import logger

from attachment_kit.core.config import Settings, get_settings
from attachment_kit.lib.storage.base import Storage
from attachment_kit.lib.storage.filesystem import FileSystemStorage
from attachment_kit.lib.storage.memory import MemoryStorage
from attachment_kit.lib.storage.s3 import S3Storage, create_s3_client

CACHE = "cache"
STORE = "store"


def build_storages(settings: Settings) -> dict[str, Storage]:
    """Create the ``cache`` and ``store`` storages for the configured backend.

    Args:
        settings: Application settings.

    Returns:
        Mapping of storage key to storage instance.

    Raises:
        ValueError: If the s3 backend is selected without a bucket.
    """
    backend = settings.storage_backend
    logger.debug("Building {} storages", backend)

    if backend == "memory":
        return {CACHE: MemoryStorage(), STORE: MemoryStorage()}

    if backend == "filesystem":
        return {
            CACHE: FileSystemStorage(settings.storage_cache_dir),
            STORE: FileSystemStorage(settings.storage_store_dir),
        }

    if not settings.s3_bucket:
        msg = "S3_BUCKET must be set when STORAGE_BACKEND=s3"
        raise ValueError(msg)

    client = create_s3_client(
        region=settings.s3_region,
        endpoint_url=settings.s3_endpoint_url,
        access_key_id=settings.s3_access_key_id,
        secret_access_key=settings.s3_secret_access_key,
    )
    return {
        CACHE: S3Storage(client, settings.s3_bucket, prefix=settings.s3_cache_prefix),
        STORE: S3Storage(client, settings.s3_bucket, prefix=settings.s3_store_prefix),
    }


@lru_cache
def get_storages() -> dict[str, Storage]:
    """Return the process-wide storages built from ``get_settings()``."""
    return build_storages(get_settings())
