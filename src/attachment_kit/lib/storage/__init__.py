"""Storage library — backends for uploaded attachment files.

Public API:
    - ``Storage``: Protocol implemented by every backend
    - ``MemoryStorage``: In-process dict-backed storage
    - ``FileSystemStorage``: Local filesystem storage
    - ``S3Storage``: S3-compatible object storage
    - ``create_s3_client``: boto3 client factory
    - ``build_storages``: Build the cache/store pair from settings
    - ``get_storages``: Cached process-wide cache/store pair
"""

from attachment_kit.lib.storage.base import Storage
from attachment_kit.lib.storage.factory import CACHE, STORE, build_storages, get_storages
from attachment_kit.lib.storage.filesystem import FileSystemStorage
from attachment_kit.lib.storage.memory import MemoryStorage
from attachment_kit.lib.storage.s3 import S3Storage, create_s3_client

__all__ = [
    "CACHE",
    "STORE",
    "FileSystemStorage",
    "MemoryStorage",
    "S3Storage",
    "Storage",
    "build_storages",
    "create_s3_client",
    "get_storages",
]
