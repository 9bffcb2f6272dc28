"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

import re
from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_\-]+(/[A-Za-z0-9_\-]+)*$")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    storage_backend: Literal["memory", "filesystem", "s3"] = Field(
        default="filesystem",
        description="Backend used for both the cache and store tiers",
    )
    storage_cache_dir: str = Field(
        default="./uploads/cache",
        description="Directory for temporary (cache tier) files when using the filesystem backend",
    )
    storage_store_dir: str = Field(
        default="./uploads/store",
        description="Directory for permanent (store tier) files when using the filesystem backend",
    )

    # S3-Compatible Object Storage
    s3_bucket: str | None = Field(
        default=None,
        description="Bucket holding both tiers when using the s3 backend",
    )
    s3_endpoint_url: str | None = Field(
        default=None,
        description="Custom endpoint for S3-compatible services (MinIO, R2)",
    )
    s3_region: str = Field(
        default="us-east-1",
        description="Region name passed to the S3 client",
    )
    s3_access_key_id: str | None = Field(
        default=None,
        description="S3 access key (falls back to the default boto3 credential chain)",
    )
    s3_secret_access_key: str | None = Field(
        default=None,
        description="S3 secret key (falls back to the default boto3 credential chain)",
    )
    s3_cache_prefix: str = Field(
        default="cache",
        description="Key prefix for cache tier objects",
    )
    s3_store_prefix: str = Field(
        default="store",
        description="Key prefix for store tier objects",
    )

    @field_validator("s3_cache_prefix", "s3_store_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        v = v.strip("/")
        if not _PREFIX_PATTERN.match(v):
            msg = f"Invalid key prefix {v!r}: use path segments of letters, digits, '-' or '_'"
            raise ValueError(msg)
        return v

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )
    log_json: bool = Field(
        default=False,
        description="Emit log records as JSON lines instead of formatted text",
    )


@lru_cache
def get_settings() -> Settings:
    """Create and return cached application settings."""
    return Settings()
