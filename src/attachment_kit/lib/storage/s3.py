"""S3-compatible object storage backend.

Provides boto3 client creation and a ``Storage`` implementation that keeps
each tier under its own key prefix of a single bucket.
"""

from collections.abc import Mapping
from typing import Any, BinaryIO
from urllib.parse import quote

import boto3
from boto3.s3.transfer import TransferConfig
from botocore.config import Config
from botocore.exceptions import ClientError
from loguru import logger

_MULTIPART_THRESHOLD = 25 * 1024 * 1024
_MULTIPART_CHUNKSIZE = 25 * 1024 * 1024
_MISSING_KEY_CODES = ("NoSuchKey", "404", "NotFound")


def create_s3_client(
    *,
    region: str = "us-east-1",
    endpoint_url: str | None = None,
    access_key_id: str | None = None,
    secret_access_key: str | None = None,
) -> Any:
    """Create a boto3 S3 client.

    Checksums are only computed when required so the client also works
    against S3-compatible services (MinIO, R2).

    Args:
        region: Region name.
        endpoint_url: Custom endpoint URL, or None for AWS.
        access_key_id: Access key, or None for the default credential chain.
        secret_access_key: Secret key, or None for the default credential chain.

    Returns:
        Configured boto3 S3 client.
    """
    config = Config(
        request_checksum_calculation="when_required",
        response_checksum_validation="when_required",
    )

    return boto3.client(
        "s3",
        endpoint_url=endpoint_url,
        aws_access_key_id=access_key_id,
        aws_secret_access_key=secret_access_key,
        region_name=region,
        config=config,
    )


class S3Storage:
    """S3 implementation of Storage.

    ``move`` is accepted for protocol compatibility but never deletes the
    input; objects are always written as fresh copies.

    Args:
        client: boto3 S3 client.
        bucket: Bucket name.
        prefix: Optional key prefix for every object.
    """

    def __init__(self, client: Any, bucket: str, prefix: str | None = None) -> None:
        self.client = client
        self.bucket = bucket
        self.prefix = prefix.strip("/") if prefix else None
        self._transfer_config = TransferConfig(
            multipart_threshold=_MULTIPART_THRESHOLD,
            multipart_chunksize=_MULTIPART_CHUNKSIZE,
            max_concurrency=4,
            use_threads=True,
        )

    def upload(
        self,
        io: BinaryIO,
        id: str,
        *,
        move: bool = False,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        extra_args: dict[str, str] = {}
        metadata = metadata or {}
        if metadata.get("mime_type"):
            extra_args["ContentType"] = metadata["mime_type"]
        if metadata.get("filename"):
            extra_args["ContentDisposition"] = f"inline; filename*=UTF-8''{quote(metadata['filename'])}"

        key = self.object_key(id)
        logger.debug("Uploading to s3://{}/{}", self.bucket, key)
        self.client.upload_fileobj(
            io,
            self.bucket,
            key,
            ExtraArgs=extra_args or None,
            Config=self._transfer_config,
        )

    def open(self, id: str) -> BinaryIO:
        """Stream an object's body.

        Raises:
            FileNotFoundError: If the object does not exist.
        """
        try:
            response = self.client.get_object(Bucket=self.bucket, Key=self.object_key(id))
        except ClientError as exc:
            if exc.response["Error"]["Code"] in _MISSING_KEY_CODES:
                msg = f"File not found: s3://{self.bucket}/{self.object_key(id)}"
                raise FileNotFoundError(msg) from exc
            raise
        return response["Body"]

    def exists(self, id: str) -> bool:
        try:
            self.client.head_object(Bucket=self.bucket, Key=self.object_key(id))
        except ClientError as exc:
            if exc.response["Error"]["Code"] in _MISSING_KEY_CODES:
                return False
            raise
        return True

    def delete(self, id: str) -> None:
        self.client.delete_object(Bucket=self.bucket, Key=self.object_key(id))

    def url(self, id: str) -> str:
        return f"s3://{self.bucket}/{self.object_key(id)}"

    def object_key(self, id: str) -> str:
        """Return the full object key for a location."""
        if self.prefix:
            return f"{self.prefix}/{id}"
        return id
