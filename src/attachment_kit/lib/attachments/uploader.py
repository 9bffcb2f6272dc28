"""Uploader: writes an IO object or an uploaded file into one storage.

Generates a fresh location for every upload, carries content metadata over
from the source and translates backend failures into ``UploadError`` and
source failures into ``ReadError``.
"""

import mimetypes
import os
import uuid
from collections.abc import Mapping
from typing import Any, BinaryIO

from loguru import logger

from attachment_kit.lib.attachments.errors import ReadError, UploadError
from attachment_kit.lib.attachments.types import FileHandle
from attachment_kit.lib.storage.base import Storage


class _SourceReader:
    """Read-only wrapper that counts bytes and tags read failures as ``ReadError``."""

    def __init__(self, io: BinaryIO, file_id: str | None) -> None:
        self._io = io
        self._file_id = file_id
        self.bytes_read = 0

    @property
    def name(self) -> Any:
        return getattr(self._io, "name", None)

    def read(self, size: int = -1) -> bytes:
        try:
            chunk = self._io.read(size)
        except Exception as exc:
            raise ReadError(self._file_id, f"cannot read source content: {exc}") from exc
        self.bytes_read += len(chunk)
        return chunk

    def close(self) -> None:
        self._io.close()


class Uploader:
    """Uploads content into a single named storage.

    Args:
        storage_key: Registry name of the storage (e.g. ``"cache"``).
        storage: The storage instance.
    """

    def __init__(self, storage_key: str, storage: Storage) -> None:
        self.storage_key = storage_key
        self.storage = storage

    def upload(
        self,
        io: FileHandle | BinaryIO,
        *,
        action: str,
        move: bool = False,
        metadata: Mapping[str, Any] | None = None,
        location: str | None = None,
    ) -> FileHandle:
        """Upload ``io`` and return a handle to the new file.

        Args:
            io: An uploaded file to re-upload, or a readable binary stream.
            action: Why the upload happens (``cache``, ``store``, ``copy``...).
            move: Whether the storage may remove the input afterwards.
            metadata: Metadata overriding what is extracted from ``io``.
            location: Explicit location; a unique one is generated otherwise.

        Returns:
            Handle to the uploaded file, with ``size`` set to the bytes written.

        Raises:
            ReadError: If the source content cannot be opened or read.
            UploadError: If the storage fails to write the content.
        """
        file_metadata = self.extract_metadata(io)
        if metadata:
            file_metadata.update(metadata)
        location = location or self.generate_location(io, file_metadata)

        source_id = io.id if isinstance(io, FileHandle) else None
        stream = self._open_source(io)
        reader = _SourceReader(stream, source_id)
        try:
            self.storage.upload(reader, location, move=move, metadata=file_metadata)
        except ReadError:
            raise
        except Exception as exc:
            logger.warning("Upload to {} failed during {}: {}", self.storage_key, action, exc)
            raise UploadError(self.storage_key, f"cannot write {location}: {exc}") from exc
        finally:
            if isinstance(io, FileHandle):
                stream.close()

        file_metadata["size"] = reader.bytes_read
        logger.debug(
            "Uploaded {} bytes to {}:{} (action={}, move={})",
            reader.bytes_read,
            self.storage_key,
            location,
            action,
            move,
        )
        return FileHandle(
            id=location,
            storage_key=self.storage_key,
            storage=self.storage,
            metadata=file_metadata,
        )

    @staticmethod
    def extract_metadata(io: FileHandle | BinaryIO) -> dict[str, Any]:
        """Collect ``filename``, ``size`` and ``mime_type`` for ``io``."""
        if isinstance(io, FileHandle):
            return dict(io.metadata)

        name = getattr(io, "name", None)
        filename = os.path.basename(name) if isinstance(name, str) and name else None
        mime_type = mimetypes.guess_type(filename)[0] if filename else None
        return {"filename": filename, "size": None, "mime_type": mime_type}

    @staticmethod
    def generate_location(io: FileHandle | BinaryIO, metadata: Mapping[str, Any]) -> str:
        """Return a unique location keeping the source's extension."""
        if isinstance(io, FileHandle) and io.extension:
            ext = io.extension
        else:
            ext = _extract_extension(metadata.get("filename") or "")
        return f"{uuid.uuid4().hex}{ext}"

    @staticmethod
    def _open_source(io: FileHandle | BinaryIO) -> BinaryIO:
        if not isinstance(io, FileHandle):
            return io
        try:
            return io.open()
        except Exception as exc:
            raise ReadError(io.id, f"cannot open source content: {exc}") from exc


def _extract_extension(filename: str) -> str:
    """Extract the lowercase file extension including the dot.

    Args:
        filename: The filename to extract from.

    Returns:
        The extension (e.g., ".pdf") or empty string if none.
    """
    dot_idx = filename.rfind(".")
    if dot_idx <= 0:
        return ""
    return filename[dot_idx:].lower()
