"""Local filesystem storage backend.

Files are stored under ``{directory}/{prefix}/{id}``; intermediate
directories are created on demand.
"""

import os
import shutil
import uuid
from collections.abc import Mapping
from pathlib import Path
from typing import Any, BinaryIO

from loguru import logger


class FileSystemStorage:
    """Local filesystem implementation of Storage.

    Args:
        directory: The root directory for file storage.
        prefix: Optional subdirectory of ``directory`` that holds the files.
    """

    def __init__(self, directory: str | Path, prefix: str | None = None) -> None:
        self._directory = Path(directory)
        self._prefix = prefix.strip("/") if prefix else None

    @property
    def base_dir(self) -> Path:
        """Directory that file locations are relative to."""
        if self._prefix:
            return self._directory / self._prefix
        return self._directory

    def upload(
        self,
        io: BinaryIO,
        id: str,
        *,
        move: bool = False,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Copy the stream to ``{base_dir}/{id}``.

        Content is written to a temporary file next to the target and renamed
        into place, so a failed write leaves nothing at ``id``.  When ``move``
        is set and ``io`` is backed by a file on disk, that file is removed
        once the copy has been written.
        """
        path = self.path(id)
        path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path = path.with_name(f".{path.name}.{uuid.uuid4().hex}.tmp")
        try:
            with tmp_path.open("wb") as f:
                shutil.copyfileobj(io, f)
            os.replace(tmp_path, path)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise

        source_path = getattr(io, "name", None)
        if move and isinstance(source_path, str) and os.path.isfile(source_path):
            io.close()
            os.unlink(source_path)
            logger.debug("Moved {} to {}", source_path, path)

    def open(self, id: str) -> BinaryIO:
        """Open a stored file for binary reading.

        Raises:
            FileNotFoundError: If the file does not exist.
        """
        path = self.path(id)
        if not path.is_file():
            msg = f"File not found: {id}"
            raise FileNotFoundError(msg)
        return path.open("rb")

    def exists(self, id: str) -> bool:
        return self.path(id).is_file()

    def delete(self, id: str) -> None:
        self.path(id).unlink(missing_ok=True)

    def url(self, id: str) -> str:
        return str(self.path(id))

    def path(self, id: str) -> Path:
        """Resolve a location to an absolute path inside ``base_dir``.

        Raises:
            ValueError: If the location escapes the storage directory.
        """
        base = self.base_dir.resolve()
        path = (base / id).resolve()
        if base not in path.parents:
            msg = f"Invalid file location: {id}"
            raise ValueError(msg)
        return path
