"""Storage protocol shared by every attachment backend."""

from collections.abc import Mapping
from typing import Any, BinaryIO, Protocol


class Storage(Protocol):
    """Abstract storage interface for uploaded files.

    Implementations are synchronous and must be safe to call from any
    thread; they hold no per-call mutable state.
    """

    def upload(
        self,
        io: BinaryIO,
        id: str,
        *,
        move: bool = False,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Write the content of ``io`` to location ``id``.

        Args:
            io: Readable binary stream positioned at the start of the content.
            id: Location to write to, unique within the storage.
            move: Whether the backend may remove the input after writing it.
            metadata: Content metadata (``filename``, ``mime_type``) the
                backend may persist alongside the bytes.
        """
        ...

    def open(self, id: str) -> BinaryIO:
        """Open the file at ``id`` for reading.

        Raises:
            FileNotFoundError: If nothing is stored at ``id``.
        """
        ...

    def exists(self, id: str) -> bool:
        """Return whether a file is stored at ``id``."""
        ...

    def delete(self, id: str) -> None:
        """Delete the file at ``id``.  Deleting a missing file is a no-op."""
        ...

    def url(self, id: str) -> str:
        """Return a URL (or path) identifying the file at ``id``."""
        ...
