"""Exceptions raised by attachment operations."""


class AttachmentError(Exception):
    """Base class for attachment failures."""


class UploadError(AttachmentError):
    """Raised when a storage backend cannot write an uploaded file.

    Args:
        storage_key: Name of the storage that rejected the write.
        message: Human-readable error description.
    """

    def __init__(self, storage_key: str, message: str) -> None:
        self.storage_key = storage_key
        self.message = message
        super().__init__(f"{storage_key}: {message}")


class ReadError(AttachmentError):
    """Raised when the content of a source file cannot be read.

    Args:
        file_id: Location of the unreadable file, when known.
        message: Human-readable error description.
    """

    def __init__(self, file_id: str | None, message: str) -> None:
        self.file_id = file_id
        self.message = message
        super().__init__(f"{file_id or '<io>'}: {message}")
