"""attachment-kit: file attachments with cache/store tiers and record copying."""

from attachment_kit.lib.attachments import (
    Attachable,
    Attacher,
    Attachment,
    AttachmentError,
    CopyResult,
    FileHandle,
    ReadError,
    Tier,
    UploadError,
)

__all__ = [
    "Attachable",
    "Attacher",
    "Attachment",
    "AttachmentError",
    "CopyResult",
    "FileHandle",
    "ReadError",
    "Tier",
    "UploadError",
]
