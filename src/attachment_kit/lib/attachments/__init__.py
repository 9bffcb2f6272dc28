"""Attachments library — attachers, uploaded files and record wiring.

Public API:
    - ``Attacher``: Per-field controller with attach/copy/promote/finalize
    - ``Attachment``: Descriptor declaring an attachment on a record class
    - ``Attachable``: Record base class that copies attachments on ``copy.copy``
    - ``FileHandle``: Immutable handle to an uploaded file
    - ``CopyResult``: Current/old pair returned by ``Attacher.copy``
    - ``Tier``: Storage tier of an attached file
    - ``Uploader``: Uploads content into a single storage
    - ``AttachmentError``, ``UploadError``, ``ReadError``: Failures
"""

from attachment_kit.lib.attachments.attacher import Attacher
from attachment_kit.lib.attachments.attachment import Attachable, Attachment, attachments_of
from attachment_kit.lib.attachments.errors import AttachmentError, ReadError, UploadError
from attachment_kit.lib.attachments.types import CopyResult, FileHandle, Tier
from attachment_kit.lib.attachments.uploader import Uploader

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
    "Uploader",
    "attachments_of",
]
