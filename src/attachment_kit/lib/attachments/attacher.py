"""Attacher: per-record, per-field controller of an attached file.

An attacher holds at most one ``current`` file and remembers the file it
replaced as ``old`` so that callers can delete it once the record is
persisted (``finalize``/``destroy_previous``).  Files live either in the
temporary *cache* storage or the permanent *store* storage.
"""

import json
from collections.abc import Mapping
from typing import Any, BinaryIO

from loguru import logger

from attachment_kit.lib.attachments.types import CopyResult, FileHandle, Tier
from attachment_kit.lib.attachments.uploader import Uploader
from attachment_kit.lib.storage.base import Storage


class Attacher:
    """Tracks the attachment of one record field.

    Args:
        storages: Registry of storages by key.
        cache: Key of the temporary storage.
        store: Key of the permanent storage.
        record: Owning record, if any.  Not owned by the attacher.
        name: Attachment name; the record column is ``{name}_data``
            unless ``column`` is given.
        column: Record attribute the serialized file data is written to.
    """

    def __init__(
        self,
        storages: Mapping[str, Storage],
        *,
        cache: str = "cache",
        store: str = "store",
        record: Any = None,
        name: str | None = None,
        column: str | None = None,
    ) -> None:
        for key in (cache, store):
            if key not in storages:
                msg = f"Unknown storage {key!r} (registered: {', '.join(sorted(storages))})"
                raise KeyError(msg)
        self.storages = storages
        self.cache_key = cache
        self.store_key = store
        self.record = record
        self.name = name
        self.column = column or (f"{name}_data" if name else None)
        self.current: FileHandle | None = None
        self.old: FileHandle | None = None
        self._changed = False

    def __repr__(self) -> str:
        storage = self.current.storage_key if self.current else None
        return f"<Attacher name={self.name!r} storage={storage!r} current={self.current!r}>"

    # -----------------------------------------------------------------------
    # State inspection
    # -----------------------------------------------------------------------

    @property
    def tier(self) -> Tier:
        """Storage tier of the current file."""
        if self.current is None:
            return Tier.NONE
        if self.current.storage_key == self.cache_key:
            return Tier.CACHE
        if self.current.storage_key == self.store_key:
            return Tier.STORE
        msg = f"File {self.current.id} is on storage {self.current.storage_key!r}, not on this attacher's tiers"
        raise ValueError(msg)

    @property
    def attached(self) -> bool:
        return self.current is not None

    @property
    def cached(self) -> bool:
        return self.tier is Tier.CACHE

    @property
    def stored(self) -> bool:
        return self.tier is Tier.STORE

    @property
    def changed(self) -> bool:
        """Whether the attachment was changed since it was loaded."""
        return self._changed

    @property
    def cache(self) -> Storage:
        return self.storages[self.cache_key]

    @property
    def store(self) -> Storage:
        return self.storages[self.store_key]

    # -----------------------------------------------------------------------
    # Uploading
    # -----------------------------------------------------------------------

    def upload(self, io: FileHandle | BinaryIO, tier: Tier, **options: Any) -> FileHandle:
        """Upload ``io`` into the storage of ``tier`` without attaching it."""
        if tier is Tier.CACHE:
            key = self.cache_key
        elif tier is Tier.STORE:
            key = self.store_key
        else:
            msg = f"Cannot upload into tier {tier!r}"
            raise ValueError(msg)
        options.setdefault("action", tier.value)
        return Uploader(key, self.storages[key]).upload(io, **options)

    def cache_file(self, io: FileHandle | BinaryIO, **options: Any) -> FileHandle:
        return self.upload(io, Tier.CACHE, **options)

    def store_file(self, io: FileHandle | BinaryIO, **options: Any) -> FileHandle:
        return self.upload(io, Tier.STORE, **options)

    # -----------------------------------------------------------------------
    # Attaching
    # -----------------------------------------------------------------------

    def attach_cached(self, io: BinaryIO, **options: Any) -> FileHandle:
        """Upload ``io`` to the cache storage and make it the current file."""
        handle = self.cache_file(io, **options)
        self.change(handle)
        return handle

    def attach(self, io: BinaryIO, **options: Any) -> FileHandle:
        """Upload ``io`` to the permanent storage and make it the current file."""
        handle = self.store_file(io, **options)
        self.change(handle)
        return handle

    def assign(self, value: BinaryIO | Mapping[str, Any] | str | None) -> FileHandle | None:
        """Assign a new value the way a form field would.

        ``None`` detaches, serialized data re-attaches a previously cached
        file and any other value is uploaded to the cache.

        Raises:
            ValueError: If serialized data does not refer to a cached file.
        """
        if value is None:
            self.change(None)
            return None

        if isinstance(value, str | Mapping):
            handle = FileHandle.from_dict(value, self.storages)
            if handle.storage_key != self.cache_key:
                msg = f"Expected cached file data, got file on storage {handle.storage_key!r}"
                raise ValueError(msg)
            self.change(handle)
            return handle

        return self.attach_cached(value)

    def change(self, handle: FileHandle | None) -> None:
        """Replace the current file, remembering the replaced one as ``old``."""
        self.old = self.current
        self.write(handle)
        self._changed = True

    def write(self, handle: FileHandle | None) -> None:
        """Set the current file and the record column, without side effects."""
        self.current = handle
        if self.record is not None and self.column:
            setattr(self.record, self.column, self.data)

    # -----------------------------------------------------------------------
    # Copying
    # -----------------------------------------------------------------------

    def copy(self, source: "Attacher") -> CopyResult:
        """Copy the current file of ``source`` into this attacher.

        The file is re-uploaded into the same tier it occupies on ``source``
        (cache or store) under a new location; ``source`` is never modified.
        This attacher's previous file becomes ``old`` and is not deleted.

        Args:
            source: Attacher to copy from.

        Returns:
            The new current file and the replaced one.

        Raises:
            UploadError: If the destination storage cannot write the file.
            ReadError: If the source file cannot be read.
        """
        tier = source.tier
        copied: FileHandle | None = None
        if tier is not Tier.NONE:
            copied = self.upload(source.current, tier, action="copy", move=False)

        old = self.current
        self.old = old
        self.write(copied)
        self._changed = True

        logger.info(
            "Copied {} attachment {} -> {}",
            tier,
            source.current.id if source.current else None,
            copied.id if copied else None,
        )
        return CopyResult(current=copied, old=old)

    # -----------------------------------------------------------------------
    # Lifecycle
    # -----------------------------------------------------------------------

    def promote(self, **options: Any) -> FileHandle | None:
        """Re-upload a cached current file into the permanent storage.

        The cached copy is left in place; ``old`` is not touched.
        """
        if not self.cached:
            return self.current
        options.setdefault("action", "store")
        stored = self.store_file(self.current, **options)
        self.write(stored)
        logger.info("Promoted {} to {}:{}", self.name or "attachment", self.store_key, stored.id)
        return stored

    def finalize(self) -> None:
        """Delete the replaced file and promote a cached current file."""
        self.destroy_previous()
        if self.cached:
            self.promote()
        self._changed = False

    def destroy_previous(self) -> None:
        """Delete ``old`` if it is a stored file other than the current one."""
        old, self.old = self.old, None
        if old is None or old == self.current or old.storage_key != self.store_key:
            return
        old.delete()
        logger.info("Deleted replaced file {}:{}", old.storage_key, old.id)

    def destroy_attached(self) -> None:
        """Delete the current file if it is in the permanent storage."""
        if self.stored:
            self.current.delete()
            logger.info("Deleted attached file {}:{}", self.current.storage_key, self.current.id)

    # -----------------------------------------------------------------------
    # Serialization
    # -----------------------------------------------------------------------

    @property
    def data(self) -> dict[str, Any] | None:
        """Serialized current file, as stored in the record column."""
        return self.current.to_dict() if self.current else None

    def load_data(self, data: Mapping[str, Any] | str | None) -> None:
        """Load the current file from serialized data without marking a change."""
        if data is None or data == "":
            self.current = None
            return
        self.current = FileHandle.from_dict(data, self.storages)

    def to_json(self) -> str | None:
        return json.dumps(self.data) if self.current else None
