"""Record wiring for attachments.

``Attachment`` is a descriptor declared on a record class::

    class Photo(Attachable):
        image = Attachment()

It exposes ``photo.image`` (the current file), ``photo.image = io``
(assignment), ``photo.image_attacher`` (the lazily built ``Attacher``) and
persists the serialized file into ``photo.image_data``.  Records deriving
from ``Attachable`` copy their attachments when duplicated with
``copy.copy`` or ``copy.deepcopy``.
"""

import copy
from collections.abc import Mapping
from typing import Any, BinaryIO

from loguru import logger

from attachment_kit.lib.attachments.attacher import Attacher
from attachment_kit.lib.attachments.types import CopyResult, FileHandle
from attachment_kit.lib.storage.base import Storage
from attachment_kit.lib.storage.factory import get_storages


class Attachment:
    """Descriptor binding an attacher to a record attribute.

    Args:
        storages: Storage registry; the configured ``get_storages()`` when None.
        cache: Key of the temporary storage.
        store: Key of the permanent storage.
        column: Record attribute holding serialized data (``{name}_data``).
    """

    def __init__(
        self,
        *,
        storages: Mapping[str, Storage] | None = None,
        cache: str = "cache",
        store: str = "store",
        column: str | None = None,
    ) -> None:
        self._storages = storages
        self.cache = cache
        self.store = store
        self.column = column
        self.name: str | None = None

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.column = self.column or f"{name}_data"
        attachment = self
        setattr(owner, f"{name}_attacher", property(lambda record: attachment.attacher(record)))

    def __get__(self, record: Any, owner: type | None = None) -> Any:
        if record is None:
            return self
        return self.attacher(record).current

    def __set__(self, record: Any, value: BinaryIO | Mapping[str, Any] | str | None) -> None:
        self.attacher(record).assign(value)

    @property
    def storages(self) -> Mapping[str, Storage]:
        return self._storages if self._storages is not None else get_storages()

    @property
    def _slot(self) -> str:
        return f"_{self.name}_attacher"

    def attacher(self, record: Any) -> Attacher:
        """Return the record's attacher, building it on first access."""
        attacher = record.__dict__.get(self._slot)
        if attacher is None:
            attacher = Attacher(
                self.storages,
                cache=self.cache,
                store=self.store,
                record=record,
                name=self.name,
                column=self.column,
            )
            attacher.load_data(getattr(record, self.column, None))
            record.__dict__[self._slot] = attacher
        return attacher

    def reset(self, record: Any) -> None:
        """Discard the record's attacher so the next access rebuilds it."""
        record.__dict__.pop(self._slot, None)

    def on_duplicate(self, duplicate: Any, original: Any) -> CopyResult:
        """Give ``duplicate`` its own copy of ``original``'s attached file.

        Errors from the copy propagate, failing the duplication.
        """
        self.reset(duplicate)
        attacher = self.attacher(duplicate)
        attacher.write(None)
        result = attacher.copy(self.attacher(original))
        logger.debug("Duplicated {} attachment of {!r}", self.name, original)
        return result


def attachments_of(cls: type) -> dict[str, Attachment]:
    """Return the attachments declared on ``cls`` and its bases, by name."""
    found: dict[str, Attachment] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, Attachment):
                found[name] = value
    return found


class Attachable:
    """Base class for records with attachments.

    ``copy.copy(record)`` and ``copy.deepcopy(record)`` return a duplicate
    whose attachments are re-uploaded copies of the original's files.  If one
    of the copies fails, the files already copied for the duplicate are
    deleted and the error propagates.
    """

    def __copy__(self) -> "Attachable":
        duplicate = self.__class__.__new__(self.__class__)
        duplicate.__dict__.update(self.__dict__)
        self._copy_attachments(duplicate)
        return duplicate

    def __deepcopy__(self, memo: dict[int, Any]) -> "Attachable":
        slots = {attachment._slot for attachment in attachments_of(type(self)).values()}
        duplicate = self.__class__.__new__(self.__class__)
        memo[id(self)] = duplicate
        for key, value in self.__dict__.items():
            if key not in slots:
                duplicate.__dict__[key] = copy.deepcopy(value, memo)
        self._copy_attachments(duplicate)
        return duplicate

    def _copy_attachments(self, duplicate: "Attachable") -> None:
        copied: list[FileHandle] = []
        try:
            for attachment in attachments_of(type(self)).values():
                result = attachment.on_duplicate(duplicate, self)
                if result.current is not None:
                    copied.append(result.current)
        except Exception:
            for handle in copied:
                try:
                    handle.delete()
                except Exception as exc:
                    logger.warning("Could not remove copied file {}:{}: {}", handle.storage_key, handle.id, exc)
            raise

    @classmethod
    def attachments(cls) -> dict[str, Attachment]:
        return attachments_of(cls)

    def attached_files(self) -> dict[str, FileHandle | None]:
        """Current file of every attachment, by name."""
        return {name: attachment.attacher(self).current for name, attachment in attachments_of(type(self)).items()}
