"""Attachment data types: storage tiers, uploaded file handles, copy results."""

import json
from collections.abc import Mapping
from contextlib import closing
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType
from typing import Any, BinaryIO

from attachment_kit.lib.storage.base import Storage
from attachment_kit.schemas.file_data import FileData


class Tier(StrEnum):
    """Storage class an attacher's current file lives in."""

    CACHE = "cache"
    STORE = "store"
    NONE = "none"


@dataclass(frozen=True)
class FileHandle:
    """Immutable descriptor of a file uploaded to a storage.

    Two handles are equal when they point at the same location on the same
    storage; metadata does not take part in comparison and is read-only.
    """

    id: str
    storage_key: str
    storage: Storage = field(compare=False, repr=False)
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __copy__(self) -> "FileHandle":
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> "FileHandle":
        return self

    @property
    def filename(self) -> str | None:
        return self.metadata.get("filename")

    @property
    def size(self) -> int | None:
        return self.metadata.get("size")

    @property
    def mime_type(self) -> str | None:
        return self.metadata.get("mime_type")

    @property
    def extension(self) -> str:
        """Lowercase extension of the location including the dot, or ''."""
        name = self.id.rsplit("/", 1)[-1]
        dot_idx = name.rfind(".")
        if dot_idx <= 0:
            return ""
        return name[dot_idx:].lower()

    def open(self) -> BinaryIO:
        """Open the stored content for reading.  Callers close the stream."""
        return self.storage.open(self.id)

    def read(self) -> bytes:
        with closing(self.open()) as f:
            return f.read()

    def exists(self) -> bool:
        return self.storage.exists(self.id)

    def delete(self) -> None:
        self.storage.delete(self.id)

    def url(self) -> str:
        return self.storage.url(self.id)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the ``{"id", "storage", "metadata"}`` form."""
        return {"id": self.id, "storage": self.storage_key, "metadata": dict(self.metadata)}

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: Mapping[str, Any] | str, storages: Mapping[str, Storage]) -> "FileHandle":
        """Load a handle from serialized data.

        Args:
            data: A dict or JSON string as produced by ``to_dict``/``to_json``.
            storages: Registry used to resolve the ``storage`` key.

        Raises:
            ValueError: If the data is malformed.
            KeyError: If the storage key is not registered.
        """
        parsed = FileData.model_validate_json(data) if isinstance(data, str) else FileData.model_validate(data)
        if parsed.storage not in storages:
            msg = f"Unknown storage {parsed.storage!r} (registered: {', '.join(sorted(storages))})"
            raise KeyError(msg)
        return cls(
            id=parsed.id,
            storage_key=parsed.storage,
            storage=storages[parsed.storage],
            metadata=parsed.metadata.model_dump(exclude_none=True),
        )


@dataclass(frozen=True)
class CopyResult:
    """Outcome of ``Attacher.copy``: the new current file and the replaced one."""

    current: FileHandle | None
    old: FileHandle | None
