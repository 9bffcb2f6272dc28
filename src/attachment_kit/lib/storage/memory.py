"""In-memory storage backend, used for tests and throwaway processes."""

import io as _io
from collections.abc import Mapping
from typing import Any, BinaryIO


class MemoryStorage:
    """Storage that keeps file contents in a dict keyed by location."""

    def __init__(self) -> None:
        self.store: dict[str, bytes] = {}

    def upload(
        self,
        io: BinaryIO,
        id: str,
        *,
        move: bool = False,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self.store[id] = io.read()

    def open(self, id: str) -> BinaryIO:
        try:
            return _io.BytesIO(self.store[id])
        except KeyError:
            msg = f"File not found: {id}"
            raise FileNotFoundError(msg) from None

    def exists(self, id: str) -> bool:
        return id in self.store

    def delete(self, id: str) -> None:
        self.store.pop(id, None)

    def url(self, id: str) -> str:
        return f"memory://{id}"
