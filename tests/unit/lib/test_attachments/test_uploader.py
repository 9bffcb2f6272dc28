"""Unit tests for the Uploader."""

import pytest

from attachment_kit.lib.attachments import FileHandle, ReadError, UploadError, Uploader
from attachment_kit.lib.storage import MemoryStorage


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def uploader(storage) -> Uploader:
    return Uploader("store", storage)


class _RecordingStorage(MemoryStorage):
    def __init__(self) -> None:
        super().__init__()
        self.calls: list[dict] = []

    def upload(self, io, id, *, move=False, metadata=None):
        self.calls.append({"id": id, "move": move, "metadata": dict(metadata or {})})
        super().upload(io, id, move=move, metadata=metadata)


class TestUploadIO:
    def test_returns_handle_on_storage(self, uploader, storage, make_io) -> None:
        handle = uploader.upload(make_io(b"hello"), action="store")
        assert handle.storage_key == "store"
        assert handle.storage is storage
        assert storage.store[handle.id] == b"hello"

    def test_size_counts_bytes_written(self, uploader, make_io) -> None:
        handle = uploader.upload(make_io(b"x" * 1000), action="store")
        assert handle.size == 1000

    def test_metadata_from_name(self, uploader, make_io) -> None:
        handle = uploader.upload(make_io(b"data", "/tmp/uploads/Budget.CSV"), action="cache")
        assert handle.filename == "Budget.CSV"
        assert handle.mime_type == "text/csv"
        assert handle.id.endswith(".csv")

    def test_anonymous_stream(self, uploader, make_io) -> None:
        handle = uploader.upload(make_io(b"data", None), action="cache")
        assert handle.filename is None
        assert handle.mime_type is None
        assert "." not in handle.id

    def test_metadata_override(self, uploader, make_io) -> None:
        handle = uploader.upload(make_io(b"data"), action="cache", metadata={"filename": "renamed.png"})
        assert handle.filename == "renamed.png"

    def test_explicit_location(self, uploader, make_io) -> None:
        handle = uploader.upload(make_io(), action="store", location="fixed/path.txt")
        assert handle.id == "fixed/path.txt"

    def test_unique_locations(self, uploader, make_io) -> None:
        first = uploader.upload(make_io(), action="store")
        second = uploader.upload(make_io(), action="store")
        assert first.id != second.id


class TestUploadFileHandle:
    def test_reuploads_content_and_metadata(self, make_io) -> None:
        source = Uploader("cache", MemoryStorage()).upload(make_io(b"abc", "pic.jpeg"), action="cache")
        target = _RecordingStorage()

        copied = Uploader("store", target).upload(source, action="copy", move=False)

        assert copied.read() == b"abc"
        assert copied.metadata == source.metadata
        assert copied.id != source.id
        assert copied.extension == ".jpeg"
        assert target.calls[0]["move"] is False
        assert target.calls[0]["metadata"]["filename"] == "pic.jpeg"

    def test_missing_source_raises_read_error(self, uploader, storage) -> None:
        ghost = FileHandle(id="missing.txt", storage_key="store", storage=storage)
        with pytest.raises(ReadError) as exc_info:
            uploader.upload(ghost, action="copy")
        assert exc_info.value.file_id == "missing.txt"
        assert isinstance(exc_info.value.__cause__, FileNotFoundError)


class TestUploadFailures:
    def test_backend_error_becomes_upload_error(self, make_io) -> None:
        class _Broken(MemoryStorage):
            def upload(self, io, id, *, move=False, metadata=None):
                raise ConnectionError("unreachable")

        with pytest.raises(UploadError, match="unreachable") as exc_info:
            Uploader("cache", _Broken()).upload(make_io(), action="cache")
        assert exc_info.value.storage_key == "cache"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    def test_read_error_is_not_wrapped(self, uploader, make_io) -> None:
        stream = make_io()

        def _read(size=-1):
            raise OSError("disk gone")

        stream.read = _read
        with pytest.raises(ReadError, match="disk gone"):
            uploader.upload(stream, action="store")
