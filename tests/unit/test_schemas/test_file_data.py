"""Unit tests for serialized file data schemas."""

import pytest
from pydantic import ValidationError

from attachment_kit.schemas.file_data import FileData, FileMetadata


class TestFileData:
    def test_valid_data(self) -> None:
        data = FileData(
            id="ab12.pdf",
            storage="store",
            metadata={"filename": "budget.pdf", "size": 1024, "mime_type": "application/pdf"},
        )
        assert data.metadata.filename == "budget.pdf"
        assert data.metadata.size == 1024

    def test_metadata_defaults_empty(self) -> None:
        data = FileData(id="a", storage="cache")
        assert data.metadata == FileMetadata()
        assert data.metadata.model_dump(exclude_none=True) == {}

    def test_negative_size_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FileData(id="a", storage="cache", metadata={"size": -1})

    def test_missing_storage_rejected(self) -> None:
        with pytest.raises(ValidationError):
            FileData.model_validate({"id": "a"})

    def test_extra_metadata_allowed(self) -> None:
        metadata = FileMetadata.model_validate({"filename": "a.png", "width": 640})
        assert metadata.model_dump(exclude_none=True) == {"filename": "a.png", "width": 640}
