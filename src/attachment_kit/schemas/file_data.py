"""Pydantic v2 schemas for serialized attachment data."""

from pydantic import BaseModel, ConfigDict, Field


class FileMetadata(BaseModel):
    """Content metadata stored alongside an uploaded file."""

    model_config = ConfigDict(extra="allow")

    filename: str | None = None
    size: int | None = Field(default=None, ge=0)
    mime_type: str | None = None


class FileData(BaseModel):
    """Serialized form of an uploaded file, as written to a record column."""

    id: str = Field(min_length=1)
    storage: str = Field(min_length=1)
    metadata: FileMetadata = Field(default_factory=FileMetadata)
