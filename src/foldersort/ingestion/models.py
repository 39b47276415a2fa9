"""Ingestion data models."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MIME_TYPE = "application/octet-stream"

EntryKind = Literal["file", "directory", "other"]


class FileEntry(BaseModel):
    """A single item returned by a directory listing.

    Attributes:
        path: Absolute path to the entry.
        name: Entry name, unique within one listing.
        kind: ``file`` for regular files, ``directory`` for directories, ``other``
            for symlinks, sockets, and anything else.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str
    kind: EntryKind

    @property
    def is_file(self) -> bool:
        return self.kind == "file"

    @property
    def is_directory(self) -> bool:
        return self.kind == "directory"


class FileMetadata(BaseModel):
    """Metadata a classifier needs to place one file.

    Attributes:
        path: Absolute path to the file.
        name: File name including extension.
        size_bytes: File size in bytes.
        modified_at: Last modification time (timezone-aware, local).
        last_accessed_at: Last access time (timezone-aware, local).
        extension: Lowercase extension without the leading dot, empty if none.
        mime_type: MIME type guessed from the file name.
    """

    model_config = ConfigDict(frozen=True)

    path: Path
    name: str
    size_bytes: int = Field(ge=0)
    modified_at: datetime
    last_accessed_at: datetime
    extension: str = ""
    mime_type: str = DEFAULT_MIME_TYPE

    @property
    def mime_category(self) -> str:
        """Return the MIME major type (``image``, ``text``, ...) or ``unknown``."""
        major, _, _ = self.mime_type.partition("/")
        return major or "unknown"


__all__ = ["DEFAULT_MIME_TYPE", "EntryKind", "FileEntry", "FileMetadata"]
