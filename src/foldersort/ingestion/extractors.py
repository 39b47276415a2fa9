"""Metadata extraction helpers."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from .detectors import MimeLookup, TypeDetector
from .errors import MetadataError
from .models import FileMetadata


def file_extension(name: str) -> str:
    """Return the lowercase extension of ``name`` without its leading dot."""
    return Path(name).suffix[1:].lower()


class MetadataExtractor:
    """Build `FileMetadata` for a file from `stat` and a MIME lookup."""

    def __init__(self, mime_lookup: MimeLookup | None = None) -> None:
        self._mime_lookup: MimeLookup = mime_lookup or TypeDetector()

    def extract(self, path: Path) -> FileMetadata:
        """Return metadata for the file at ``path``.

        Args:
            path: File to inspect.

        Returns:
            FileMetadata: Size, timestamps, extension, and MIME type.

        Raises:
            MetadataError: If the file cannot be stat'ed.
        """
        try:
            stat = path.stat()
        except OSError as exc:
            raise MetadataError(f"Unable to read metadata for {path}: {exc}") from exc

        return FileMetadata(
            path=path,
            name=path.name,
            size_bytes=stat.st_size,
            modified_at=datetime.fromtimestamp(stat.st_mtime).astimezone(),
            last_accessed_at=datetime.fromtimestamp(stat.st_atime).astimezone(),
            extension=file_extension(path.name),
            mime_type=self._mime_lookup(path.name),
        )
