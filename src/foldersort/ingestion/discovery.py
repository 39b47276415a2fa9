"""Directory listing utilities."""

from __future__ import annotations

from pathlib import Path

from .errors import MetadataError
from .models import EntryKind, FileEntry


def _entry_kind(path: Path) -> EntryKind:
    if path.is_symlink():
        return "other"
    if path.is_dir():
        return "directory"
    if path.is_file():
        return "file"
    return "other"


class DirectoryScanner:
    """List the immediate children of a directory.

    Only one level is inspected; entries come back in the order the filesystem
    returns them.
    """

    def list_entries(self, root: Path) -> list[FileEntry]:
        """Return the direct entries of ``root``.

        Args:
            root: Directory to list.

        Returns:
            list[FileEntry]: One entry per child, tagged by kind.

        Raises:
            MetadataError: If the directory cannot be listed.
        """
        root = root.expanduser().resolve()
        try:
            children = list(root.iterdir())
        except OSError as exc:
            raise MetadataError(f"Unable to list {root}: {exc}") from exc

        return [
            FileEntry(path=child, name=child.name, kind=_entry_kind(child))
            for child in children
        ]

    def list_files(self, root: Path) -> list[FileEntry]:
        """Return only the regular-file entries of ``root``."""
        return [entry for entry in self.list_entries(root) if entry.is_file]

    def list_directories(self, root: Path) -> list[FileEntry]:
        """Return only the subdirectory entries of ``root``."""
        return [entry for entry in self.list_entries(root) if entry.is_directory]
