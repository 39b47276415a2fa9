"""Flatten an organized directory back to a single level."""

from __future__ import annotations

import logging
from pathlib import Path

from foldersort.ingestion import DirectoryScanner, FileEntry, MetadataError

from .errors import FlattenError
from .models import FlattenResult

LOGGER = logging.getLogger(__name__)


class DirectoryFlattener:
    """Move files out of category folders and remove the emptied folders."""

    def __init__(
        self,
        *,
        scanner: DirectoryScanner | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.scanner = scanner or DirectoryScanner()
        self.logger = logger or LOGGER

    def reverse(self, target: Path) -> FlattenResult:
        """Flatten every immediate subdirectory of ``target`` into ``target``.

        A failure inside one subdirectory is logged and recorded; the remaining
        subdirectories are still flattened.

        Args:
            target: Previously organized directory.

        Returns:
            FlattenResult: Files restored, directories removed, and failures.

        Raises:
            MetadataError: If ``target`` itself cannot be listed.
        """
        root = target.expanduser().resolve()
        result = FlattenResult()
        for entry in self.scanner.list_directories(root):
            result = self._flatten_one(entry, root, result)

        self.logger.info(
            "%d files restored from %d folders",
            result.files_restored,
            len(result.directories_removed),
        )
        return result

    def _flatten_one(self, entry: FileEntry, root: Path, result: FlattenResult) -> FlattenResult:
        try:
            children = self.scanner.list_files(entry.path)
        except MetadataError as exc:
            return self._record_failure(result, entry, exc)

        for child in children:
            destination = root / child.name
            try:
                child.path.rename(destination)
            except OSError as exc:
                error = FlattenError(f"Unable to move {child.path} to {destination}: {exc}")
                return self._record_failure(result, entry, error)
            self.logger.info("Moved %s back to %s", child.name, destination)
            result = result.record_restore()

        try:
            entry.path.rmdir()
        except OSError as exc:
            error = FlattenError(f"Unable to remove {entry.path}: {exc}")
            return self._record_failure(result, entry, error)
        self.logger.info("Removed empty directory %s", entry.path)
        return result.record_removal(entry.path)

    def _record_failure(
        self, result: FlattenResult, entry: FileEntry, exc: Exception
    ) -> FlattenResult:
        self.logger.error("Unable to flatten %s: %s", entry.path, exc)
        return result.record_error(f"{entry.path}: {exc}")


def reverse(target: Path, *, logger: logging.Logger | None = None) -> FlattenResult:
    """Flatten ``target`` using a default `DirectoryFlattener`."""
    return DirectoryFlattener(logger=logger).reverse(target)


__all__ = ["DirectoryFlattener", "reverse"]
