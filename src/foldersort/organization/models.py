"""Organization result models."""

from __future__ import annotations

from pathlib import Path
from typing import FrozenSet, Tuple

from pydantic import BaseModel, ConfigDict, Field


class OrganizationModel(BaseModel):
    """Shared configuration for immutable organization results."""

    model_config = ConfigDict(frozen=True)


class MoveOperation(OrganizationModel):
    """Represents moving a file into a category folder.

    Attributes:
        source: File path before the move.
        destination: File path after the move.
        category: Category computed for the file.
    """

    source: Path
    destination: Path
    category: str


class RunSummary(OrganizationModel):
    """Outcome of one organize run.

    Instances are never mutated; `record_move` and `record_error` return a new
    summary so the executor can fold one step at a time.

    Attributes:
        files_moved: Number of files moved (or planned, in dry runs).
        folders_created: Distinct destination directories that received files.
        moves: Moves in the order they happened.
        errors: Messages for files that were skipped.
        dry_run: Whether the run only planned moves.
    """

    files_moved: int = 0
    folders_created: FrozenSet[Path] = Field(default_factory=frozenset)
    moves: Tuple[MoveOperation, ...] = ()
    errors: Tuple[str, ...] = ()
    dry_run: bool = False

    @property
    def folder_count(self) -> int:
        return len(self.folders_created)

    def record_move(self, operation: MoveOperation) -> "RunSummary":
        """Return a summary that also counts ``operation``.

        Files with an empty category land in the target root, which is not a
        category folder and is not added to ``folders_created``.
        """
        folders = self.folders_created
        if operation.category:
            folders = folders | {operation.destination.parent}
        return self.model_copy(
            update={
                "files_moved": self.files_moved + 1,
                "folders_created": folders,
                "moves": self.moves + (operation,),
            }
        )

    def record_error(self, message: str) -> "RunSummary":
        """Return a summary that also lists ``message`` as a skipped file."""
        return self.model_copy(update={"errors": self.errors + (message,)})

    def describe(self) -> str:
        """Return the human-readable outcome line."""
        verb = "would be moved" if self.dry_run else "moved"
        return f"{self.files_moved} files {verb} to {self.folder_count} folders"


class FlattenResult(OrganizationModel):
    """Outcome of flattening an organized directory.

    Attributes:
        files_restored: Number of files moved back to the top level.
        directories_removed: Category directories removed once emptied.
        errors: Messages for subdirectories that could not be flattened.
    """

    files_restored: int = 0
    directories_removed: Tuple[Path, ...] = ()
    errors: Tuple[str, ...] = ()

    def record_restore(self) -> "FlattenResult":
        return self.model_copy(update={"files_restored": self.files_restored + 1})

    def record_removal(self, directory: Path) -> "FlattenResult":
        return self.model_copy(
            update={"directories_removed": self.directories_removed + (directory,)}
        )

    def record_error(self, message: str) -> "FlattenResult":
        return self.model_copy(update={"errors": self.errors + (message,)})


__all__ = ["FlattenResult", "MoveOperation", "OrganizationModel", "RunSummary"]
