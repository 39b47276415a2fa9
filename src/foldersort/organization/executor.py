"""Relocation executor: classify each file of a directory and move it."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

from foldersort.classification import Strategy, build_strategy, classify
from foldersort.classification.models import StrategyModel
from foldersort.ingestion import DirectoryScanner, FileEntry, MetadataError, MetadataExtractor

from .errors import MoveError, OrganizationError
from .models import MoveOperation, RunSummary
from .provisioner import DirectoryProvisioner

LOGGER = logging.getLogger(__name__)


def _format_size(size_bytes: int) -> str:
    if size_bytes < 1024:
        return f"{size_bytes} B"
    if size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    return f"{size_bytes / (1024 * 1024):.1f} MB"


class RelocationExecutor:
    """Move the regular files of a source directory into category folders."""

    def __init__(
        self,
        *,
        scanner: DirectoryScanner | None = None,
        extractor: MetadataExtractor | None = None,
        logger: logging.Logger | None = None,
        fail_fast: bool = False,
    ) -> None:
        self.scanner = scanner or DirectoryScanner()
        self.extractor = extractor or MetadataExtractor()
        self.logger = logger or LOGGER
        self.fail_fast = fail_fast

    def run(
        self,
        source: Path,
        target: Path | None,
        strategy: StrategyModel,
        *,
        dry_run: bool = False,
        now: datetime | None = None,
    ) -> RunSummary:
        """Classify and move every regular file directly inside ``source``.

        Args:
            source: Directory whose files are organized.
            target: Root that receives the category folders; the current
                directory when empty.
            strategy: Strategy variant selecting the classifier.
            dry_run: When true, only log the planned moves.
            now: Reference time for recency classification, shared by every
                file of the run. Naive values are taken as local time.

        Returns:
            RunSummary: Files moved, folders touched, and per-file errors.

        Raises:
            MetadataError: If ``source`` cannot be listed.
            OrganizationError: On the first per-file failure, or when the target
                root cannot be created, if ``fail_fast`` is set. Without
                ``fail_fast`` an unusable target root is recorded as the only
                error and no file is moved.
        """
        source_root = source.expanduser().resolve()
        target_root = (target or Path.cwd()).expanduser().resolve()
        # One aware reference time for the whole run; naive values are read as local time.
        reference = (now or datetime.now(timezone.utc)).astimezone()

        entries = self.scanner.list_entries(source_root)
        summary = RunSummary(dry_run=dry_run)
        provisioner = DirectoryProvisioner(logger=self.logger)
        if not dry_run:
            try:
                provisioner.ensure(target_root)
            except OrganizationError as exc:
                self.logger.error("Unable to prepare %s: %s", target_root, exc)
                if self.fail_fast:
                    raise
                summary = summary.record_error(f"{target_root}: {exc}")
                self.logger.warning("No files were moved from %s", source_root)
                return summary

        for entry in entries:
            if not entry.is_file:
                self.logger.debug("Skipping %s (%s)", entry.path, entry.kind)
                continue
            try:
                operation = self._relocate(
                    entry, target_root, strategy, provisioner, dry_run=dry_run, now=reference
                )
            except (MetadataError, OrganizationError) as exc:
                self.logger.error("Skipping %s: %s", entry.name, exc)
                summary = summary.record_error(f"{entry.path}: {exc}")
                if self.fail_fast:
                    raise
                continue
            if operation is not None:
                summary = summary.record_move(operation)

        if summary.files_moved:
            self.logger.info(summary.describe())
        else:
            self.logger.warning("No files were moved from %s", source_root)
        return summary

    def _relocate(
        self,
        entry: FileEntry,
        target_root: Path,
        strategy: StrategyModel,
        provisioner: DirectoryProvisioner,
        *,
        dry_run: bool,
        now: datetime | None,
    ) -> MoveOperation | None:
        metadata = self.extractor.extract(entry.path)
        category = classify(metadata, strategy, now=now)
        destination_dir = target_root / category if category else target_root
        destination = destination_dir / entry.name

        if destination == entry.path:
            self.logger.debug("%s is already in place", entry.path)
            return None

        operation = MoveOperation(source=entry.path, destination=destination, category=category)
        if dry_run:
            self.logger.info("Would move %s to %s", entry.name, destination)
            return operation

        provisioner.ensure(destination_dir)
        try:
            entry.path.rename(destination)
        except OSError as exc:
            raise MoveError(f"Unable to move {entry.path} to {destination}: {exc}") from exc

        self.logger.info(
            "Moved %s (%s, modified %s) to %s",
            entry.name,
            _format_size(metadata.size_bytes),
            metadata.modified_at.isoformat(timespec="seconds"),
            destination,
        )
        return operation


def organize(
    source: Path,
    target: Path | None,
    strategy_name: str,
    options: Mapping[str, Any] | None = None,
    *,
    dry_run: bool = False,
    fail_fast: bool = False,
    now: datetime | None = None,
    logger: logging.Logger | None = None,
    extractor: MetadataExtractor | None = None,
) -> RunSummary:
    """Build the named strategy and run it over ``source``.

    The strategy is validated before the filesystem is touched, so an unknown
    name or bad option raises `ConfigError` without side effects.
    """
    strategy: Strategy = build_strategy(strategy_name, options)
    executor = RelocationExecutor(extractor=extractor, logger=logger, fail_fast=fail_fast)
    return executor.run(source, target, strategy, dry_run=dry_run, now=now)


__all__ = ["RelocationExecutor", "organize"]
