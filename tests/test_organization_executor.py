"""Tests for the relocation executor and directory provisioning."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

import pytest

from foldersort.classification import DateStrategy, ExtensionStrategy, SizeStrategy
from foldersort.config import ConfigError
from foldersort.ingestion import FileMetadata, MetadataError, MetadataExtractor
from foldersort.organization import (
    DirectoryProvisioner,
    MoveError,
    MoveOperation,
    ProvisioningError,
    RelocationExecutor,
    RunSummary,
    organize,
)

MB = 1024 * 1024


def _touch(path: Path, *, size: int = 7, modified: datetime | None = None) -> Path:
    path.write_bytes(b"\0" * size)
    if modified is not None:
        stamp = modified.timestamp()
        os.utime(path, (stamp, stamp))
    return path


def _dirs(tmp_path: Path) -> tuple[Path, Path]:
    source = tmp_path / "sourceDir"
    target = tmp_path / "targetDir"
    source.mkdir()
    target.mkdir()
    return source, target


class FailingExtractor(MetadataExtractor):
    """Extractor that cannot stat files whose name is listed in ``broken``."""

    def __init__(self, *broken: str) -> None:
        super().__init__()
        self.broken = set(broken)

    def extract(self, path: Path) -> FileMetadata:
        if path.name in self.broken:
            raise MetadataError(f"Unable to read metadata for {path}: simulated")
        return super().extract(path)


def test_provisioner_creates_directory_once(tmp_path: Path) -> None:
    provisioner = DirectoryProvisioner()
    destination = tmp_path / "a" / "b"

    assert provisioner.ensure(destination) is True
    assert destination.is_dir()
    assert provisioner.ensure(destination) is False
    assert provisioner.provisioned == frozenset({destination})


def test_provisioner_accepts_existing_directory(tmp_path: Path) -> None:
    existing = tmp_path / "existingDir"
    existing.mkdir()

    assert DirectoryProvisioner().ensure(existing) is True
    assert existing.is_dir()


def test_provisioner_wraps_filesystem_failures(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with pytest.raises(ProvisioningError):
        DirectoryProvisioner().ensure(blocker)
    with pytest.raises(ProvisioningError):
        DirectoryProvisioner().ensure(blocker / "child")


def test_provisioner_logs_only_new_directories(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    existing = tmp_path / "existing"
    existing.mkdir()
    provisioner = DirectoryProvisioner()

    with caplog.at_level(logging.INFO, logger="foldersort"):
        provisioner.ensure(existing)
        provisioner.ensure(tmp_path / "fresh")
        provisioner.ensure(tmp_path / "fresh")

    created = [record for record in caplog.records if "Created directory" in record.message]
    assert len(created) == 1
    assert "fresh" in created[0].message


def test_run_summary_is_folded_not_mutated(tmp_path: Path) -> None:
    empty = RunSummary()
    folder = tmp_path / "txt"
    first = empty.record_move(
        MoveOperation(source=tmp_path / "a.txt", destination=folder / "a.txt", category="txt")
    )
    second = first.record_move(
        MoveOperation(source=tmp_path / "b.txt", destination=folder / "b.txt", category="txt")
    )

    assert empty.files_moved == 0
    assert first.files_moved == 1
    assert second.files_moved == 2
    assert second.folders_created == frozenset({folder})
    assert second.describe() == "2 files moved to 1 folders"
    with pytest.raises(Exception):
        second.files_moved = 5  # type: ignore[misc]


def test_organize_by_type(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "file1.txt")
    _touch(source / "file2.jpg")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert (target / "txt" / "file1.txt").exists()
    assert (target / "jpg" / "file2.jpg").exists()
    assert not (source / "file1.txt").exists()
    assert summary.files_moved == 2
    assert len(summary.folders_created) == 2
    assert summary.errors == ()


def test_organize_by_date_months(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "file1.txt", modified=datetime(2023, 1, 1, 12, 0))
    _touch(source / "file2.jpg", modified=datetime(2023, 2, 15, 12, 0))

    summary = RelocationExecutor().run(source, target, DateStrategy(granularity="months"))

    assert (target / "2023-01" / "file1.txt").exists()
    assert (target / "2023-02" / "file2.jpg").exists()
    assert summary.files_moved == 2
    assert summary.folders_created == frozenset(
        {target.resolve() / "2023-01", target.resolve() / "2023-02"}
    )


def test_organize_by_size_with_custom_thresholds(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "small.txt", size=100)
    _touch(source / "medium.jpg", size=5 * MB)
    _touch(source / "large.zip", size=15 * MB)

    summary = organize(source, target, "size", {"small_max_mb": 1, "medium_max_mb": 10})

    assert (target / "Small" / "small.txt").exists()
    assert (target / "Medium" / "medium.jpg").exists()
    assert (target / "Large" / "large.zip").exists()
    assert summary.files_moved == 3
    assert summary.folder_count == 3


def test_organize_by_content(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "document.pdf")
    _touch(source / "image.jpg")

    summary = organize(source, target, "content")

    assert (target / "Documents" / "document.pdf").exists()
    assert (target / "Images" / "image.jpg").exists()
    assert summary.files_moved == 2
    assert summary.folder_count == 2


def test_organize_by_recency(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    now = datetime.now(timezone.utc)
    fresh = _touch(source / "fresh.txt")
    stale = _touch(source / "stale.txt")
    old = (now - timedelta(days=200)).timestamp()
    os.utime(stale, (old, old))
    recent = (now - timedelta(days=1)).timestamp()
    os.utime(fresh, (recent, recent))

    summary = organize(source, target, "Last Used", now=now)

    assert (target / "Recently Used" / "fresh.txt").exists()
    assert (target / "Rarely Used" / "stale.txt").exists()
    assert summary.files_moved == 2


def test_organize_by_recency_accepts_naive_reference_time(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "a.txt")
    _touch(source / "b.txt")

    summary = organize(source, target, "last used", now=datetime(2030, 1, 1))

    assert summary.errors == ()
    assert summary.files_moved == 2
    assert (target / "Rarely Used" / "a.txt").exists()
    assert (target / "Rarely Used" / "b.txt").exists()


def test_run_uses_one_reference_time_for_every_file(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source, target = _dirs(tmp_path)
    for name in ("a.txt", "b.txt", "c.txt"):
        _touch(source / name)
    seen: list[datetime | None] = []

    def recording_classify(metadata: FileMetadata, strategy: Any, *, now: Any = None) -> str:
        seen.append(now)
        return "bucket"

    monkeypatch.setattr("foldersort.organization.executor.classify", recording_classify)

    RelocationExecutor().run(source, target, ExtensionStrategy())

    assert len(seen) == 3
    assert len(set(seen)) == 1
    assert seen[0] is not None and seen[0].tzinfo is not None


def test_shared_category_is_provisioned_once(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    for name in ("a.txt", "b.txt", "c.txt"):
        _touch(source / name)

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert summary.files_moved == 3
    assert summary.folders_created == frozenset({target.resolve() / "txt"})


def test_directories_and_nested_files_are_ignored(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    nested = source / "nested"
    nested.mkdir()
    _touch(nested / "deep.txt")
    _touch(source / "top.txt")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert summary.files_moved == 1
    assert (nested / "deep.txt").exists()
    assert (target / "txt" / "top.txt").exists()


def test_file_without_extension_lands_in_target_root(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "README")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert (target / "README").exists()
    assert summary.files_moved == 1
    assert summary.folder_count == 0


def test_organizing_in_place(tmp_path: Path) -> None:
    source = tmp_path / "inbox"
    source.mkdir()
    _touch(source / "a.txt")
    _touch(source / "LICENSE")

    summary = RelocationExecutor().run(source, source, ExtensionStrategy())

    assert (source / "txt" / "a.txt").exists()
    assert (source / "LICENSE").exists()
    assert summary.files_moved == 1


def test_unknown_strategy_touches_nothing(tmp_path: Path) -> None:
    source = tmp_path / "sourceDir"
    source.mkdir()
    _touch(source / "file1.txt")
    target = tmp_path / "missingTarget"

    with pytest.raises(ConfigError):
        organize(source, target, "colour")

    assert (source / "file1.txt").exists()
    assert not target.exists()


def test_metadata_failure_skips_file_and_continues(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "good.txt")
    _touch(source / "bad.txt")

    executor = RelocationExecutor(extractor=FailingExtractor("bad.txt"))
    summary = executor.run(source, target, ExtensionStrategy())

    assert summary.files_moved == 1
    assert (target / "txt" / "good.txt").exists()
    assert (source / "bad.txt").exists()
    assert len(summary.errors) == 1
    assert "bad.txt" in summary.errors[0]


def test_size_strategy_also_skips_failed_files(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "good.bin")
    _touch(source / "bad.bin")

    executor = RelocationExecutor(extractor=FailingExtractor("bad.bin"))
    summary = executor.run(source, target, SizeStrategy())

    assert summary.files_moved == 1
    assert (target / "Small" / "good.bin").exists()
    assert len(summary.errors) == 1


def test_provisioning_failure_skips_file(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    (target / "txt").write_text("occupied by a file", encoding="utf-8")
    _touch(source / "note.txt")
    _touch(source / "photo.jpg")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert (source / "note.txt").exists()
    assert (target / "jpg" / "photo.jpg").exists()
    assert summary.files_moved == 1
    assert len(summary.errors) == 1


def test_rename_failure_skips_file_and_continues(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    blocked = target / "txt" / "a.txt"
    blocked.mkdir(parents=True)
    (blocked / "keep.txt").write_text("not empty", encoding="utf-8")
    _touch(source / "a.txt")
    _touch(source / "b.jpg")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert summary.files_moved == 1
    assert len(summary.errors) == 1
    assert "a.txt" in summary.errors[0]
    assert (source / "a.txt").is_file()
    assert (target / "jpg" / "b.jpg").exists()


def test_rename_failure_reraises_move_error_when_fail_fast(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    blocked = target / "txt" / "a.txt"
    blocked.mkdir(parents=True)
    (blocked / "keep.txt").write_text("not empty", encoding="utf-8")
    _touch(source / "a.txt")

    with pytest.raises(MoveError):
        RelocationExecutor(fail_fast=True).run(source, target, ExtensionStrategy())

    assert (source / "a.txt").is_file()


def test_unusable_target_root_is_reported_in_summary(tmp_path: Path) -> None:
    source = tmp_path / "sourceDir"
    source.mkdir()
    target = tmp_path / "targetDir"
    target.write_text("occupied by a file", encoding="utf-8")
    _touch(source / "a.txt")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy())

    assert summary.files_moved == 0
    assert len(summary.errors) == 1
    assert str(target.resolve()) in summary.errors[0]
    assert (source / "a.txt").is_file()


def test_unusable_target_root_reraises_when_fail_fast(tmp_path: Path) -> None:
    source = tmp_path / "sourceDir"
    source.mkdir()
    target = tmp_path / "targetDir"
    target.write_text("occupied by a file", encoding="utf-8")
    _touch(source / "a.txt")

    with pytest.raises(ProvisioningError):
        RelocationExecutor(fail_fast=True).run(source, target, ExtensionStrategy())

    assert (source / "a.txt").is_file()


def test_fail_fast_reraises(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "bad.txt")

    executor = RelocationExecutor(extractor=FailingExtractor("bad.txt"), fail_fast=True)

    with pytest.raises(MetadataError):
        executor.run(source, target, ExtensionStrategy())


def test_dry_run_leaves_files_in_place(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "file1.txt")
    _touch(source / "file2.jpg")

    summary = RelocationExecutor().run(source, target, ExtensionStrategy(), dry_run=True)

    assert summary.dry_run is True
    assert summary.files_moved == 2
    assert summary.describe() == "2 files would be moved to 2 folders"
    assert (source / "file1.txt").exists()
    assert not (target / "txt").exists()


def test_missing_target_defaults_to_current_directory(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "file1.txt")
    monkeypatch.chdir(target)

    summary = RelocationExecutor().run(source, None, ExtensionStrategy())

    assert (target / "txt" / "file1.txt").exists()
    assert summary.files_moved == 1


def test_missing_source_raises_metadata_error(tmp_path: Path) -> None:
    with pytest.raises(MetadataError):
        RelocationExecutor().run(tmp_path / "absent", tmp_path, ExtensionStrategy())


def test_run_logs_summary_and_empty_warning(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "file1.txt")

    with caplog.at_level(logging.INFO, logger="foldersort"):
        RelocationExecutor().run(source, target, ExtensionStrategy())
        RelocationExecutor().run(source, target, ExtensionStrategy())

    assert "1 files moved to 1 folders" in caplog.text
    assert any(
        record.levelno == logging.WARNING and "No files were moved" in record.message
        for record in caplog.records
    )


def test_injected_logger_receives_messages(tmp_path: Path) -> None:
    source, target = _dirs(tmp_path)
    _touch(source / "file1.txt")

    records: list[logging.LogRecord] = []

    class _Collector(logging.Handler):
        def emit(self, record: logging.LogRecord) -> None:
            records.append(record)

    logger = logging.getLogger("tests.injected")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    handler = _Collector()
    logger.addHandler(handler)
    try:
        RelocationExecutor(logger=logger).run(source, target, ExtensionStrategy())
    finally:
        logger.removeHandler(handler)

    messages = [record.getMessage() for record in records]
    assert any(message.startswith("Moved file1.txt") for message in messages)
    assert "1 files moved to 1 folders" in messages
