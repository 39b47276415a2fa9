"""Configuration models describing foldersort settings."""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat


class FolderSortBaseModel(BaseModel):
    """Shared configuration for foldersort Pydantic models."""

    model_config = ConfigDict(extra="forbid")


class SizeThresholds(FolderSortBaseModel):
    """Upper bounds, in megabytes, of the size buckets.

    Attributes:
        small_max_mb: Files strictly below this size are ``Small``.
        medium_max_mb: Files strictly below this size (and not small) are ``Medium``.
    """

    small_max_mb: PositiveFloat = 1.0
    medium_max_mb: PositiveFloat = 10.0


class RecencyThresholds(FolderSortBaseModel):
    """Upper bounds, in days since last access, of the recency buckets.

    Attributes:
        recent_max_days: Files accessed within this many days are ``Recently Used``.
        moderate_max_days: Files accessed within this many days are ``Moderately Used``.
    """

    recent_max_days: PositiveFloat = 30.0
    moderate_max_days: PositiveFloat = 90.0


class OrganizationOptions(FolderSortBaseModel):
    """Settings that govern how files are classified and relocated.

    Attributes:
        default_strategy: Strategy offered when the user does not choose one.
        date_granularity: Bucket resolution for the date strategy.
        size: Size bucket thresholds.
        recency: Last-access bucket thresholds.
        fail_fast: Abort the batch on the first per-file failure.
    """

    default_strategy: Literal["type", "date", "size", "content", "last used"] = "type"
    date_granularity: Literal["days", "weeks", "months", "years"] = "months"
    size: SizeThresholds = Field(default_factory=SizeThresholds)
    recency: RecencyThresholds = Field(default_factory=RecencyThresholds)
    fail_fast: bool = False


class LoggingSettings(FolderSortBaseModel):
    """Runtime logging configuration.

    Attributes:
        level: Logging verbosity level.
        file: Optional log file path; disabled when null.
        max_size_mb: Maximum log size before rotation.
        backup_count: Number of historical log files to retain.
    """

    level: str = "INFO"
    file: Optional[str] = "~/.foldersort/foldersort.log"
    max_size_mb: int = 10
    backup_count: int = 3


class CLIOptions(FolderSortBaseModel):
    """CLI behavior defaults and presentation preferences.

    Attributes:
        quiet_default: Whether commands suppress non-error output by default.
        summary_default: Whether commands only print summary lines by default.
    """

    quiet_default: bool = False
    summary_default: bool = False


class FolderSortConfig(FolderSortBaseModel):
    """Top-level configuration struct for foldersort.

    Attributes:
        organization: Classification and relocation settings.
        logging: Logging configuration.
        cli: CLI presentation defaults.
    """

    organization: OrganizationOptions = Field(default_factory=OrganizationOptions)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "FolderSortBaseModel",
    "SizeThresholds",
    "RecencyThresholds",
    "OrganizationOptions",
    "LoggingSettings",
    "CLIOptions",
    "FolderSortConfig",
]
