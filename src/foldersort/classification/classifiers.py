"""Classifiers mapping file metadata to a destination folder name.

Every classifier is a pure function of the metadata it receives and the
strategy carrying its options. `classify` dispatches to the function registered
for the strategy variant and `build_strategy` turns a user-facing strategy name
plus options into a validated variant.
"""

from __future__ import annotations

import math
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Mapping, Optional

from pydantic import TypeAdapter, ValidationError

from foldersort.config.exceptions import ConfigError
from foldersort.ingestion.models import FileMetadata

from .models import (
    STRATEGY_NAMES,
    ContentStrategy,
    DateStrategy,
    ExtensionStrategy,
    RecencyStrategy,
    SizeStrategy,
    Strategy,
    StrategyModel,
)

BYTES_PER_MB = 1024 * 1024
SECONDS_PER_DAY = 24 * 60 * 60

# fmt: off
DOCUMENT_EXTENSIONS = frozenset(
    {
        "pdf", "doc", "docx", "xls", "xlsx", "ppt", "pptx", "odt", "ods", "odp",
        "odg", "odf", "rtf", "txt", "csv", "md", "pages", "numbers", "key", "wpd",
        "wps", "epub", "tex", "latex", "dotx", "dotm", "xltx", "xltm", "potx",
        "potm", "ott", "ots", "otp", "dif", "slk", "xlam", "xla", "odb", "dbf",
        "mdb", "accdb", "sqlite", "json", "xml", "yaml", "yml", "ini", "cfg", "log",
        "azw", "mobi",
    }
)
# fmt: on
EXECUTABLE_EXTENSIONS = frozenset({"exe", "msi", "dmg", "app", "apk"})
ARCHIVE_EXTENSIONS = frozenset({"zip", "rar", "7z", "tar", "gz", "tgz", "bz2", "xz", "zst", "iso"})
EXECUTABLE_MIME_TYPES = frozenset({"application/x-msdownload"})

_MEDIA_CATEGORIES = {
    "image": "Images",
    "video": "Videos",
    "audio": "Audio",
}

_STRATEGY_ALIASES = {
    "extension": "type",
    "last-used": "last used",
    "last_used": "last used",
    "recency": "last used",
}

_STRATEGY_ADAPTER: TypeAdapter[Strategy] = TypeAdapter(Strategy)


def _sunday_based_weekday(value: date) -> int:
    """Return the weekday with Sunday=0 through Saturday=6."""
    return (value.weekday() + 1) % 7


def week_of_month(value: date) -> str:
    """Return the weekly bucket label for ``value``.

    The label joins the Monday of the Sunday-started week containing ``value``
    with the 1-based week ordinal inside the month, e.g. ``2023-01-02_Week_1``.
    """
    weekday = _sunday_based_weekday(value)
    monday = value - timedelta(days=weekday) + timedelta(days=1)
    first_offset = _sunday_based_weekday(value.replace(day=1))
    ordinal = math.ceil((value.day + first_offset) / 7)
    return f"{monday.isoformat()}_Week_{ordinal}"


def classify_by_extension(metadata: FileMetadata, strategy: ExtensionStrategy) -> str:
    """Return the lowercase extension; files without one map to ``""``."""
    return metadata.extension.lower().lstrip(".")


def classify_by_date(metadata: FileMetadata, strategy: DateStrategy) -> str:
    """Return the date bucket of the file's modification time."""
    modified = metadata.modified_at.date()
    granularity = strategy.granularity
    if granularity == "days":
        return modified.isoformat()
    if granularity == "weeks":
        return week_of_month(modified)
    if granularity == "months":
        return f"{modified.year:04d}-{modified.month:02d}"
    if granularity == "years":
        return f"{modified.year:04d}"
    raise ConfigError(f"Unknown date granularity '{granularity}'.")


def classify_by_size(metadata: FileMetadata, strategy: SizeStrategy) -> str:
    """Return ``Small``, ``Medium`` or ``Large``; bounds are exclusive."""
    size = metadata.size_bytes
    if size < strategy.small_max_mb * BYTES_PER_MB:
        return "Small"
    if size < strategy.medium_max_mb * BYTES_PER_MB:
        return "Medium"
    return "Large"


def classify_by_content(metadata: FileMetadata, strategy: ContentStrategy) -> str:
    """Return the content family of the file, checked in priority order."""
    media = _MEDIA_CATEGORIES.get(metadata.mime_category)
    if media is not None:
        return media
    extension = metadata.extension
    if metadata.mime_category == "text" or extension in DOCUMENT_EXTENSIONS:
        return "Documents"
    if extension in EXECUTABLE_EXTENSIONS or metadata.mime_type in EXECUTABLE_MIME_TYPES:
        return "Executables"
    if extension in ARCHIVE_EXTENSIONS:
        return "Archives"
    return "Other"


def days_since_access(metadata: FileMetadata, now: Optional[datetime] = None) -> float:
    """Return the fractional number of days since the file was last accessed."""
    current = (now or datetime.now(timezone.utc)).astimezone()
    return (current - metadata.last_accessed_at).total_seconds() / SECONDS_PER_DAY


def classify_by_recency(
    metadata: FileMetadata,
    strategy: RecencyStrategy,
    now: Optional[datetime] = None,
) -> str:
    """Return the recency bucket; bounds are inclusive."""
    days = days_since_access(metadata, now)
    if days <= strategy.recent_max_days:
        return "Recently Used"
    if days <= strategy.moderate_max_days:
        return "Moderately Used"
    return "Rarely Used"


_CLASSIFIERS: dict[type[StrategyModel], Callable[..., str]] = {
    ExtensionStrategy: classify_by_extension,
    DateStrategy: classify_by_date,
    SizeStrategy: classify_by_size,
    ContentStrategy: classify_by_content,
}


def classify(
    metadata: FileMetadata,
    strategy: StrategyModel,
    *,
    now: Optional[datetime] = None,
) -> str:
    """Return the category for ``metadata`` under ``strategy``.

    Args:
        metadata: Metadata of the file being placed.
        strategy: Strategy variant selecting the classifier and its options.
        now: Reference time for recency; defaults to the current time.

    Returns:
        str: Destination folder name.

    Raises:
        ConfigError: If no classifier is registered for the strategy.
    """
    if isinstance(strategy, RecencyStrategy):
        return classify_by_recency(metadata, strategy, now)
    classifier = _CLASSIFIERS.get(type(strategy))
    if classifier is None:
        raise ConfigError(f"No classifier registered for {type(strategy).__name__}.")
    return classifier(metadata, strategy)


def normalize_strategy_name(name: str) -> str:
    """Return the canonical strategy name for ``name`` (case-insensitive)."""
    normalized = " ".join(name.strip().lower().split())
    return _STRATEGY_ALIASES.get(normalized, normalized)


def build_strategy(name: str, options: Mapping[str, Any] | None = None) -> Strategy:
    """Build the strategy variant named ``name`` from ``options``.

    Args:
        name: One of ``type``, ``date``, ``size``, ``content``, ``last used``.
        options: Strategy-specific options; ``None`` values are ignored so that
            unset CLI flags fall back to defaults.

    Returns:
        Strategy: Validated strategy variant.

    Raises:
        ConfigError: If the name is unknown or the options are invalid.
    """
    kind = normalize_strategy_name(name)
    if kind not in STRATEGY_NAMES:
        choices = ", ".join(STRATEGY_NAMES)
        raise ConfigError(f"Unknown organization type '{name}'. Choose one of: {choices}.")

    payload = {key: value for key, value in dict(options or {}).items() if value is not None}
    payload["kind"] = kind
    try:
        return _STRATEGY_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid options for '{kind}' organization: {exc}") from exc


__all__ = [
    "ARCHIVE_EXTENSIONS",
    "DOCUMENT_EXTENSIONS",
    "EXECUTABLE_EXTENSIONS",
    "build_strategy",
    "classify",
    "classify_by_content",
    "classify_by_date",
    "classify_by_extension",
    "classify_by_recency",
    "classify_by_size",
    "days_since_access",
    "normalize_strategy_name",
    "week_of_month",
]
