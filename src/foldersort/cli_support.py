"""Helpers shared by the CLI commands: logging setup and interactive input."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Callable, Optional

import click
from pydantic import BaseModel, Field
from rich.console import Console
from rich.logging import RichHandler

from foldersort.classification import STRATEGY_NAMES, normalize_strategy_name
from foldersort.config import ConfigError, FolderSortConfig, strategy_options
from foldersort.config.models import LoggingSettings
from foldersort.organization import RunSummary

PACKAGE_LOGGER = "foldersort"
_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

PromptProvider = Callable[..., Any]


class OrgInputs(BaseModel):
    """Resolved inputs for one `foldersort org` invocation.

    Attributes:
        source: Directory whose files are organized.
        target: Root for category folders; ``None`` means the current directory.
        strategy: Canonical strategy name.
        options: Strategy options merged from configuration and flags.
    """

    source: Path
    target: Optional[Path] = None
    strategy: str
    options: dict[str, Any] = Field(default_factory=dict)


def configure_logging(
    settings: LoggingSettings,
    *,
    verbose: bool = False,
    console_output: bool = True,
    console: Console | None = None,
) -> logging.Logger:
    """Attach console and (optionally) rotating file handlers to the package logger.

    Args:
        settings: Logging section of the resolved configuration.
        verbose: Force DEBUG level regardless of ``settings.level``.
        console_output: Whether to log to the terminal at all.
        console: Rich console for the terminal handler; stderr by default.

    Returns:
        logging.Logger: The configured ``foldersort`` logger.

    Raises:
        ConfigError: If the configured level is not a logging level name.
    """
    level_name = "DEBUG" if verbose else settings.level.upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ConfigError(f"Unknown logging level '{settings.level}'.")

    logger = logging.getLogger(PACKAGE_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(level)

    if console_output:
        rich_handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        rich_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(rich_handler)

    if settings.file:
        log_path = Path(settings.file).expanduser()
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=max(1, settings.max_size_mb) * 1024 * 1024,
            backupCount=max(0, settings.backup_count),
            encoding="utf-8",
        )
        file_handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        logger.addHandler(file_handler)

    if not logger.handlers:
        logger.addHandler(logging.NullHandler())
    return logger


def collect_org_inputs(
    config: FolderSortConfig,
    *,
    source: str | None,
    target: str | None,
    strategy: str | None,
    overrides: dict[str, Any] | None = None,
    prompt: PromptProvider = click.prompt,
) -> OrgInputs:
    """Resolve organize inputs, asking ``prompt`` for anything missing.

    When ``source`` is missing the command runs interactively: the source,
    target, organization type and (for dates) granularity are requested
    through ``prompt``. Otherwise the configured default strategy is used.

    Args:
        config: Resolved configuration supplying defaults.
        source: Source directory given on the command line.
        target: Target directory given on the command line.
        strategy: Strategy name given on the command line.
        overrides: Strategy options given on the command line.
        prompt: Callable with the `click.prompt` signature.

    Returns:
        OrgInputs: Validated, normalized inputs.

    Raises:
        ConfigError: If the strategy name is unknown.
    """
    interactive = source is None
    if interactive:
        source = prompt("Enter the source directory to organize", type=str)
        if target is None:
            target = prompt(
                "Enter the target directory to move the files to (blank = current directory)",
                default="",
                show_default=False,
                type=str,
            )
        if strategy is None:
            strategy = prompt(
                f"Enter the type of organization ({', '.join(STRATEGY_NAMES)})",
                default=config.organization.default_strategy,
                type=str,
            )

    kind = normalize_strategy_name(strategy or config.organization.default_strategy)
    if kind not in STRATEGY_NAMES:
        raise ConfigError(
            f"Unknown organization type '{strategy}'. Choose one of: {', '.join(STRATEGY_NAMES)}."
        )

    options = strategy_options(config, kind)
    options.update({key: value for key, value in (overrides or {}).items() if value is not None})
    if interactive and kind == "date" and not (overrides or {}).get("granularity"):
        options["granularity"] = prompt(
            "Enter the date granularity (days, weeks, months, years)",
            default=options.get("granularity", "months"),
            type=str,
        ).strip().lower()

    return OrgInputs(
        source=Path(str(source).strip()).expanduser(),
        target=Path(target.strip()).expanduser() if target and target.strip() else None,
        strategy=kind,
        options=options,
    )


def summarize_moves(summary: RunSummary, target_root: Path) -> list[tuple[str, int]]:
    """Return ``(folder, count)`` rows for the moves of ``summary``, by first use."""
    counts: dict[str, int] = {}
    for operation in summary.moves:
        folder = operation.destination.parent
        try:
            label = str(folder.relative_to(target_root)) if folder != target_root else "."
        except ValueError:
            label = str(folder)
        counts[label] = counts.get(label, 0) + 1
    return list(counts.items())


def summary_payload(summary: RunSummary, source: Path, target: Path) -> dict[str, Any]:
    """Return the JSON payload describing an organize run."""
    return {
        "context": {
            "source_root": source.as_posix(),
            "destination_root": target.as_posix(),
            "dry_run": summary.dry_run,
        },
        "counts": {
            "moved": summary.files_moved,
            "folders": summary.folder_count,
            "errors": len(summary.errors),
        },
        "folders": sorted(path.as_posix() for path in summary.folders_created),
        "moves": [operation.model_dump(mode="json") for operation in summary.moves],
        "errors": list(summary.errors),
    }


__all__ = [
    "OrgInputs",
    "PACKAGE_LOGGER",
    "PromptProvider",
    "collect_org_inputs",
    "configure_logging",
    "summarize_moves",
    "summary_payload",
]
