"""Command line interface for the foldersort project."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

import click
import yaml
from click.core import ParameterSource
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from foldersort.classification import build_strategy
from foldersort.cli_support import (
    collect_org_inputs,
    configure_logging,
    summarize_moves,
    summary_payload,
)
from foldersort.config import ConfigError, ConfigManager, FolderSortConfig
from foldersort.ingestion import MetadataError
from foldersort.organization import DirectoryFlattener, OrganizationError, RelocationExecutor

console = Console()

# First match wins; anything unlisted is reported as ``internal_error``.
_ERROR_CODES: tuple[tuple[type[Exception], str], ...] = (
    (ConfigError, "config_error"),
    (MetadataError, "listing_error"),
    (OrganizationError, "organization_error"),
    (click.ClickException, "cli_error"),
)


class OutputMode:
    """How much a command prints: everything, summaries only, nothing, or JSON.

    Attributes:
        quiet: Print errors only.
        summary_only: Skip detail output such as tables.
        json_output: Print a single JSON document instead of rich output.
    """

    def __init__(
        self, *, quiet: bool = False, summary_only: bool = False, json_output: bool = False
    ) -> None:
        self.quiet = quiet
        self.summary_only = summary_only
        self.json_output = json_output

    @classmethod
    def resolve(
        cls,
        ctx: click.Context,
        config: FolderSortConfig,
        *,
        quiet: bool,
        summary_mode: bool,
        json_output: bool,
    ) -> "OutputMode":
        """Combine command-line flags with the configured CLI defaults.

        Flags typed on the command line win over ``cli.quiet_default`` and
        ``cli.summary_default``.

        Raises:
            click.ClickException: If the requested modes contradict each other.
        """
        quiet_flag = ctx.get_parameter_source("quiet") == ParameterSource.COMMANDLINE
        summary_flag = ctx.get_parameter_source("summary_mode") == ParameterSource.COMMANDLINE
        quiet_enabled = quiet if quiet_flag else config.cli.quiet_default
        summary_only = summary_mode if summary_flag else config.cli.summary_default

        if json_output:
            if quiet_flag and quiet_enabled:
                raise click.ClickException("--json cannot be combined with --quiet.")
            if summary_flag and summary_only:
                raise click.ClickException("--json cannot be combined with --summary.")
            return cls(json_output=True)

        if quiet_enabled and summary_only:
            raise click.ClickException(
                "Quiet and summary modes cannot both be enabled. Adjust CLI defaults or flags."
            )
        return cls(quiet=quiet_enabled, summary_only=summary_only)

    @property
    def console_logging(self) -> bool:
        """Whether log records may be written to the terminal."""
        return not (self.quiet or self.json_output)

    def emit(self, message: Any, *, mode: str = "detail") -> None:
        """Print ``message`` unless the mode hides it.

        ``mode`` is ``detail``, ``summary``, ``warning`` or ``error``.
        """
        if self.quiet and mode != "error":
            return
        if self.summary_only and mode == "detail":
            return
        console.print(message)

    def emit_errors(self, errors: Iterable[str]) -> None:
        entries = list(errors)
        if not entries:
            return
        self.emit("[red]Errors encountered:[/red]", mode="error")
        for entry in entries:
            self.emit(f"  - {entry}", mode="error")

    def emit_summary_line(self, command: str, root: Path, metrics: dict[str, Any]) -> None:
        parts = ", ".join(f"{key}={value}" for key, value in metrics.items())
        self.emit(f"[green]{command} summary for {root}: {parts}.[/green]", mode="summary")


@contextmanager
def _reported_errors(action: str, *, json_output: bool) -> Iterator[None]:
    """Turn exceptions raised inside the block into CLI errors.

    In JSON mode an ``{"error": {"code", "message"}}`` document is printed and
    the process exits with status 1; otherwise a `click.ClickException` is
    raised.

    Args:
        action: Gerund describing the command, used for unexpected errors.
        json_output: Whether the command runs in JSON mode.
    """
    try:
        yield
    except (click.Abort, click.exceptions.Exit):
        raise
    except Exception as exc:
        details: dict[str, Any] | None = None
        for error_type, code in _ERROR_CODES:
            if isinstance(exc, error_type):
                message = str(exc)
                break
        else:
            code = "internal_error"
            message = f"Unexpected error while {action}: {exc}"
            details = {"exception": type(exc).__name__}

        if json_output:
            payload: dict[str, Any] = {"error": {"code": code, "message": message}}
            if details is not None:
                payload["error"]["details"] = details
            console.print_json(data=payload)
            raise SystemExit(1) from exc
        if isinstance(exc, click.ClickException):
            raise
        raise click.ClickException(message) from exc


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="foldersort")
def cli() -> None:
    """foldersort sorts the files of a directory into category folders."""


@cli.command()
@click.argument("source", required=False, type=click.Path(file_okay=False, path_type=str))
@click.option(
    "--output",
    type=click.Path(file_okay=False, path_type=str),
    help="Directory receiving the category folders (default: current directory).",
)
@click.option(
    "--by",
    "strategy",
    type=str,
    help="Organization type: type, date, size, content, or 'last used'.",
)
@click.option(
    "--granularity",
    type=click.Choice(["days", "weeks", "months", "years"], case_sensitive=False),
    help="Date bucket resolution for --by date.",
)
@click.option("--small-mb", type=float, help="Upper bound of the Small size bucket (MB).")
@click.option("--medium-mb", type=float, help="Upper bound of the Medium size bucket (MB).")
@click.option("--recent-days", type=float, help="Upper bound of 'Recently Used' (days).")
@click.option("--moderate-days", type=float, help="Upper bound of 'Moderately Used' (days).")
@click.option("--dry-run", is_flag=True, help="Show the planned moves without moving anything.")
@click.option("--json", "json_output", is_flag=True, help="Print the run as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Print summary lines only.")
@click.option("--quiet", is_flag=True, help="Print errors only.")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def org(
    ctx: click.Context,
    source: str | None,
    output: str | None,
    strategy: str | None,
    granularity: str | None,
    small_mb: float | None,
    medium_mb: float | None,
    recent_days: float | None,
    moderate_days: float | None,
    dry_run: bool,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Move the files directly inside SOURCE into category folders.

    SOURCE, the target directory and the organization type are prompted for
    when SOURCE is omitted. Threshold flags override the configured values for
    this run only.
    """
    with _reported_errors("organizing files", json_output=json_output):
        config = ConfigManager().load()
        mode = OutputMode.resolve(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        configure_logging(config.logging, verbose=verbose, console_output=mode.console_logging)

        inputs = collect_org_inputs(
            config,
            source=source,
            target=output,
            strategy=strategy,
            overrides={
                "granularity": granularity.lower() if granularity else None,
                "small_max_mb": small_mb,
                "medium_max_mb": medium_mb,
                "recent_max_days": recent_days,
                "moderate_max_days": moderate_days,
            },
        )
        strategy_model = build_strategy(inputs.strategy, inputs.options)

        source_root = inputs.source.resolve()
        if not source_root.is_dir():
            raise click.ClickException(f"Source directory does not exist: {source_root}")
        target_root = (inputs.target or Path.cwd()).resolve()

        executor = RelocationExecutor(fail_fast=config.organization.fail_fast)
        summary = executor.run(source_root, target_root, strategy_model, dry_run=dry_run)

        if mode.json_output:
            console.print_json(data=summary_payload(summary, source_root, target_root))
            return

        rows = summarize_moves(summary, target_root)
        if rows:
            title = "Planned moves" if dry_run else "Moved files"
            table = Table(title=f"{title}: {source_root} → {target_root}")
            table.add_column("Folder", overflow="fold")
            table.add_column("Files", justify="right")
            for folder, count in rows:
                table.add_row(folder, str(count))
            mode.emit(table)

        mode.emit_errors(summary.errors)
        if summary.files_moved:
            mode.emit(f"[green]{summary.describe()}.[/green]", mode="summary")
        else:
            mode.emit("[yellow]No files were moved.[/yellow]", mode="warning")

        metrics: dict[str, Any] = {
            "strategy": inputs.strategy,
            "moved": summary.files_moved,
            "folders": summary.folder_count,
            "errors": len(summary.errors),
        }
        if dry_run:
            metrics["dry_run"] = True
        mode.emit_summary_line("Organization", target_root, metrics)


@cli.command()
@click.argument("target", type=click.Path(exists=True, file_okay=False, path_type=str))
@click.option("--json", "json_output", is_flag=True, help="Print the result as JSON.")
@click.option("--summary", "summary_mode", is_flag=True, help="Print summary lines only.")
@click.option("--quiet", is_flag=True, help="Print errors only.")
@click.option("-v", "--verbose", is_flag=True, help="Log at DEBUG level.")
@click.pass_context
def reverse(
    ctx: click.Context,
    target: str,
    json_output: bool,
    summary_mode: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Move files out of every subfolder of TARGET and remove the emptied folders."""
    with _reported_errors("reversing organization", json_output=json_output):
        config = ConfigManager().load()
        mode = OutputMode.resolve(
            ctx, config, quiet=quiet, summary_mode=summary_mode, json_output=json_output
        )
        configure_logging(config.logging, verbose=verbose, console_output=mode.console_logging)

        target_root = Path(target).expanduser().resolve()
        result = DirectoryFlattener().reverse(target_root)

        if mode.json_output:
            console.print_json(
                data={
                    "context": {"target_root": target_root.as_posix()},
                    "counts": {
                        "restored": result.files_restored,
                        "removed": len(result.directories_removed),
                        "errors": len(result.errors),
                    },
                    "removed": [path.as_posix() for path in result.directories_removed],
                    "errors": list(result.errors),
                }
            )
            return

        mode.emit_errors(result.errors)
        mode.emit(
            f"[green]Restored {result.files_restored} files from "
            f"{len(result.directories_removed)} folders.[/green]",
            mode="summary",
        )


@cli.group()
def config() -> None:
    """Inspect and change ~/.foldersort/config.yaml."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore FOLDERSORT__* environment overrides.")
def config_view(no_env: bool) -> None:
    """Print the effective configuration as YAML.

    Raises:
        click.ClickException: If the configuration cannot be loaded.
    """
    try:
        loaded = ConfigManager().load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    yaml_text = yaml.safe_dump(loaded.model_dump(mode="python"), sort_keys=False)
    console.print(Syntax(yaml_text, "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="YAML value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Store VALUE under the dotted KEY and show the resulting diff.

    Example: ``foldersort config set organization.size.small_max_mb --value 2``.

    Raises:
        click.ClickException: If the key or value is rejected.
    """
    try:
        diff = ConfigManager().set_value(key, value)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if not diff:
        console.print("[yellow]Nothing to change; the value is already set.[/yellow]")
        return

    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {key.strip()}.[/green]")


@config.command("edit")
def config_edit() -> None:
    """Edit the configuration file in $EDITOR and validate the result.

    Raises:
        click.ClickException: If the edited text is not a valid configuration.
    """
    manager = ConfigManager()
    manager.ensure_exists()

    original = manager.read_text()
    edited = click.edit(original, extension=".yaml")
    if edited is None:
        console.print("[yellow]Editor closed without saving; nothing changed.[/yellow]")
        return
    if edited == original:
        console.print("[yellow]No changes detected.[/yellow]")
        return

    try:
        manager.apply_text(edited)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    console.print("[green]Configuration updated.[/green]")


def main() -> None:
    """Console script entry point."""
    cli()


if __name__ == "__main__":
    main()
