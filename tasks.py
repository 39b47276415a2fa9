"""Invoke tasks for developing foldersort.

Every task shells out to `uv` so local runs match CI. The `sandbox` task seeds
a scratch directory with sample files and previews an organize run on it.
"""

from __future__ import annotations

import os
import shlex
import shutil
from collections.abc import Sequence
from pathlib import Path

from invoke import Collection, Context, task

PROJECT_ROOT = Path(__file__).parent
SANDBOX_DIR = PROJECT_ROOT / ".sandbox"

SAMPLE_FILES = {
    "report.pdf": b"%PDF-1.4\n",
    "notes.txt": b"meeting notes\n",
    "photo.jpg": b"\xff\xd8\xff\xe0",
    "song.mp3": b"ID3",
    "installer.exe": b"MZ",
    "backup.zip": b"PK\x03\x04",
    "large.bin": b"\0" * (2 * 1024 * 1024),
    "Makefile": b"all:\n",
}


def _run_uv(ctx: Context, args: Sequence[str], *, echo: bool = True) -> None:
    """Execute `uv` with the given arguments.

    Args:
        ctx: Invoke execution context.
        args: Arguments appended after the `uv` executable.
        echo: Whether to echo the command before running it.
    """
    ctx.run(shlex.join(("uv", *args)), echo=echo, pty=os.name != "nt")


@task
def sync(ctx: Context, dev: bool = True) -> None:
    """Synchronize the virtual environment, including dev extras by default."""
    args = ["sync"]
    if dev:
        args.extend(["--extra", "dev"])
    _run_uv(ctx, args)


@task(
    help={
        "k": "pytest -k expression for test selection.",
        "path": "Path or module to test (defaults to tests/).",
        "options": "Additional CLI flags forwarded verbatim to pytest.",
    }
)
def tests(ctx: Context, k: str = "", path: str = "tests", options: str = "") -> None:
    """Run the pytest suite."""
    args: list[str] = ["run", "pytest"]
    if k:
        args.extend(["-k", k])
    if options:
        args.extend(shlex.split(options))
    args.append(path)
    _run_uv(ctx, args)


@task(help={"fix": "Apply auto-fixes where possible (ruff --fix)."})
def lint(ctx: Context, fix: bool = False) -> None:
    """Check formatting and lint rules with Ruff."""
    _run_uv(ctx, ["run", "ruff", "format", "--check", "src", "tests"])
    lint_args: list[str] = ["run", "ruff", "check", "src", "tests"]
    if fix:
        lint_args.append("--fix")
    _run_uv(ctx, lint_args)


@task
def mypy(ctx: Context) -> None:
    """Type-check the package."""
    _run_uv(ctx, ["run", "mypy", "src"])


@task
def ci(ctx: Context) -> None:
    """Run lint, type checks and tests in the order CI does."""
    ctx.invoke(lint)
    ctx.invoke(mypy)
    ctx.invoke(tests)


@task(
    help={
        "by": "Organization type passed to `foldersort org --by`.",
        "apply": "Actually move the sample files instead of previewing.",
    }
)
def sandbox(ctx: Context, by: str = "content", apply: bool = False) -> None:
    """Recreate `.sandbox/` with sample files and organize them.

    Args:
        ctx: Invoke execution context.
        by: Organization type to use.
        apply: Move files for real; without it the run is a dry run.
    """
    if SANDBOX_DIR.exists():
        shutil.rmtree(SANDBOX_DIR)
    inbox = SANDBOX_DIR / "inbox"
    inbox.mkdir(parents=True)
    for name, payload in SAMPLE_FILES.items():
        (inbox / name).write_bytes(payload)

    args = ["run", "foldersort", "org", str(inbox), "--output", str(SANDBOX_DIR / "sorted")]
    args.extend(["--by", by])
    if not apply:
        args.append("--dry-run")
    _run_uv(ctx, args)


namespace = Collection(sync, tests, lint, mypy, ci, sandbox)
