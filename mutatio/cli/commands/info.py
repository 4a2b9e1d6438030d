"""Info command - show the current branch, version and next version."""

from __future__ import annotations

from pathlib import Path

import typer

from mutatio.cli.commands._helpers import PROJECT_DIR_OPTION, exit_on_error
from mutatio.cli.context import build_context
from mutatio.lifecycle.info import describe
from mutatio.versioning.taxonomy import ReleaseType


def info(
    release_type: ReleaseType = typer.Option(ReleaseType.PATCH, "--type", help="Bump used for the next version"),
    project_dir: Path | None = PROJECT_DIR_OPTION,
) -> None:
    """Show the current branch and version, and the next version."""
    # Read only: no CI variables are exported, so skip CI detection.
    ctx = build_context(project_dir=project_dir, ci="dotenv")
    exit_on_error(describe(ctx.pipeline, release_type), ctx)
