"""Sync command - fetch and fast-forward the current branch."""

from __future__ import annotations

from pathlib import Path

from mutatio.cli.commands._helpers import PROJECT_DIR_OPTION, exit_on_error
from mutatio.cli.context import build_context
from mutatio.lifecycle.sync import sync_branch


def sync(project_dir: Path | None = PROJECT_DIR_OPTION) -> None:
    """Fetch from the remote and fast-forward the current branch."""
    ctx = build_context(project_dir=project_dir, ci="dotenv")
    exit_on_error(sync_branch(ctx.pipeline), ctx)
