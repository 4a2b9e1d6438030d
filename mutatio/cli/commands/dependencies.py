"""Dependency commands - publish and consume released artifact versions."""

from __future__ import annotations

from pathlib import Path

import typer

from mutatio.cli.commands._helpers import (
    CI_OPTION,
    PROJECT_DIR_OPTION,
    PUSH_OPTION,
    exit_on_error,
)
from mutatio.cli.context import build_context
from mutatio.lifecycle.dependencies import collate_artifacts as collate
from mutatio.lifecycle.dependencies import update_dependencies as update


def collate_artifacts(
    version: str = typer.Argument(..., help="Release version (e.g. 2.1.0)"),
    push: bool | None = PUSH_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    ci: str | None = CI_OPTION,
) -> None:
    """Export the group:artifact:version list of a release branch."""
    ctx = build_context(project_dir=project_dir, push=push, ci=ci)
    exit_on_error(collate(ctx.pipeline, version), ctx)


def update_dependencies(
    version: str = typer.Argument(..., help="Release version (e.g. 2.1.0)"),
    artifacts: str = typer.Option(
        ..., "--artifacts", help="group:artifact:version entries separated by ';' or ','"
    ),
    push: bool | None = PUSH_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    ci: str | None = CI_OPTION,
) -> None:
    """Pin direct dependencies on the release branch to released versions."""
    ctx = build_context(project_dir=project_dir, push=push, ci=ci)
    exit_on_error(update(ctx.pipeline, version, artifacts), ctx)
