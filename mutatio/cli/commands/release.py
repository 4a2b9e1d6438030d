"""Release commands - cut and finish ``release/<version>`` branches."""

from __future__ import annotations

from pathlib import Path

import typer

from mutatio.cli.commands._helpers import (
    CI_OPTION,
    PROJECT_DIR_OPTION,
    PUSH_OPTION,
    exit_on_error,
    usage_error,
)
from mutatio.cli.context import build_context
from mutatio.lifecycle.release import end_release, start_release
from mutatio.versioning.taxonomy import (
    ReleaseType,
    VersionIdentifier,
    parse_category,
    parse_identifier,
)


def release_start(
    release_type: ReleaseType = typer.Option(ReleaseType.PATCH, "--type", help="Version component to bump"),
    identifier: str = typer.Option(
        VersionIdentifier.SNAPSHOT.value,
        "--identifier",
        help="Pre-release of the next development version (SNAPSHOT, BETA, ALPHA, RC or NONE)",
    ),
    push: bool | None = PUSH_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    ci: str | None = CI_OPTION,
) -> None:
    """Cut a release branch and move development to the next version."""
    ctx = build_context(project_dir=project_dir, push=push, ci=ci)
    parsed = parse_identifier(identifier)
    if parsed is None:
        usage_error(
            ctx,
            f"unknown version identifier '{identifier}'",
            hint="One of: SNAPSHOT, BETA, ALPHA, RC, NONE",
        )
    exit_on_error(start_release(ctx.pipeline, release_type, parsed), ctx)


def release_end(
    version: str = typer.Argument(..., help="Release version (e.g. 2.1.0)"),
    mainline: str | None = typer.Option(
        None, "--mainline", help="main or master (defaults to config)", show_default=False
    ),
    push: bool | None = PUSH_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    ci: str | None = CI_OPTION,
) -> None:
    """Merge the release branch into the mainline and tag it."""
    ctx = build_context(project_dir=project_dir, push=push, ci=ci)
    wanted = mainline or ctx.config.mainline
    category = parse_category(wanted)
    if category is None or not category.is_mainline:
        usage_error(ctx, f"'{wanted}' is not a mainline branch", hint="Use main or master")
    exit_on_error(end_release(ctx.pipeline, version, category), ctx)
