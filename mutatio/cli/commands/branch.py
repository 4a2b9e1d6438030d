"""Topic branch commands - start and end ``<category>/<identity>`` branches."""

from __future__ import annotations

from pathlib import Path

import typer

from mutatio.cli.commands._helpers import (
    CI_OPTION,
    IDENTITY_OPTION,
    PROJECT_DIR_OPTION,
    PUSH_OPTION,
    exit_on_error,
    usage_error,
)
from mutatio.cli.context import CLIContext, build_context
from mutatio.lifecycle.branch import end_branch, start_branch
from mutatio.versioning.taxonomy import BranchCategory, parse_category


def _category(ctx: CLIContext, value: str) -> BranchCategory:
    category = parse_category(value)
    if category is None:
        usage_error(
            ctx,
            f"unknown branch category '{value}'",
            hint="One of: " + ", ".join(c.prefix for c in BranchCategory),
        )
    return category


def branch_start(
    category: str = typer.Argument(..., help="Branch category (e.g. feat, hotfix, chore)"),
    message: str | None = typer.Option(
        None, "--message", "-m", help="Commit message (overrides the generated one)", show_default=False
    ),
    identity: str | None = IDENTITY_OPTION,
    push: bool | None = PUSH_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    ci: str | None = CI_OPTION,
) -> None:
    """Branch off development and mark the version with the branch."""
    ctx = build_context(project_dir=project_dir, identity=identity, push=push, ci=ci)
    exit_on_error(start_branch(ctx.pipeline, _category(ctx, category), message), ctx)


def branch_end(
    category: str = typer.Argument(..., help="Branch category (e.g. feat, hotfix, chore)"),
    identity: str | None = IDENTITY_OPTION,
    push: bool | None = PUSH_OPTION,
    project_dir: Path | None = PROJECT_DIR_OPTION,
    ci: str | None = CI_OPTION,
) -> None:
    """Merge the branch into development and restore the development version."""
    ctx = build_context(project_dir=project_dir, identity=identity, push=push, ci=ci)
    exit_on_error(end_branch(ctx.pipeline, _category(ctx, category)), ctx)
