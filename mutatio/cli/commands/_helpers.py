"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from mutatio.core.errors import ErrorCode
from mutatio.core.failures import StepFailed, exit_code_for
from mutatio.core.result import Err, Result
from mutatio.output.console import Style

if TYPE_CHECKING:
    from mutatio.cli.context import CLIContext


IDENTITY_OPTION = typer.Option(
    None,
    "--identity",
    help="Branch identity, e.g. a ticket number (defaults to config, then 123456)",
    show_default=False,
)
PUSH_OPTION = typer.Option(
    None,
    "--push/--no-push",
    help="Push branches and tags to the remote (defaults to config)",
    show_default=False,
)
PROJECT_DIR_OPTION = typer.Option(
    None,
    "--project-dir",
    help="Project root containing pom.xml (defaults to the current directory)",
    show_default=False,
)
CI_OPTION = typer.Option(
    None,
    "--ci",
    help="CI variable target: auto, azure, teamcity, github, jenkins or dotenv",
    show_default=False,
)


def exit_on_error[T](result: Result[T, StepFailed], ctx: CLIContext) -> T:
    """Return the value of ``result`` or print the failure and exit.

    The exit code follows the kind of error that stopped the run, and the
    message always names the failing step.
    """
    if isinstance(result, Err):
        error = result.error
        ctx.console.error(error.message)
        if error.hint:
            ctx.console.print(f"hint: {error.hint}", Style.DIM)
        raise typer.Exit(code=int(exit_code_for(error)))
    return result.value


def exit_with_code(code: ErrorCode) -> NoReturn:
    raise typer.Exit(code=int(code))


def usage_error(ctx: CLIContext, message: str, hint: str | None = None) -> NoReturn:
    ctx.console.error(message)
    if hint:
        ctx.console.print(f"hint: {hint}", Style.DIM)
    exit_with_code(ErrorCode.USER_ERROR)

