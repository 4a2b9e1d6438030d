from __future__ import annotations

import typer

from mutatio import __version__
from mutatio.cli.commands.branch import branch_end, branch_start
from mutatio.cli.commands.dependencies import collate_artifacts, update_dependencies
from mutatio.cli.commands.info import info
from mutatio.cli.commands.release import release_end, release_start
from mutatio.cli.commands.sync import sync

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Git-flow branch and release lifecycle for Maven projects.",
)


# Commands
app.command("branch-start")(branch_start)
app.command("branch-end")(branch_end)
app.command("release-start")(release_start)
app.command("release-end")(release_end)
app.command("collate-artifacts")(collate_artifacts)
app.command("update-dependencies")(update_dependencies)
app.command()(info)
app.command()(sync)


def _show_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_show_version,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    pass


def main() -> None:
    app()
