from __future__ import annotations

from typer.testing import CliRunner

from mutatio import __version__
from mutatio.cli.app import app

runner = CliRunner()


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert result.output.strip() == __version__


def test_commands_are_registered() -> None:
    result = runner.invoke(app, ["--help"])

    assert result.exit_code == 0
    for command in (
        "branch-start",
        "branch-end",
        "release-start",
        "release-end",
        "collate-artifacts",
        "update-dependencies",
        "info",
        "sync",
    ):
        assert command in result.output


def test_missing_argument_is_usage_error() -> None:
    result = runner.invoke(app, ["release-end"])

    assert result.exit_code == 2


def test_identity_is_only_a_branch_option() -> None:
    assert "--identity" in runner.invoke(app, ["branch-start", "--help"]).output
    for command in ("release-start", "release-end", "collate-artifacts", "update-dependencies"):
        result = runner.invoke(app, [command, "--identity", "JIRA-7"])
        assert result.exit_code == 2
