from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from mutatio.ci.export import exporter_for
from mutatio.core.config import MutatioConfig, load_project_config, parse_ci_platform
from mutatio.core.errors import ErrorCode
from mutatio.core.result import Err
from mutatio.git.repository import Repository
from mutatio.git.transport import transport_for_remote
from mutatio.lifecycle.context import PipelineContext
from mutatio.manifest.pom import PomManifest
from mutatio.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    project_dir: Path
    config: MutatioConfig
    console: ConsoleProtocol
    pipeline: PipelineContext


def _fail(message: str, code: ErrorCode) -> typer.Exit:
    typer.echo(f"error: {message}", err=True)
    return typer.Exit(code=int(code))


def build_context(
    *,
    project_dir: Path | None = None,
    identity: str | None = None,
    push: bool | None = None,
    ci: str | None = None,
) -> CLIContext:
    """Resolve config, git transport and CI exporter for one command run.

    Command line values win over ``mutatio.toml``.
    """
    try:
        root = (project_dir or Path.cwd()).expanduser().resolve()
    except OSError as e:
        raise _fail(f"invalid --project-dir: {e}", ErrorCode.USER_ERROR)
    if not root.is_dir():
        raise _fail(f"project directory not found: {root}", ErrorCode.USER_ERROR)

    config_result = load_project_config(root)
    if isinstance(config_result, Err):
        raise _fail(config_result.error.message, ErrorCode.ENV_ERROR)
    config = config_result.value

    platform = config.ci
    if ci is not None:
        parsed = parse_ci_platform(ci)
        if parsed is None:
            raise _fail(f"unknown CI platform '{ci}'", ErrorCode.USER_ERROR)
        platform = parsed

    console = RichConsole()

    ssh_key = Path(config.transport.ssh_key) if config.transport.ssh_key else None
    token = os.environ.get(config.transport.token_env) or None
    remote_url = Repository(root, remote=config.remote).remote_url()
    repository = Repository(
        root,
        remote=config.remote,
        transport=transport_for_remote(remote_url, ssh_key=ssh_key, token=token),
    )

    exporter = exporter_for(platform, project_dir=root, env=os.environ)
    if isinstance(exporter, Err):
        raise _fail(exporter.error.message, ErrorCode.ENV_ERROR)

    pipeline = PipelineContext(
        vcs=repository,
        manifest=PomManifest(console),
        exporter=exporter.value,
        console=console,
        project_dir=root,
        identity=identity if identity is not None else config.identity,
        push=config.push if push is None else push,
        development_branch=config.development_branch,
        release_branch=config.release_branch,
        remote=config.remote,
    )
    return CLIContext(project_dir=root, config=config, console=console, pipeline=pipeline)
