"""CI variable export.

Lifecycle runs publish their results (created branch, versions, tag,
artifacts) as pipeline variables so later pipeline steps can use them. Each
CI system has its own channel: logging commands on stdout for Azure Pipelines
and TeamCity, an environment file for GitHub Actions and Jenkins. Outside CI
the variables land in a ``.env`` file.
"""

from __future__ import annotations

import shlex
import sys
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol, TextIO

from mutatio.core.config import CiPlatform
from mutatio.core.failures import ExportError
from mutatio.core.result import Err, Ok, Result
from mutatio.platform.files import append_text

__all__ = [
    "AzureExporter",
    "BuildSystem",
    "DotEnvExporter",
    "GitHubExporter",
    "JenkinsExporter",
    "TeamCityExporter",
    "VariableExporter",
    "detect_build_system",
    "export_file",
    "exporter_for",
]

DOTENV_FILENAME = ".env"
JENKINS_PROPERTIES = "env-vars.properties"


class VariableExporter(Protocol):
    def export_variable(self, name: str, value: str) -> Result[None, ExportError]: ...


class BuildSystem(Enum):
    TEAM_CITY = "teamcity"
    AZURE_DEVOPS = "azure"
    GITHUB_ACTIONS = "github"
    JENKINS = "jenkins"
    UNKNOWN = "dotenv"


def detect_build_system(env: Mapping[str, str]) -> BuildSystem:
    """Guess the CI system from the variables it always sets."""
    if env.get("TF_BUILD"):
        return BuildSystem.AZURE_DEVOPS
    if env.get("TEAMCITY_VERSION"):
        return BuildSystem.TEAM_CITY
    if env.get("GITHUB_ACTIONS", "").lower() == "true":
        return BuildSystem.GITHUB_ACTIONS
    if env.get("JENKINS_URL") or env.get("JENKINS_HOME"):
        return BuildSystem.JENKINS
    return BuildSystem.UNKNOWN


@dataclass
class AzureExporter:
    stream: TextIO

    def export_variable(self, name: str, value: str) -> Result[None, ExportError]:
        # Logging commands are line based.
        flat = value.replace("\r", "").replace("\n", "%0A")
        return _emit(self.stream, name, f"##vso[task.setvariable variable={name};]{flat}")


def _teamcity_escape(value: str) -> str:
    out: list[str] = []
    for ch in value:
        match ch:
            case "|" | "'" | "[" | "]":
                out.append(f"|{ch}")
            case "\n":
                out.append("|n")
            case "\r":
                out.append("|r")
            case _:
                out.append(ch)
    return "".join(out)


@dataclass
class TeamCityExporter:
    stream: TextIO

    def export_variable(self, name: str, value: str) -> Result[None, ExportError]:
        line = f"##teamcity[setParameter name='{_teamcity_escape(name)}' value='{_teamcity_escape(value)}']"
        return _emit(self.stream, name, line)


@dataclass(frozen=True, slots=True)
class GitHubExporter:
    """Appends to the file named by ``$GITHUB_ENV``."""

    env_file: Path

    def export_variable(self, name: str, value: str) -> Result[None, ExportError]:
        if "\n" in value:
            delimiter = "MUTATIO_EOF"
            entry = f"{name}<<{delimiter}\n{value}\n{delimiter}\n"
        else:
            entry = f"{name}={value}\n"
        return _append(self.env_file, name, entry)


@dataclass(frozen=True, slots=True)
class JenkinsExporter:
    """Appends ``export`` lines to ``$JENKINS_HOME/env-vars.properties``."""

    properties_file: Path

    def export_variable(self, name: str, value: str) -> Result[None, ExportError]:
        return _append(self.properties_file, name, f"export {name}={shlex.quote(value)}\n")


@dataclass(frozen=True, slots=True)
class DotEnvExporter:
    env_file: Path

    def export_variable(self, name: str, value: str) -> Result[None, ExportError]:
        if value and all(c.isalnum() or c in "._-/:+" for c in value):
            rendered = value
        else:
            escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("\n", "\\n")
            rendered = f'"{escaped}"'
        return _append(self.env_file, name, f"{name}={rendered}\n")


def export_file(exporter: VariableExporter) -> Path | None:
    """File ``exporter`` appends to, if it writes one."""
    match exporter:
        case GitHubExporter(env_file=path) | DotEnvExporter(env_file=path):
            return path
        case JenkinsExporter(properties_file=path):
            return path
        case _:
            return None


def _emit(stream: TextIO, name: str, line: str) -> Result[None, ExportError]:
    try:
        stream.write(line + "\n")
        stream.flush()
    except OSError as e:
        return Err(ExportError(name=name, reason=str(e)))
    return Ok(None)


def _append(path: Path, name: str, entry: str) -> Result[None, ExportError]:
    try:
        append_text(path, entry)
    except OSError as e:
        return Err(ExportError(name=name, reason=f"{path}: {e}"))
    return Ok(None)


def exporter_for(
    platform: CiPlatform,
    *,
    project_dir: Path,
    env: Mapping[str, str],
    stream: TextIO | None = None,
) -> Result[VariableExporter, ExportError]:
    """Build the exporter for ``platform`` (``auto`` detects it from ``env``)."""
    out = stream if stream is not None else sys.stdout
    system = detect_build_system(env) if platform == "auto" else BuildSystem(platform)

    match system:
        case BuildSystem.AZURE_DEVOPS:
            return Ok(AzureExporter(out))
        case BuildSystem.TEAM_CITY:
            return Ok(TeamCityExporter(out))
        case BuildSystem.GITHUB_ACTIONS:
            github_env = env.get("GITHUB_ENV")
            if not github_env:
                return Err(ExportError(name="GITHUB_ENV", reason="GITHUB_ENV is not set"))
            return Ok(GitHubExporter(Path(github_env)))
        case BuildSystem.JENKINS:
            jenkins_home = env.get("JENKINS_HOME")
            if not jenkins_home:
                return Err(ExportError(name="JENKINS_HOME", reason="JENKINS_HOME is not set"))
            return Ok(JenkinsExporter(Path(jenkins_home) / JENKINS_PROPERTIES))
        case BuildSystem.UNKNOWN:
            return Ok(DotEnvExporter(project_dir / DOTENV_FILENAME))
