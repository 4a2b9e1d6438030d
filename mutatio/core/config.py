"""Project configuration loading.

Configuration lives in ``mutatio.toml`` at the project root, or in the
``[tool.mutatio]`` table of ``pyproject.toml``. Every key is optional; a
project without either file runs on the defaults below.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_str, get_table

__all__ = [
    "CONFIG_FILENAME",
    "CiPlatform",
    "ConfigError",
    "MutatioConfig",
    "TransportConfig",
    "load_config",
    "load_project_config",
    "parse_ci_platform",
]

CONFIG_FILENAME = "mutatio.toml"

DEFAULT_DEVELOPMENT_BRANCH = "development"
DEFAULT_RELEASE_BRANCH = "release"
DEFAULT_MAINLINE = "master"
DEFAULT_REMOTE = "origin"
DEFAULT_TOKEN_ENV = "MUTATIO_GIT_TOKEN"

CiPlatform = Literal["auto", "azure", "teamcity", "github", "jenkins", "dotenv"]
_CI_PLATFORMS: tuple[CiPlatform, ...] = ("auto", "azure", "teamcity", "github", "jenkins", "dotenv")


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class TransportConfig:
    """Where to find credential material for the git remote.

    The values are handed to the transport untouched; mutatio never reads
    the key file or logs the token.
    """

    ssh_key: str | None = None
    token_env: str = DEFAULT_TOKEN_ENV


@dataclass(frozen=True, slots=True)
class MutatioConfig:
    """Main configuration container."""

    development_branch: str = DEFAULT_DEVELOPMENT_BRANCH
    release_branch: str = DEFAULT_RELEASE_BRANCH
    mainline: str = DEFAULT_MAINLINE
    remote: str = DEFAULT_REMOTE
    push: bool = True
    ci: CiPlatform = "auto"
    identity: str | None = None
    transport: TransportConfig = field(default_factory=TransportConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> MutatioConfig:
        """Create a config from a parsed TOML table."""
        transport: StrDict = get_table(data, "transport") or {}
        push = get_bool(data, "push")
        if push is None and "push" in data:
            raise TypeError(f"push must be true or false, got {data['push']!r}")
        ci = parse_ci_platform(get_str(data, "ci") or "auto")
        if ci is None:
            raise ValueError(f"unknown ci platform (expected one of {', '.join(_CI_PLATFORMS)})")

        return cls(
            development_branch=get_str(data, "development_branch") or DEFAULT_DEVELOPMENT_BRANCH,
            release_branch=get_str(data, "release_branch") or DEFAULT_RELEASE_BRANCH,
            mainline=(get_str(data, "mainline") or DEFAULT_MAINLINE).lower(),
            remote=get_str(data, "remote") or DEFAULT_REMOTE,
            push=True if push is None else push,
            ci=ci,
            identity=get_str(data, "identity"),
            transport=TransportConfig(
                ssh_key=get_str(transport, "ssh_key"),
                token_env=get_str(transport, "token_env") or DEFAULT_TOKEN_ENV,
            ),
        )


def parse_ci_platform(value: str) -> CiPlatform | None:
    """Match a user-supplied platform name, case-insensitively."""
    wanted = value.strip().lower()
    for platform in _CI_PLATFORMS:
        if platform == wanted:
            return platform
    return None


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and syntax errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def _build(data: Mapping[str, object], path: Path) -> Result[MutatioConfig, ConfigError]:
    try:
        return Ok(MutatioConfig.from_dict(data))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config(path: Path) -> Result[MutatioConfig, ConfigError]:
    """Load configuration from a ``mutatio.toml`` file.

    Args:
        path: Path to the TOML file

    Returns:
        Ok(MutatioConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result
    return _build(result.value, path)


def load_project_config(project_dir: Path) -> Result[MutatioConfig, ConfigError]:
    """Resolve the configuration for a project directory.

    ``mutatio.toml`` wins over ``[tool.mutatio]`` in ``pyproject.toml``.
    Neither file present yields the defaults.
    """
    config_path = project_dir / CONFIG_FILENAME
    if config_path.is_file():
        return load_config(config_path)

    pyproject = project_dir / "pyproject.toml"
    if pyproject.is_file():
        parsed = _parse_toml(pyproject)
        if isinstance(parsed, Err):
            return parsed
        tool = get_table(parsed.value, "tool") or {}
        section = get_table(tool, "mutatio")
        if section is not None:
            return _build(section, pyproject)

    return Ok(MutatioConfig())
