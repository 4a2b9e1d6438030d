"""Remote transports.

A transport only contributes extra ``git -c`` options and environment
variables to the git subprocess; credentials are passed through, never
stored.
"""

from __future__ import annotations

import base64
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

__all__ = [
    "DefaultTransport",
    "HttpsTokenTransport",
    "SshTransport",
    "Transport",
    "is_ssh_url",
    "transport_for_remote",
]


class Transport(Protocol):
    def git_config_args(self) -> list[str]: ...

    def env(self) -> dict[str, str]: ...


@dataclass(frozen=True, slots=True)
class DefaultTransport:
    """Whatever git is already configured with (agent, credential helper)."""

    def git_config_args(self) -> list[str]:
        return []

    def env(self) -> dict[str, str]:
        return {}


@dataclass(frozen=True, slots=True)
class SshTransport:
    key_path: Path

    def git_config_args(self) -> list[str]:
        return []

    def env(self) -> dict[str, str]:
        key = shlex.quote(str(self.key_path.expanduser()))
        return {"GIT_SSH_COMMAND": f"ssh -i {key} -o IdentitiesOnly=yes"}


@dataclass(frozen=True, slots=True)
class HttpsTokenTransport:
    """Token sent as the basic-auth user name with an empty password."""

    token: str

    def git_config_args(self) -> list[str]:
        raw = base64.b64encode(f"{self.token}:".encode()).decode("ascii")
        return ["-c", f"http.extraHeader=Authorization: Basic {raw}"]

    def env(self) -> dict[str, str]:
        # Never fall back to an interactive prompt in CI.
        return {"GIT_TERMINAL_PROMPT": "0"}

    def __repr__(self) -> str:
        return "HttpsTokenTransport(token=***)"


def is_ssh_url(url: str) -> bool:
    return url.startswith("git@") or url.startswith("ssh://")


def transport_for_remote(
    url: str | None,
    *,
    ssh_key: Path | None = None,
    token: str | None = None,
) -> Transport:
    """Pick the transport matching the remote URL scheme.

    Falls back to ``DefaultTransport`` when the matching credential is not
    configured, or when the URL is neither SSH nor HTTPS (local paths).
    """
    if not url:
        return DefaultTransport()
    if is_ssh_url(url):
        return SshTransport(ssh_key) if ssh_key is not None else DefaultTransport()
    if url.startswith("https://") or url.startswith("http://"):
        return HttpsTokenTransport(token) if token else DefaultTransport()
    return DefaultTransport()
