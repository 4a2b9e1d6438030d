from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from mutatio.ci.export import VariableExporter
from mutatio.core.config import DEFAULT_DEVELOPMENT_BRANCH, DEFAULT_RELEASE_BRANCH, DEFAULT_REMOTE
from mutatio.lifecycle.ports import ManifestService, VersionControl
from mutatio.output.console import ConsoleProtocol

__all__ = ["IDENTITY_SENTINEL", "PipelineContext"]

IDENTITY_SENTINEL = "123456"


@dataclass(frozen=True, slots=True)
class PipelineContext:
    """Everything a single lifecycle run needs. Built per run."""

    vcs: VersionControl
    manifest: ManifestService
    exporter: VariableExporter
    console: ConsoleProtocol
    project_dir: Path
    identity: str | None = None
    push: bool = True
    development_branch: str = DEFAULT_DEVELOPMENT_BRANCH
    release_branch: str = DEFAULT_RELEASE_BRANCH
    remote: str = DEFAULT_REMOTE

    @property
    def branch_identity(self) -> str:
        """Identity used as branch suffix and commit scope."""
        if self.identity is None or not self.identity.strip():
            return IDENTITY_SENTINEL
        return self.identity.strip()

    def release_branch_for(self, version: object) -> str:
        return f"{self.release_branch}/{version}"

    def release_tag_for(self, version: object) -> str:
        return f"{self.release_branch}-{version}"
