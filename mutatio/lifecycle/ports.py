"""Interfaces the orchestrators drive.

``mutatio.git.Repository`` and ``mutatio.manifest.PomManifest`` are the
production implementations; tests pass in-memory fakes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Protocol

from mutatio.core.failures import (
    BranchNotFoundError,
    ManifestUpdateError,
    TransportError,
    VersionFormatError,
)
from mutatio.core.result import Result
from mutatio.git.repository import CheckoutResult, MergeOutcome
from mutatio.manifest.coordinates import ArtifactCoordinate
from mutatio.versioning.semver import SemanticVersion

__all__ = ["ManifestService", "VersionControl"]


class VersionControl(Protocol):
    def current_branch(self) -> Result[str, TransportError]: ...

    def checkout(self, name: str) -> Result[CheckoutResult, TransportError | BranchNotFoundError]: ...

    def checkout_create(
        self, name: str
    ) -> Result[CheckoutResult, TransportError | BranchNotFoundError]: ...

    def branch_exists(self, name: str, *, local: bool = True, remote: bool = True) -> bool: ...

    def stage_all(self, exclude: Sequence[Path] = ()) -> Result[None, TransportError]: ...

    def commit(self, message: str) -> Result[None, TransportError]: ...

    def merge(self, source: str, *, into: str) -> Result[MergeOutcome, TransportError]: ...

    def tag_exists(self, name: str) -> bool: ...

    def tag(self, name: str, message: str) -> Result[None, TransportError]: ...

    def push(self, refspec: str | None = None) -> Result[str, TransportError]: ...

    def push_tag(self, name: str) -> Result[str, TransportError]: ...

    def fetch(self) -> Result[str, TransportError]: ...

    def pull(self, branch: str) -> Result[MergeOutcome, TransportError]: ...


class ManifestService(Protocol):
    def read_version_text(self, directory: Path) -> Result[str, ManifestUpdateError]: ...

    def read_version(
        self, directory: Path
    ) -> Result[SemanticVersion, ManifestUpdateError | VersionFormatError]: ...

    def write_version(
        self, directory: Path, version: SemanticVersion
    ) -> Result[None, ManifestUpdateError]: ...

    def propagate_parent_version(
        self, directory: Path, version: SemanticVersion
    ) -> Result[tuple[Path, ...], ManifestUpdateError]: ...

    def list_declared_modules(self, directory: Path) -> Result[tuple[str, ...], ManifestUpdateError]: ...

    def read_coordinate(self, directory: Path) -> Result[ArtifactCoordinate, ManifestUpdateError]: ...

    def update_dependency_versions(
        self, directory: Path, lookup: Mapping[str, str]
    ) -> Result[tuple[ArtifactCoordinate, ...], ManifestUpdateError]: ...
