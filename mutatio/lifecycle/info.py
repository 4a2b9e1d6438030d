from __future__ import annotations

from dataclasses import dataclass

from mutatio.core.failures import StepFailed
from mutatio.core.result import Err, Ok, Result
from mutatio.lifecycle.context import PipelineContext
from mutatio.output.console import Style
from mutatio.versioning.semver import SemanticVersion
from mutatio.versioning.taxonomy import ReleaseType

__all__ = ["ProjectInfo", "describe"]


@dataclass(frozen=True, slots=True)
class ProjectInfo:
    branch: str
    version: SemanticVersion
    release_type: ReleaseType
    next_version: SemanticVersion


def describe(
    ctx: PipelineContext, release_type: ReleaseType = ReleaseType.PATCH
) -> Result[ProjectInfo, StepFailed]:
    """Current branch and version, and where a ``release_type`` bump leads.

    Read only: nothing is checked out, written or exported.
    """
    branch = ctx.vcs.current_branch()
    if isinstance(branch, Err):
        return Err(StepFailed(step="current branch", cause=branch.error))
    version = ctx.manifest.read_version(ctx.project_dir)
    if isinstance(version, Err):
        return Err(StepFailed(step="read version", cause=version.error))

    current = version.value
    info = ProjectInfo(
        branch=branch.value,
        version=current,
        release_type=release_type,
        next_version=current.bump(release_type, current.pre_release, current.build),
    )
    ctx.console.print(f"branch: {info.branch}", Style.INFO)
    ctx.console.print(f"version: {info.version}", Style.INFO)
    ctx.console.print(f"next {release_type} version: {info.next_version}", Style.INFO)
    return Ok(info)
