"""Branch and release lifecycle engine."""

from .branch import branch_version, end_branch, start_branch
from .context import IDENTITY_SENTINEL, PipelineContext
from .dependencies import collate_artifacts, update_dependencies
from .info import ProjectInfo, describe
from .ports import ManifestService, VersionControl
from .release import end_release, next_versions, start_release
from .report import LifecycleReport, RunRecorder
from .sync import sync_branch

__all__ = [
    "IDENTITY_SENTINEL",
    "LifecycleReport",
    "ManifestService",
    "PipelineContext",
    "ProjectInfo",
    "RunRecorder",
    "VersionControl",
    "branch_version",
    "collate_artifacts",
    "describe",
    "end_branch",
    "end_release",
    "next_versions",
    "start_branch",
    "start_release",
    "sync_branch",
    "update_dependencies",
]
