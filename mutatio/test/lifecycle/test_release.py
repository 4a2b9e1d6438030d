"""Tests for release start/end."""

from __future__ import annotations

from pathlib import Path

import pytest

from mutatio.core.failures import BranchNotFoundError, InvalidInput, MergeFailedError, VersionFormatError
from mutatio.git import MergeOutcome
from mutatio.core.result import Err, Ok
from mutatio.lifecycle import end_release, next_versions, start_release
from mutatio.manifest import PomManifest
from mutatio.output.console import MockConsole
from mutatio.testing import Pipeline
from mutatio.versioning import BranchCategory, ReleaseType, SemanticVersion, VersionIdentifier


def read_version(directory: Path) -> SemanticVersion:
    return PomManifest(MockConsole()).read_version(directory).unwrap()


class TestNextVersions:
    @pytest.mark.parametrize(
        ("release_type", "release", "development"),
        [
            (ReleaseType.MAJOR, "2.2.0", "2.2.0-SNAPSHOT"),
            (ReleaseType.MINOR, "1.3.0", "1.3.0-SNAPSHOT"),
            (ReleaseType.PATCH, "1.2.1", "1.2.1-SNAPSHOT"),
        ],
    )
    def test_from_snapshot(self, release_type: ReleaseType, release: str, development: str) -> None:
        current = SemanticVersion(1, 2, 0, "SNAPSHOT")

        release_version, development_version = next_versions(current, release_type)

        assert (str(release_version), str(development_version)) == (release, development)

    def test_identifier_none(self) -> None:
        _, development = next_versions(SemanticVersion(1, 0, 0), ReleaseType.PATCH, VersionIdentifier.NONE)
        assert str(development) == "1.0.1"

    def test_identifier_rc(self) -> None:
        _, development = next_versions(SemanticVersion(1, 0, 0), ReleaseType.MINOR, VersionIdentifier.RC)
        assert str(development) == "1.1.0-RC"


class TestStartRelease:
    """Test start_release orchestration."""

    def test_minor_release(self, pipeline: Pipeline, tmp_path: Path) -> None:
        result = start_release(pipeline.ctx, ReleaseType.MINOR)

        assert isinstance(result, Ok)
        assert pipeline.vcs.branch == "development"
        assert read_version(tmp_path) == SemanticVersion(1, 3, 0, "SNAPSHOT")
        assert read_version(tmp_path / "app") == SemanticVersion(1, 3, 0, "SNAPSHOT")
        assert pipeline.vcs.snapshots["release/1.3.0"][Path("pom.xml")].count("<version>1.3.0</version>") == 1
        assert pipeline.vcs.commits == [
            ("release/1.3.0", "release(1.3.0): Start work on 1.3.0"),
            ("development", "development: Start work on development"),
        ]
        assert pipeline.vcs.pushes == [("release/1.3.0", None), ("development", None)]
        assert pipeline.exporter.variables == [
            ("MUTATIO_NEXT_DEV_VERSION", "1.3.0-SNAPSHOT"),
            ("MUTATIO_NEXT_RELEASE_VERSION", "1.3.0"),
        ]

    def test_step_order(self, pipeline: Pipeline) -> None:
        start_release(pipeline.ctx, ReleaseType.PATCH)

        assert pipeline.vcs.calls == [
            "checkout development",
            "checkout release/1.2.1",
            "stage",
            "commit",
            "push",
            "checkout development",
            "stage",
            "commit",
            "push",
        ]

    def test_custom_identifier(self, pipeline: Pipeline, tmp_path: Path) -> None:
        start_release(pipeline.ctx, ReleaseType.MAJOR, VersionIdentifier.BETA)

        assert read_version(tmp_path) == SemanticVersion(2, 2, 0, "BETA")

    def test_push_disabled(self, pipeline: Pipeline) -> None:
        result = start_release(pipeline.with_options(push=False), ReleaseType.MINOR)

        assert isinstance(result, Ok)
        assert result.value.skipped == ("push release/1.3.0", "push development")
        assert pipeline.vcs.pushes == []
        assert len(pipeline.vcs.commits) == 2

    def test_custom_branch_names(self, pipeline: Pipeline) -> None:
        pipeline.vcs.local.add("develop")
        ctx = pipeline.with_options(development_branch="develop", release_branch="rel")

        start_release(ctx, ReleaseType.MINOR)

        assert "checkout rel/1.3.0" in pipeline.vcs.calls
        assert pipeline.vcs.branch == "develop"


class TestEndRelease:
    """Test end_release orchestration."""

    def test_merges_and_tags(self, pipeline: Pipeline, tmp_path: Path) -> None:
        start_release(pipeline.ctx, ReleaseType.MINOR)
        pipeline.exporter.variables.clear()

        result = end_release(pipeline.ctx, "1.3.0")

        assert isinstance(result, Ok)
        assert pipeline.vcs.merges == [("release/1.3.0", "master")]
        assert pipeline.vcs.tags == {"release-1.3.0"}
        assert pipeline.vcs.branch == "master"
        assert read_version(tmp_path) == SemanticVersion(1, 3, 0)
        assert pipeline.vcs.commits[-1] == ("release/1.3.0", "release(1.3.0): Finish work on 1.3.0")
        assert pipeline.vcs.pushes[-2:] == [
            ("master", "refs/tags/release-1.3.0:refs/tags/release-1.3.0"),
            ("master", None),
        ]
        assert pipeline.exporter.variables == [
            ("MUTATIO_RELEASE_BRANCH", "release/1.3.0"),
            ("MUTATIO_RELEASE_TAG", "release-1.3.0"),
            ("MUTATIO_RELEASE_VERSION", "1.3.0"),
        ]

    def test_main_mainline(self, pipeline: Pipeline) -> None:
        pipeline.vcs.local.update({"main", "release/2.1.0"})

        result = end_release(pipeline.ctx, "2.1.0", BranchCategory.MAIN)

        assert isinstance(result, Ok)
        assert pipeline.vcs.merges == [("release/2.1.0", "main")]
        assert "tag release-2.1.0" in pipeline.vcs.calls

    def test_existing_tag_is_skipped(self, pipeline: Pipeline) -> None:
        pipeline.vcs.local.add("release/2.1.0")
        pipeline.vcs.tags.add("release-2.1.0")

        result = end_release(pipeline.ctx, "2.1.0")

        assert isinstance(result, Ok)
        assert result.value.skipped == ("tag release-2.1.0",)
        assert "tag release-2.1.0" not in pipeline.vcs.calls
        assert pipeline.console.find("tag already exists")

    def test_rerun_is_safe(self, pipeline: Pipeline) -> None:
        pipeline.vcs.local.add("release/2.1.0")
        assert isinstance(end_release(pipeline.ctx, "2.1.0"), Ok)

        result = end_release(pipeline.ctx, "2.1.0")

        assert isinstance(result, Ok)
        assert pipeline.vcs.calls.count("tag release-2.1.0") == 1

    def test_not_a_mainline(self, pipeline: Pipeline) -> None:
        result = end_release(pipeline.ctx, "2.1.0", BranchCategory.DEVELOPMENT)

        assert isinstance(result, Err)
        assert result.error.step == "check mainline"
        assert isinstance(result.error.cause, InvalidInput)
        assert pipeline.vcs.calls == []

    def test_invalid_version(self, pipeline: Pipeline) -> None:
        result = end_release(pipeline.ctx, "two")

        assert isinstance(result, Err)
        assert result.error.cause == VersionFormatError(value="two")

    def test_missing_release_branch(self, pipeline: Pipeline) -> None:
        result = end_release(pipeline.ctx, "9.9.9")

        assert isinstance(result, Err)
        assert result.error.cause == BranchNotFoundError(branch="release/9.9.9")

    def test_conflicting_merge_stops_before_tagging(self, pipeline: Pipeline) -> None:
        pipeline.vcs.local.add("release/2.1.0")
        pipeline.vcs.merge_outcome = MergeOutcome.CONFLICTING

        result = end_release(pipeline.ctx, "2.1.0")

        assert isinstance(result, Err)
        assert result.error.step == "merge release/2.1.0 -> master"
        assert result.error.cause == MergeFailedError(
            source="release/2.1.0", target="master", outcome="CONFLICTING"
        )
        assert pipeline.vcs.tags == set()
        assert pipeline.exporter.variables == []
