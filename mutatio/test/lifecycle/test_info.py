from __future__ import annotations

from pathlib import Path

from mutatio.core.result import Err, Ok
from mutatio.lifecycle import describe
from mutatio.output.console import Style
from mutatio.testing import Pipeline
from mutatio.versioning import ReleaseType, SemanticVersion


class TestDescribe:
    """describe() is read only."""

    def test_default_patch(self, pipeline: Pipeline) -> None:
        result = describe(pipeline.ctx)

        assert isinstance(result, Ok)
        assert result.value.branch == "development"
        assert result.value.version == SemanticVersion(1, 2, 0, "SNAPSHOT")
        assert result.value.next_version == SemanticVersion(1, 2, 1, "SNAPSHOT")
        assert pipeline.vcs.calls == []
        assert pipeline.exporter.variables == []

    def test_prints_summary(self, pipeline: Pipeline) -> None:
        describe(pipeline.ctx, ReleaseType.MAJOR)

        assert pipeline.console.messages == [
            "branch: development",
            "version: 1.2.0-SNAPSHOT",
            "next major version: 2.2.0-SNAPSHOT",
        ]
        assert all(o.style == Style.INFO for o in pipeline.console.outputs)

    def test_missing_pom(self, pipeline: Pipeline, tmp_path: Path) -> None:
        (tmp_path / "pom.xml").unlink()

        result = describe(pipeline.ctx)

        assert isinstance(result, Err)
        assert result.error.step == "read version"
