"""Tests for mutatio.manifest.pom module."""

from __future__ import annotations

from pathlib import Path

import pytest

from mutatio.core.failures import ManifestUpdateError, VersionFormatError
from mutatio.core.result import Err, Ok
from mutatio.manifest import ArtifactCoordinate, PomManifest
from mutatio.output.console import MockConsole
from mutatio.testing import PomFiles
from mutatio.versioning import SemanticVersion

V130 = SemanticVersion(1, 3, 0)


@pytest.fixture
def console() -> MockConsole:
    return MockConsole()


@pytest.fixture
def manifest(console: MockConsole) -> PomManifest:
    return PomManifest(console)


class TestReadVersion:
    """Test PomManifest.read_version."""

    def test_project_version(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.project(version="1.2.0-SNAPSHOT")

        assert manifest.read_version(tmp_path) == Ok(SemanticVersion(1, 2, 0, "SNAPSHOT"))

    def test_falls_back_to_parent_version(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.module("core", artifact="core", version="2.0.1")

        assert manifest.read_version(tmp_path / "core") == Ok(SemanticVersion(2, 0, 1))

    def test_ignores_dependency_versions(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.module("app", artifact="app", version="1.0.0", extra=poms.dependencies(("g", "a", "9.9.9")))

        assert manifest.read_version(tmp_path / "app") == Ok(SemanticVersion(1, 0, 0))

    def test_missing_pom(self, manifest: PomManifest, tmp_path: Path) -> None:
        result = manifest.read_version(tmp_path)

        assert isinstance(result, Err)
        assert isinstance(result.error, ManifestUpdateError)
        assert "not found" in result.error.message

    def test_invalid_version(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.project(version="${revision}")

        assert manifest.read_version(tmp_path) == Err(VersionFormatError(value="${revision}"))

    def test_malformed_xml(self, manifest: PomManifest, tmp_path: Path) -> None:
        (tmp_path / "pom.xml").write_text("<project><version>1.0.0</project>", encoding="utf-8")

        result = manifest.read_version(tmp_path)

        assert isinstance(result, Err)
        assert "malformed XML" in result.error.message

    def test_root_must_be_project(self, manifest: PomManifest, tmp_path: Path) -> None:
        (tmp_path / "pom.xml").write_text("<settings><version>1.0.0</version></settings>", encoding="utf-8")

        result = manifest.read_version(tmp_path)

        assert isinstance(result, Err)
        assert "not <project>" in result.error.message

    def test_comments_are_skipped(self, manifest: PomManifest, tmp_path: Path) -> None:
        (tmp_path / "pom.xml").write_text(
            "<project>\n  <!-- <version>0.0.1</version> -->\n  <artifactId>x</artifactId>\n"
            "  <version>3.1.0</version>\n</project>\n",
            encoding="utf-8",
        )

        assert manifest.read_version(tmp_path) == Ok(SemanticVersion(3, 1, 0))


class TestReadVersionText:
    def test_returns_value_as_written(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.project(version="1.2.0-SNAPSHOT-FEATURE_7")

        assert manifest.read_version_text(tmp_path) == Ok("1.2.0-SNAPSHOT-FEATURE_7")
        assert isinstance(manifest.read_version(tmp_path), Err)

    def test_parent_fallback(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.module("core", artifact="core", version="2.0.1")

        assert manifest.read_version_text(tmp_path / "core") == Ok("2.0.1")


class TestWriteVersion:
    """Test PomManifest.write_version preserves formatting."""

    def test_only_version_text_changes(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        path = poms.project(version="1.2.0-SNAPSHOT", extra="    <!-- keep me -->\n")
        before = path.read_text(encoding="utf-8")

        assert manifest.write_version(tmp_path, V130) == Ok(None)

        after = path.read_text(encoding="utf-8")
        assert after == before.replace("<version>1.2.0-SNAPSHOT</version>", "<version>1.3.0</version>")

    def test_parent_version_untouched(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        path = poms.module("core", artifact="core", version="1.2.0")

        assert manifest.write_version(tmp_path / "core", V130) == Ok(None)

        text = path.read_text(encoding="utf-8")
        assert "        <version>1.2.0</version>\n    </parent>" in text
        assert "    <artifactId>core</artifactId>\n    <version>1.3.0</version>\n" in text

    def test_reports_write(
        self, poms: PomFiles, manifest: PomManifest, console: MockConsole, tmp_path: Path
    ) -> None:
        poms.project()

        manifest.write_version(tmp_path, V130)

        assert console.find("version 1.3.0")

    def test_missing_artifact_id(self, manifest: PomManifest, tmp_path: Path) -> None:
        (tmp_path / "pom.xml").write_text("<project></project>", encoding="utf-8")

        assert isinstance(manifest.write_version(tmp_path, V130), Err)


class TestPropagateParentVersion:
    """Test PomManifest.propagate_parent_version."""

    def test_updates_every_module(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.reactor("1.2.0-SNAPSHOT")

        result = manifest.propagate_parent_version(tmp_path, V130)

        assert result == Ok((tmp_path / "core", tmp_path / "app"))
        assert manifest.read_version(tmp_path / "core") == Ok(V130)
        app = (tmp_path / "app" / "pom.xml").read_text(encoding="utf-8")
        assert "<version>1.0.0</version>" in app

    def test_nested_modules(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.project(extra=poms.modules("services"))
        poms.module("services", artifact="services", extra=poms.modules("api"))
        poms.module("services/api", artifact="api", parent="services")

        result = manifest.propagate_parent_version(tmp_path, V130)

        assert isinstance(result, Ok)
        assert tmp_path / "services" / "api" in result.value
        assert manifest.read_version(tmp_path / "services" / "api") == Ok(V130)

    def test_unchanged_modules_not_reported(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.reactor("1.3.0")

        assert manifest.propagate_parent_version(tmp_path, V130) == Ok(())

    def test_missing_module_pom_warns(
        self, poms: PomFiles, manifest: PomManifest, console: MockConsole, tmp_path: Path
    ) -> None:
        poms.project(extra=poms.modules("ghost"))

        assert manifest.propagate_parent_version(tmp_path, V130) == Ok(())
        assert console.find("module pom.xml not found")

    def test_module_without_parent_warns(
        self, poms: PomFiles, manifest: PomManifest, console: MockConsole, tmp_path: Path
    ) -> None:
        poms.project(extra=poms.modules("standalone"))
        poms.project("standalone", artifact="standalone", version="0.1.0")

        assert manifest.propagate_parent_version(tmp_path, V130) == Ok(())
        assert console.find("no parent defined")
        assert manifest.read_version(tmp_path / "standalone") == Ok(SemanticVersion(0, 1, 0))


class TestCoordinatesAndDependencies:
    def test_read_coordinate_inherits_from_parent(
        self, poms: PomFiles, manifest: PomManifest, tmp_path: Path
    ) -> None:
        poms.module("core", artifact="core", version="1.3.0")

        assert manifest.read_coordinate(tmp_path / "core") == Ok(
            ArtifactCoordinate("com.example", "core", "1.3.0")
        )

    def test_read_coordinate_missing_fields(self, manifest: PomManifest, tmp_path: Path) -> None:
        (tmp_path / "pom.xml").write_text("<project><artifactId>x</artifactId></project>", encoding="utf-8")

        result = manifest.read_coordinate(tmp_path)

        assert isinstance(result, Err)
        assert "missing groupId, version" in result.error.message

    def test_list_declared_modules(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.reactor()

        assert manifest.list_declared_modules(tmp_path) == Ok(("core", "app"))
        assert manifest.list_declared_modules(tmp_path / "core") == Ok(())

    def test_update_dependency_versions(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.reactor("1.2.0-SNAPSHOT")
        lookup = {"com.example:core": "1.3.0", "org.other:unused": "5.0"}

        result = manifest.update_dependency_versions(tmp_path / "app", lookup)

        assert result == Ok((ArtifactCoordinate("com.example", "core", "1.3.0"),))
        text = (tmp_path / "app" / "pom.xml").read_text(encoding="utf-8")
        assert "<artifactId>core</artifactId>\n            <version>1.3.0</version>" in text
        assert "<artifactId>lib-api</artifactId>\n            <version>1.0.0</version>" in text
        # parent version is not a dependency
        assert "<version>1.2.0-SNAPSHOT</version>\n    </parent>" in text

    def test_update_is_noop_when_current(self, poms: PomFiles, manifest: PomManifest, tmp_path: Path) -> None:
        poms.reactor("1.3.0")
        path = tmp_path / "app" / "pom.xml"
        mtime = path.stat().st_mtime_ns

        result = manifest.update_dependency_versions(tmp_path / "app", {"com.example:core": "1.3.0"})

        assert result == Ok(())
        assert path.stat().st_mtime_ns == mtime

    def test_managed_dependencies_without_version_skipped(
        self, poms: PomFiles, manifest: PomManifest, tmp_path: Path
    ) -> None:
        extra = (
            "    <dependencies>\n"
            "        <dependency>\n"
            "            <groupId>com.example</groupId>\n"
            "            <artifactId>core</artifactId>\n"
            "        </dependency>\n"
            "    </dependencies>\n"
        )
        poms.module("app", artifact="app", extra=extra)

        assert manifest.update_dependency_versions(tmp_path / "app", {"com.example:core": "1.3.0"}) == Ok(())
