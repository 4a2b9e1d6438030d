"""In-memory fakes for the lifecycle ports, used by the test suite.

``FakeVcs`` keeps one snapshot of every ``pom.xml`` per branch and swaps them
in the working directory on checkout, so orchestrators observe the same
manifest changes they would on a real repository.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from pathlib import Path

from mutatio.core.failures import BranchNotFoundError, ExportError, TransportError
from mutatio.core.result import Err, Ok, Result
from mutatio.git.repository import CheckoutResult, MergeOutcome
from mutatio.lifecycle.context import PipelineContext
from mutatio.manifest.pom import PomManifest
from mutatio.output.console import MockConsole


POM_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <groupId>com.example</groupId>
    <artifactId>{artifact}</artifactId>
    <version>{version}</version>
    <packaging>pom</packaging>
{extra}</project>
"""

MODULE_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<project xmlns="http://maven.apache.org/POM/4.0.0">
    <modelVersion>4.0.0</modelVersion>
    <parent>
        <groupId>com.example</groupId>
        <artifactId>{parent}</artifactId>
        <version>{version}</version>
    </parent>
    <artifactId>{artifact}</artifactId>
{extra}</project>
"""


def write_pom(directory: Path, content: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / "pom.xml"
    path.write_text(content, encoding="utf-8")
    return path


def modules_block(*names: str) -> str:
    lines = "".join(f"        <module>{n}</module>\n" for n in names)
    return f"    <modules>\n{lines}    </modules>\n"


def dependencies_block(*coordinates: tuple[str, str, str]) -> str:
    body = "".join(
        "        <dependency>\n"
        f"            <groupId>{g}</groupId>\n"
        f"            <artifactId>{a}</artifactId>\n"
        f"            <version>{v}</version>\n"
        "        </dependency>\n"
        for g, a, v in coordinates
    )
    return f"    <dependencies>\n{body}    </dependencies>\n"


def make_reactor(root: Path, version: str = "1.2.0-SNAPSHOT") -> None:
    """Root pom with two modules, ``core`` and ``app``."""
    write_pom(root, POM_TEMPLATE.format(artifact="parent", version=version, extra=modules_block("core", "app")))
    write_pom(root / "core", MODULE_TEMPLATE.format(parent="parent", artifact="core", version=version, extra=""))
    write_pom(
        root / "app",
        MODULE_TEMPLATE.format(
            parent="parent",
            artifact="app",
            version=version,
            extra=dependencies_block(("org.lib", "lib-api", "1.0.0"), ("com.example", "core", version)),
        ),
    )


@dataclass
class FakeVcs:
    root: Path
    branch: str = "development"
    local: set[str] = field(default_factory=lambda: {"development", "master"})
    remote: set[str] = field(default_factory=set)
    tags: set[str] = field(default_factory=set)
    merge_outcome: MergeOutcome = MergeOutcome.FAST_FORWARD
    fail: dict[str, TransportError] = field(default_factory=dict)
    calls: list[str] = field(default_factory=list)
    commits: list[tuple[str, str]] = field(default_factory=list)
    pushes: list[tuple[str, str | None]] = field(default_factory=list)
    merges: list[tuple[str, str]] = field(default_factory=list)
    excluded: list[tuple[Path, ...]] = field(default_factory=list)
    pull_outcome: MergeOutcome = MergeOutcome.FAST_FORWARD
    snapshots: dict[str, dict[Path, str]] = field(default_factory=dict)

    def _files(self) -> dict[Path, str]:
        return {p.relative_to(self.root): p.read_text(encoding="utf-8") for p in self.root.rglob("pom.xml")}

    def _restore(self, files: dict[Path, str]) -> None:
        for rel, text in files.items():
            (self.root / rel).parent.mkdir(parents=True, exist_ok=True)
            (self.root / rel).write_text(text, encoding="utf-8")

    def _switch(self, name: str) -> None:
        self.snapshots[self.branch] = self._files()
        if name in self.snapshots:
            self._restore(self.snapshots[name])
        self.branch = name

    def _failure(self, command: str) -> Err[TransportError] | None:
        error = self.fail.get(command)
        return Err(error) if error is not None else None

    def current_branch(self) -> Result[str, TransportError]:
        return Ok(self.branch)

    def branch_exists(self, name: str, *, local: bool = True, remote: bool = True) -> bool:
        return (local and name in self.local) or (remote and name in self.remote)

    def checkout(self, name: str) -> Result[CheckoutResult, TransportError | BranchNotFoundError]:
        if not self.branch_exists(name):
            return Err(BranchNotFoundError(branch=name))
        return self.checkout_create(name)

    def checkout_create(self, name: str) -> Result[CheckoutResult, TransportError | BranchNotFoundError]:
        self.calls.append(f"checkout {name}")
        failure = self._failure("checkout")
        if failure is not None:
            return failure
        if name == self.branch:
            return Ok(CheckoutResult.ALREADY_ON)
        if name in self.local:
            outcome = CheckoutResult.SWITCHED
        elif name in self.remote:
            outcome = CheckoutResult.CREATED_TRACKING
        else:
            outcome = CheckoutResult.CREATED_LOCAL
        if name not in self.snapshots:
            self.snapshots[name] = self._files()
        self.local.add(name)
        self._switch(name)
        return Ok(outcome)

    def stage_all(self, exclude: Sequence[Path] = ()) -> Result[None, TransportError]:
        self.calls.append("stage")
        self.excluded.append(tuple(exclude))
        return self._failure("stage") or Ok(None)

    def commit(self, message: str) -> Result[None, TransportError]:
        self.calls.append("commit")
        failure = self._failure("commit")
        if failure is not None:
            return failure
        self.commits.append((self.branch, message))
        return Ok(None)

    def merge(self, source: str, *, into: str) -> Result[MergeOutcome, TransportError]:
        switched = self.checkout(into)
        if isinstance(switched, Err):
            return Err(TransportError(command="merge", message=switched.error.message))
        self.calls.append(f"merge {source} -> {into}")
        self.merges.append((source, into))
        if self.merge_outcome.is_accepted:
            files = self.snapshots.get(source, {})
            self._restore(files)
        return Ok(self.merge_outcome)

    def tag_exists(self, name: str) -> bool:
        return name in self.tags

    def tag(self, name: str, message: str) -> Result[None, TransportError]:
        self.calls.append(f"tag {name}")
        self.tags.add(name)
        return Ok(None)

    def push(self, refspec: str | None = None) -> Result[str, TransportError]:
        self.calls.append(f"push {refspec}" if refspec else "push")
        failure = self._failure("push")
        if failure is not None:
            return failure
        self.pushes.append((self.branch, refspec))
        return Ok("")

    def push_tag(self, name: str) -> Result[str, TransportError]:
        return self.push(f"refs/tags/{name}:refs/tags/{name}")

    def fetch(self) -> Result[str, TransportError]:
        self.calls.append("fetch")
        return self._failure("fetch") or Ok("")

    def pull(self, branch: str) -> Result[MergeOutcome, TransportError]:
        self.calls.append(f"pull {branch}")
        return self._failure("pull") or Ok(self.pull_outcome)


@dataclass
class RecordingExporter:
    variables: list[tuple[str, str]] = field(default_factory=list)
    fail: bool = False

    def export_variable(self, name: str, value: str) -> Result[None, ExportError]:
        if self.fail:
            return Err(ExportError(name=name, reason="disk full"))
        self.variables.append((name, value))
        return Ok(None)

    def get(self, name: str) -> str | None:
        return dict(self.variables).get(name)


@dataclass
class Pipeline:
    ctx: PipelineContext
    vcs: FakeVcs
    exporter: RecordingExporter
    console: MockConsole

    def with_options(self, **changes: object) -> PipelineContext:
        return replace(self.ctx, **changes)  # type: ignore[arg-type]


@dataclass(frozen=True)
class PomFiles:
    """Writes pom.xml fixtures below ``root``."""

    root: Path

    def project(
        self, rel: str = ".", *, artifact: str = "parent", version: str = "1.2.0-SNAPSHOT", extra: str = ""
    ) -> Path:
        return write_pom(self.root / rel, POM_TEMPLATE.format(artifact=artifact, version=version, extra=extra))

    def module(
        self, rel: str, *, artifact: str, version: str = "1.2.0-SNAPSHOT", parent: str = "parent", extra: str = ""
    ) -> Path:
        return write_pom(
            self.root / rel,
            MODULE_TEMPLATE.format(parent=parent, artifact=artifact, version=version, extra=extra),
        )

    def reactor(self, version: str = "1.2.0-SNAPSHOT") -> None:
        make_reactor(self.root, version)

    modules = staticmethod(modules_block)
    dependencies = staticmethod(dependencies_block)


def make_pipeline(root: Path, *, identity: str | None = "123456", push: bool = True) -> Pipeline:
    """Pipeline over a FakeVcs rooted at ``root`` (poms are not created)."""
    console = MockConsole()
    vcs = FakeVcs(root=root)
    exporter = RecordingExporter()
    ctx = PipelineContext(
        vcs=vcs,
        manifest=PomManifest(console),
        exporter=exporter,
        console=console,
        project_dir=root,
        identity=identity,
        push=push,
    )
    return Pipeline(ctx=ctx, vcs=vcs, exporter=exporter, console=console)
