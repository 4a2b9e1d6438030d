"""Cross-project dependency alignment.

A release of project A publishes its artifacts (``collate_artifacts``) as a
``;``-separated ``group:artifact:version`` list. Project B's release branch
then consumes that list (``update_dependencies``) and pins its direct
dependencies on A to the released versions.
"""

from __future__ import annotations

from pathlib import Path

from mutatio.commits.conventional import CommitDescription, ConventionalCommit, format_commit
from mutatio.core.failures import StepFailed
from mutatio.core.result import Err, Ok, Result
from mutatio.lifecycle.context import PipelineContext
from mutatio.lifecycle.report import LifecycleReport, RunRecorder
from mutatio.manifest.coordinates import ArtifactCoordinate, parse_artifact_list
from mutatio.manifest.pom import POM_FILENAME
from mutatio.versioning.semver import parse_version
from mutatio.versioning.taxonomy import BranchAction, BranchCategory

__all__ = ["collate_artifacts", "module_directories", "update_dependencies"]


def module_directories(
    rec: RunRecorder, ctx: PipelineContext, root: Path
) -> Result[list[Path], StepFailed]:
    """``root`` followed by every declared module, depth first.

    Modules whose pom.xml is missing are reported and left out.
    """
    found: list[Path] = []
    seen: set[Path] = set()

    def visit(directory: Path) -> Result[None, StepFailed]:
        key = directory.resolve()
        if key in seen:
            return Ok(None)
        seen.add(key)
        found.append(directory)

        modules = rec.step(
            f"list modules {_relative(ctx, directory)}",
            ctx.manifest.list_declared_modules(directory),
        )
        if isinstance(modules, Err):
            return modules
        for module in modules.value:
            module_dir = directory / module
            if not (module_dir / POM_FILENAME).is_file():
                ctx.console.warning(f"module pom.xml not found: {module_dir / POM_FILENAME}")
                continue
            visited = visit(module_dir)
            if isinstance(visited, Err):
                return visited
        return Ok(None)

    walked = visit(root)
    if isinstance(walked, Err):
        return walked
    return Ok(found)


def _relative(ctx: PipelineContext, directory: Path) -> str:
    try:
        rel = directory.relative_to(ctx.project_dir)
    except ValueError:
        return str(directory)
    return str(rel) if str(rel) != "." else "."


def collate_artifacts(
    ctx: PipelineContext, release_version: str
) -> Result[tuple[ArtifactCoordinate, ...], StepFailed]:
    rec = RunRecorder(ctx, f"Collating artifacts for release {release_version}")

    parsed = rec.step("parse version", parse_version(release_version))
    if isinstance(parsed, Err):
        return parsed
    version = parsed.value
    release_branch = ctx.release_branch_for(version)
    release_tag = ctx.release_tag_for(version)

    switched = rec.step(f"checkout {release_branch}", ctx.vcs.checkout(release_branch))
    if isinstance(switched, Err):
        return switched

    directories = module_directories(rec, ctx, ctx.project_dir)
    if isinstance(directories, Err):
        return directories

    artifacts: list[ArtifactCoordinate] = []
    for directory in directories.value:
        coordinate = rec.step(
            f"read coordinate {_relative(ctx, directory)}",
            ctx.manifest.read_coordinate(directory),
        )
        if isinstance(coordinate, Err):
            return coordinate
        if coordinate.value not in artifacts:
            artifacts.append(coordinate.value)
            ctx.console.print(f" - {coordinate.value}")

    exported = rec.export_all(
        [
            ("MUTATIO_RELEASE_BRANCH", release_branch),
            ("MUTATIO_RELEASE_TAG", release_tag),
            ("MUTATIO_RELEASE_ARTIFACTS", ";".join(str(a) for a in artifacts)),
            ("MUTATIO_RELEASE_VERSION", str(version)),
        ]
    )
    if isinstance(exported, Err):
        return exported

    ctx.console.success(f"collated {len(artifacts)} artifact(s) on {release_branch}")
    return Ok(tuple(artifacts))


def update_dependencies(
    ctx: PipelineContext, release_version: str, artifacts: str
) -> Result[LifecycleReport, StepFailed]:
    rec = RunRecorder(ctx, f"Updating dependencies for release {release_version}")

    parsed = rec.step("parse version", parse_version(release_version))
    if isinstance(parsed, Err):
        return parsed
    release_branch = ctx.release_branch_for(parsed.value)

    lookup, rejected = parse_artifact_list(artifacts)
    for entry in rejected:
        ctx.console.warning(f"ignoring malformed artifact '{entry}' (expected group:artifact:version)")

    switched = rec.step(f"checkout {release_branch}", ctx.vcs.checkout(release_branch))
    if isinstance(switched, Err):
        return switched

    directories = module_directories(rec, ctx, ctx.project_dir)
    if isinstance(directories, Err):
        return directories

    updated: list[ArtifactCoordinate] = []
    for directory in directories.value:
        changed = rec.step(
            f"update dependencies {_relative(ctx, directory)}",
            ctx.manifest.update_dependency_versions(directory, lookup),
        )
        if isinstance(changed, Err):
            return changed
        for coordinate in changed.value:
            if coordinate not in updated:
                updated.append(coordinate)

    if not updated:
        rec.skip("commit", "dependencies already up to date")
        exported = rec.export("MUTATIO_DEPENDENCIES_UPDATED", "false")
        if isinstance(exported, Err):
            return exported
        return Ok(rec.finish(f"no dependency changes on {release_branch}"))

    for coordinate in updated:
        rec.note("updated", coordinate)

    message = format_commit(
        ConventionalCommit(
            type=BranchCategory.RELEASE,
            scope=release_branch,
            description=str(CommitDescription(action=BranchAction.UPDATE, branch_name=release_branch)),
            body="\n".join(f"Updated dependency: {c}" for c in updated),
        )
    )
    staged = rec.stage()
    if isinstance(staged, Err):
        return staged
    committed = rec.step("commit", ctx.vcs.commit(message))
    if isinstance(committed, Err):
        return committed
    pushed = rec.push("push", ctx.vcs.push)
    if isinstance(pushed, Err):
        return pushed

    exported = rec.export_all(
        [
            ("MUTATIO_UPDATED_DEPENDENCIES", ";".join(str(c) for c in updated)),
            ("MUTATIO_DEPENDENCIES_UPDATED", "true"),
        ]
    )
    if isinstance(exported, Err):
        return exported

    return Ok(rec.finish(f"updated {len(updated)} dependency version(s) on {release_branch}"))
