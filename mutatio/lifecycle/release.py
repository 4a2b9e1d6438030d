"""Release lifecycle.

``start_release`` cuts ``release/<next>`` from development and moves
development on to the next development version. ``end_release`` merges the
release branch into the mainline and tags it. Re-running ``end_release``
after a partial failure is safe: the checkout of an already current branch is
a no-op and an existing tag is not recreated.
"""

from __future__ import annotations

from mutatio.commits.conventional import CommitDescription, ConventionalCommit, format_commit
from mutatio.core.failures import InvalidInput, StepFailed
from mutatio.core.result import Err, Ok, Result
from mutatio.lifecycle.branch import merge_accepted, set_project_version
from mutatio.lifecycle.context import PipelineContext
from mutatio.lifecycle.report import LifecycleReport, RunRecorder
from mutatio.versioning.semver import SemanticVersion, parse_version
from mutatio.versioning.taxonomy import (
    BranchAction,
    BranchCategory,
    ReleaseType,
    VersionIdentifier,
)

__all__ = ["end_release", "next_versions", "start_release"]


def next_versions(
    current: SemanticVersion,
    release_type: ReleaseType,
    identifier: VersionIdentifier | str = VersionIdentifier.SNAPSHOT,
) -> tuple[SemanticVersion, SemanticVersion]:
    """Return ``(release version, next development version)``.

    ``1.2.0-SNAPSHOT`` with MINOR gives ``1.3.0`` and ``1.3.0-SNAPSHOT``.
    """
    return (
        current.bump(release_type),
        current.bump(release_type, pre_release=str(identifier) or None),
    )


def _commit_message(
    category: BranchCategory, action: BranchAction, branch_name: str, scope: str | None
) -> str:
    description = CommitDescription(action=action, branch_name=branch_name)
    return format_commit(ConventionalCommit(type=category, scope=scope, description=str(description)))


def start_release(
    ctx: PipelineContext,
    release_type: ReleaseType,
    identifier: VersionIdentifier | str = VersionIdentifier.SNAPSHOT,
) -> Result[LifecycleReport, StepFailed]:
    rec = RunRecorder(ctx, f"Starting {release_type} release")
    development = ctx.development_branch

    current = rec.step("read version", ctx.manifest.read_version(ctx.project_dir))
    if isinstance(current, Err):
        return current
    release_version, development_version = next_versions(current.value, release_type, identifier)
    release_branch = ctx.release_branch_for(release_version)
    rec.note("release branch", release_branch)
    rec.note("release version", release_version)
    rec.note("next development version", development_version)

    switched = rec.step(f"checkout {development}", ctx.vcs.checkout_create(development))
    if isinstance(switched, Err):
        return switched
    created = rec.step(f"checkout {release_branch}", ctx.vcs.checkout_create(release_branch))
    if isinstance(created, Err):
        return created
    updated = set_project_version(rec, ctx, release_version)
    if isinstance(updated, Err):
        return updated
    staged = rec.stage()
    if isinstance(staged, Err):
        return staged
    committed = rec.step(
        "commit release",
        ctx.vcs.commit(
            _commit_message(
                BranchCategory.RELEASE,
                BranchAction.START,
                str(release_version),
                str(release_version),
            )
        ),
    )
    if isinstance(committed, Err):
        return committed
    pushed = rec.push(f"push {release_branch}", ctx.vcs.push)
    if isinstance(pushed, Err):
        return pushed

    back = rec.step(f"checkout {development}", ctx.vcs.checkout_create(development))
    if isinstance(back, Err):
        return back
    bumped = set_project_version(rec, ctx, development_version)
    if isinstance(bumped, Err):
        return bumped
    staged = rec.stage()
    if isinstance(staged, Err):
        return staged
    committed = rec.step(
        "commit development",
        ctx.vcs.commit(
            _commit_message(BranchCategory.DEVELOPMENT, BranchAction.START, development, None)
        ),
    )
    if isinstance(committed, Err):
        return committed
    pushed = rec.push(f"push {development}", ctx.vcs.push)
    if isinstance(pushed, Err):
        return pushed

    exported = rec.export_all(
        [
            ("MUTATIO_NEXT_DEV_VERSION", str(development_version)),
            ("MUTATIO_NEXT_RELEASE_VERSION", str(release_version)),
        ]
    )
    if isinstance(exported, Err):
        return exported

    return Ok(rec.finish(f"started {release_branch}, {development} is now {development_version}"))


def end_release(
    ctx: PipelineContext,
    release_version: str,
    mainline: BranchCategory = BranchCategory.MASTER,
) -> Result[LifecycleReport, StepFailed]:
    rec = RunRecorder(ctx, f"Finishing release {release_version}")

    if not mainline.is_mainline:
        return rec.fail(
            "check mainline",
            InvalidInput(
                message=f"'{mainline.prefix}' is not a mainline branch",
                hint="Use main or master",
            ),
        )

    parsed = rec.step("parse version", parse_version(release_version))
    if isinstance(parsed, Err):
        return parsed
    version = parsed.value
    release_branch = ctx.release_branch_for(version)
    release_tag = ctx.release_tag_for(version)
    target = mainline.prefix
    rec.note("release branch", release_branch)
    rec.note("tag", release_tag)

    switched = rec.step(f"checkout {release_branch}", ctx.vcs.checkout(release_branch))
    if isinstance(switched, Err):
        return switched
    staged = rec.stage()
    if isinstance(staged, Err):
        return staged
    committed = rec.step(
        "commit release",
        ctx.vcs.commit(
            _commit_message(BranchCategory.RELEASE, BranchAction.FINISH, str(version), str(version))
        ),
    )
    if isinstance(committed, Err):
        return committed

    merged = merge_accepted(rec, ctx, release_branch, target)
    if isinstance(merged, Err):
        return merged

    if ctx.vcs.tag_exists(release_tag):
        rec.skip(f"tag {release_tag}", "tag already exists")
    else:
        tagged = rec.step(f"tag {release_tag}", ctx.vcs.tag(release_tag, f"Created tag: {release_tag}"))
        if isinstance(tagged, Err):
            return tagged
    pushed = rec.push(f"push tag {release_tag}", lambda: ctx.vcs.push_tag(release_tag))
    if isinstance(pushed, Err):
        return pushed

    back = rec.step(f"checkout {target}", ctx.vcs.checkout_create(target))
    if isinstance(back, Err):
        return back
    pushed = rec.push(f"push {target}", ctx.vcs.push)
    if isinstance(pushed, Err):
        return pushed

    exported = rec.export_all(
        [
            ("MUTATIO_RELEASE_BRANCH", release_branch),
            ("MUTATIO_RELEASE_TAG", release_tag),
            ("MUTATIO_RELEASE_VERSION", str(version)),
        ]
    )
    if isinstance(exported, Err):
        return exported

    return Ok(rec.finish(f"released {version} on {target} as {release_tag}"))
