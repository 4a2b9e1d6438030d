"""Topic branch lifecycle: start and end ``<category>/<identity>`` branches.

Start branches off development, tags the manifest version with a
``-<CATEGORY>-<identity>`` pre-release and commits. End merges the branch back
into development and restores the development version there. Runs stop at the
first failing step; nothing is rolled back.
"""

from __future__ import annotations

from mutatio.commits.conventional import CommitDescription, ConventionalCommit, format_commit
from mutatio.core.failures import InvalidInput, MergeFailedError, StepFailed
from mutatio.core.result import Err, Ok, Result
from mutatio.lifecycle.context import PipelineContext
from mutatio.lifecycle.report import LifecycleReport, RunRecorder
from mutatio.versioning.semver import SemanticVersion, is_valid_identifier, parse_version
from mutatio.versioning.taxonomy import BranchAction, BranchCategory

__all__ = [
    "branch_commit_message",
    "branch_version",
    "check_identity",
    "end_branch",
    "merge_accepted",
    "set_project_version",
    "start_branch",
]


def branch_version(
    version: SemanticVersion, category: BranchCategory, identity: str
) -> SemanticVersion:
    """``1.2.0-SNAPSHOT`` on ``feat/42`` becomes ``1.2.0-SNAPSHOT-FEATURE-42``."""
    marker = f"{category.upper_name}-{identity}"
    if version.pre_release:
        return version.with_pre_release(f"{version.pre_release}-{marker}")
    return version.with_pre_release(marker)


def branch_commit_message(category: BranchCategory, action: BranchAction, identity: str) -> str:
    description = CommitDescription(action=action, branch_name=identity)
    return format_commit(
        ConventionalCommit(type=category, scope=identity, description=str(description))
    )


def check_identity(rec: RunRecorder, identity: str) -> Result[None, StepFailed]:
    """The identity ends up in the version, so it must be a valid pre-release part."""
    if not is_valid_identifier(identity):
        return rec.fail(
            "check identity",
            InvalidInput(
                f"identity '{identity}' cannot be used in a version",
                hint="Use only letters, digits, '.' and '-', e.g. JIRA-7",
            ),
        )
    return Ok(None)


def set_project_version(
    rec: RunRecorder, ctx: PipelineContext, version: SemanticVersion
) -> Result[None, StepFailed]:
    """Write ``version`` to the root manifest and every module's parent reference."""
    written = rec.step("write version", ctx.manifest.write_version(ctx.project_dir, version))
    if isinstance(written, Err):
        return written
    propagated = rec.step(
        "propagate version", ctx.manifest.propagate_parent_version(ctx.project_dir, version)
    )
    if isinstance(propagated, Err):
        return propagated
    return Ok(None)


def start_branch(
    ctx: PipelineContext,
    category: BranchCategory,
    commit_message: str | None = None,
) -> Result[LifecycleReport, StepFailed]:
    identity = ctx.branch_identity
    branch = category.branch_name(identity)
    rec = RunRecorder(ctx, f"Starting {branch}")
    checked = check_identity(rec, identity)
    if isinstance(checked, Err):
        return checked

    current = rec.step("read version", ctx.manifest.read_version(ctx.project_dir))
    if isinstance(current, Err):
        return current
    version = branch_version(current.value, category, identity)
    rec.note("branch", branch)
    rec.note("version", version)

    message = commit_message or branch_commit_message(category, BranchAction.START, identity)

    switched = rec.step(
        f"checkout {ctx.development_branch}", ctx.vcs.checkout_create(ctx.development_branch)
    )
    if isinstance(switched, Err):
        return switched
    created = rec.step(f"checkout {branch}", ctx.vcs.checkout_create(branch))
    if isinstance(created, Err):
        return created

    updated = set_project_version(rec, ctx, version)
    if isinstance(updated, Err):
        return updated

    staged = rec.stage()
    if isinstance(staged, Err):
        return staged
    committed = rec.step("commit", ctx.vcs.commit(message))
    if isinstance(committed, Err):
        return committed

    pushed = rec.push("push", ctx.vcs.push)
    if isinstance(pushed, Err):
        return pushed

    # Nothing to publish for a branch that only exists locally.
    if ctx.push:
        exported = rec.export_all(
            [
                ("MUTATIO_FEAT_VERSION", str(version)),
                ("MUTATIO_CREATED_BRANCH", branch),
            ]
        )
        if isinstance(exported, Err):
            return exported

    return Ok(rec.finish(f"started {branch} at {version}"))


def end_branch(
    ctx: PipelineContext,
    category: BranchCategory,
) -> Result[LifecycleReport, StepFailed]:
    identity = ctx.branch_identity
    branch = category.branch_name(identity)
    development = ctx.development_branch
    rec = RunRecorder(ctx, f"Finishing {branch}")
    checked = check_identity(rec, identity)
    if isinstance(checked, Err):
        return checked

    switched = rec.step(f"checkout {development}", ctx.vcs.checkout_create(development))
    if isinstance(switched, Err):
        return switched
    development_version = rec.step("read version", ctx.manifest.read_version(ctx.project_dir))
    if isinstance(development_version, Err):
        return development_version
    rec.note("development version", development_version.value)

    topic = rec.step(f"checkout {branch}", ctx.vcs.checkout(branch))
    if isinstance(topic, Err):
        return topic
    topic_text = rec.step(f"read {branch} version", ctx.manifest.read_version_text(ctx.project_dir))
    if isinstance(topic_text, Err):
        return topic_text
    topic_version = topic_text.value
    match parse_version(topic_version):
        case Ok(parsed):
            topic_version = str(parsed)
        case Err(e):
            ctx.console.warning(f"{branch}: {e.message}")
    rec.note("branch version", topic_version)

    merged = merge_accepted(rec, ctx, branch, development)
    if isinstance(merged, Err):
        return merged

    back = rec.step(f"checkout {development}", ctx.vcs.checkout_create(development))
    if isinstance(back, Err):
        return back
    restored = set_project_version(rec, ctx, development_version.value)
    if isinstance(restored, Err):
        return restored

    staged = rec.stage()
    if isinstance(staged, Err):
        return staged
    committed = rec.step(
        "commit", ctx.vcs.commit(branch_commit_message(category, BranchAction.FINISH, identity))
    )
    if isinstance(committed, Err):
        return committed

    pushed = rec.push("push", ctx.vcs.push)
    if isinstance(pushed, Err):
        return pushed
    exported = rec.export_all(
        [
            ("MUTATIO_FEAT_VERSION", topic_version),
            ("MUTATIO_MERGED_BRANCH", branch),
        ]
    )
    if isinstance(exported, Err):
        return exported

    return Ok(rec.finish(f"merged {branch} into {development}"))


def merge_accepted(
    rec: RunRecorder, ctx: PipelineContext, source: str, target: str
) -> Result[None, StepFailed]:
    """Merge ``source`` into ``target``; only fast-forward and real merges pass."""
    step = f"merge {source} -> {target}"
    outcome = rec.step(step, ctx.vcs.merge(source, into=target))
    if isinstance(outcome, Err):
        return outcome
    rec.note("merge", outcome.value)
    if not outcome.value.is_accepted:
        return rec.fail(
            step, MergeFailedError(source=source, target=target, outcome=str(outcome.value))
        )
    return Ok(None)
