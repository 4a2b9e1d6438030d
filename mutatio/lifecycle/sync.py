"""Bring the checked-out branch up to date with the remote.

Fetches through the configured transport (SSH key or token), then
fast-forwards the current branch to ``<remote>/<branch>``. A branch that has
diverged from the remote is left untouched and reported as a failed merge.
"""

from __future__ import annotations

from mutatio.core.failures import MergeFailedError, StepFailed
from mutatio.core.result import Err, Ok, Result
from mutatio.git.repository import MergeOutcome
from mutatio.lifecycle.context import PipelineContext
from mutatio.lifecycle.report import LifecycleReport, RunRecorder

__all__ = ["sync_branch"]


def sync_branch(ctx: PipelineContext) -> Result[LifecycleReport, StepFailed]:
    rec = RunRecorder(ctx, f"Syncing with {ctx.remote}")

    current = rec.step("current branch", ctx.vcs.current_branch())
    if isinstance(current, Err):
        return current
    branch = current.value
    upstream = f"{ctx.remote}/{branch}"
    rec.note("branch", branch)

    fetched = rec.step(f"fetch {ctx.remote}", ctx.vcs.fetch())
    if isinstance(fetched, Err):
        return fetched

    if not ctx.vcs.branch_exists(branch, local=False, remote=True):
        rec.skip(f"pull {upstream}", "branch is not on the remote")
        return Ok(rec.finish(f"{branch} has no remote counterpart"))

    step = f"pull {upstream}"
    outcome = rec.step(step, ctx.vcs.pull(branch))
    if isinstance(outcome, Err):
        return outcome
    rec.note("pull", outcome.value)
    match outcome.value:
        case MergeOutcome.ALREADY_UP_TO_DATE:
            return Ok(rec.finish(f"{branch} is up to date with {upstream}"))
        case MergeOutcome.FAST_FORWARD:
            return Ok(rec.finish(f"fast-forwarded {branch} to {upstream}"))
        case _:
            return rec.fail(
                step, MergeFailedError(source=upstream, target=branch, outcome=str(outcome.value))
            )
