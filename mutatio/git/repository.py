"""Git repository backed by the ``git`` executable.

Implements the VersionControl port used by the lifecycle orchestrators.
All operations return Result types; failures become ``TransportError`` (or
``BranchNotFoundError`` when a branch that must exist is missing).

Usage:
    repo = Repository(Path("/path/to/project"), transport=SshTransport(key))

    match repo.merge("feat/123456", into="development"):
        case Ok(outcome) if outcome.is_accepted:
            print(f"merged: {outcome}")
        case Ok(outcome):
            print(f"merge stopped: {outcome}")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from pathlib import Path

from mutatio.core.failures import BranchNotFoundError, TransportError
from mutatio.core.result import Err, Ok, Result
from mutatio.git.transport import DefaultTransport, Transport
from mutatio.platform.process import ProcessError
from mutatio.platform.process import run as run_process

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0
_NETWORK_COMMANDS = frozenset({"fetch", "pull", "push", "clone", "ls-remote"})

__all__ = [
    "CheckoutResult",
    "MergeOutcome",
    "Repository",
]


class MergeOutcome(StrEnum):
    FAST_FORWARD = "FAST_FORWARD"
    MERGED = "MERGED"
    MERGED_SQUASHED = "MERGED_SQUASHED"
    ALREADY_UP_TO_DATE = "ALREADY_UP_TO_DATE"
    CONFLICTING = "CONFLICTING"
    CHECKOUT_CONFLICT = "CHECKOUT_CONFLICT"
    FAILED = "FAILED"

    @property
    def is_accepted(self) -> bool:
        return self in (
            MergeOutcome.FAST_FORWARD,
            MergeOutcome.MERGED,
            MergeOutcome.MERGED_SQUASHED,
        )


class CheckoutResult(StrEnum):
    ALREADY_ON = "already-on"
    SWITCHED = "switched"
    CREATED_TRACKING = "created-tracking"
    CREATED_LOCAL = "created-local"


class Repository:
    """Git working copy at ``path``.

    Attributes:
        path: Repository root
        remote: Remote used for fetch, push and tracking branches
    """

    def __init__(
        self,
        path: Path,
        *,
        remote: str = "origin",
        transport: Transport | None = None,
    ) -> None:
        self.path = path
        self.remote = remote
        self._transport: Transport = transport or DefaultTransport()

    def remote_url(self) -> str | None:
        result = self._run(["remote", "get-url", self.remote])
        match result:
            case Ok(stdout):
                return stdout.strip() or None
            case Err(_):
                return None

    def current_branch(self) -> Result[str, TransportError]:
        result = self._run(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Err(e):
                return Err(_git_error("rev-parse", e, "cannot resolve current branch"))
            case Ok(stdout):
                branch = stdout.strip()
                if branch == "HEAD":
                    return Err(
                        TransportError(command="rev-parse", message="HEAD is detached")
                    )
                return Ok(branch)

    def branch_exists(self, name: str, *, local: bool = True, remote: bool = True) -> bool:
        refs: list[str] = []
        if local:
            refs.append(f"refs/heads/{name}")
        if remote:
            refs.append(f"refs/remotes/{self.remote}/{name}")
        return any(self._ref_exists(ref) for ref in refs)

    def checkout(
        self, name: str
    ) -> Result[CheckoutResult, TransportError | BranchNotFoundError]:
        """Switch to an existing branch, tracking the remote one if needed."""
        if not self.branch_exists(name):
            return Err(BranchNotFoundError(branch=name))
        return self.checkout_create(name)

    def checkout_create(
        self, name: str
    ) -> Result[CheckoutResult, TransportError | BranchNotFoundError]:
        """Switch to ``name``, creating it when it does not exist.

        Already on it: nothing to do. Local branch: plain checkout. Remote
        only: new local branch tracking ``<remote>/<name>``. Neither: new
        local branch from the current HEAD.
        """
        current = self.current_branch()
        if isinstance(current, Ok) and current.value == name:
            return Ok(CheckoutResult.ALREADY_ON)

        if self.branch_exists(name, local=True, remote=False):
            args = ["checkout", name]
            outcome = CheckoutResult.SWITCHED
        elif self.branch_exists(name, local=False, remote=True):
            args = ["checkout", "-b", name, "--track", f"{self.remote}/{name}"]
            outcome = CheckoutResult.CREATED_TRACKING
        else:
            args = ["checkout", "-b", name]
            outcome = CheckoutResult.CREATED_LOCAL

        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error("checkout", result.error, f"cannot checkout {name}"))
        return Ok(outcome)

    def stage_all(self, exclude: Sequence[Path] = ()) -> Result[None, TransportError]:
        """Stage every change except ``exclude`` (paths outside the tree are ignored)."""
        args = ["add", "-A"]
        skipped = [p for p in (self._tree_path(path) for path in exclude) if p is not None]
        if skipped:
            args += ["--", ".", *(f":(exclude){p}" for p in skipped)]
        result = self._run(args)
        if isinstance(result, Err):
            return Err(_git_error("add", result.error, "staging failed"))
        return Ok(None)

    def commit(self, message: str) -> Result[None, TransportError]:
        # Lifecycle commits are markers; they must succeed with nothing staged.
        result = self._run(["commit", "--allow-empty", "-m", message])
        if isinstance(result, Err):
            return Err(_git_error("commit", result.error, "commit failed"))
        return Ok(None)

    def merge(self, source: str, *, into: str) -> Result[MergeOutcome, TransportError]:
        """Check out ``into`` and merge ``source`` into it.

        A merge git refuses or stops (conflicts, dirty tree) is an ``Ok``
        carrying the outcome; the caller decides which outcomes it accepts.
        The working tree is left as git left it.
        """
        switched = self.checkout(into)
        if isinstance(switched, Err):
            error = switched.error
            if isinstance(error, BranchNotFoundError):
                return Err(TransportError(command="merge", message=error.message))
            return Err(error)

        result = self._run(["merge", "--no-edit", source])
        match result:
            case Ok(stdout):
                return Ok(_classify_merge_output(stdout))
            case Err(e):
                output = f"{e.stdout}\n{e.stderr}"
                if "CONFLICT" in output:
                    return Ok(MergeOutcome.CONFLICTING)
                if "would be overwritten" in output:
                    return Ok(MergeOutcome.CHECKOUT_CONFLICT)
                return Ok(MergeOutcome.FAILED)

    def tag_exists(self, name: str) -> bool:
        return self._ref_exists(f"refs/tags/{name}")

    def tag(self, name: str, message: str) -> Result[None, TransportError]:
        result = self._run(["tag", "-a", name, "-m", message])
        if isinstance(result, Err):
            return Err(_git_error("tag", result.error, f"cannot create tag {name}"))
        return Ok(None)

    def push(self, refspec: str | None = None) -> Result[str, TransportError]:
        """Push ``refspec`` (default: the current branch, setting upstream)."""
        args = (
            ["push", self.remote, refspec]
            if refspec
            else ["push", "-u", self.remote, "HEAD"]
        )
        result = self._run(args)
        match result:
            case Err(e):
                return Err(_git_error("push", e, "push failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def push_tag(self, name: str) -> Result[str, TransportError]:
        return self.push(f"refs/tags/{name}:refs/tags/{name}")

    def fetch(self) -> Result[str, TransportError]:
        result = self._run(["fetch", self.remote])
        match result:
            case Err(e):
                return Err(_git_error("fetch", e, "fetch failed"))
            case Ok(stdout):
                return Ok(stdout.strip())

    def pull(self, branch: str) -> Result[MergeOutcome, TransportError]:
        """Fast-forward the checked-out ``branch`` to ``<remote>/<branch>``.

        A branch that has diverged is ``Ok(FAILED)``; nothing is merged.
        """
        result = self._run(["pull", "--ff-only", self.remote, branch])
        match result:
            case Ok(stdout):
                if "Already up to date" in stdout or "Already up-to-date" in stdout:
                    return Ok(MergeOutcome.ALREADY_UP_TO_DATE)
                return Ok(MergeOutcome.FAST_FORWARD)
            case Err(e):
                output = f"{e.stdout}\n{e.stderr}"
                if "fast-forward" in output.lower() or "diverg" in output:
                    return Ok(MergeOutcome.FAILED)
                return Err(_git_error("pull", e, f"cannot pull {branch}"))

    def _tree_path(self, path: Path) -> str | None:
        try:
            return path.resolve().relative_to(self.path.resolve()).as_posix()
        except ValueError:
            return None

    def _ref_exists(self, ref: str) -> bool:
        return isinstance(self._run(["show-ref", "--verify", "--quiet", ref]), Ok)

    def _run(self, args: list[str]) -> Result[str, ProcessError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in _NETWORK_COMMANDS
            else _GIT_TIMEOUT_SECONDS
        )
        return run_process(
            ["git", *self._transport.git_config_args(), "-C", str(self.path), *args],
            cwd=self.path,
            extra_env=self._transport.env(),
            timeout=timeout,
        )


def _classify_merge_output(stdout: str) -> MergeOutcome:
    if "Already up to date" in stdout or "Already up-to-date" in stdout:
        return MergeOutcome.ALREADY_UP_TO_DATE
    if "Fast-forward" in stdout:
        return MergeOutcome.FAST_FORWARD
    if "Squash commit" in stdout:
        return MergeOutcome.MERGED_SQUASHED
    return MergeOutcome.MERGED


def _git_error(command: str, e: ProcessError, fallback: str) -> TransportError:
    return TransportError(
        command=command,
        message=e.stderr.strip() or e.stdout.strip() or fallback,
        returncode=e.returncode,
    )
