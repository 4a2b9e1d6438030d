"""Error values produced by the lifecycle engine and its ports.

Each kind is a frozen dataclass travelling inside ``Err``. All of them expose
``message`` and ``hint`` so the CLI can print any of them uniformly.
Orchestrators wrap whatever a step returned into ``StepFailed`` so the
failing step name always reaches the user.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ErrorCode

__all__ = [
    "BranchNotFoundError",
    "DescriptionFormatError",
    "ExportError",
    "InvalidInput",
    "LifecycleError",
    "ManifestUpdateError",
    "MergeFailedError",
    "StepFailed",
    "TransportError",
    "UnknownCommitTypeError",
    "VersionFormatError",
    "exit_code_for",
]


@dataclass(frozen=True, slots=True)
class VersionFormatError:
    value: str

    @property
    def message(self) -> str:
        return f"invalid semantic version: '{self.value}'"

    @property
    def hint(self) -> str | None:
        return "Expected MAJOR.MINOR[.PATCH][-PRERELEASE][+BUILD]"


@dataclass(frozen=True, slots=True)
class UnknownCommitTypeError:
    type_token: str
    header: str

    @property
    def message(self) -> str:
        if not self.type_token:
            return f"not a conventional commit header: '{self.header}'"
        return f"unknown commit type '{self.type_token}'"

    @property
    def hint(self) -> str | None:
        return "Expected 'type(scope)!: description' with a known branch category as type"


@dataclass(frozen=True, slots=True)
class DescriptionFormatError:
    text: str
    reason: str

    @property
    def message(self) -> str:
        return f"invalid commit description '{self.text}': {self.reason}"

    @property
    def hint(self) -> str | None:
        return "Expected '<Action> work on <branch>[: message]'"


@dataclass(frozen=True, slots=True)
class BranchNotFoundError:
    branch: str

    @property
    def message(self) -> str:
        return f"branch '{self.branch}' does not exist locally or on the remote"

    @property
    def hint(self) -> str | None:
        return "Run a fetch, or check the category and identity used to start the branch"


@dataclass(frozen=True, slots=True)
class MergeFailedError:
    source: str
    target: str
    outcome: str

    @property
    def message(self) -> str:
        return f"merge {self.source} -> {self.target} ended with {self.outcome}"

    @property
    def hint(self) -> str | None:
        return "Resolve the merge manually, commit, then re-run the same command"


@dataclass(frozen=True, slots=True)
class ManifestUpdateError:
    path: Path
    reason: str

    @property
    def message(self) -> str:
        return f"{self.path}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return None


@dataclass(frozen=True, slots=True)
class TransportError:
    """A git command failed (checkout, commit, push, fetch, ...)."""

    command: str
    message: str
    returncode: int = 1

    @property
    def hint(self) -> str | None:
        return f"git {self.command} exited with {self.returncode}"


@dataclass(frozen=True, slots=True)
class ExportError:
    name: str
    reason: str

    @property
    def message(self) -> str:
        return f"failed to export CI variable {self.name}: {self.reason}"

    @property
    def hint(self) -> str | None:
        return "Pass --ci dotenv to write variables to .env instead"


@dataclass(frozen=True, slots=True)
class InvalidInput:
    message: str
    hint: str | None = None


LifecycleError = (
    VersionFormatError
    | UnknownCommitTypeError
    | DescriptionFormatError
    | BranchNotFoundError
    | MergeFailedError
    | ManifestUpdateError
    | TransportError
    | ExportError
    | InvalidInput
)


@dataclass(frozen=True, slots=True)
class StepFailed:
    """A lifecycle run stopped at ``step`` because of ``cause``."""

    step: str
    cause: LifecycleError

    @property
    def message(self) -> str:
        return f"{self.step}: {self.cause.message}"

    @property
    def hint(self) -> str | None:
        return self.cause.hint


def exit_code_for(error: StepFailed | LifecycleError) -> ErrorCode:
    """Map an error to the CLI exit code for its kind."""
    cause = error.cause if isinstance(error, StepFailed) else error
    match cause:
        case VersionFormatError() | UnknownCommitTypeError() | DescriptionFormatError():
            return ErrorCode.USER_ERROR
        case InvalidInput():
            return ErrorCode.USER_ERROR
        case BranchNotFoundError() | TransportError():
            return ErrorCode.VCS_ERROR
        case ManifestUpdateError():
            return ErrorCode.MANIFEST_ERROR
        case MergeFailedError():
            return ErrorCode.MERGE_ERROR
        case ExportError():
            return ErrorCode.IO_ERROR
