"""Closed vocabularies: branch categories, branch actions, release types and
pre-release identifiers."""

from __future__ import annotations

from enum import StrEnum

__all__ = [
    "BranchAction",
    "BranchCategory",
    "ReleaseType",
    "VersionIdentifier",
    "parse_category",
    "parse_identifier",
]


class BranchCategory(StrEnum):
    """Branch category; the value is the branch prefix (``feat/123456``)."""

    ARCHIVE = "archive"
    BUGFIX = "bugfix"
    BUILD = "build"
    CHORE = "chore"
    CI = "ci"
    CODE = "code"
    DEVELOPMENT = "development"
    DOCS = "docs"
    EXPERIMENT = "experiment"
    FEATURE = "feat"
    FIX = "fix"
    HOTFIX = "hotfix"
    IMPROVEMENT = "improvement"
    MAIN = "main"
    MASTER = "master"
    PERF = "perf"
    PROTOTYPE = "prototype"
    REFACTOR = "refactor"
    RELEASE = "release"
    SANDBOX = "sandbox"
    STAGING = "staging"
    STYLE = "style"
    TEST = "test"

    @property
    def prefix(self) -> str:
        return self.value

    @property
    def upper_name(self) -> str:
        """Form used inside pre-release tokens (``-FEATURE-123456``)."""
        return self.name

    def branch_name(self, name: str) -> str:
        return f"{self.value}/{name}"

    @property
    def is_mainline(self) -> bool:
        return self in (BranchCategory.MAIN, BranchCategory.MASTER)


def parse_category(text: str) -> BranchCategory | None:
    """Look up a category by prefix (``feat``) or name (``FEATURE``)."""
    token = text.strip()
    lowered = token.lower()
    for category in BranchCategory:
        if category.value == lowered or category.name == token.upper():
            return category
    return None


class BranchAction(StrEnum):
    START = "start"
    FINISH = "finish"
    MERGE = "merge"
    UPDATE = "update"

    @property
    def label(self) -> str:
        return self.value.capitalize()


class ReleaseType(StrEnum):
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"


class VersionIdentifier(StrEnum):
    SNAPSHOT = "SNAPSHOT"
    BETA = "BETA"
    ALPHA = "ALPHA"
    RC = "RC"
    NONE = ""


def parse_identifier(text: str) -> VersionIdentifier | None:
    token = text.strip().upper()
    if token in ("", "NONE"):
        return VersionIdentifier.NONE
    for identifier in VersionIdentifier:
        if identifier.value == token:
            return identifier
    return None
