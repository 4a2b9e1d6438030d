"""Semantic versions and the branch/release vocabulary."""

from .semver import SemanticVersion, is_valid_identifier, parse_version
from .taxonomy import (
    BranchAction,
    BranchCategory,
    ReleaseType,
    VersionIdentifier,
    parse_category,
    parse_identifier,
)

__all__ = [
    "BranchAction",
    "BranchCategory",
    "ReleaseType",
    "SemanticVersion",
    "VersionIdentifier",
    "is_valid_identifier",
    "parse_category",
    "parse_identifier",
    "parse_version",
]
