"""Commit message model."""

from .conventional import (
    CommitDescription,
    ConventionalCommit,
    format_commit,
    parse_commit,
    parse_description,
)

__all__ = [
    "CommitDescription",
    "ConventionalCommit",
    "format_commit",
    "parse_commit",
    "parse_description",
]
