"""Conventional commit messages.

Header shape: ``type(scope)!: description``, then an optional body and an
optional footer, each separated by one blank line. The type is a branch
category prefix, so ``feat(123456): Start work on 123456`` is the commit that
opens branch ``feat/123456``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from mutatio.core.failures import DescriptionFormatError, UnknownCommitTypeError
from mutatio.core.result import Err, Ok, Result
from mutatio.versioning.taxonomy import BranchAction, BranchCategory, parse_category

__all__ = [
    "CommitDescription",
    "ConventionalCommit",
    "format_commit",
    "parse_commit",
    "parse_description",
]

_PARAGRAPH_BREAK_RE = re.compile(r"\r?\n[ \t]*\r?\n")
_PREFIX_RE = re.compile(r"^(?P<type>[^()!\s]+)(\((?P<scope>[^()]*)\))?(?P<bang>!)?$")

_WORK_ON = " work on "
_NO_ACTION = "Perform"


@dataclass(frozen=True, slots=True)
class CommitDescription:
    """``<Action> work on <branch>[: message]``; no action renders as Perform."""

    action: BranchAction | None
    branch_name: str
    message: str | None = None

    def __str__(self) -> str:
        verb = self.action.label if self.action is not None else _NO_ACTION
        text = f"{verb}{_WORK_ON}{self.branch_name}"
        if self.message and self.message.strip():
            text += f": {self.message.strip()}"
        return text


@dataclass(frozen=True, slots=True)
class ConventionalCommit:
    type: BranchCategory
    description: str
    scope: str | None = None
    breaking: bool = False
    body: str | None = None
    footer: str | None = None

    def __str__(self) -> str:
        return format_commit(self)


def format_commit(commit: ConventionalCommit) -> str:
    header = commit.type.prefix
    if commit.scope and commit.scope.strip():
        header += f"({commit.scope.strip()})"
    if commit.breaking:
        header += "!"
    header += f": {commit.description.strip()}"

    parts = [header]
    for section in (commit.body, commit.footer):
        if section and section.strip():
            parts.append(section.strip())
    return "\n\n".join(parts)


def parse_commit(text: str) -> Result[ConventionalCommit, UnknownCommitTypeError]:
    """Parse a full commit message.

    Only the first two blank-line boundaries split sections: anything after
    the second one belongs to the footer.
    """
    sections = _PARAGRAPH_BREAK_RE.split(text.strip(), maxsplit=2)
    header = sections[0].strip()

    colon = header.find(":")
    if colon <= 0:
        return Err(UnknownCommitTypeError(type_token="", header=header))

    m = _PREFIX_RE.match(header[:colon].strip())
    if m is None:
        return Err(UnknownCommitTypeError(type_token=header[:colon].strip(), header=header))

    category = parse_category(m.group("type"))
    if category is None:
        return Err(UnknownCommitTypeError(type_token=m.group("type"), header=header))

    scope = m.group("scope")
    body = sections[1].strip() if len(sections) > 1 else ""
    footer = sections[2].strip() if len(sections) > 2 else ""

    return Ok(
        ConventionalCommit(
            type=category,
            description=header[colon + 1 :].strip(),
            scope=scope.strip() if scope and scope.strip() else None,
            breaking=m.group("bang") is not None,
            body=body or None,
            footer=footer or None,
        )
    )


def parse_description(text: str) -> Result[CommitDescription, DescriptionFormatError]:
    idx = text.find(_WORK_ON)
    if idx < 0:
        return Err(DescriptionFormatError(text=text, reason=f"missing '{_WORK_ON.strip()}'"))

    verb = text[:idx].strip()
    action: BranchAction | None
    if verb.lower() == _NO_ACTION.lower():
        action = None
    else:
        matched = [a for a in BranchAction if a.value == verb.lower()]
        if not matched:
            return Err(DescriptionFormatError(text=text, reason=f"unknown action '{verb}'"))
        action = matched[0]

    rest = text[idx + len(_WORK_ON) :].strip()
    branch, sep, message = rest.partition(": ")
    if not branch.strip():
        return Err(DescriptionFormatError(text=text, reason="missing branch name"))

    return Ok(
        CommitDescription(
            action=action,
            branch_name=branch.strip(),
            message=message.strip() if sep and message.strip() else None,
        )
    )
