from __future__ import annotations

import re
from dataclasses import dataclass

from mutatio.core.failures import VersionFormatError
from mutatio.core.result import Err, Ok, Result
from mutatio.versioning.taxonomy import ReleaseType

__all__ = ["SemanticVersion", "is_valid_identifier", "parse_version"]


_VERSION_RE = re.compile(
    r"^(\d+)\.(\d+)(\.(\d+))?(-([0-9A-Za-z.-]+))?(\+([0-9A-Za-z.-]+))?$",
    re.ASCII,
)
_IDENTIFIER_RE = re.compile(r"[0-9A-Za-z.-]+", re.ASCII)


def is_valid_identifier(text: str) -> bool:
    """True when ``text`` may appear in a pre-release or build suffix."""
    return _IDENTIFIER_RE.fullmatch(text) is not None


@dataclass(frozen=True, slots=True)
class SemanticVersion:
    major: int
    minor: int
    patch: int = 0
    pre_release: str | None = None
    build: str | None = None

    def __post_init__(self) -> None:
        for suffix in (self.pre_release, self.build):
            if suffix and not is_valid_identifier(suffix):
                raise ValueError(f"invalid version suffix '{suffix}' (allowed: 0-9 A-Z a-z . -)")

    def __str__(self) -> str:
        text = f"{self.major}.{self.minor}.{self.patch}"
        if self.pre_release:
            text += f"-{self.pre_release}"
        if self.build:
            text += f"+{self.build}"
        return text

    def bump(
        self,
        kind: ReleaseType,
        pre_release: str | None = None,
        build: str | None = None,
    ) -> SemanticVersion:
        """Increment one component; the others are kept as they are.

        ``1.2.3`` bumped MINOR is ``1.3.3``. Pre-release and build are not
        carried over, only the supplied values are used.
        """
        pre = pre_release or None
        meta = build or None
        match kind:
            case ReleaseType.MAJOR:
                return SemanticVersion(self.major + 1, self.minor, self.patch, pre, meta)
            case ReleaseType.MINOR:
                return SemanticVersion(self.major, self.minor + 1, self.patch, pre, meta)
            case ReleaseType.PATCH:
                return SemanticVersion(self.major, self.minor, self.patch + 1, pre, meta)
            case _:
                raise AssertionError(f"unexpected release type: {kind}")

    def with_pre_release(self, pre_release: str | None) -> SemanticVersion:
        return SemanticVersion(
            self.major, self.minor, self.patch, pre_release or None, self.build
        )


def parse_version(text: str) -> Result[SemanticVersion, VersionFormatError]:
    m = _VERSION_RE.match(text.strip())
    if m is None:
        return Err(VersionFormatError(value=text))
    return Ok(
        SemanticVersion(
            major=int(m.group(1)),
            minor=int(m.group(2)),
            patch=int(m.group(4)) if m.group(4) is not None else 0,
            pre_release=m.group(6),
            build=m.group(8),
        )
    )
