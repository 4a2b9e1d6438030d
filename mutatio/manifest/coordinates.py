from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["ArtifactCoordinate", "parse_artifact_list"]

_SEPARATOR_RE = re.compile(r"[;,]")


@dataclass(frozen=True, slots=True)
class ArtifactCoordinate:
    group_id: str
    artifact_id: str
    version: str

    @property
    def key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    def __str__(self) -> str:
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


def parse_artifact_list(text: str) -> tuple[dict[str, str], list[str]]:
    """Split ``g:a:v`` entries separated by ``;`` or ``,``.

    Returns the ``group:artifact -> version`` lookup (first entry wins for a
    repeated key, insertion ordered) and the entries that were not three
    non-empty parts.
    """
    lookup: dict[str, str] = {}
    rejected: list[str] = []
    for raw in _SEPARATOR_RE.split(text):
        entry = raw.strip()
        if not entry:
            continue
        parts = [p.strip() for p in entry.split(":")]
        if len(parts) != 3 or not all(parts):
            rejected.append(entry)
            continue
        key = f"{parts[0]}:{parts[1]}"
        lookup.setdefault(key, parts[2])
    return lookup, rejected
