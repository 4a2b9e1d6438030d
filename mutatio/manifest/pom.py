"""Maven ``pom.xml`` manifest service.

Edits are done in place on the original text: only the content of the
touched elements changes, so comments, ordering and indentation survive a
version bump. The scanner understands just enough XML for POM files
(elements, comments, processing instructions, CDATA).
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from mutatio.core.failures import ManifestUpdateError, VersionFormatError
from mutatio.core.result import Err, Ok, Result
from mutatio.manifest.coordinates import ArtifactCoordinate
from mutatio.output.console import ConsoleProtocol, Style
from mutatio.platform.files import atomic_write_text
from mutatio.versioning.semver import SemanticVersion, parse_version

__all__ = ["POM_FILENAME", "PomManifest"]

POM_FILENAME = "pom.xml"

_TOKEN_RE = re.compile(
    r"<!--.*?-->"
    r"|<\?.*?\?>"
    r"|<!\[CDATA\[.*?\]\]>"
    r"|<![A-Za-z][^>]*>"
    r"|<(?P<close>/?)(?P<name>[A-Za-z_][\w.:-]*)(?P<attrs>[^>]*?)(?P<empty>/?)>",
    re.DOTALL,
)

_PROJECT_VERSION = ("project", "version")
_PARENT_VERSION = ("project", "parent", "version")
_PROJECT_GROUP = ("project", "groupId")
_PARENT_GROUP = ("project", "parent", "groupId")
_PROJECT_ARTIFACT = ("project", "artifactId")
_MODULE = ("project", "modules", "module")
_DEPENDENCY = ("project", "dependencies", "dependency")


@dataclass(frozen=True, slots=True)
class _Element:
    path: tuple[str, ...]
    parent: int
    outer_start: int
    start: int
    end: int
    outer_end: int


@dataclass(frozen=True, slots=True)
class _Pom:
    path: Path
    text: str
    elements: tuple[_Element, ...]

    def find(self, path: tuple[str, ...]) -> _Element | None:
        for element in self.elements:
            if element.path == path:
                return element
        return None

    def find_all(self, path: tuple[str, ...]) -> list[_Element]:
        return [e for e in self.elements if e.path == path]

    def children(self, index: int) -> list[_Element]:
        return [e for e in self.elements if e.parent == index]

    def value(self, element: _Element | None) -> str | None:
        if element is None:
            return None
        return self.text[element.start : element.end].strip() or None

    def first_value(self, *paths: tuple[str, ...]) -> str | None:
        for path in paths:
            found = self.value(self.find(path))
            if found is not None:
                return found
        return None


def _scan(path: Path, text: str) -> Result[_Pom, ManifestUpdateError]:
    elements: list[_Element] = []
    # (name, element index, outer_start, content start)
    stack: list[tuple[str, int, int, int]] = []
    slots: list[_Element | None] = []

    for m in _TOKEN_RE.finditer(text):
        name = m.group("name")
        if name is None:
            continue
        local = name.rsplit(":", 1)[-1]

        if m.group("close"):
            if not stack or stack[-1][0] != local:
                return Err(ManifestUpdateError(path=path, reason=f"malformed XML near </{name}>"))
            _, index, outer_start, start = stack.pop()
            slots[index] = _Element(
                path=(*(entry[0] for entry in stack), local),
                parent=stack[-1][1] if stack else -1,
                outer_start=outer_start,
                start=start,
                end=m.start(),
                outer_end=m.end(),
            )
            continue

        index = len(slots)
        if m.group("empty"):
            slots.append(
                _Element(
                    path=(*(entry[0] for entry in stack), local),
                    parent=stack[-1][1] if stack else -1,
                    outer_start=m.start(),
                    start=m.end(),
                    end=m.end(),
                    outer_end=m.end(),
                )
            )
        else:
            slots.append(None)
            stack.append((local, index, m.start(), m.end()))

    if stack:
        return Err(ManifestUpdateError(path=path, reason=f"unclosed element <{stack[-1][0]}>"))

    elements.extend(e for e in slots if e is not None)
    if not elements or elements[0].path != ("project",):
        return Err(ManifestUpdateError(path=path, reason="root element is not <project>"))
    return Ok(_Pom(path=path, text=text, elements=tuple(elements)))


def _replace(text: str, edits: list[tuple[int, int, str]]) -> str:
    for start, end, value in sorted(edits, reverse=True):
        text = text[:start] + value + text[end:]
    return text


class PomManifest:
    """ManifestService over ``pom.xml`` files in a Maven reactor."""

    def __init__(self, console: ConsoleProtocol) -> None:
        self._console = console

    def _load(self, directory: Path) -> Result[_Pom, ManifestUpdateError]:
        pom_file = directory / POM_FILENAME
        try:
            text = pom_file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return Err(ManifestUpdateError(path=pom_file, reason="pom.xml not found"))
        except (OSError, UnicodeDecodeError) as e:
            return Err(ManifestUpdateError(path=pom_file, reason=f"cannot read: {e}"))
        return _scan(pom_file, text)

    def _save(self, pom: _Pom, text: str) -> Result[None, ManifestUpdateError]:
        try:
            atomic_write_text(pom.path, text)
        except OSError as e:
            return Err(ManifestUpdateError(path=pom.path, reason=f"cannot write: {e}"))
        return Ok(None)

    def read_version_text(self, directory: Path) -> Result[str, ManifestUpdateError]:
        """The declared version as written, falling back to the parent's."""
        loaded = self._load(directory)
        if isinstance(loaded, Err):
            return loaded
        pom = loaded.value
        raw = pom.first_value(_PROJECT_VERSION, _PARENT_VERSION)
        if raw is None:
            return Err(ManifestUpdateError(path=pom.path, reason="no <version> declared"))
        return Ok(raw)

    def read_version(
        self, directory: Path
    ) -> Result[SemanticVersion, ManifestUpdateError | VersionFormatError]:
        raw = self.read_version_text(directory)
        if isinstance(raw, Err):
            return raw
        return parse_version(raw.value)

    def write_version(
        self, directory: Path, version: SemanticVersion
    ) -> Result[None, ManifestUpdateError]:
        loaded = self._load(directory)
        if isinstance(loaded, Err):
            return loaded
        pom = loaded.value

        current = pom.find(_PROJECT_VERSION)
        if current is not None:
            text = _replace(pom.text, [(current.start, current.end, str(version))])
        else:
            anchor = pom.find(_PROJECT_ARTIFACT)
            if anchor is None:
                return Err(ManifestUpdateError(path=pom.path, reason="no <artifactId> to anchor <version>"))
            line_start = pom.text.rfind("\n", 0, anchor.outer_start) + 1
            indent = pom.text[line_start : anchor.outer_start]
            if indent.strip():
                indent = ""
            insert = f"\n{indent}<version>{version}</version>"
            text = _replace(pom.text, [(anchor.outer_end, anchor.outer_end, insert)])

        saved = self._save(pom, text)
        if isinstance(saved, Err):
            return saved
        self._console.print(f"{pom.path}: version {version}", Style.DIM)
        return Ok(None)

    def list_declared_modules(self, directory: Path) -> Result[tuple[str, ...], ManifestUpdateError]:
        loaded = self._load(directory)
        if isinstance(loaded, Err):
            return loaded
        pom = loaded.value
        modules = [pom.value(e) for e in pom.find_all(_MODULE)]
        return Ok(tuple(m for m in modules if m))

    def propagate_parent_version(
        self, directory: Path, version: SemanticVersion
    ) -> Result[tuple[Path, ...], ManifestUpdateError]:
        """Point every declared module's ``<parent><version>`` at ``version``.

        Nested reactors are walked too. A module without a pom.xml or
        without a parent is reported and skipped.
        """
        modules = self.list_declared_modules(directory)
        if isinstance(modules, Err):
            return modules

        updated: list[Path] = []
        for module in modules.value:
            module_dir = directory / module
            if not (module_dir / POM_FILENAME).is_file():
                self._console.warning(f"module pom.xml not found: {module_dir / POM_FILENAME}")
                continue

            loaded = self._load(module_dir)
            if isinstance(loaded, Err):
                return loaded
            pom = loaded.value

            parent_version = pom.find(_PARENT_VERSION)
            if parent_version is None:
                self._console.warning(f"no parent defined in {pom.path}")
            elif pom.value(parent_version) != str(version):
                text = _replace(pom.text, [(parent_version.start, parent_version.end, str(version))])
                saved = self._save(pom, text)
                if isinstance(saved, Err):
                    return saved
                self._console.print(f"{pom.path}: parent version {version}", Style.DIM)
                updated.append(module_dir)

            nested = self.propagate_parent_version(module_dir, version)
            if isinstance(nested, Err):
                return nested
            updated.extend(nested.value)

        return Ok(tuple(updated))

    def read_coordinate(self, directory: Path) -> Result[ArtifactCoordinate, ManifestUpdateError]:
        """``groupId:artifactId:version``; groupId and version may come from <parent>."""
        loaded = self._load(directory)
        if isinstance(loaded, Err):
            return loaded
        pom = loaded.value

        group_id = pom.first_value(_PROJECT_GROUP, _PARENT_GROUP)
        artifact_id = pom.first_value(_PROJECT_ARTIFACT)
        version = pom.first_value(_PROJECT_VERSION, _PARENT_VERSION)
        missing = [
            name
            for name, value in (("groupId", group_id), ("artifactId", artifact_id), ("version", version))
            if value is None
        ]
        if missing or group_id is None or artifact_id is None or version is None:
            return Err(ManifestUpdateError(path=pom.path, reason=f"missing {', '.join(missing)}"))
        return Ok(ArtifactCoordinate(group_id=group_id, artifact_id=artifact_id, version=version))

    def update_dependency_versions(
        self, directory: Path, lookup: Mapping[str, str]
    ) -> Result[tuple[ArtifactCoordinate, ...], ManifestUpdateError]:
        """Rewrite direct dependencies found in ``lookup`` (``group:artifact`` -> version).

        Only dependencies with an explicit, different ``<version>`` change.
        Returns the rewritten coordinates; the file is left untouched when
        nothing changed.
        """
        loaded = self._load(directory)
        if isinstance(loaded, Err):
            return loaded
        pom = loaded.value

        edits: list[tuple[int, int, str]] = []
        changed: list[ArtifactCoordinate] = []
        for index, dependency in enumerate(pom.elements):
            if dependency.path != _DEPENDENCY:
                continue
            fields = {child.path[-1]: child for child in pom.children(index)}
            group_id = pom.value(fields.get("groupId"))
            artifact_id = pom.value(fields.get("artifactId"))
            version_element = fields.get("version")
            if group_id is None or artifact_id is None or version_element is None:
                continue

            wanted = lookup.get(f"{group_id}:{artifact_id}")
            if wanted is None or wanted == pom.value(version_element):
                continue

            edits.append((version_element.start, version_element.end, wanted))
            changed.append(ArtifactCoordinate(group_id, artifact_id, wanted))

        if edits:
            saved = self._save(pom, _replace(pom.text, edits))
            if isinstance(saved, Err):
                return saved
            for coordinate in changed:
                self._console.print(f"{pom.path}: dependency {coordinate}", Style.DIM)
        return Ok(tuple(changed))
