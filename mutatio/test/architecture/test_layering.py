"""Layering rules checked on the source tree.

- subprocess is only called from ``platform/process.py``
- Rich is only imported by ``output/console.py``
- the engine (everything outside ``cli``) never imports the CLI or typer
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class ImportRef:
    module: str
    line: int


def package_root() -> Path:
    return Path(__file__).resolve().parents[2]


def iter_source_files() -> list[Path]:
    root = package_root()
    files: list[Path] = []
    for path in sorted(root.rglob("*.py")):
        rel = path.relative_to(root)
        if rel.parts[0] == "test" or "__pycache__" in rel.parts:
            continue
        files.append(path)
    return files


def read_tree(path: Path) -> ast.AST:
    return ast.parse(path.read_text(encoding="utf-8"), filename=str(path))


def parse_imports(path: Path) -> list[ImportRef]:
    imports: list[ImportRef] = []
    for node in ast.walk(read_tree(path)):
        if isinstance(node, ast.Import):
            imports.extend(ImportRef(alias.name, node.lineno) for alias in node.names)
        elif isinstance(node, ast.ImportFrom) and not node.level and node.module:
            imports.append(ImportRef(node.module, node.lineno))
    return imports


def matches_prefix(module: str, prefix: str) -> bool:
    return module == prefix or module.startswith(prefix + ".")


def _relative(path: Path) -> str:
    return path.relative_to(package_root()).as_posix()


def test_subprocess_only_in_process_module() -> None:
    offenders: list[str] = []
    for file_path in iter_source_files():
        if _relative(file_path) == "platform/process.py":
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "subprocess"):
                offenders.append(f"{_relative(file_path)}:{item.line}: imports subprocess")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)


def test_rich_only_in_console_module() -> None:
    offenders: list[str] = []
    for file_path in iter_source_files():
        if _relative(file_path) == "output/console.py":
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "rich"):
                offenders.append(f"{_relative(file_path)}:{item.line}: imports '{item.module}'")

    assert not offenders, "Rich usage violations:\n" + "\n".join(offenders)


def test_engine_does_not_import_cli() -> None:
    offenders: list[str] = []
    for file_path in iter_source_files():
        rel = _relative(file_path)
        if rel.startswith("cli/"):
            continue
        for item in parse_imports(file_path):
            if matches_prefix(item.module, "mutatio.cli") or matches_prefix(item.module, "typer"):
                offenders.append(f"{rel}:{item.line}: forbidden import '{item.module}'")

    assert not offenders, "engine -> cli dependency violations:\n" + "\n".join(offenders)
