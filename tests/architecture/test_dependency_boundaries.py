"""依存境界（core / interactive / api）の破りを検出するテスト。"""

from __future__ import annotations

import ast
from pathlib import Path

import pytest

_PACKAGE = "driftsketch"

_GUI_LIBRARIES = ("pyglet", "moderngl", "imgui", "OpenGL")


def _repo_root() -> Path:
    for parent in Path(__file__).resolve().parents:
        if (parent / "src" / _PACKAGE).is_dir() and (parent / "tests").is_dir():
            return parent
    raise RuntimeError("repo root が見つからない")


def _module_name(path: Path, src_root: Path) -> tuple[str, bool]:
    parts = list(path.relative_to(src_root).with_suffix("").parts)
    is_package = parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    return ".".join(parts), is_package


def _resolve_importfrom(current_module: str, is_package: bool, node: ast.ImportFrom) -> set[str]:
    """`from X import a, b` を import されうるモジュール名の集合へ展開する。"""

    level = int(node.level or 0)
    if level == 0:
        base = str(node.module or "")
    else:
        package = current_module if is_package else current_module.rpartition(".")[0]
        parts = package.split(".")
        if level - 1 >= len(parts):
            raise ValueError(
                f"相対 import の解決に失敗: module={current_module!r} level={level}"
            )
        base = ".".join(parts[: len(parts) - (level - 1)])
        if node.module:
            base = f"{base}.{node.module}"
    if not base:
        return set()
    return {base} | {f"{base}.{a.name}" for a in node.names if a.name != "*"}


def _imports_of(path: Path, src_root: Path) -> set[str]:
    current, is_package = _module_name(path, src_root)
    found: set[str] = set()
    for node in ast.walk(ast.parse(path.read_text(encoding="utf-8"))):
        if isinstance(node, ast.Import):
            found.update(alias.name for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            found.update(_resolve_importfrom(current, is_package, node))
    return found


def _violations(subpackage: str, forbidden: tuple[str, ...]) -> list[str]:
    repo = _repo_root()
    src_root = repo / "src"
    out: list[str] = []
    for path in sorted((src_root / _PACKAGE / subpackage).rglob("*.py")):
        bad = sorted(
            m for m in _imports_of(path, src_root) if m.startswith(forbidden)
        )
        if bad:
            out.append(f"{path.relative_to(repo)}: {', '.join(bad)}")
    return out


def test_core_has_no_windowing_or_gui_imports() -> None:
    forbidden = (f"{_PACKAGE}.interactive", f"{_PACKAGE}.api", *_GUI_LIBRARIES)
    assert _violations("core", forbidden) == []


def test_interactive_does_not_depend_on_api() -> None:
    assert _violations("interactive", (f"{_PACKAGE}.api",)) == []


@pytest.mark.parametrize(
    ("source", "module", "is_package", "expected"),
    [
        ("from ..interactive import gl\n", "driftsketch.core.views", False, "driftsketch.interactive.gl"),
        ("from . import noise\n", "driftsketch.core.particle_system", False, "driftsketch.core.noise"),
        ("from .utils import x\n", "driftsketch.interactive.gl", True, "driftsketch.interactive.gl.utils"),
        ("from driftsketch import api\n", "driftsketch.core.views", False, "driftsketch.api"),
    ],
)
def test_relative_imports_are_resolved(source, module, is_package, expected) -> None:
    node = ast.parse(source).body[0]
    assert isinstance(node, ast.ImportFrom)
    assert expected in _resolve_importfrom(module, is_package, node)


def test_unresolvable_relative_import_is_rejected() -> None:
    node = ast.parse("from ...x import y\n").body[0]
    assert isinstance(node, ast.ImportFrom)
    with pytest.raises(ValueError):
        _resolve_importfrom("driftsketch.core", True, node)
