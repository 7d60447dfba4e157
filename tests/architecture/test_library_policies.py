"""Source gates for src/adaptevo: no bare or silent excepts, no basicConfig, no print()."""

from __future__ import annotations

import ast
from collections.abc import Iterator
from pathlib import Path


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[2]


def _library_trees() -> Iterator[tuple[str, ast.AST]]:
    repo_root = _repo_root()
    for path in sorted((repo_root / "src" / "adaptevo").rglob("*.py")):
        rel_path = path.relative_to(repo_root).as_posix()
        text = path.read_text(encoding="utf-8-sig")
        try:
            tree = ast.parse(text)
        except SyntaxError as exc:  # pragma: no cover - should not happen
            raise AssertionError(f"Failed to parse {rel_path}: {exc}") from exc
        yield rel_path, tree


def _call_name(node: ast.Call) -> str | None:
    func = node.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


def _report(title: str, violations: list[str]) -> None:
    if violations:
        msg = [title]
        msg.extend(f"- {item}" for item in sorted(violations))
        raise AssertionError("\n".join(msg))


def test_no_bare_or_silent_except() -> None:
    violations: list[str] = []
    for rel_path, tree in _library_trees():
        for node in ast.walk(tree):
            if not isinstance(node, ast.ExceptHandler):
                continue
            if node.type is None:
                violations.append(f"{rel_path}:{node.lineno}: bare except:")
            elif len(node.body) == 1 and isinstance(node.body[0], ast.Pass):
                violations.append(f"{rel_path}:{node.lineno}: silent swallow (except ...: pass)")
    _report("Exception handling violations detected:", violations)


def test_no_basic_config() -> None:
    violations = [
        f"{rel_path}:{node.lineno}: logging.basicConfig"
        for rel_path, tree in _library_trees()
        for node in ast.walk(tree)
        if isinstance(node, ast.Call) and _call_name(node) == "basicConfig"
    ]
    _report("logging.basicConfig is forbidden in library modules:", violations)


def test_no_prints_in_library() -> None:
    violations = [
        f"{rel_path}:{node.lineno}: {_call_name(node)}()"
        for rel_path, tree in _library_trees()
        for node in ast.walk(tree)
        if isinstance(node, ast.Call) and _call_name(node) in {"print", "pprint"}
    ]
    _report("print() is forbidden in library modules; use a module logger:", violations)
