from __future__ import annotations

import sys
import textwrap
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from typer.testing import CliRunner

ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from goconv.engine.syntax import (  # noqa: E402
    CallExpr,
    Field,
    FuncDecl,
    GoStmt,
    Ident,
    IfStmt,
    ImportSpec,
    Node,
    ReturnStmt,
    SourceFile,
    TypeSpec,
    VarSpec,
)
from goconv.engine.types import Position  # noqa: E402


class SyntaxBuilder:
    """Builds syntax-model nodes by hand, one line per node."""

    def __init__(self, filename: str = "x.go") -> None:
        self.filename = filename
        self._line = 0

    def pos(self, line: int | None = None) -> Position:
        if line is None:
            self._line += 1
            line = self._line
        return Position(self.filename, line, 1)

    def ident(self, name: str) -> Ident:
        return Ident(position=self.pos(), name=name)

    def import_spec(self, path: str) -> ImportSpec:
        return ImportSpec(position=self.pos(), path=path)

    def go(self) -> GoStmt:
        return GoStmt(position=self.pos())

    def var(self, *names: str, file_scope: bool = True) -> VarSpec:
        return VarSpec(position=self.pos(), names=names, file_scope=file_scope)

    def struct(self, name: str, is_struct: bool = True) -> TypeSpec:
        return TypeSpec(position=self.pos(), name=name, is_struct=is_struct)

    def func(
        self,
        name: str,
        params: tuple[tuple[str, ...], ...] = (),
        results: tuple[str, ...] = (),
        body: tuple[Node, ...] = (),
    ) -> FuncDecl:
        return FuncDecl(
            position=self.pos(),
            name=name,
            params=tuple(Field(names=p, type_name="T") for p in params),
            results=tuple(Field(names=(), type_name=r) for r in results),
            body=body,
            children=body,
        )

    def ret(self, *values: Node) -> ReturnStmt:
        return ReturnStmt(position=self.pos(), results=values, children=values)

    def call(self, name: str, *args: Node) -> CallExpr:
        callee = self.ident(name)
        return CallExpr(position=self.pos(), callee=callee, args=args, children=(callee, *args))

    def if_stmt(self, has_else: bool, *children: Node) -> IfStmt:
        return IfStmt(position=self.pos(), has_else=has_else, children=children)

    def block(self, *children: Node) -> Node:
        return Node(position=self.pos(), children=children, label="block")

    def file(
        self,
        package_path: str,
        *nodes: Node,
        package_name: str = "pkg",
        imports: tuple[ImportSpec, ...] = (),
    ) -> SourceFile:
        root = Node(position=self.pos(0), children=(*imports, *nodes), label="source_file")
        return SourceFile(
            filename=self.filename,
            package_path=package_path,
            package_name=package_name,
            package_position=self.pos(1),
            root=root,
            imports=imports,
        )


@pytest.fixture
def syntax() -> SyntaxBuilder:
    return SyntaxBuilder()


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture(autouse=True)
def isolate_config(tmp_path: Path, monkeypatch: Any) -> Path:
    """Point settings to a temp path so tests don't pick up a local goconv.toml."""
    cfg_path = tmp_path / "goconv.toml"
    monkeypatch.setenv("GOCONV_CONFIG", str(cfg_path))
    return cfg_path


@pytest.fixture
def go_module(tmp_path: Path) -> Callable[[dict[str, str]], Path]:
    """Write a Go module (go.mod plus the given files) and return its root."""

    def _write(files: dict[str, str], module: str = "example") -> Path:
        root = tmp_path / "module"
        root.mkdir(exist_ok=True)
        (root / "go.mod").write_text(f"module {module}\n\ngo 1.22\n", encoding="utf-8")
        for rel, source in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(source), encoding="utf-8")
        return root

    return _write
