"""Language-neutral syntax model consumed by the analyzer.

The front end (see goconv.golang.parser) turns a concrete parse tree into
these nodes. Only the node kinds the rules care about carry typed fields;
everything else is a plain Node that keeps its children so the walk still
reaches nested constructs such as closures.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import ClassVar

from goconv.engine.types import Position


class NodeKind(Enum):
    """Kinds of syntax nodes the analyzer dispatches on."""

    OTHER = auto()
    IDENT = auto()
    IMPORT_SPEC = auto()
    GO_STMT = auto()
    VAR_SPEC = auto()
    TYPE_SPEC = auto()
    FUNC_DECL = auto()
    RETURN_STMT = auto()
    CALL_EXPR = auto()
    IF_STMT = auto()


@dataclass(frozen=True, kw_only=True)
class Node:
    kind: ClassVar[NodeKind] = NodeKind.OTHER

    position: Position
    children: tuple[Node, ...] = ()
    label: str = ""  # front-end node type, kept for debugging


@dataclass(frozen=True, kw_only=True)
class Ident(Node):
    kind: ClassVar[NodeKind] = NodeKind.IDENT

    name: str


@dataclass(frozen=True, kw_only=True)
class ImportSpec(Node):
    kind: ClassVar[NodeKind] = NodeKind.IMPORT_SPEC

    path: str  # unquoted


@dataclass(frozen=True, kw_only=True)
class GoStmt(Node):
    kind: ClassVar[NodeKind] = NodeKind.GO_STMT


@dataclass(frozen=True, kw_only=True)
class VarSpec(Node):
    """One spec of a var declaration, e.g. ``a, b = 1, 2``."""

    kind: ClassVar[NodeKind] = NodeKind.VAR_SPEC

    names: tuple[str, ...]
    file_scope: bool = False


@dataclass(frozen=True, kw_only=True)
class TypeSpec(Node):
    kind: ClassVar[NodeKind] = NodeKind.TYPE_SPEC

    name: str
    is_struct: bool = False


@dataclass(frozen=True)
class Field:
    """A parameter or result group: ``a, b int`` has two names and one type."""

    names: tuple[str, ...]
    type_name: str


@dataclass(frozen=True, kw_only=True)
class FuncDecl(Node):
    """A function or method declaration.

    ``body`` holds the top-level statements of the function body and is also
    used as the node's children.
    """

    kind: ClassVar[NodeKind] = NodeKind.FUNC_DECL

    name: str
    params: tuple[Field, ...] = ()
    results: tuple[Field, ...] = ()
    body: tuple[Node, ...] = ()


@dataclass(frozen=True, kw_only=True)
class ReturnStmt(Node):
    kind: ClassVar[NodeKind] = NodeKind.RETURN_STMT

    results: tuple[Node, ...] = ()


@dataclass(frozen=True, kw_only=True)
class CallExpr(Node):
    kind: ClassVar[NodeKind] = NodeKind.CALL_EXPR

    callee: Node
    args: tuple[Node, ...] = ()


@dataclass(frozen=True, kw_only=True)
class IfStmt(Node):
    kind: ClassVar[NodeKind] = NodeKind.IF_STMT

    has_else: bool = False


@dataclass(frozen=True)
class SourceFile:
    """One parsed file of a package, as handed to the analyzer."""

    filename: str
    package_path: str
    package_name: str
    package_position: Position
    root: Node
    imports: tuple[ImportSpec, ...] = ()


__all__ = [
    "CallExpr",
    "Field",
    "FuncDecl",
    "GoStmt",
    "Ident",
    "IfStmt",
    "ImportSpec",
    "Node",
    "NodeKind",
    "ReturnStmt",
    "SourceFile",
    "TypeSpec",
    "VarSpec",
]
