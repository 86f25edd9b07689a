"""Go front end: tree-sitter parse trees to the engine's syntax model.

Only the constructs the rules look at are given typed nodes. Everything else
becomes a plain Node carrying its named children, so the analyzer still
walks into closures, composite literals and nested blocks.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import tree_sitter_go
from tree_sitter import Language, Node as TSNode, Parser

from goconv.core.console import get_logger
from goconv.engine.syntax import (
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
from goconv.engine.types import Position

logger = get_logger(__name__)

GO_LANGUAGE = Language(tree_sitter_go.language())

# Wrapper nodes whose children belong to the enclosing list.
_TRANSPARENT = frozenset({"statement_list", "var_spec_list", "import_spec_list"})
_FUNCTIONS = frozenset({"function_declaration", "method_declaration"})


def _parser() -> Parser:
    return Parser(GO_LANGUAGE)


def unquote(literal: str) -> str:
    """Strip the quotes of an interpreted or raw Go string literal."""
    if len(literal) >= 2 and literal[0] == literal[-1] and literal[0] in "\"`":
        return literal[1:-1]
    return literal


@dataclass
class _TreeBuilder:
    filename: str
    data: bytes
    imports: list[ImportSpec] = field(default_factory=list)

    def text(self, node: TSNode | None) -> str:
        if node is None:
            return ""
        return self.data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")

    def position(self, node: TSNode) -> Position:
        row, column = node.start_point
        return Position(self.filename, row + 1, column + 1)

    def named(self, node: TSNode | None) -> Iterator[TSNode]:
        """Named children without comments, with wrapper lists flattened."""
        if node is None:
            return
        for child in node.named_children:
            if child.type == "comment":
                continue
            if child.type in _TRANSPARENT:
                yield from self.named(child)
                continue
            yield child

    def convert_all(self, node: TSNode | None, file_scope: bool = False) -> tuple[Node, ...]:
        return tuple(self.convert(child, file_scope) for child in self.named(node))

    def convert(self, node: TSNode, file_scope: bool = False) -> Node:
        kind = node.type
        position = self.position(node)

        if kind == "identifier":
            return Ident(position=position, name=self.text(node), label=kind)

        if kind == "import_spec":
            spec = ImportSpec(
                position=position,
                path=unquote(self.text(node.child_by_field_name("path"))),
                label=kind,
            )
            self.imports.append(spec)
            return spec

        if kind == "go_statement":
            return GoStmt(position=position, children=self.convert_all(node), label=kind)

        if kind == "var_declaration":
            # Only specs directly under a top-level declaration are globals.
            return Node(position=position, children=self.convert_all(node, file_scope), label=kind)

        if kind == "var_spec":
            return VarSpec(
                position=position,
                names=tuple(self.text(n) for n in node.children_by_field_name("name")),
                file_scope=file_scope,
                children=self.convert_all(node),
                label=kind,
            )

        if kind == "type_spec":
            type_node = node.child_by_field_name("type")
            return TypeSpec(
                position=position,
                name=self.text(node.child_by_field_name("name")),
                is_struct=type_node is not None and type_node.type == "struct_type",
                children=self.convert_all(node),
                label=kind,
            )

        if kind in _FUNCTIONS:
            return self._function(node, position)

        if kind == "return_statement":
            results = self._return_values(node)
            return ReturnStmt(position=position, results=results, children=results, label=kind)

        if kind == "call_expression":
            function = node.child_by_field_name("function")
            callee = (
                self.convert(function)
                if function is not None
                else Node(position=position, label="missing")
            )
            args = self.convert_all(node.child_by_field_name("arguments"))
            return CallExpr(
                position=position,
                callee=callee,
                args=args,
                children=(callee, *args),
                label=kind,
            )

        if kind == "if_statement":
            return IfStmt(
                position=position,
                has_else=node.child_by_field_name("alternative") is not None,
                children=self.convert_all(node),
                label=kind,
            )

        return Node(position=position, children=self.convert_all(node), label=kind)

    def _return_values(self, node: TSNode) -> tuple[Node, ...]:
        values: list[Node] = []
        for child in self.named(node):
            if child.type == "expression_list":
                values.extend(self.convert_all(child))
            else:
                values.append(self.convert(child))
        return tuple(values)

    def _fields(self, node: TSNode | None) -> tuple[Field, ...]:
        if node is None:
            return ()
        if node.type != "parameter_list":
            # Single unparenthesized result such as `func f() error`.
            return (Field(names=(), type_name=self.text(node)),)
        return tuple(
            Field(
                names=tuple(self.text(n) for n in decl.children_by_field_name("name")),
                type_name=self.text(decl.child_by_field_name("type")),
            )
            for decl in self.named(node)
        )

    def _function(self, node: TSNode, position: Position) -> FuncDecl:
        body = self.convert_all(node.child_by_field_name("body"))
        return FuncDecl(
            position=position,
            name=self.text(node.child_by_field_name("name")),
            params=self._fields(node.child_by_field_name("parameters")),
            results=self._fields(node.child_by_field_name("result")),
            body=body,
            children=body,
            label=node.type,
        )


def parse_source(source: str | bytes, filename: str, package_path: str) -> SourceFile:
    """Parse one Go file into a SourceFile for the analyzer.

    Files with syntax errors are still converted; tree-sitter keeps the
    well-formed parts of the tree around ERROR nodes.
    """
    data = source.encode("utf-8") if isinstance(source, str) else source
    tree = _parser().parse(data)
    ts_root = tree.root_node
    if ts_root.has_error:
        logger.warning("Syntax errors in %s; analysing the recoverable parts", filename)

    builder = _TreeBuilder(filename=filename, data=data)
    package_name = ""
    package_position = builder.position(ts_root)
    top_level: list[Node] = []

    for child in builder.named(ts_root):
        if child.type == "package_clause":
            package_position = builder.position(child)
            ident = next(builder.named(child), None)
            package_name = builder.text(ident)
            continue
        top_level.append(builder.convert(child, file_scope=True))

    root = Node(
        position=builder.position(ts_root),
        children=tuple(top_level),
        label=ts_root.type,
    )
    return SourceFile(
        filename=filename,
        package_path=package_path,
        package_name=package_name,
        package_position=package_position,
        root=root,
        imports=tuple(builder.imports),
    )


__all__ = [
    "GO_LANGUAGE",
    "parse_source",
    "unquote",
]
