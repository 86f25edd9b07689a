"""Single-pass traversal driver.

PackageAnalyzer runs in two explicit phases:

1. traverse(): walk every file depth-first once. Layering and node rules
   report immediately; error structs, error checkers and verb-prefixed
   functions are recorded in the registries.
2. reconcile(): drain both registries and report unmatched entries.

An analyzer owns its registries, so packages analysed in parallel each need
their own instance. The rule tables are shared read-only.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import cast

from goconv.core.console import get_logger
from goconv.engine import layering, rules
from goconv.engine.registry import ErrorContractRegistry, OperationPairRegistry
from goconv.engine.syntax import (
    CallExpr,
    FuncDecl,
    GoStmt,
    ImportSpec,
    Node,
    NodeKind,
    ReturnStmt,
    SourceFile,
    TypeSpec,
    VarSpec,
)
from goconv.engine.tables import DEFAULT_RULE_TABLES, RuleTables
from goconv.engine.types import CollectingSink, Diagnostic, DiagnosticSink, FilteringSink, RuleId

logger = get_logger(__name__)


class PackageAnalyzer:
    """Checks one package's files against the conventions."""

    def __init__(
        self,
        sink: DiagnosticSink,
        tables: RuleTables | None = None,
        disabled: frozenset[RuleId] = frozenset(),
    ) -> None:
        self.sink: DiagnosticSink = FilteringSink(sink, disabled) if disabled else sink
        self.tables = tables or DEFAULT_RULE_TABLES
        self.error_contracts = ErrorContractRegistry(self.tables)
        self.operation_pairs = OperationPairRegistry(self.tables)
        self._scope = ""
        self._handlers: dict[NodeKind, Callable[[Node], None]] = {
            NodeKind.GO_STMT: self._visit_go_stmt,
            NodeKind.VAR_SPEC: self._visit_var_spec,
            NodeKind.TYPE_SPEC: self._visit_type_spec,
            NodeKind.IMPORT_SPEC: self._visit_import_spec,
            NodeKind.FUNC_DECL: self._visit_func_decl,
            NodeKind.RETURN_STMT: self._visit_return_stmt,
            NodeKind.CALL_EXPR: self._visit_call_expr,
        }

    def run(self, files: Iterable[SourceFile]) -> None:
        self.traverse(files)
        self.reconcile()

    def traverse(self, files: Iterable[SourceFile]) -> None:
        for file in files:
            self.visit_file(file)

    def reconcile(self) -> None:
        logger.debug(
            "Reconciling %d error contract entries and %d operation pairs",
            len(self.error_contracts),
            len(self.operation_pairs),
        )
        self.error_contracts.reconcile()
        self.operation_pairs.reconcile()

    def visit_file(self, file: SourceFile) -> None:
        self._scope = file.package_name
        rules.check_package_name(file, self.sink, self.tables)
        layering.check_imports(file, self.sink, self.tables)
        self._walk(file.root)

    def _walk(self, root: Node) -> None:
        # Iterative pre-order walk; deeply nested expressions must not hit
        # the recursion limit.
        stack = [root]
        while stack:
            node = stack.pop()
            handler = self._handlers.get(node.kind)
            if handler is not None:
                handler(node)
            stack.extend(reversed(node.children))

    def _visit_go_stmt(self, node: Node) -> None:
        rules.check_go_stmt(cast(GoStmt, node), self.sink, self.tables)

    def _visit_var_spec(self, node: Node) -> None:
        rules.check_var_spec(cast(VarSpec, node), self.sink, self.tables)

    def _visit_type_spec(self, node: Node) -> None:
        spec = cast(TypeSpec, node)
        self.error_contracts.offer_struct(spec.name, spec.is_struct, spec.position, self.sink)

    def _visit_import_spec(self, node: Node) -> None:
        rules.check_import_spec(cast(ImportSpec, node), self.sink, self.tables)

    def _visit_func_decl(self, node: Node) -> None:
        func = cast(FuncDecl, node)
        rules.check_function(func, self.sink, self.tables)

        # Error checkers and constructors never take part in operation pairs.
        if self.error_contracts.offer_checker(func.name, func.position, self.sink):
            return
        if rules.is_constructor(func.name, self.tables):
            return
        self.operation_pairs.record(self._scope, func.name, func.position, self.sink)

    def _visit_return_stmt(self, node: Node) -> None:
        rules.check_return(cast(ReturnStmt, node), self.sink, self.tables)

    def _visit_call_expr(self, node: Node) -> None:
        rules.check_call(cast(CallExpr, node), self.sink, self.tables)


def analyze_package(
    files: Iterable[SourceFile],
    tables: RuleTables | None = None,
    disabled: frozenset[RuleId] = frozenset(),
) -> list[Diagnostic]:
    """Analyse one package and return its diagnostics in emission order."""
    sink = CollectingSink()
    PackageAnalyzer(sink, tables=tables, disabled=disabled).run(files)
    return sink.diagnostics


__all__ = [
    "PackageAnalyzer",
    "analyze_package",
]
