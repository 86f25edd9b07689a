"""Context-free node rules.

Each check looks at a single node (and its immediate children) and reports
straight to the sink. None of them keeps state between calls.
"""

from __future__ import annotations

from goconv.engine.syntax import (
    CallExpr,
    FuncDecl,
    GoStmt,
    Ident,
    IfStmt,
    ImportSpec,
    ReturnStmt,
    SourceFile,
    VarSpec,
)
from goconv.engine.tables import RuleTables
from goconv.engine.types import DiagnosticSink, RuleId


def is_exported(name: str) -> bool:
    """Go visibility: a name is exported when it starts with an upper-case letter."""
    return name[:1].isupper()


def check_package_name(file: SourceFile, sink: DiagnosticSink, tables: RuleTables) -> None:
    last = file.package_path.split("/")[-1]
    reason = tables.banned_package_names.get(last)
    if reason is not None:
        sink.report(
            file.package_position,
            "should not use %s to package name, %s",
            last,
            reason,
            rule=RuleId.BANNED_PACKAGE_NAME,
        )


def check_go_stmt(node: GoStmt, sink: DiagnosticSink, tables: RuleTables) -> None:
    sink.report(
        node.position,
        "should not use raw goroutine, use goroutine pool instead",
        rule=RuleId.RAW_GOROUTINE,
    )


def check_var_spec(node: VarSpec, sink: DiagnosticSink, tables: RuleTables) -> None:
    if not node.file_scope or not node.names:
        return
    if is_exported(node.names[0]):
        sink.report(
            node.position,
            "global variable %s should not be exported or pascal case",
            node.names[0],
            rule=RuleId.EXPORTED_GLOBAL,
        )


def check_import_spec(node: ImportSpec, sink: DiagnosticSink, tables: RuleTables) -> None:
    suggestion = tables.banned_import_paths.get(node.path)
    if suggestion is not None:
        sink.report(
            node.position,
            "should not use %s, %s",
            node.path,
            suggestion,
            rule=RuleId.BANNED_IMPORT,
        )


def check_function(node: FuncDecl, sink: DiagnosticSink, tables: RuleTables) -> None:
    """Run every signature and body rule that applies to a function declaration."""
    _check_context_param(node, sink, tables)
    _check_error_result(node, sink, tables)
    _check_else_branches(node, sink, tables)


def is_error_checker(name: str, tables: RuleTables) -> bool:
    return name.startswith(tables.checker_prefix) and name.endswith(tables.error_suffix)


def is_constructor(name: str, tables: RuleTables) -> bool:
    return not is_error_checker(name, tables) and name.startswith(tables.constructor_prefix)


def _context_index(node: FuncDecl, tables: RuleTables) -> int | None:
    for index, param in enumerate(node.params):
        if param.names and param.names[0] == tables.context_param:
            return index
    return None


def _check_context_param(node: FuncDecl, sink: DiagnosticSink, tables: RuleTables) -> None:
    index = _context_index(node, tables)

    if index is None and is_constructor(node.name, tables):
        sink.report(
            node.position,
            "missing context.Context parameter",
            rule=RuleId.MISSING_CONTEXT,
        )

    if index is not None and index != 0:
        sink.report(
            node.position,
            "context.Context should be the first parameter",
            rule=RuleId.CONTEXT_FIRST,
        )


def _check_error_result(node: FuncDecl, sink: DiagnosticSink, tables: RuleTables) -> None:
    error_indexes = [
        i for i, result in enumerate(node.results) if result.type_name == tables.error_type
    ]
    if error_indexes and error_indexes[-1] != len(node.results) - 1:
        sink.report(
            node.position,
            "error should be the last return value",
            rule=RuleId.ERROR_LAST,
        )


def _check_else_branches(node: FuncDecl, sink: DiagnosticSink, tables: RuleTables) -> None:
    # Only the top-level statement list; nested ifs are left alone.
    for stmt in node.body:
        if isinstance(stmt, IfStmt) and stmt.has_else:
            sink.report(
                stmt.position,
                "if statement should not have an else branch, "
                "use early return or switch statement instead",
                rule=RuleId.NO_ELSE,
            )


def check_return(node: ReturnStmt, sink: DiagnosticSink, tables: RuleTables) -> None:
    for result in node.results:
        if isinstance(result, Ident) and result.name == tables.error_ident:
            sink.report(
                node.position,
                "should not return error, use fmt.Errorf instead",
                rule=RuleId.BARE_ERR_RETURN,
            )


def check_call(node: CallExpr, sink: DiagnosticSink, tables: RuleTables) -> None:
    callee = node.callee
    if not isinstance(callee, Ident) or callee.name != tables.alloc_builtin:
        return
    if len(node.args) < tables.min_alloc_args:
        sink.report(
            node.position,
            "make function should be called with 2 arguments",
            rule=RuleId.MAKE_ARITY,
        )


__all__ = [
    "check_call",
    "check_function",
    "check_go_stmt",
    "check_import_spec",
    "check_package_name",
    "check_return",
    "check_var_spec",
    "is_constructor",
    "is_error_checker",
    "is_exported",
]
