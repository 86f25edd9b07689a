"""
Convention-checking engine.

Walks the syntax trees of one package once and reports violations of the
layering, naming symmetry and API-shape conventions. Context-free rules
report during the walk; cross-reference rules (error struct/checker pairs
and Request/Reply style operation pairs) report after it.

The engine does no I/O: files arrive as SourceFile values built by a front
end (see goconv.golang) and diagnostics leave through a DiagnosticSink.
"""

from goconv.engine.analyzer import PackageAnalyzer, analyze_package
from goconv.engine.paths import Classification, Group, classify
from goconv.engine.tables import DEFAULT_RULE_TABLES, RuleTables
from goconv.engine.types import (
    CollectingSink,
    Diagnostic,
    DiagnosticSink,
    FilteringSink,
    Position,
    RuleId,
)

__all__ = [
    "DEFAULT_RULE_TABLES",
    "Classification",
    "CollectingSink",
    "Diagnostic",
    "DiagnosticSink",
    "FilteringSink",
    "Group",
    "PackageAnalyzer",
    "Position",
    "RuleId",
    "RuleTables",
    "analyze_package",
    "classify",
]
