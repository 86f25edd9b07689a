"""Presentation of diagnostics.

The engine emits diagnostics in traversal order; these helpers sort,
count and format them for the terminal or for machines.
"""

from __future__ import annotations

import json
from collections import Counter
from collections.abc import Iterable, Sequence

from goconv.checker import PackageReport
from goconv.engine.types import Diagnostic, RuleId


def sort_diagnostics(diagnostics: Iterable[Diagnostic]) -> list[Diagnostic]:
    return sorted(diagnostics, key=lambda d: d.position)


def format_diagnostic(diagnostic: Diagnostic) -> str:
    suffix = f" [{diagnostic.rule.name}]" if diagnostic.rule is not None else ""
    return f"{diagnostic.position}: {diagnostic.message}{suffix}"


def format_text(reports: Sequence[PackageReport]) -> str:
    """One line per diagnostic, packages in discovery order."""
    lines: list[str] = []
    for report in reports:
        lines.extend(format_diagnostic(d) for d in sort_diagnostics(report.diagnostics))
    return "\n".join(lines)


def format_json(reports: Sequence[PackageReport]) -> str:
    payload = [
        {
            "package": report.import_path,
            "directory": str(report.directory),
            "files": report.file_count,
            "diagnostics": [
                {
                    "file": d.position.filename,
                    "line": d.position.line,
                    "column": d.position.column,
                    "message": d.message,
                    "rule": d.rule.name if d.rule is not None else None,
                }
                for d in sort_diagnostics(report.diagnostics)
            ],
        }
        for report in reports
    ]
    return json.dumps(payload, indent=2)


def count_by_rule(diagnostics: Iterable[Diagnostic]) -> dict[RuleId | None, int]:
    return dict(Counter(d.rule for d in diagnostics))


__all__ = [
    "count_by_rule",
    "format_diagnostic",
    "format_json",
    "format_text",
    "sort_diagnostics",
]
