"""Cross-layer import rules.

Every import of a file is compared with the file's own package path. Both
checks look at one (file, import) pair at a time and report immediately.
"""

from __future__ import annotations

from goconv.engine.paths import classify
from goconv.engine.syntax import SourceFile
from goconv.engine.tables import RuleTables
from goconv.engine.types import DiagnosticSink, RuleId


def check_imports(file: SourceFile, sink: DiagnosticSink, tables: RuleTables) -> None:
    """Report same-depth sibling imports and imports from forbidden layers."""
    own = classify(file.package_path)
    forbidden = tables.forbidden_imports.get(own.layer, frozenset()) if own.layer else frozenset()

    for spec in file.imports:
        imported = classify(spec.path)

        if own.group == imported.group and len(own.remainder) == len(imported.remainder):
            sink.report(
                spec.position,
                "must not import from the same group, same depth",
                rule=RuleId.SAME_GROUP_DEPTH,
            )

        layer = imported.layer
        if layer is not None and layer in forbidden:
            sink.report(
                spec.position,
                "must not import from %s package",
                tables.label_of(layer),
                rule=RuleId.LAYER_VIOLATION,
            )


__all__ = ["check_imports"]
