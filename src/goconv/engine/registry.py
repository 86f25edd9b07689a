"""Cross-reference registries.

Some conventions can only be judged once the whole package has been seen:
an ``XxxError`` struct needs an ``IsXxxError`` function somewhere in the
package, and a ``RequestUser`` function needs a matching ``ReplyUser``. The
registries below collect candidates during traversal and report whatever is
still unmatched when reconcile() drains them. A registry is owned by exactly
one analysis run.
"""

from __future__ import annotations

from dataclasses import dataclass

from goconv.engine.rules import is_error_checker, is_exported
from goconv.engine.tables import PairRole, RuleTables
from goconv.engine.types import DiagnosticSink, Position, RuleId


@dataclass(frozen=True)
class PendingEntry:
    """A candidate captured at visit time and resolved during reconciliation."""

    name: str
    position: Position
    sink: DiagnosticSink

    def report(self, fmt: str, *args: object, rule: RuleId) -> None:
        self.sink.report(self.position, fmt, *args, rule=rule)


class ErrorContractRegistry:
    """Pairs exported ``*Error`` structs with their ``Is*Error`` predicates."""

    def __init__(self, tables: RuleTables) -> None:
        self._tables = tables
        self._structs: dict[str, PendingEntry] = {}
        self._checkers: dict[str, PendingEntry] = {}

    def __len__(self) -> int:
        return len(self._structs) + len(self._checkers)

    def offer_struct(
        self, name: str, is_struct: bool, position: Position, sink: DiagnosticSink
    ) -> bool:
        """Record a type declaration if it is an exported error struct."""
        if not (is_struct and is_exported(name) and name.endswith(self._tables.error_suffix)):
            return False
        self._structs[name] = PendingEntry(name, position, sink)
        return True

    def offer_checker(self, name: str, position: Position, sink: DiagnosticSink) -> bool:
        """Record an ``Is*Error`` function; the first declaration wins."""
        if not is_error_checker(name, self._tables):
            return False
        self._checkers.setdefault(name, PendingEntry(name, position, sink))
        return True

    def reconcile(self) -> None:
        prefix = self._tables.checker_prefix
        structs, checkers = self._structs, self._checkers
        self._structs, self._checkers = {}, {}

        for name, entry in structs.items():
            checker = prefix + name
            if checker not in checkers:
                entry.report("missing %s function", checker, rule=RuleId.MISSING_ERROR_CHECKER)
            checkers.pop(checker, None)

        for name, entry in checkers.items():
            struct = name.removeprefix(prefix)
            if struct not in structs:
                entry.report("missing %s struct", struct, rule=RuleId.MISSING_ERROR_STRUCT)


@dataclass(frozen=True)
class PairHalf:
    verb: str
    entry: PendingEntry


@dataclass
class OperationPair:
    first: PairHalf | None = None
    second: PairHalf | None = None


class OperationPairRegistry:
    """Pairs verb-prefixed functions such as Request/Reply or Send/Receive.

    Keys are ``(scope, base)`` where scope is the declared package name of the
    file and base is the function name with its verb prefixes stripped.
    """

    def __init__(self, tables: RuleTables) -> None:
        self._tables = tables
        self._pairs: dict[tuple[str, str], OperationPair] = {}

    def __len__(self) -> int:
        return len(self._pairs)

    def base_name(self, name: str) -> str:
        # Each verb is stripped at most once, in table order.
        for verb, _ in self._tables.verb_roles:
            name = name.removeprefix(verb)
        return name

    def record(self, scope: str, name: str, position: Position, sink: DiagnosticSink) -> None:
        pair = self._pairs.setdefault((scope, self.base_name(name)), OperationPair())

        for verb, role in self._tables.verb_roles:
            if not name.startswith(verb):
                continue
            half = PairHalf(verb, PendingEntry(name, position, sink))
            if role is PairRole.FIRST:
                pair.first = half
            else:
                pair.second = half
            return

    def reconcile(self) -> None:
        pairs, self._pairs = self._pairs, {}

        for pair in pairs.values():
            lone = None
            if pair.first is not None and pair.second is None:
                lone = pair.first
            elif pair.first is None and pair.second is not None:
                lone = pair.second
            if lone is None:
                continue
            lone.entry.report(
                "missing %s function",
                self._tables.opposite_of(lone.verb),
                rule=RuleId.MISSING_OPERATION_PAIR,
            )


__all__ = [
    "ErrorContractRegistry",
    "OperationPair",
    "OperationPairRegistry",
    "PairHalf",
    "PendingEntry",
]
