"""Types and data structures shared by the convention checker."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol


class RuleId(Enum):
    """Conventions the engine knows how to check."""

    RAW_GOROUTINE = "raw goroutine spawned outside a pool"
    EXPORTED_GLOBAL = "exported package-level variable"
    BANNED_PACKAGE_NAME = "package named after a denied generic name"
    BANNED_IMPORT = "import of a denied legacy package"
    CONTEXT_FIRST = "ctx parameter is not the first parameter"
    MISSING_CONTEXT = "New constructor without a ctx parameter"
    ERROR_LAST = "error result is not the last result"
    NO_ELSE = "top-level if statement with an else branch"
    BARE_ERR_RETURN = "err returned without wrapping"
    MAKE_ARITY = "make called with fewer than 2 arguments"
    SAME_GROUP_DEPTH = "import from the same group at the same depth"
    LAYER_VIOLATION = "import from a forbidden layer"
    MISSING_ERROR_CHECKER = "Error struct without Is<Name> function"
    MISSING_ERROR_STRUCT = "Is<Name>Error function without Error struct"
    MISSING_OPERATION_PAIR = "verb-prefixed function without its opposite"

    @property
    def description(self) -> str:
        return self.value


@dataclass(frozen=True, order=True)
class Position:
    """A source location, 1-based line and column."""

    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.filename}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """A single convention violation."""

    position: Position
    message: str
    rule: RuleId | None = None


class DiagnosticSink(Protocol):
    """Receives violations as soon as a rule produces them."""

    def report(
        self, position: Position, fmt: str, *args: object, rule: RuleId | None = None
    ) -> None: ...


@dataclass
class CollectingSink:
    """Sink that keeps every diagnostic in emission order."""

    diagnostics: list[Diagnostic] = field(default_factory=list)

    def report(
        self, position: Position, fmt: str, *args: object, rule: RuleId | None = None
    ) -> None:
        message = fmt % args if args else fmt
        self.diagnostics.append(Diagnostic(position=position, message=message, rule=rule))


@dataclass
class FilteringSink:
    """Forwards diagnostics to another sink unless their rule is disabled."""

    target: DiagnosticSink
    disabled: frozenset[RuleId] = frozenset()

    def report(
        self, position: Position, fmt: str, *args: object, rule: RuleId | None = None
    ) -> None:
        if rule is not None and rule in self.disabled:
            return
        self.target.report(position, fmt, *args, rule=rule)


__all__ = [
    "CollectingSink",
    "Diagnostic",
    "DiagnosticSink",
    "FilteringSink",
    "Position",
    "RuleId",
]
