"""Fixed rule tables.

All tables are read-only after construction and may be shared by any number
of analyzers. The CLI can extend the denylists through
RuleTables.with_overrides(); the engine itself never reads configuration.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType

from goconv.engine.paths import Group


class PairRole(Enum):
    """Which half of an operation pair a verb fills."""

    FIRST = "first"
    SECOND = "second"


UNKNOWN_OPPOSITE = "unknown"


def _frozen(mapping: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class RuleTables:
    """Denylists, layer legality and naming tables used by the rules."""

    # Last package path segment -> reason
    banned_package_names: Mapping[str, str] = field(
        default_factory=lambda: _frozen({"util": "use a more descriptive package name"})
    )

    # Import path -> replacement suggestion
    banned_import_paths: Mapping[str, str] = field(
        default_factory=lambda: _frozen(
            {
                "github.com/pkg/errors": "use fmt.Errorf and errors instead",
                "io/ioutil": "use os or package io instead",
            }
        )
    )

    # File layer -> layers it must not import
    forbidden_imports: Mapping[Group, frozenset[Group]] = field(
        default_factory=lambda: MappingProxyType(
            {
                Group.LIB: frozenset({Group.INTERNAL, Group.CMD}),
                Group.INTERNAL: frozenset({Group.CMD}),
                Group.MODEL: frozenset({Group.CMD, Group.INTERNAL, Group.LIB}),
                Group.GEN: frozenset({Group.CMD, Group.INTERNAL, Group.LIB}),
            }
        )
    )

    group_labels: Mapping[Group, str] = field(
        default_factory=lambda: MappingProxyType(
            {
                Group.LIB: "library",
                Group.INTERNAL: "internal",
                Group.CMD: "command",
                Group.MODEL: "model",
                Group.GEN: "gen",
            }
        )
    )

    # Ordered: stripping and role detection both follow this order
    verb_roles: tuple[tuple[str, PairRole], ...] = (
        ("Request", PairRole.FIRST),
        ("Reply", PairRole.SECOND),
        ("Send", PairRole.FIRST),
        ("Receive", PairRole.SECOND),
        ("Publish", PairRole.FIRST),
        ("Subscribe", PairRole.SECOND),
    )

    # Set/Get only appear here, never in verb_roles
    opposites: Mapping[str, str] = field(
        default_factory=lambda: _frozen(
            {
                "Request": "Reply",
                "Reply": "Request",
                "Send": "Receive",
                "Receive": "Send",
                "Publish": "Subscribe",
                "Subscribe": "Publish",
                "Set": "Get",
                "Get": "Set",
            }
        )
    )

    error_suffix: str = "Error"
    checker_prefix: str = "Is"
    constructor_prefix: str = "New"
    context_param: str = "ctx"
    error_type: str = "error"
    error_ident: str = "err"
    alloc_builtin: str = "make"
    min_alloc_args: int = 2

    def opposite_of(self, verb: str) -> str:
        return self.opposites.get(verb, UNKNOWN_OPPOSITE)

    def label_of(self, group: Group) -> str:
        return self.group_labels.get(group, group.value)

    def with_overrides(
        self,
        banned_package_names: Mapping[str, str] | None = None,
        banned_import_paths: Mapping[str, str] | None = None,
    ) -> RuleTables:
        """Return a copy whose denylists are extended by the given entries."""
        return replace(
            self,
            banned_package_names=_frozen(
                {**self.banned_package_names, **(banned_package_names or {})}
            ),
            banned_import_paths=_frozen(
                {**self.banned_import_paths, **(banned_import_paths or {})}
            ),
        )


DEFAULT_RULE_TABLES = RuleTables()


__all__ = [
    "DEFAULT_RULE_TABLES",
    "UNKNOWN_OPPOSITE",
    "PairRole",
    "RuleTables",
]
