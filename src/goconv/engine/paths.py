"""Package path classification.

A package path such as ``example.com/lib/client`` is read as
``root/group/remainder...``: the group names the architectural layer and the
remainder is used to compare depth between a file and the packages it imports.
"""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

PATH_SEPARATOR = "/"


class Group(Enum):
    """Architectural layers recognised by the layering rules."""

    LIB = "lib"
    INTERNAL = "internal"
    CMD = "cmd"
    MODEL = "model"
    GEN = "gen"

    @classmethod
    def parse(cls, name: str) -> Group | None:
        """Return the layer for a group segment, or None for other groups."""
        try:
            return cls(name)
        except ValueError:
            return None


class Classification(NamedTuple):
    group: str
    remainder: tuple[str, ...]

    @property
    def layer(self) -> Group | None:
        return Group.parse(self.group)


def classify(path: str) -> Classification:
    """Split a package path into its group and the segments after it.

    Fewer than two segments have no group. Two segments use the first one as
    the group; deeper paths skip the root segment and use the second.
    """
    parts = path.split(PATH_SEPARATOR)
    if len(parts) < 2:
        return Classification("", tuple(parts))
    if len(parts) == 2:
        return Classification(parts[0], tuple(parts[1:]))
    return Classification(parts[1], tuple(parts[2:]))


__all__ = [
    "PATH_SEPARATOR",
    "Classification",
    "Group",
    "classify",
]
