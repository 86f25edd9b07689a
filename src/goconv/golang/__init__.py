"""Go front end: parsing with tree-sitter and package discovery."""

from goconv.golang.loader import (
    GoPackage,
    PackageDir,
    discover_packages,
    find_module,
    load_package,
)
from goconv.golang.parser import parse_source

__all__ = [
    "GoPackage",
    "PackageDir",
    "discover_packages",
    "find_module",
    "load_package",
    "parse_source",
]
