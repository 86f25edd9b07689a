"""Package discovery and loading for Go source trees.

Go analyses one package at a time, and a package is one directory. The
import path of a package is its module path (from go.mod) joined with the
directory's path relative to the module root.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from goconv.core.console import get_logger
from goconv.core.errors import PackageDiscoveryError, SourceError
from goconv.engine.syntax import SourceFile
from goconv.golang.parser import parse_source, unquote

logger = get_logger(__name__)

GO_MOD = "go.mod"
_MODULE_RE = re.compile(r"^\s*module\s+(\S+)", re.MULTILINE)


@dataclass(frozen=True)
class PackageDir:
    """A directory holding the .go files of one package."""

    directory: Path
    import_path: str
    files: tuple[Path, ...]


@dataclass(frozen=True)
class GoPackage:
    """A loaded package, ready for the analyzer."""

    import_path: str
    directory: Path
    files: tuple[SourceFile, ...]


def read_module_path(go_mod: Path) -> str | None:
    """Return the module path declared in a go.mod file."""
    try:
        text = go_mod.read_text(encoding="utf-8")
    except OSError as exc:
        raise SourceError(f"Cannot read {go_mod}: {exc}", context={"path": str(go_mod)}) from exc
    match = _MODULE_RE.search(text)
    return unquote(match.group(1)) if match else None


def find_module(start: Path) -> tuple[Path, str] | None:
    """Search start and its parents for go.mod; return (module root, module path)."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / GO_MOD
        if candidate.is_file():
            module_path = read_module_path(candidate)
            if module_path:
                return directory, module_path
    return None


def _is_go_file(name: str, include_tests: bool) -> bool:
    if not name.endswith(".go"):
        return False
    return include_tests or not name.endswith("_test.go")


def _skip_dir(name: str, exclude_dirs: Iterable[str]) -> bool:
    return name.startswith((".", "_")) or name in exclude_dirs


def _import_path(base: str, module_root: Path, directory: Path) -> str:
    try:
        rel = directory.resolve().relative_to(module_root.resolve())
    except ValueError:
        return base
    return base if rel == Path(".") else f"{base}/{rel.as_posix()}"


def discover_packages(
    target: Path,
    *,
    module_path: str | None = None,
    include_tests: bool = False,
    exclude_dirs: Iterable[str] = ("vendor", "testdata"),
) -> list[PackageDir]:
    """Find every Go package at or below target.

    A file target yields a single package containing just that file.
    Directories holding their own go.mod below the target are separate
    modules and are skipped.
    """
    if not target.exists():
        raise PackageDiscoveryError("Target does not exist", context={"path": str(target)})

    excluded = frozenset(exclude_dirs)
    start = target.parent if target.is_file() else target
    found = find_module(start)
    module_root = found[0] if found else start.resolve()
    base = module_path or (found[1] if found else start.resolve().name)

    if target.is_file():
        return [PackageDir(start, _import_path(base, module_root, start), (target,))]

    packages: list[PackageDir] = []
    for dirpath, dirnames, filenames in os.walk(target):
        directory = Path(dirpath)
        kept = []
        for name in sorted(dirnames):
            if _skip_dir(name, excluded):
                logger.debug("Skipping directory %s", directory / name)
                continue
            if (directory / name / GO_MOD).is_file():
                logger.debug("Skipping nested module %s", directory / name)
                continue
            kept.append(name)
        dirnames[:] = kept

        go_files = tuple(
            directory / name for name in sorted(filenames) if _is_go_file(name, include_tests)
        )
        if go_files:
            packages.append(
                PackageDir(directory, _import_path(base, module_root, directory), go_files)
            )

    return packages


def load_package(package: PackageDir) -> GoPackage:
    """Read and parse every file of a package."""
    files: list[SourceFile] = []
    for path in package.files:
        try:
            data = path.read_bytes()
        except OSError as exc:
            raise SourceError(f"Cannot read {path}: {exc}", context={"path": str(path)}) from exc
        files.append(parse_source(data, str(path), package.import_path))
    logger.debug("Loaded %s (%d files)", package.import_path, len(files))
    return GoPackage(package.import_path, package.directory, tuple(files))


__all__ = [
    "GoPackage",
    "PackageDir",
    "discover_packages",
    "find_module",
    "load_package",
    "read_module_path",
]
