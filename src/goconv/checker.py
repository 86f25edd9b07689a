"""High-level checking functions.

Glue between the Go front end and the analysis engine:
- check_source: one in-memory file treated as a package of its own
- check_package: one discovered package directory
- check_paths: every package below a list of targets, optionally in parallel
"""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from goconv.core.console import get_logger
from goconv.engine import RuleTables, analyze_package
from goconv.engine.types import Diagnostic, RuleId
from goconv.golang import PackageDir, discover_packages, load_package, parse_source

logger = get_logger(__name__)


@dataclass(frozen=True)
class CheckOptions:
    """Everything a check needs besides the targets."""

    tables: RuleTables | None = None
    disabled: frozenset[RuleId] = frozenset()
    include_tests: bool = False
    module_path: str | None = None
    exclude_dirs: tuple[str, ...] = ("vendor", "testdata")
    jobs: int = 1


@dataclass(frozen=True)
class PackageReport:
    import_path: str
    directory: Path
    file_count: int
    diagnostics: tuple[Diagnostic, ...] = field(default_factory=tuple)


def check_source(
    source: str,
    filename: str,
    package_path: str,
    options: CheckOptions | None = None,
) -> list[Diagnostic]:
    """Check a single Go source string as if it were a whole package."""
    opts = options or CheckOptions()
    file = parse_source(source, filename, package_path)
    return analyze_package([file], tables=opts.tables, disabled=opts.disabled)


def check_package(package: PackageDir, options: CheckOptions | None = None) -> PackageReport:
    opts = options or CheckOptions()
    loaded = load_package(package)
    diagnostics = analyze_package(loaded.files, tables=opts.tables, disabled=opts.disabled)
    return PackageReport(
        import_path=loaded.import_path,
        directory=loaded.directory,
        file_count=len(loaded.files),
        diagnostics=tuple(diagnostics),
    )


def check_paths(targets: Sequence[Path], options: CheckOptions | None = None) -> list[PackageReport]:
    """Discover and check every package below the given targets.

    Each package gets its own analyzer, so packages can be checked on a
    thread pool. Reports keep discovery order regardless of jobs.
    """
    opts = options or CheckOptions()
    packages: list[PackageDir] = []
    for target in targets:
        packages.extend(
            discover_packages(
                target,
                module_path=opts.module_path,
                include_tests=opts.include_tests,
                exclude_dirs=opts.exclude_dirs,
            )
        )
    logger.debug("Discovered %d packages", len(packages))

    if opts.jobs <= 1 or len(packages) <= 1:
        return [check_package(package, opts) for package in packages]

    with ThreadPoolExecutor(max_workers=opts.jobs) as executor:
        return list(executor.map(lambda package: check_package(package, opts), packages))


__all__ = [
    "CheckOptions",
    "PackageReport",
    "check_package",
    "check_paths",
    "check_source",
]
