"""goconv - convention checker for Go packages.

This package provides the analysis engine behind the `goconv` command-line
tool: architectural layering rules, naming symmetry rules and API-shape rules
evaluated over a Go package in a single pass.

Exports:
    __version__: Package version string.
"""

from __future__ import annotations

__all__ = ["__version__"]

__version__ = "0.3.0"
