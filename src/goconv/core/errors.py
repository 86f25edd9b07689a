"""Error hierarchy for goconv.

The analysis engine itself never raises for unusual input; these exceptions
belong to the layers around it (settings, file loading, package discovery)
and are turned into exit codes by the CLI.
"""

from __future__ import annotations

from typing import Any


class GoconvError(Exception):
    """Base exception for all goconv errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{ctx_str}]"
        return self.message


class ConfigurationError(GoconvError):
    """Raised when a settings file cannot be read or validated."""


class SourceError(GoconvError):
    """Raised when a Go source file cannot be read."""


class PackageDiscoveryError(GoconvError):
    """Raised when a target path does not exist or holds no Go packages."""


__all__ = [
    "ConfigurationError",
    "GoconvError",
    "PackageDiscoveryError",
    "SourceError",
]
