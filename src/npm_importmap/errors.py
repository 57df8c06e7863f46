"""Error hierarchy for import map generation.

Every fatal condition raised while generating an import map derives from
``ImportMapError`` so the CLI can report it and exit without writing a
partially built document.
"""

from __future__ import annotations


class ImportMapError(RuntimeError):
    """Base error for failures while generating an import map."""


class ConfigError(ImportMapError):
    """Raised when the configuration file cannot be loaded or is invalid."""


class LockfileError(ImportMapError):
    """Raised when the lockfile cannot be read or references a missing entry."""


class FetchError(ImportMapError):
    """Raised when a manifest or file listing cannot be fetched or decoded."""


class ExportResolutionError(ImportMapError):
    """Raised when an ``exports`` target cannot be matched for a subpath."""


class ImportMapValidationError(ImportMapError):
    """Raised when the emitted document does not satisfy the import map schema."""


class ResolutionError(ImportMapError):
    """Raised when a specific package-version cannot be resolved."""

    def __init__(self, package: str, version: str, reason: str) -> None:
        super().__init__(f"Failed to resolve {package}@{version}: {reason}")
        self.package = package
        self.version = version
        self.reason = reason
