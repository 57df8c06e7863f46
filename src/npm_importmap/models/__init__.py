"""Data models for lockfiles and package manifests."""

from __future__ import annotations

from .lockfile import LockEntry, Lockfile, actual_version, split_package_key
from .manifest import (
    ConditionalExports,
    ExportsField,
    PackageManifest,
    StringExports,
    SubpathExports,
    parse_exports,
)

__all__ = [
    "ConditionalExports",
    "ExportsField",
    "LockEntry",
    "Lockfile",
    "PackageManifest",
    "StringExports",
    "SubpathExports",
    "actual_version",
    "parse_exports",
    "split_package_key",
]
