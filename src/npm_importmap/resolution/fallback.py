"""Entry point probing for packages without an ``exports`` field."""

from __future__ import annotations

import re
from collections.abc import Set

from ..models import PackageManifest

ENTRY_FIELDS = ("module", "main")
PROBE_SUFFIXES = ("", ".mjs", ".js", ".json")
DEFAULT_ENTRY = "index.js"

_RELATIVE_PREFIX = re.compile(r"^\.?/")


def strip_relative(path: str) -> str:
    """Drop a leading ``./`` or ``/`` from a package-relative path."""
    return _RELATIVE_PREFIX.sub("", path)


def declared_entry(manifest: PackageManifest) -> str | None:
    for field in ENTRY_FIELDS:
        value = getattr(manifest, field)
        if isinstance(value, str):
            return strip_relative(value)
    return None


def find_entry(entry: str, listing: Set[str]) -> str | None:
    """Return the first of ``entry`` plus a known suffix present in ``listing``."""
    for suffix in PROBE_SUFFIXES:
        candidate = f"{entry}{suffix}"
        if candidate in listing:
            return candidate
    return None


def resolve_fallback(manifest: PackageManifest, listing: Set[str]) -> str | None:
    """Resolve the root entry file from ``module``/``main`` against a real listing.

    ``main`` frequently omits the extension, so each candidate is tried with
    the suffixes in :data:`PROBE_SUFFIXES`. Returns ``None`` when neither the
    declared entry nor ``index.js`` exists.
    """
    entry = declared_entry(manifest)
    if entry:
        found = find_entry(entry, listing)
        if found:
            return found
    return find_entry(DEFAULT_ENTRY, listing)
