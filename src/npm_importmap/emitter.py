"""Import map pruning and serialization."""

from __future__ import annotations

import json
from typing import Any

from .validators.import_map import validate_import_map


def prune(import_map: dict[str, Any]) -> dict[str, Any]:
    """Return the map without scopes of packages that have no runtime dependencies."""
    scopes = {url: scope for url, scope in import_map.get("scopes", {}).items() if scope}
    return {
        "imports": dict(import_map.get("imports", {})),
        "scopes": scopes,
    }


def render(import_map: dict[str, Any]) -> str:
    """Prune, validate and serialize an import map.

    Keys are sorted so the output is identical for identical inputs no matter
    which order the dependency graph was walked in.
    """
    document = prune(import_map)
    validate_import_map(document)
    return json.dumps(document, indent=2, sort_keys=True) + "\n"
