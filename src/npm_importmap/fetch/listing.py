"""Flatten jsDelivr file-tree listings into relative paths."""

from __future__ import annotations

from typing import Any
from collections.abc import Iterable

from ..errors import FetchError


def flatten_listing(files: Iterable[dict[str, Any]]) -> frozenset[str]:
    """Return every file path in a ``{type, name, files}`` tree, slash-joined.

    Walks the tree with an explicit stack so deeply nested listings cannot hit
    the recursion limit.
    """
    paths: set[str] = set()
    stack: list[tuple[Iterable[dict[str, Any]], str]] = [(files, "")]

    while stack:
        nodes, prefix = stack.pop()
        for node in nodes:
            if not isinstance(node, dict):
                raise FetchError(f"Malformed file listing node under '{prefix or '/'}': {node!r}")
            name = node.get("name")
            if not isinstance(name, str) or not name:
                continue
            if node.get("type") == "directory":
                children = node.get("files") or []
                if not isinstance(children, list):
                    raise FetchError(f"Directory '{prefix}{name}' has a malformed 'files' value")
                stack.append((children, f"{prefix}{name}/"))
            else:
                paths.add(f"{prefix}{name}")

    return frozenset(paths)
