"""Condition matching for the ``exports`` field of package.json.

Follows the resolution rules used by npm-aware tooling: the allowed
conditions are ``default``, ``import``, the requested conditions and ``node``
(or ``browser``). A conditional mapping is walked in declaration order and the
first allowed key decides the branch. Arrays are tried in order as fallbacks.
"""

from __future__ import annotations

from typing import Any
from collections.abc import Iterable

from ..errors import ExportResolutionError
from ..models import ConditionalExports, ExportsField, StringExports, SubpathExports


def allowed_conditions(
    conditions: Iterable[str] = (),
    *,
    browser: bool = False,
) -> frozenset[str]:
    allows = {"default", "import", *conditions}
    allows.add("browser" if browser else "node")
    return frozenset(allows)


def match_target(target: Any, allows: frozenset[str]) -> str | None:
    """Return the first string target reachable through allowed conditions."""
    if not target:
        return None
    if isinstance(target, str):
        return target
    if isinstance(target, list):
        for candidate in target:
            found = match_target(candidate, allows)
            if found:
                return found
        return None
    if isinstance(target, dict):
        for key, value in target.items():
            if key in allows:
                # The first allowed key commits to its branch.
                return match_target(value, allows)
    return None


def _normalise_subpath(name: str, subpath: str) -> str:
    if subpath == name:
        return "."
    if subpath.startswith(f"{name}/"):
        subpath = subpath[len(name) + 1 :]
    if subpath in ("", "."):
        return "."
    if not subpath.startswith("./"):
        subpath = f"./{subpath.lstrip('/')}"
    return subpath


def _missing(name: str, subpath: str) -> ExportResolutionError:
    return ExportResolutionError(f'Missing "{subpath}" export in "{name}" package')


def _no_conditions(name: str, subpath: str) -> ExportResolutionError:
    return ExportResolutionError(
        f'No known conditions for "{subpath}" entry in "{name}" package'
    )


def resolve_exports(
    name: str,
    exports: ExportsField,
    subpath: str = ".",
    *,
    conditions: Iterable[str] = ("module",),
    browser: bool = False,
) -> str:
    """Resolve ``subpath`` of package ``name`` to its declared relative target.

    The returned path is exactly as written in package.json (usually ``./``
    prefixed). Raises :class:`ExportResolutionError` when the subpath is not
    exported or no branch matches the allowed conditions.
    """
    target = _normalise_subpath(name, subpath)
    allows = allowed_conditions(conditions, browser=browser)

    if isinstance(exports, StringExports):
        if target != ".":
            raise _missing(name, target)
        return exports.target

    if isinstance(exports, ConditionalExports):
        if target != ".":
            raise _missing(name, target)
        found = match_target(dict(exports.conditions), allows)
        if not found:
            raise _no_conditions(name, target)
        return found

    if not isinstance(exports, SubpathExports):
        raise TypeError(f"Unsupported exports value: {exports!r}")

    subpaths = exports.subpaths
    if target in subpaths:
        found = match_target(subpaths[target], allows)
        if not found:
            raise _no_conditions(name, target)
        return found

    # Longest matching pattern or directory prefix wins.
    best_key: str | None = None
    for key in subpaths:
        if key.endswith("*"):
            prefix = key[:-1]
        elif key.endswith("/"):
            prefix = key
        else:
            continue
        if target.startswith(prefix) and (best_key is None or len(key) > len(best_key)):
            best_key = key

    if best_key is None:
        raise _missing(name, target)

    found = match_target(subpaths[best_key], allows)
    if not found:
        raise _no_conditions(name, target)

    if best_key.endswith("*"):
        rest = target[len(best_key) - 1 :]
        return found.replace("*", rest)
    return found + target[len(best_key) :]
