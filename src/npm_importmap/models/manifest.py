"""Package manifest model with the ``exports`` field parsed up front."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TypeAlias
from collections.abc import Mapping


@dataclass(frozen=True)
class StringExports:
    """``"exports": "./index.js"``: a single root target."""

    target: str


@dataclass(frozen=True)
class ConditionalExports:
    """``"exports": {"import": ..., "default": ...}``: conditions for the root only."""

    conditions: Mapping[str, Any]


@dataclass(frozen=True)
class SubpathExports:
    """``"exports": {".": ..., "./lib/*": ...}``: one entry per public subpath."""

    subpaths: Mapping[str, Any]


ExportsField: TypeAlias = StringExports | ConditionalExports | SubpathExports


def parse_exports(raw: Any) -> ExportsField | None:
    """Classify a raw ``exports`` value; ``None`` when absent or unusable."""
    if isinstance(raw, str):
        return StringExports(raw)
    if isinstance(raw, dict) and raw:
        first = next(iter(raw))
        if not first.startswith("."):
            return ConditionalExports(raw)
        return SubpathExports(raw)
    # Arrays of fallbacks are only meaningful per condition; treat as conditional root.
    if isinstance(raw, list) and raw:
        return ConditionalExports({"default": raw})
    return None


@dataclass(frozen=True)
class PackageManifest:
    """The fields of ``package.json`` that drive entry-point resolution."""

    name: str
    exports: ExportsField | None = None
    main: str | None = None
    module: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], name: str | None = None) -> PackageManifest:
        if not isinstance(data, Mapping):
            raise ValueError("package.json must be a JSON object")
        pkg_name = data.get("name") if isinstance(data.get("name"), str) else None
        main = data.get("main")
        module = data.get("module")
        return cls(
            name=name or pkg_name or "",
            exports=parse_exports(data.get("exports")),
            main=main if isinstance(main, str) else None,
            module=module if isinstance(module, str) else None,
        )
