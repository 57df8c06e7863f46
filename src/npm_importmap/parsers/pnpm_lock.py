"""Parse pnpm-lock.yaml into a :class:`~npm_importmap.models.Lockfile`."""

from __future__ import annotations

from pathlib import Path
from typing import Any
from collections.abc import Mapping

import yaml

from ..errors import LockfileError
from ..models import LockEntry, Lockfile, split_package_key


def _lockfile_major(data: Mapping[str, Any]) -> int:
    raw = data.get("lockfileVersion", 5)
    try:
        return int(float(str(raw)))
    except ValueError:
        raise LockfileError(f"Unsupported lockfileVersion: {raw!r}") from None


def _version_map(section: Any) -> dict[str, str]:
    """Normalise a dependency section; pnpm 6+ nests ``{specifier, version}``."""
    if not section:
        return {}
    if not isinstance(section, dict):
        raise LockfileError("Dependency section must be a mapping")
    versions: dict[str, str] = {}
    for name, value in section.items():
        if isinstance(value, dict):
            value = value.get("version")
        if value is None:
            raise LockfileError(f"Dependency '{name}' has no resolved version")
        versions[str(name)] = str(value)
    return versions


def load(data: Mapping[str, Any]) -> Lockfile:
    """Build a Lockfile from an already parsed lockfile document."""
    if not isinstance(data, Mapping):
        raise LockfileError("Lockfile must be a mapping")

    major = _lockfile_major(data)

    root: Mapping[str, Any] = data
    importers = data.get("importers")
    if isinstance(importers, dict) and "." in importers:
        root = importers["."] or {}
        if not isinstance(root, dict):
            raise LockfileError("Root importer must be a mapping")

    # pnpm 9 moved dependency edges from "packages" to "snapshots".
    pkgs = data.get("snapshots") if major >= 9 else data.get("packages")
    if pkgs and not isinstance(pkgs, dict):
        raise LockfileError("Package section must be a mapping")
    packages: dict[tuple[str, str], LockEntry] = {}
    for key, meta in (pkgs or {}).items():
        if not isinstance(key, str):
            continue
        name, version_key = split_package_key(key, major)
        meta = meta or {}
        if not isinstance(meta, dict):
            raise LockfileError(f"Package entry {key!r} must be a mapping")
        try:
            entry = LockEntry(
                name=name,
                version_key=version_key,
                dependencies=_version_map(meta.get("dependencies")),
                optional_dependencies=_version_map(meta.get("optionalDependencies")),
            )
        except ValueError as exc:
            raise LockfileError(f"Invalid package entry {key!r}: {exc}") from exc
        packages[(name, version_key)] = entry

    return Lockfile(
        dependencies=_version_map(root.get("dependencies")),
        dev_dependencies=_version_map(root.get("devDependencies")),
        optional_dependencies=_version_map(root.get("optionalDependencies")),
        packages=packages,
        major=major,
    )


def parse(path: Path) -> Lockfile:
    """Read and parse a pnpm lock file."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise LockfileError(f"Failed to read lockfile {path}: {exc}") from exc

    try:
        data = yaml.safe_load(text) or {}
    except yaml.YAMLError as exc:
        raise LockfileError(f"Invalid YAML in lockfile {path}: {exc}") from exc

    return load(data)
