"""Typed view over a parsed pnpm lockfile."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from collections.abc import Mapping

from ..errors import LockfileError

# pnpm 5 appends "_<peer hash>", pnpm 6+ appends "(<peer>@<version>)".
_VERSION_SUFFIX = re.compile(r"[_(].*$")

LINK_PREFIX = "link:"


def actual_version(version_key: str) -> str:
    """Return the semantic version encoded in a lockfile version-key."""
    return _VERSION_SUFFIX.sub("", version_key)


def split_package_key(key: str, major: int) -> tuple[str, str]:
    """Split a package reference into ``(name, version_key)``.

    pnpm 5 keys look like ``/name/1.2.3`` or ``/@scope/name/1.2.3_hash``;
    pnpm 6+ keys look like ``/name@1.2.3`` or ``@scope/name@1.2.3(peer@1.0.0)``.
    """
    ref = key[1:] if key.startswith("/") else key
    if major >= 6:
        # Ignore any "@" inside the peer suffix.
        head = ref.split("(", 1)[0]
        idx = head.find("@", 1)
        if idx <= 0 or idx == len(ref) - 1:
            raise LockfileError(f"Malformed package key: {key!r}")
        return ref[:idx], ref[idx + 1 :]

    parts = ref.split("/")
    name_len = 2 if ref.startswith("@") else 1
    if len(parts) <= name_len or not all(parts):
        raise LockfileError(f"Malformed package key: {key!r}")
    return "/".join(parts[:name_len]), "/".join(parts[name_len:])


@dataclass(frozen=True)
class LockEntry:
    """A single ``packages`` entry of the lockfile."""

    name: str
    version_key: str
    dependencies: Mapping[str, str] = field(default_factory=dict)
    optional_dependencies: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Package name must be non-empty")
        if not self.version_key:
            raise ValueError(f"Package '{self.name}' must have a version")

    def runtime_dependencies(self) -> dict[str, str]:
        """Return optional dependencies overlaid with regular dependencies."""
        merged = dict(self.optional_dependencies)
        merged.update(self.dependencies)
        return merged


@dataclass(frozen=True)
class Lockfile:
    """Root dependency sets plus every resolved package entry."""

    dependencies: Mapping[str, str]
    dev_dependencies: Mapping[str, str]
    optional_dependencies: Mapping[str, str]
    packages: Mapping[tuple[str, str], LockEntry]
    major: int = 5

    def entry(self, name: str, version_key: str) -> LockEntry:
        try:
            return self.packages[(name, version_key)]
        except KeyError:
            raise LockfileError(
                f"Lockfile has no packages entry for {name}@{version_key}"
            ) from None

    def resolve_reference(self, name: str, reference: str) -> tuple[str, str] | None:
        """Return the real ``(name, version_key)`` a dependency value points at.

        Plain version-keys resolve to ``(name, reference)``. npm aliases such as
        ``string-width-cjs: /string-width@4.2.3`` (pnpm 6) or
        ``string-width-cjs: string-width@4.2.3`` (pnpm 9) resolve to the aliased
        package. Workspace ``link:`` references return ``None``.
        """
        if reference.startswith(LINK_PREFIX):
            return None
        if reference.startswith("/"):
            return split_package_key(reference, self.major)
        if self.major >= 6 and "@" in reference.split("(", 1)[0]:
            return split_package_key(reference, self.major)
        return name, reference

    def root_dependencies(
        self,
        *,
        include_dependencies: bool = True,
        include_dev_dependencies: bool = True,
        include_optional_dependencies: bool = False,
    ) -> dict[str, str]:
        """Merge the enabled root dependency sets.

        Dev dependencies are applied first, then optional dependencies, then
        regular dependencies, so a regular dependency wins a name collision.
        """
        merged: dict[str, str] = {}
        if include_dev_dependencies:
            merged.update(self.dev_dependencies)
        if include_optional_dependencies:
            merged.update(self.optional_dependencies)
        if include_dependencies:
            merged.update(self.dependencies)
        return merged
