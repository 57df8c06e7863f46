"""Dependency graph walk that builds the import map's imports and scopes.

The walker owns every piece of mutable state for one generation run: the
FIFO work queue, the resolved-definition cache (keyed by CDN base URL, i.e. by
package name and actual version) and the root ``imports``/``scopes`` maps.
Items are processed one at a time; the cache slot for a package-version is
registered before its manifest is fetched, so each version is fetched at most
once however many dependents reach it.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any

from .config import GeneratorOptions
from .errors import ExportResolutionError, FetchError, ResolutionError
from .fetch import MetadataFetcher, cdn_url
from .models import Lockfile, actual_version
from .resolution import resolve_definition

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class WorkItem:
    """A dependency edge waiting to be written into ``target``."""

    specifier: str
    version_key: str
    target: dict[str, str]


def _aliased(definition: dict[str, str], name: str, specifier: str) -> dict[str, str]:
    """Rename ``name`` and its subpath specifiers to an npm alias."""
    if specifier == name:
        return dict(definition)
    renamed: dict[str, str] = {}
    for key, url in definition.items():
        if key == name or key.startswith(f"{name}/"):
            key = specifier + key[len(name) :]
        renamed[key] = url
    return renamed


class GraphWalker:
    """Resolve every reachable package-version of a lockfile exactly once."""

    def __init__(
        self,
        lockfile: Lockfile,
        fetcher: MetadataFetcher,
        options: GeneratorOptions | None = None,
    ) -> None:
        self.lockfile = lockfile
        self.fetcher = fetcher
        self.options = options or GeneratorOptions()
        self.queue: deque[WorkItem] = deque()
        self.cache: dict[str, dict[str, str]] = {}
        self.imports: dict[str, str] = {}
        self.scopes: dict[str, dict[str, str]] = {}
        self.root_versions: dict[str, str] = {}

    def seed(self) -> None:
        """Queue one item per enabled root dependency, targeting ``imports``."""
        self.root_versions = self.lockfile.root_dependencies(
            include_dependencies=self.options.include_dependencies,
            include_dev_dependencies=self.options.include_dev_dependencies,
            include_optional_dependencies=self.options.include_optional_dependencies,
        )
        for name, version_key in self.root_versions.items():
            self.queue.append(WorkItem(name, version_key, self.imports))

    def run(self) -> dict[str, Any]:
        """Seed the queue, drain it and return the raw ``{imports, scopes}`` map."""
        self.seed()
        while self.queue:
            item = self.queue.popleft()
            self.resolve_edge(item.specifier, item.version_key, item.target)
        return {"imports": self.imports, "scopes": self.scopes}

    def _should_copy_cached(self, specifier: str, version_key: str, target: dict[str, str]) -> bool:
        # A scope falls back to the root imports, so it only needs its own copy
        # when the root does not already map this name to the same version.
        if target is self.imports:
            return True
        return self.root_versions.get(specifier) != version_key

    def resolve_edge(self, specifier: str, version_key: str, target: dict[str, str]) -> None:
        """Write the definition of ``specifier@version_key`` into ``target``.

        ``specifier`` is the dependency name as declared by the dependent; for
        npm aliases it differs from the package that ``version_key`` points at.
        """
        reference = self.lockfile.resolve_reference(specifier, version_key)
        if reference is None:
            logger.warning(
                "Skipping %s: workspace link %s is not served by the CDN", specifier, version_key
            )
            return

        name, package_key = reference
        entry = self.lockfile.entry(name, package_key)
        version = actual_version(package_key)
        base_url = cdn_url(self.options.cdn_base, name, version)

        cached = self.cache.get(base_url)
        if cached is not None:
            logger.debug("Cached %s@%s", name, version)
            if self._should_copy_cached(specifier, version_key, target):
                target.update(_aliased(cached, name, specifier))
            return

        logger.info("Resolving %s@%s", name, version)

        definition: dict[str, str] = {}
        self.cache[base_url] = definition

        try:
            manifest = self.fetcher.fetch_manifest(name, version)
            definition.update(
                resolve_definition(
                    manifest,
                    base_url,
                    lambda: self.fetcher.fetch_listing(name, version),
                    conditions=self.options.conditions,
                    browser=self.options.browser,
                )
            )
        except (FetchError, ExportResolutionError) as exc:
            raise ResolutionError(name, version, str(exc)) from exc

        scope: dict[str, str] = {}
        for dep_name, dep_version_key in entry.runtime_dependencies().items():
            self.queue.append(WorkItem(dep_name, dep_version_key, scope))

        target.update(_aliased(definition, name, specifier))
        self.scopes[base_url] = scope
