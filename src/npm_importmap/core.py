"""Core generation entrypoints.

This module has no CLI concerns so it can be used from scripts and tests
with any :class:`~npm_importmap.fetch.MetadataFetcher`.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from .config import GeneratorOptions
from .emitter import prune
from .fetch import JsDelivrFetcher, MetadataFetcher
from .models import Lockfile
from .parsers.pnpm_lock import parse as parse_pnpm_lock
from .walker import GraphWalker


def default_fetcher(options: GeneratorOptions) -> JsDelivrFetcher:
    return JsDelivrFetcher(
        cdn_base=options.cdn_base,
        listing_base=options.listing_base,
        timeout=options.timeout,
        attempts=options.fetch_attempts,
    )


def build_import_map(
    lockfile: Lockfile,
    options: GeneratorOptions | None = None,
    fetcher: MetadataFetcher | None = None,
) -> dict[str, Any]:
    """Walk the lockfile's dependency graph and return a pruned import map.

    Raises any :class:`~npm_importmap.errors.ImportMapError` unchanged; no
    partial map is returned on failure.
    """
    options = options or GeneratorOptions()
    walker = GraphWalker(lockfile, fetcher or default_fetcher(options), options)
    return prune(walker.run())


def generate_import_map(
    lockfile_path: Path,
    options: GeneratorOptions | None = None,
    fetcher: MetadataFetcher | None = None,
) -> dict[str, Any]:
    """Parse ``pnpm-lock.yaml`` at ``lockfile_path`` and build its import map."""
    return build_import_map(parse_pnpm_lock(lockfile_path), options, fetcher)
