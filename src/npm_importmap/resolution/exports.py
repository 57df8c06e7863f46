"""Build a package's resolved definition: specifier -> absolute CDN URL."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Set

from ..errors import ExportResolutionError
from ..models import ConditionalExports, PackageManifest, StringExports, SubpathExports
from .conditions import allowed_conditions, match_target, resolve_exports
from .fallback import resolve_fallback, strip_relative

logger = logging.getLogger(__name__)

ListingLoader = Callable[[], Set[str]]


def _subpath_definition(
    name: str,
    exports: SubpathExports,
    base_url: str,
    conditions: Iterable[str],
    browser: bool,
) -> dict[str, str]:
    definition: dict[str, str] = {}
    allows = allowed_conditions(conditions, browser=browser)

    for key, value in exports.subpaths.items():
        if value is None:
            # Explicitly excluded subpath.
            continue

        specifier = name + key[1:]

        if key.endswith("/*") or key.endswith("/"):
            target = match_target(value, allows)
            if target is None:
                raise ExportResolutionError(
                    f'No known conditions for "{key}" entry in "{name}" package'
                )
            prefix = strip_relative(target.split("*", 1)[0])
            if prefix and not prefix.endswith("/"):
                logger.warning(
                    "Not mapping %s%s: pattern target %s is not a directory", name, key[1:], target
                )
                continue
            definition[specifier.rstrip("*")] = base_url + prefix
            continue

        if "*" in key:
            logger.debug("Skipping %s: suffix patterns cannot be expressed in an import map", key)
            continue

        resolved = resolve_exports(name, exports, key, conditions=conditions, browser=browser)
        definition[specifier] = base_url + strip_relative(resolved)

    return definition


def resolve_definition(
    manifest: PackageManifest,
    base_url: str,
    load_listing: ListingLoader,
    *,
    conditions: Iterable[str] = ("module",),
    browser: bool = False,
) -> dict[str, str]:
    """Compute the specifiers a package exposes and the URLs they map to.

    ``base_url`` is the package-version's CDN directory and must end with a
    slash. ``load_listing`` is only invoked when the manifest has no
    ``exports`` field.
    """
    name = manifest.name
    exports = manifest.exports

    if isinstance(exports, StringExports):
        return {name: base_url + strip_relative(exports.target)}

    if isinstance(exports, ConditionalExports):
        resolved = resolve_exports(name, exports, ".", conditions=conditions, browser=browser)
        return {name: base_url + strip_relative(resolved)}

    if isinstance(exports, SubpathExports):
        return _subpath_definition(name, exports, base_url, conditions, browser)

    definition: dict[str, str] = {}
    entry = resolve_fallback(manifest, load_listing())
    if entry is None:
        logger.warning("No entry point found for %s, mapping its directory only", name)
    else:
        definition[name] = base_url + entry
    definition[f"{name}/"] = base_url
    return definition
