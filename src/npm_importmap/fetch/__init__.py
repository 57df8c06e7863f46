"""Package metadata retrieval."""

from __future__ import annotations

from typing import Protocol

from ..models import PackageManifest
from .jsdelivr import JsDelivrFetcher, cdn_url
from .listing import flatten_listing


class MetadataFetcher(Protocol):
    """Structural protocol for anything that can supply package metadata."""

    def fetch_manifest(self, name: str, version: str) -> PackageManifest: ...

    def fetch_listing(self, name: str, version: str) -> frozenset[str]: ...


__all__ = [
    "JsDelivrFetcher",
    "MetadataFetcher",
    "cdn_url",
    "flatten_listing",
]
