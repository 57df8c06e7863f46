from __future__ import annotations

from collections import Counter
from typing import Any

from npm_importmap.errors import FetchError
from npm_importmap.models import PackageManifest

CDN = "https://cdn.jsdelivr.net/npm"


class FakeFetcher:
    """In-memory manifests and listings that count every fetch."""

    def __init__(
        self,
        manifests: dict[tuple[str, str], dict[str, Any]],
        listings: dict[tuple[str, str], set[str]] | None = None,
    ) -> None:
        self.manifests = manifests
        self.listings = listings or {}
        self.manifest_calls: Counter[tuple[str, str]] = Counter()
        self.listing_calls: Counter[tuple[str, str]] = Counter()

    def fetch_manifest(self, name: str, version: str) -> PackageManifest:
        self.manifest_calls[(name, version)] += 1
        try:
            data = self.manifests[(name, version)]
        except KeyError:
            raise FetchError(f"Unexpected status code 404 fetching {name}@{version}") from None
        return PackageManifest.from_dict(data, name=name)

    def fetch_listing(self, name: str, version: str) -> frozenset[str]:
        self.listing_calls[(name, version)] += 1
        return frozenset(self.listings.get((name, version), set()))


class FakeResponse:
    def __init__(self, status_code=200, payload=None, invalid_json=False):
        self.status_code = status_code
        self._payload = payload
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.headers = {}
        self.responses = responses
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append((url, timeout))
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response

