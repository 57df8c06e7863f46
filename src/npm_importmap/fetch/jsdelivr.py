"""Package manifest and file listing retrieval from jsDelivr."""

from __future__ import annotations

import logging
from typing import Any

import requests
from requests import Response
from tenacity import Retrying, stop_after_attempt, wait_fixed

from ..config import JSDELIVR_API, JSDELIVR_CDN
from ..errors import FetchError
from ..models import PackageManifest
from .listing import flatten_listing

logger = logging.getLogger(__name__)

USER_AGENT = "npm-importmap/0.1"


def cdn_url(cdn_base: str, name: str, version: str, path: str = "") -> str:
    """Return the CDN URL of ``path`` inside ``name@version``."""
    return f"{cdn_base}/{name}@{version}/{path}"


class JsDelivrFetcher:
    """Fetch manifests from the jsDelivr CDN and listings from its data API."""

    def __init__(
        self,
        cdn_base: str = JSDELIVR_CDN,
        listing_base: str = JSDELIVR_API,
        timeout: float = 30.0,
        attempts: int = 1,
        session: requests.Session | None = None,
    ) -> None:
        self.cdn_base = cdn_base.rstrip("/")
        self.listing_base = listing_base.rstrip("/")
        self.timeout = timeout
        self.attempts = attempts
        self.session = session or requests.Session()
        self.session.headers["User-Agent"] = USER_AGENT

    def _http_get(self, url: str) -> Response:
        retrying = Retrying(
            reraise=True,
            stop=stop_after_attempt(self.attempts),
            wait=wait_fixed(2),
        )
        return retrying(self.session.get, url, timeout=self.timeout)

    def get_json(self, url: str) -> Any:
        logger.info("Fetching %s", url)
        try:
            response = self._http_get(url)
        except requests.RequestException as exc:
            raise FetchError(f"Failed to fetch {url}: {exc}") from exc

        if response.status_code != 200:
            raise FetchError(f"Unexpected status code {response.status_code} fetching {url}")

        try:
            return response.json()
        except ValueError as exc:
            raise FetchError(f"Response from {url} is not valid JSON: {exc}") from exc

    def fetch_manifest(self, name: str, version: str) -> PackageManifest:
        data = self.get_json(cdn_url(self.cdn_base, name, version, "package.json"))
        try:
            return PackageManifest.from_dict(data, name=name)
        except ValueError as exc:
            raise FetchError(f"Invalid package.json for {name}@{version}: {exc}") from exc

    def fetch_listing(self, name: str, version: str) -> frozenset[str]:
        data = self.get_json(f"{self.listing_base}/package/npm/{name}@{version}")
        if not isinstance(data, dict) or not isinstance(data.get("files"), list):
            raise FetchError(f"File listing for {name}@{version} has no 'files' array")
        return flatten_listing(data["files"])
