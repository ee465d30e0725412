"""Discovery service client wrapper around requests.

Fetches the API directory and REST descriptions one at a time.
"""

from collections.abc import Iterator

import requests

from discovery_typings.parser.base import DirectoryItem, RestDescription
from discovery_typings.parser.discovery import parse_rest_description

DEFAULT_DIRECTORY_URL = "https://www.googleapis.com/discovery/v1/apis"
GOOGLE_ADS_DISCOVERY_URL = "https://googleads.googleapis.com/$discovery/rest?version=v{version}"
GOOGLE_ADS_NAME = "googleads"
GOOGLE_ADS_FIRST_VERSION = 4
TIMEOUT = 60


class DiscoveryClient:
    """Wrapper for discovery service HTTP calls."""

    def __init__(self, proxy: str | None = None, directory_url: str = DEFAULT_DIRECTORY_URL):
        self.directory_url = directory_url
        self.session = requests.Session()
        if proxy:
            self.session.proxies.update({"http": proxy, "https": proxy})

    def _get_json(self, url: str) -> dict:
        response = self.session.get(url, timeout=TIMEOUT)
        response.raise_for_status()
        return response.json()

    def list_apis(self, preferred_only: bool = False) -> list[DirectoryItem]:
        """Return the directory of available APIs."""
        data = self._get_json(self.directory_url)
        items = [DirectoryItem.model_validate(item) for item in data.get("items", [])]
        if preferred_only:
            items = [item for item in items if item.preferred]
        return items

    def get_rest_description(self, url: str) -> RestDescription:
        """Fetch and parse a single REST description."""
        return parse_rest_description(self._get_json(url))

    def extra_apis(self) -> Iterator[tuple[RestDescription, str]]:
        """Yield APIs missing from the directory.

        Google Ads versions are probed upward until the first 404.
        """
        version = GOOGLE_ADS_FIRST_VERSION
        while True:
            url = GOOGLE_ADS_DISCOVERY_URL.format(version=version)
            try:
                description = self.get_rest_description(url)
            except requests.HTTPError as e:
                if e.response is not None and e.response.status_code == 404:
                    return
                raise
            yield description, url
            version += 1

    def iter_rest_descriptions(self, service: str | None = None) -> Iterator[tuple[RestDescription, str]]:
        """Yield (description, source URL) for every API, optionally only those named service.

        Each document is fetched only when the previous one has been consumed.
        """
        for item in self.list_apis():
            if service and item.name != service:
                continue
            yield self.get_rest_description(item.discovery_rest_url), item.discovery_rest_url

        if service and service != GOOGLE_ADS_NAME:
            return
        yield from self.extra_apis()
