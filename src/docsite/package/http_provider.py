"""httpx implementation of RegistryClient."""

from __future__ import annotations

import asyncio
import json
import logging

import httpx

from docsite import __version__
from docsite.file import CachedResponse, ResponseCache

from .errors import UpstreamFailure
from .types import FetchResult

logger = logging.getLogger(__name__)

DEFAULT_HEADERS = {
    "Accept": "application/json",
    # api.github.com rejects requests without a user agent
    "User-Agent": f"docsite/{__version__}",
}


class HttpRegistryClient:
    """Client for the npm registry and the GitHub contents API."""

    def __init__(
        self,
        cache: ResponseCache | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._cache = cache if cache is not None else ResponseCache(persist=False)
        self._http = httpx.AsyncClient(
            headers=DEFAULT_HEADERS,
            timeout=timeout,
            follow_redirects=True,
            transport=transport,
        )

    @property
    def cache(self) -> ResponseCache:
        return self._cache

    async def fetch_json(self, url: str) -> FetchResult:
        # stored entries live on disk (or a remote fsspec store)
        cached = await asyncio.to_thread(self._cache.get, url)
        if cached is not None:
            return FetchResult(cached.status, cached.body)

        logger.debug("GET %s", url)
        try:
            response = await self._http.get(url)
        except httpx.HTTPError as e:
            raise UpstreamFailure(f"Request to {url} failed: {e}", url=url) from e

        body = self._parse_body(url, response)
        await asyncio.to_thread(self._cache.put, url, CachedResponse(response.status_code, body))
        return FetchResult(response.status_code, body)

    @staticmethod
    def _parse_body(url: str, response: httpx.Response):
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            if response.status_code == 404:
                return None
            raise UpstreamFailure(f"Non-JSON response ({response.status_code}) from {url}", url=url) from e

    async def close(self) -> None:
        await self._http.aclose()
