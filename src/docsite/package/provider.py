"""Abstract client interface for upstream JSON endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from .types import FetchResult

if TYPE_CHECKING:
    from docsite.config import SiteConfig


class RegistryClient(Protocol):
    """Abstract interface for fetching JSON from the registry and GitHub.

    Implementations must return the same response for the same URL once it
    has been fetched (see ``ResponseCache``).
    """

    async def fetch_json(self, url: str) -> FetchResult:
        """GET ``url`` and parse the body as JSON.

        Args:
            url: Absolute URL

        Returns:
            FetchResult with the HTTP status and parsed body. A 404 whose body
            is not JSON yields ``body=None``.

        Raises:
            UpstreamFailure: On network errors, or a non-JSON body on any
                other status
        """
        ...

    async def close(self) -> None:
        """Release network resources."""
        ...


def get_client(config: SiteConfig) -> RegistryClient:
    """Get the production client for a site configuration.

    Args:
        config: Site configuration (cache location, timeout)

    Returns:
        Client backed by httpx and a ResponseCache
    """
    from docsite.file import ResponseCache

    from .http_provider import HttpRegistryClient

    cache = ResponseCache(config.cache_dir, ttl=config.cache_ttl)
    return HttpRegistryClient(cache=cache, timeout=config.timeout)
