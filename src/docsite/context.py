"""Site context for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from docsite.config import SiteConfig
from docsite.package.fake import FakeRegistryClient
from docsite.package.provider import RegistryClient, get_client
from docsite.views import ViewRenderer


@dataclass(frozen=True)
class SiteContext:
    """Everything a request handler needs.

    Created once per process (see ``docsite.server.lifespan``) and closed on
    shutdown. Use for_test() for testing scenarios.
    """

    config: SiteConfig
    client: RegistryClient
    views: ViewRenderer = field(default_factory=ViewRenderer)

    @classmethod
    def create(cls, config: SiteConfig) -> SiteContext:
        """Create a production context with the httpx client."""
        return cls(config=config, client=get_client(config), views=ViewRenderer(site_name=config.site_name))

    @classmethod
    def for_test(
        cls,
        *,
        listing: list[dict[str, Any]] | None = None,
        records: dict[str, dict[str, Any]] | None = None,
        config: SiteConfig | None = None,
    ) -> SiteContext:
        """Create a test context with a fake registry.

        Args:
            listing: Body served at ``config.listing_url``
            records: Registry records keyed by unscoped package name

        Returns:
            SiteContext backed by FakeRegistryClient
        """
        config = config or SiteConfig()
        client = FakeRegistryClient()
        if listing is not None:
            client.add(config.listing_url, listing)
        for name, record in (records or {}).items():
            client.add(f"{config.registry_url}/{config.registry_scope}/{name}", record)
        return cls(config=config, client=client, views=ViewRenderer(site_name=config.site_name))

    async def close(self) -> None:
        await self.client.close()
