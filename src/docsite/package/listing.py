"""Middleware listing from the GitHub repository contents API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from markupsafe import escape
from pydantic import ValidationError

from .errors import UpstreamFailure
from .package import is_denylisted
from .types import PackageListing, PackageSummary

if TYPE_CHECKING:
    from docsite.context import SiteContext

logger = logging.getLogger(__name__)

PREVIEW_SEPARATOR = "<br />"


async def fetch_listing(ctx: SiteContext) -> list[PackageSummary]:
    """Fetch every entry of the packages directory.

    Raises:
        UpstreamFailure: If the request fails or the body is not a list of
            ``{"name": ...}`` objects
    """
    url = ctx.config.listing_url
    result = await ctx.client.fetch_json(url)
    if not result.ok:
        raise UpstreamFailure(f"Listing request returned {result.status}", url=url)

    try:
        return PackageListing.validate_python(result.body)
    except ValidationError as e:
        raise UpstreamFailure(f"Unexpected listing payload from {url}", url=url) from e


async def list_packages(ctx: SiteContext, query: str | None = None) -> list[PackageSummary]:
    """List middleware packages, optionally filtered by a search query.

    Without a query, core packages (DENYLIST) are hidden. With a query, the
    whole listing is searched and core packages can match.

    Args:
        ctx: Site context
        query: Substring to look for; lowercased before matching

    Returns:
        Matching entries in listing order
    """
    listing = await fetch_listing(ctx)

    if not query:
        return [pkg for pkg in listing if not is_denylisted(pkg.name)]

    needle = query.lower()
    pkgs = [pkg for pkg in listing if needle in pkg.name]
    logger.debug("query %r matched %d of %d packages", query, len(pkgs), len(listing))
    return pkgs


def render_preview(pkg: PackageSummary) -> str:
    name = escape(pkg.name)
    return f"""
<a class="mw_preview" href="/mw/{name}">
  <div>
    <h3>{name}</h3>
  </div>
</a>
"""


def render_previews(pkgs: list[PackageSummary]) -> str:
    """Join the preview fragments of ``pkgs`` into one HTML block."""
    return PREVIEW_SEPARATOR.join(render_preview(pkg) for pkg in pkgs)


def search_view_model(pkgs: list[PackageSummary], query: str | None = None) -> dict[str, Any]:
    """View model for ``pages/search.html``."""
    return {
        "title": "Middleware",
        "query": query or "",
        "pkg_templates": render_previews(pkgs),
        "head": '<link rel="stylesheet" href="/css/search.css" />',
    }
