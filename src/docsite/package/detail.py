"""Middleware detail pages from npm registry records."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from docsite.markdown import Highlighter, highlight_code, render

from .errors import MalformedRecordError, UpstreamFailure
from .package import is_denylisted, repository_link
from .types import NotApplicable, NotFound, PackageDetail, PackageRecord, VersionBody

if TYPE_CHECKING:
    from docsite.context import SiteContext

logger = logging.getLogger(__name__)


def parse_record(body, url: str) -> PackageRecord:
    try:
        return PackageRecord.model_validate(body)
    except ValidationError as e:
        raise UpstreamFailure(f"Unexpected registry payload from {url}", url=url) from e


def parse_version(record: PackageRecord, version: str, url: str) -> VersionBody:
    """Validate ``versions[version]`` of a record."""
    body: Any = record.versions.get(version)
    if body is None:
        raise MalformedRecordError(f"{record.name}: latest version {version} is not in versions", url=url)
    try:
        return VersionBody.model_validate(body)
    except ValidationError as e:
        raise MalformedRecordError(f"{record.name}@{version} has an unusable version entry", url=url) from e


def registry_url(ctx: SiteContext, name: str) -> str:
    """Registry document URL for ``name`` under the configured scope.

    The name is used as given; ``logger@1.0.0`` or ``@foo`` are looked up
    literally and the registry answers 404 for them.
    """
    return f"{ctx.config.registry_url.rstrip('/')}/{ctx.config.registry_scope}/{name}"


async def get_package_detail(
    ctx: SiteContext,
    name: str,
    highlighter: Highlighter = highlight_code,
) -> PackageDetail | NotFound | NotApplicable:
    """Resolve a middleware's latest version, repository and README.

    Args:
        ctx: Site context
        name: Unscoped middleware name, e.g. ``logger``
        highlighter: Code highlighter for the README

    Returns:
        PackageDetail, NotFound if the registry has no such package, or
        NotApplicable for core packages (no request is made)

    Raises:
        UpstreamFailure: If the request fails or the record is unusable
    """
    if is_denylisted(name):
        return NotApplicable(name)

    url = registry_url(ctx, name)
    result = await ctx.client.fetch_json(url)
    if result.status == 404:
        return NotFound(name)
    if not result.ok:
        raise UpstreamFailure(f"Registry returned {result.status}", url=url)

    record = parse_record(result.body, url)
    version = record.dist_tags.latest
    body = parse_version(record, version, url)
    if body.repository is None:
        raise MalformedRecordError(f"{record.name}@{version} has no repository", url=url)

    link = repository_link(body.repository)
    logger.debug("resolved %s@%s -> %s", record.name, version, link.url)

    return PackageDetail(
        name=record.name,
        version=version,
        readme_html=render(record.readme or "", highlighter),
        repo_link=link.url,
        repo_directory=link.directory,
        title=f"{record.name} | {ctx.config.site_name}",
    )
