"""Type definitions for upstream payloads and resolver results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class PackageSummary(BaseModel):
    """One entry of the repository-contents listing.

    Only ``name`` is required; GitHub sends more (path, sha, type, urls)
    and those are kept as extra fields.
    """

    model_config = ConfigDict(extra="allow")

    name: str


class RepositoryInfo(BaseModel):
    """``repository`` field of a published version."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    url: str
    directory: str | None = None


class VersionBody(BaseModel):
    model_config = ConfigDict(extra="allow")

    version: str | None = None
    repository: RepositoryInfo | None = None


class DistTags(BaseModel):
    model_config = ConfigDict(extra="allow")

    latest: str


class PackageRecord(BaseModel):
    """Registry document for a single package (``GET /<scope>/<name>``)."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    name: str
    dist_tags: DistTags = Field(alias="dist-tags")
    # only the latest version is validated, older ones may use legacy shapes
    versions: dict[str, Any]
    readme: str | None = None


PackageListing = TypeAdapter(list[PackageSummary])


@dataclass(frozen=True)
class FetchResult:
    """HTTP status plus parsed JSON body (None when the body was not JSON)."""

    status: int
    body: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300


@dataclass(frozen=True)
class RepositoryLink:
    url: str
    directory: str | None = None


@dataclass(frozen=True)
class NotFound:
    """The registry has no package by this name."""

    name: str


@dataclass(frozen=True)
class NotApplicable:
    """The name belongs to a core package, not a middleware."""

    name: str


@dataclass(frozen=True)
class PackageDetail:
    name: str
    version: str
    readme_html: str
    repo_link: str
    repo_directory: str | None
    title: str

    def to_view_model(self) -> dict[str, Any]:
        """View model for ``pages/mw.html``."""
        return {
            "name": self.name,
            "version": self.version,
            "readme_html": self.readme_html,
            "repo_link": self.repo_link,
            "repo_directory": self.repo_directory,
            "title": self.title,
            "head": '<link rel="stylesheet" href="/css/mw.css" />',
        }
