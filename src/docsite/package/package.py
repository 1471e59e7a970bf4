"""Middleware package identity based on the PURL standard."""

from __future__ import annotations

from packageurl import PackageURL

from .types import RepositoryInfo, RepositoryLink

DEFAULT_SCOPE = "@tinyhttp"

# Core packages published under the scope that are not middleware
DENYLIST: frozenset[str] = frozenset(
    {
        "app",
        "etag",
        "cookie",
        "cookie-signature",
        "dotenv",
        "send",
        "router",
        "req",
        "res",
        "type-is",
        "content-disposition",
        "forwarded",
        "proxy-addr",
        "accepts",
        "cli",
    }
)


def is_denylisted(name: str) -> bool:
    return name in DENYLIST


def _normalize_input(s: str, scope: str) -> str:
    """Normalize user input into full PURL string.

    Accepts:
    - pkg:npm/%40scope/name[@v]
    - npm/@scope/name[@v]
    - @scope/name[@v]
    - name[@v] (resolved under ``scope``)

    The scope's ``@`` is percent-encoded, otherwise it would be read as the
    version separator.
    """
    s = s.removeprefix("pkg:").removeprefix("npm/")
    if not s.startswith(("@", "%40")) and scope:
        s = f"{scope}/{s}"
    if s.startswith("@"):
        s = "%40" + s[1:]
    return f"pkg:npm/{s}"


def strip_vcs_url(url: str, vcs_type: str | None = None) -> str:
    """Turn a package.json repository URL into a browsable link.

    ``git+https://github.com/org/repo.git`` becomes
    ``https://github.com/org/repo``. URLs without the ``<type>+`` prefix or
    the ``.git`` suffix pass through unchanged.
    """
    if vcs_type:
        url = url.removeprefix(f"{vcs_type}+")
    return url.removesuffix(".git")


def repository_link(repository: RepositoryInfo) -> RepositoryLink:
    return RepositoryLink(url=strip_vcs_url(repository.url, repository.type), directory=repository.directory)


class Package:
    """A middleware package in the npm registry."""

    def __init__(self, name: str, scope: str = DEFAULT_SCOPE):
        """Initialize from a bare middleware name or a short/full npm PURL."""
        if name.startswith("pkg:") and not name.startswith("pkg:npm/"):
            raise ValueError(f"Not an npm package: {name}")
        if not name.strip() or name.endswith("/"):
            raise ValueError(f"Invalid package name: {name!r}")
        try:
            self._purl = PackageURL.from_string(_normalize_input(name, scope))
        except ValueError as e:
            raise ValueError(f"Invalid package name: {name}") from e

    @property
    def name(self) -> str:
        """Unscoped name, e.g. ``logger``."""
        return self._purl.name

    @property
    def scope(self) -> str | None:
        return self._purl.namespace

    @property
    def version(self) -> str | None:
        return self._purl.version

    @property
    def full_name(self) -> str:
        """Registry name, e.g. ``@tinyhttp/logger``."""
        if self.scope:
            return f"{self.scope}/{self.name}"
        return self.name

    @property
    def is_denylisted(self) -> bool:
        return is_denylisted(self.name)

    @property
    def purl(self) -> str:
        return self._purl.to_string()

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Package) and self.purl == other.purl

    def __hash__(self) -> int:
        return hash(self.purl)

    def __repr__(self) -> str:
        return f"Package({self.purl!r})"
