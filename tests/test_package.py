"""Tests for Package module."""

import pytest

from docsite import DENYLIST, Package
from docsite.package.package import is_denylisted, repository_link, strip_vcs_url
from docsite.package.types import RepositoryInfo


def test_package_creation_bare_name():
    """Test Package creation from a bare middleware name."""
    pkg = Package("logger")
    assert pkg.name == "logger"
    assert pkg.scope == "@tinyhttp"
    assert pkg.full_name == "@tinyhttp/logger"
    assert pkg.version is None


def test_package_creation_with_version():
    """Test Package creation with version."""
    pkg = Package("logger@1.2.0")
    assert pkg.name == "logger"
    assert pkg.version == "1.2.0"


def test_package_creation_scoped():
    """Test Package creation with an explicit scope."""
    pkg = Package("@other/logger")
    assert pkg.scope == "@other"
    assert pkg.full_name == "@other/logger"


def test_package_creation_full_purl():
    """Test Package creation with full PURL format."""
    pkg = Package("pkg:npm/%40tinyhttp/logger@1.2.0")
    assert pkg.full_name == "@tinyhttp/logger"
    assert pkg.version == "1.2.0"
    assert pkg == Package("npm/@tinyhttp/logger@1.2.0")


def test_package_custom_scope():
    pkg = Package("logger", scope="@acme")
    assert pkg.full_name == "@acme/logger"


def test_package_not_npm():
    with pytest.raises(ValueError, match="Not an npm package"):
        Package("pkg:pypi/requests")


def test_package_invalid_name():
    with pytest.raises(ValueError, match="Invalid package name"):
        Package("")


def test_denylist_contents():
    assert len(DENYLIST) == 15
    assert {"app", "etag", "router", "cli"} <= DENYLIST
    assert "logger" not in DENYLIST
    assert Package("etag").is_denylisted
    assert not Package("logger").is_denylisted
    assert is_denylisted("proxy-addr")


@pytest.mark.parametrize(
    ("url", "vcs_type", "expected"),
    [
        ("git+https://github.com/tinyhttp/tinyhttp.git", "git", "https://github.com/tinyhttp/tinyhttp"),
        ("https://github.com/tinyhttp/tinyhttp.git", "git", "https://github.com/tinyhttp/tinyhttp"),
        ("git+https://github.com/tinyhttp/tinyhttp", "git", "https://github.com/tinyhttp/tinyhttp"),
        ("https://github.com/tinyhttp/tinyhttp", "git", "https://github.com/tinyhttp/tinyhttp"),
        ("git+ssh://git@github.com/a/b.git", None, "git+ssh://git@github.com/a/b"),
        ("", "git", ""),
    ],
)
def test_strip_vcs_url(url, vcs_type, expected):
    assert strip_vcs_url(url, vcs_type) == expected


@pytest.mark.parametrize(
    "url",
    ["git+https://host/org/repo.git", "https://host/org/repo", "not a url", "git+", ".git"],
)
def test_strip_vcs_url_is_idempotent(url):
    once = strip_vcs_url(url, "git")
    assert strip_vcs_url(once, "git") == once


def test_strip_vcs_url_only_strips_trailing_suffix():
    """A .git inside the URL (e.g. a github.io repo) is left alone."""
    url = "git+https://github.com/org/org.github.io.git"
    assert strip_vcs_url(url, "git") == "https://github.com/org/org.github.io"


def test_repository_link():
    repo = RepositoryInfo(type="git", url="git+https://host/org/repo.git", directory="pkg")
    link = repository_link(repo)
    assert link.url == "https://host/org/repo"
    assert link.directory == "pkg"


def test_repository_link_without_directory():
    link = repository_link(RepositoryInfo(type="git", url="https://host/org/repo"))
    assert link.url == "https://host/org/repo"
    assert link.directory is None
