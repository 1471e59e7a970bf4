"""Pytest configuration and fixtures"""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient

from docsite import SiteConfig, SiteContext
from docsite.server import create_app


def make_record(
    name: str = "@tinyhttp/router-name",
    latest: str = "1.2.0",
    repository: dict | None = None,
    readme: str | None = "# router-name\n",
) -> dict:
    """Registry record in the shape registry.npmjs.org returns."""
    if repository is None:
        repository = {"type": "git", "url": "git+https://host/org/repo.git", "directory": "pkg"}
    return {
        "name": name,
        "dist-tags": {"latest": latest},
        "versions": {
            "1.0.0": {"version": "1.0.0"},
            latest: {"version": latest, "repository": repository},
        },
        "readme": readme,
    }


@pytest.fixture
def static_dir(tmp_path):
    """Create a temporary static directory"""
    root = tmp_path / "static"
    (root / "css").mkdir(parents=True)
    (root / "index.html").write_text("<h1>home</h1>")
    (root / "404.html").write_text("<h1>custom 404</h1>")
    (root / "css" / "main.css").write_text("body {}")
    (root / "docs.md").write_text("# Docs\n\n## Install\n\n```sh\npnpm i @tinyhttp/app\n```\n")
    return root


@pytest.fixture
def config(static_dir, tmp_path) -> SiteConfig:
    return SiteConfig(static_dir=str(static_dir), cache_dir=str(tmp_path / "cache"))


@pytest.fixture
def listing() -> list[dict]:
    return [
        {"name": "logger", "type": "dir"},
        {"name": "etag", "type": "dir"},
        {"name": "app", "type": "dir"},
        {"name": "cors", "type": "dir"},
    ]


@pytest.fixture
def context(config, listing) -> SiteContext:
    return SiteContext.for_test(
        listing=listing,
        records={"router-name": make_record()},
        config=config,
    )


@pytest.fixture
async def client(context: SiteContext) -> AsyncGenerator[AsyncClient]:
    """Create an async test client."""
    app = create_app(context=context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
