"""In-memory RegistryClient for tests and offline previews."""

from __future__ import annotations

from typing import Any

from .errors import UpstreamFailure
from .types import FetchResult


class FakeRegistryClient:
    """Serves canned responses by URL.

    URLs without a canned response answer 404. URLs listed in ``failing``
    raise UpstreamFailure. Every requested URL is appended to ``requested``.
    """

    def __init__(
        self,
        responses: dict[str, tuple[int, Any]] | None = None,
        failing: set[str] | None = None,
    ):
        self.responses: dict[str, tuple[int, Any]] = dict(responses or {})
        self.failing: set[str] = set(failing or ())
        self.requested: list[str] = []
        self.closed = False

    def add(self, url: str, body: Any, status: int = 200) -> None:
        self.responses[url] = (status, body)

    async def fetch_json(self, url: str) -> FetchResult:
        self.requested.append(url)
        if url in self.failing:
            raise UpstreamFailure(f"Request to {url} failed", url=url)
        status, body = self.responses.get(url, (404, None))
        return FetchResult(status, body)

    async def close(self) -> None:
        self.closed = True
