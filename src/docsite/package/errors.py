"""Errors raised while resolving package metadata."""


class UpstreamFailure(Exception):
    """An upstream request failed or returned something unusable.

    Covers network errors, non-JSON bodies, unexpected statuses and
    registry records missing the fields needed to render a page.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class MalformedRecordError(UpstreamFailure):
    """Registry record is valid JSON but lacks ``versions[latest]`` or ``repository``."""
