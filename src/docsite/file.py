"""On-disk and in-memory cache for upstream HTTP responses."""

from __future__ import annotations

import json
import logging
import os
import re
import time
import unicodedata
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from fsspec.core import url_to_fs
from fsspec.implementations.cache_mapper import HashCacheMapper
from platformdirs import user_cache_dir
from upath import UPath

logger = logging.getLogger(__name__)


def to_valid_filename(name: str) -> str:
    # keep ASCII, drop symbols, collapse spaces/dashes
    normalized = unicodedata.normalize("NFKD", name).encode("ascii", "ignore").decode("ascii")
    cleaned = re.sub(r"[^\w\s-]", "", normalized).strip()
    return re.sub(r"[-\s]+", "_", cleaned).lower()


@dataclass(frozen=True)
class CachedResponse:
    """A completed upstream response."""

    status: int
    body: Any


class ResponseCache:
    """Response cache keyed by URL.

    Entries live in memory for the lifetime of the process and are mirrored
    to one JSON file per URL so a restarted server starts warm. The directory
    may be a local path or any fsspec URL (``memory://``, ``s3://``...).
    Memory entries never expire; stored entries older than ``ttl`` seconds
    are ignored when it is set.
    """

    # Global cache directory (overridable via ENV)
    CACHE_DIR = Path(os.environ.get("DOCSITE_CACHE_DIR", user_cache_dir("docsite", "docsite")))

    # same naming scheme as fsspec's filecache:: storage
    _mapper = HashCacheMapper()

    def __init__(self, directory: str | Path | UPath | None = None, ttl: int | None = None, persist: bool = True):
        self.directory = UPath(directory) if directory else UPath(self.CACHE_DIR)
        self.ttl = ttl
        self.persist = persist
        self._memory: dict[str, CachedResponse] = {}
        self._fs, self._root = url_to_fs(str(self.directory))

    def _entry_path(self, url: str) -> str:
        return f"{self._root}/{to_valid_filename(url)[:80]}-{self._mapper(url)[:16]}.json"

    def get(self, url: str) -> CachedResponse | None:
        entry = self._memory.get(url)
        if entry is not None:
            logger.debug("cache hit (memory): %s", url)
            return entry

        if not self.persist:
            return None

        entry = self._read(url)
        if entry is not None:
            logger.debug("cache hit (disk): %s", url)
            self._memory[url] = entry
        return entry

    def put(self, url: str, response: CachedResponse) -> None:
        """Store ``response``; a failing disk write leaves the memory entry in place."""
        self._memory[url] = response
        if not self.persist:
            return
        try:
            self._write(url, response)
        except OSError as e:
            logger.warning("could not persist cache entry for %s in %s: %s", url, self.directory, e)

    def clear(self) -> None:
        """Drop every entry, in memory and on disk."""
        self._memory.clear()
        if self.persist and self._fs.isdir(self._root):
            for path in self._fs.glob(f"{self._root}/*.json"):
                self._fs.rm_file(path)

    def __contains__(self, url: str) -> bool:
        return self.get(url) is not None

    def __len__(self) -> int:
        return len(self._memory)

    def is_expired(self, path: str) -> bool:
        if self.ttl is None:
            return False
        return time.time() - self._fs.modified(path).timestamp() > self.ttl

    def _read(self, url: str) -> CachedResponse | None:
        path = self._entry_path(url)
        try:
            if self.is_expired(path):
                return None
            with self._fs.open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            return None
        except (OSError, ValueError):
            logger.warning("discarding unreadable cache entry %s", path)
            if self._fs.exists(path):
                self._fs.rm_file(path)
            return None

        if data.get("url") != url:
            return None
        return CachedResponse(status=int(data["status"]), body=data.get("body"))

    def _write(self, url: str, response: CachedResponse) -> None:
        path = self._entry_path(url)
        tmp = f"{path}.{uuid.uuid4().hex}.tmp"
        self._fs.makedirs(self._root, exist_ok=True)
        try:
            with self._fs.open(tmp, "w", encoding="utf-8") as f:
                json.dump({"url": url, "status": response.status, "body": response.body}, f, ensure_ascii=False)
            # readers only ever see a complete entry
            self._fs.mv(tmp, path)
        finally:
            if self._fs.exists(tmp):
                self._fs.rm_file(tmp)

    def __repr__(self) -> str:
        return f"ResponseCache({str(self.directory)!r}, ttl={self.ttl!r})"
