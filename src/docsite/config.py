"""Site configuration from defaults, an optional config file and the environment."""

from __future__ import annotations

import copy
import dataclasses
import json as json_lib
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Self

import tomlkit
from deepmerge import Merger
from ruamel.yaml import YAML

from .file import ResponseCache

DEFAULT_PORT = 3000

# dict recursive, list/scalar replace
docsite_merger = Merger(
    [
        (dict, ["merge"]),
        (list, ["override"]),
    ],
    ["override"],  # Other types (scalars) replace
    ["override"],  # Type conflict: replace
)


def merge_deep(*docs: Mapping[str, Any]) -> dict:
    """Deep merge multiple documents.

    Strategy:
    - Dicts: recursive merge
    - Lists: replace entirely
    - Scalars: replace
    """
    result: dict = {}
    for doc in docs:
        result = docsite_merger.merge(result, copy.deepcopy(dict(doc)))
    return result


def _parse_port(value: str | int | None) -> int:
    try:
        port = int(value) if value is not None else 0
    except (TypeError, ValueError):
        port = 0
    return port or DEFAULT_PORT


def read_config_file(path: str | Path) -> dict:
    """Parse a TOML, YAML or JSON config file into a plain dict.

    Raises:
        ValueError: If the file extension is not supported
    """
    path = Path(path)
    content = path.read_text(encoding="utf-8")
    suffix = path.suffix.lower()

    if suffix == ".toml":
        return tomlkit.parse(content).unwrap()
    if suffix in (".yaml", ".yml"):
        data = YAML(typ="safe").load(content) or {}
        return dict(data)
    if suffix == ".json":
        return json_lib.loads(content) if content.strip() else {}
    raise ValueError(f"Unsupported config file format: {path}")


@dataclass(frozen=True)
class SiteConfig:
    """Settings for the documentation server."""

    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    mode: str = "development"
    site_name: str = "tinyhttp"
    registry_url: str = "https://registry.npmjs.org"
    registry_scope: str = "@tinyhttp"
    listing_url: str = "https://api.github.com/repos/talentlessguy/tinyhttp/contents/packages"
    static_dir: str = "static"
    cache_dir: str = str(ResponseCache.CACHE_DIR)
    cache_ttl: int | None = None
    timeout: float = 30.0
    log_level: str = "INFO"

    @property
    def is_production(self) -> bool:
        return self.mode == "production"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Self:
        """Build from a flat mapping, rejecting unknown keys."""
        fields = {f.name for f in dataclasses.fields(cls)}
        unknown = sorted(set(data) - fields)
        if unknown:
            raise ValueError(f"Unknown config keys: {', '.join(unknown)}")

        values = dict(data)
        if "port" in values:
            values["port"] = _parse_port(values["port"])
        if values.get("cache_ttl") is not None:
            values["cache_ttl"] = int(values["cache_ttl"])
        if "timeout" in values:
            values["timeout"] = float(values["timeout"])
        if "mode" in values and values["mode"] not in ("development", "production"):
            raise ValueError(f"Unknown mode: {values['mode']}")
        return cls(**values)

    @classmethod
    def load(cls, path: str | Path | None = None, environ: Mapping[str, str] | None = None) -> Self:
        """Load configuration.

        Precedence (lowest to highest): built-in defaults, the config file
        (``path`` or ``$DOCSITE_CONFIG``), environment variables.

        Args:
            path: Optional TOML/YAML/JSON config file
            environ: Environment mapping (default: ``os.environ``)
        """
        env = os.environ if environ is None else environ
        path = path or env.get("DOCSITE_CONFIG")

        file_values = read_config_file(path) if path else {}
        # a [docsite] table may hold the settings
        file_values = file_values.get("docsite", file_values)

        return cls.from_dict(merge_deep(file_values, _env_overrides(env)))


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    if "PORT" in env:
        overrides["port"] = _parse_port(env["PORT"])
    mapping = {
        "DOCSITE_HOST": "host",
        "DOCSITE_ENV": "mode",
        "DOCSITE_STATIC_DIR": "static_dir",
        "DOCSITE_CACHE_DIR": "cache_dir",
        "DOCSITE_CACHE_TTL": "cache_ttl",
        "DOCSITE_LOG_LEVEL": "log_level",
    }
    for var, key in mapping.items():
        if env.get(var):
            overrides[key] = env[var]
    return overrides
