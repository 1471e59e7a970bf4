"""CLI interface for docsite."""

import asyncio
import dataclasses
import sys
from pathlib import Path

import tyro

from .config import SiteConfig
from .context import SiteContext
from .package import NotApplicable, NotFound, Package, UpstreamFailure, get_package_detail, list_packages


def serve(config: Path | None = None, host: str | None = None, port: int | None = None) -> None:
    """Run the documentation server.

    Args:
        config: Config file (TOML/YAML/JSON). Defaults to $DOCSITE_CONFIG.
        host: Interface to bind (overrides config)
        port: Port to listen on (overrides config and $PORT)
    """
    from .server import run

    site_config = SiteConfig.load(config)
    overrides = {key: value for key, value in {"host": host, "port": port}.items() if value is not None}
    if overrides:
        site_config = dataclasses.replace(site_config, **overrides)
    run(site_config)


async def _with_context(site_config: SiteConfig, func):
    ctx = SiteContext.create(site_config)
    try:
        return await func(ctx)
    finally:
        await ctx.close()


def list_middleware(query: str | None = None, config: Path | None = None) -> None:
    """List middleware packages.

    Args:
        query: Only show packages whose name contains this
        config: Config file (TOML/YAML/JSON)
    """
    site_config = SiteConfig.load(config)
    try:
        pkgs = asyncio.run(_with_context(site_config, lambda ctx: list_packages(ctx, query)))
    except UpstreamFailure as e:
        print(f"✗ Failed: {e}")
        sys.exit(1)

    if not pkgs:
        print("No middleware found.")
        return

    print(f"Found {len(pkgs)} package(s):\n")
    for pkg in pkgs:
        print(f"  {pkg.name}")


def info(name: tyro.conf.Positional[str], config: Path | None = None) -> None:
    """Show the latest version and repository of a middleware.

    Args:
        name: Middleware name or npm PURL (e.g. "logger", "@tinyhttp/logger@2.0.0")
        config: Config file (TOML/YAML/JSON)
    """
    site_config = SiteConfig.load(config)
    try:
        package = Package(name, scope=site_config.registry_scope)
    except ValueError as e:
        print(f"✗ {e}")
        sys.exit(1)
    if package.scope != site_config.registry_scope:
        print(f"✗ {package.full_name} is not a {site_config.registry_scope} package")
        sys.exit(1)

    try:
        result = asyncio.run(_with_context(site_config, lambda ctx: get_package_detail(ctx, package.name)))
    except UpstreamFailure as e:
        print(f"✗ Failed: {e}")
        sys.exit(1)

    if isinstance(result, NotApplicable):
        print(f"{package.name} is a core package, not a middleware.")
        return
    if isinstance(result, NotFound):
        print(f"Package not found: {package.full_name}")
        sys.exit(1)

    print(f"Package: {result.name}")
    print(f"Version: {result.version}")
    if package.version and package.version != result.version:
        print(f"  (requested {package.version}, only the latest version is shown)")
    print(f"Repository: {result.repo_link}")
    if result.repo_directory:
        print(f"Directory: {result.repo_directory}")


def main() -> None:
    """docsite - tinyhttp documentation server."""
    if len(sys.argv) < 2:
        print("Usage: docsite <command> [options]")
        print("\nCommands:")
        print("  serve             Run the documentation server")
        print("  list              List middleware packages")
        print("  info <name>       Show information about a middleware")
        sys.exit(1)

    command = sys.argv[1]
    commands = {"serve": serve, "list": list_middleware, "info": info}

    if command in commands:
        tyro.cli(commands[command], args=sys.argv[2:])
    else:
        print(f"Unknown command: {command}")
        print("Use 'docsite --help' for usage information")
        sys.exit(1)


if __name__ == "__main__":
    main()
