"""FastAPI application entry point."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import FileResponse, HTMLResponse, PlainTextResponse, Response

from docsite import __version__
from docsite.config import SiteConfig
from docsite.context import SiteContext
from docsite.markdown import render
from docsite.package import NotApplicable, NotFound, UpstreamFailure, get_package_detail, list_packages
from docsite.package.listing import search_view_model

logger = logging.getLogger(__name__)
access_logger = logging.getLogger("docsite.access")

IMMUTABLE = "public, max-age=31536000, immutable"
NO_CACHE = "no-cache"

router = APIRouter()


def configure_logging(level: str | int = logging.INFO) -> None:
    """Send docsite logs to stderr with timestamps."""
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    root = logging.getLogger("docsite")
    root.handlers[:] = [handler]
    root.setLevel(level.upper() if isinstance(level, str) else level)
    root.propagate = False


def get_context(request: Request) -> SiteContext:
    """Get SiteContext from app state."""
    return request.app.state.context


@router.get("/mw")
async def search(request: Request, q: str | None = None) -> HTMLResponse:
    """Middleware listing, filtered by ``q``."""
    ctx = get_context(request)
    pkgs = await list_packages(ctx, q)
    return HTMLResponse(ctx.views.render("pages/search.html", search_view_model(pkgs, q)))


@router.get("/mw/{name}")
async def middleware(request: Request, name: str) -> Response:
    """Middleware detail page."""
    ctx = get_context(request)
    result = await get_package_detail(ctx, name)

    if isinstance(result, NotApplicable):
        # core packages have no page here; fall through to static files
        return await serve_static(request, f"mw/{name}")
    if isinstance(result, NotFound):
        return Response(status_code=404)
    return HTMLResponse(ctx.views.render("pages/mw.html", result.to_view_model()))


@router.get("/{path:path}")
async def static(request: Request, path: str) -> Response:
    """Static files and markdown pages."""
    return await serve_static(request, path)


def _resolve_inside(root: Path, relative: str) -> Path | None:
    target = (root / relative).resolve()
    if target != root and root not in target.parents:
        return None
    return target


def render_page(page: Path) -> str:
    return render(page.read_text(encoding="utf-8"), header_ids=True)


async def serve_static(request: Request, path: str) -> Response:
    """Serve ``path`` from the static directory.

    Tries the file itself (``index.html`` for directories), then
    ``<path>.md`` rendered as a page, then the 404 handler.
    """
    ctx = get_context(request)
    root = Path(ctx.config.static_dir).resolve()
    path = path.strip("/")

    target = _resolve_inside(root, path)
    if target is None:
        return not_found(request)

    if target.is_dir():
        target = target / "index.html"
    if target.is_file():
        cache_control = IMMUTABLE if ctx.config.is_production else NO_CACHE
        return FileResponse(target, headers={"Cache-Control": cache_control})

    page = _resolve_inside(root, f"{path or 'index'}.md")
    if page is not None and page.is_file():
        html = await asyncio.to_thread(render_page, page)
        view_model = {"title": ctx.config.site_name, "content_html": html}
        return HTMLResponse(
            ctx.views.render("pages/markdown.html", view_model),
            headers={"Cache-Control": IMMUTABLE},
        )

    return not_found(request)


def not_found(request: Request) -> Response:
    """404 as an HTML page for browsers, plain text otherwise."""
    if "text/html" not in request.headers.get("accept", ""):
        return PlainTextResponse("Not Found", status_code=404)

    page = Path(get_context(request).config.static_dir) / "404.html"
    if page.is_file():
        return FileResponse(page, status_code=404)
    return HTMLResponse("<h1>404 Not Found</h1>", status_code=404)


async def upstream_failure_handler(request: Request, exc: Exception) -> Response:
    logger.error("upstream failure on %s %s", request.method, request.url.path, exc_info=exc)
    return PlainTextResponse("Internal Server Error", status_code=500)


async def log_requests(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    client = request.client.host if request.client else "-"
    access_logger.info(
        "%s %s %s %d %.1fms", client, request.method, request.url.path, response.status_code, elapsed_ms
    )
    return response


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown.

    Creates the production context (httpx client and response cache) on
    startup and closes it on shutdown.
    """
    config: SiteConfig = app.state.config
    context = SiteContext.create(config)
    app.state.context = context
    logger.info("Running on http://localhost:%d in %s mode", config.port, config.mode)

    yield

    await context.close()


def create_app(context: SiteContext | None = None, config: SiteConfig | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        context: Optional SiteContext for testing. If None, uses lifespan
                 to create the production context from ``config``.
        config: Configuration for the production context (default: loaded
                from the environment)

    Returns:
        Configured FastAPI application
    """
    if context is not None:
        # Test mode: use provided context, no lifespan
        app = FastAPI(title="docsite", version=__version__, docs_url=None, redoc_url=None, openapi_url=None)
        app.state.context = context
        app.state.config = context.config
    else:
        app = FastAPI(
            title="docsite",
            version=__version__,
            docs_url=None,
            redoc_url=None,
            openapi_url=None,
            lifespan=lifespan,
        )
        app.state.config = config or SiteConfig.load()

    app.middleware("http")(log_requests)
    app.add_exception_handler(UpstreamFailure, upstream_failure_handler)
    app.include_router(router)

    return app


def run(config: SiteConfig | None = None) -> None:
    """Run the server (entry point for CLI)."""
    config = config or SiteConfig.load()
    configure_logging(config.log_level)
    uvicorn.run(create_app(config=config), host=config.host, port=config.port, log_level="warning")


if __name__ == "__main__":
    run()
