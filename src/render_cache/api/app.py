from contextlib import asynccontextmanager

from fastapi import FastAPI, Header, Request, Response
from fastapi.responses import PlainTextResponse

from render_cache.api.dependencies import AdminDep, Components, PageDep
from render_cache.dto import CacheClearResponse, CacheStatsResponse, ThemeItem
from render_cache.errors import RenderCacheError
from render_cache.logging import get_logger

logger = get_logger(__name__)


def create_app(components: Components) -> FastAPI:
    """Build the HTTP app around one bootstrap's components.

    Args:
        components: Output of ``build_components``

    Returns:
        The FastAPI application
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Log startup and release clients on shutdown."""
        logger.info(
            "app_started",
            environment=components.settings.app_env,
            themes=len(components.themes),
            theme=components.engine.theme,
        )

        yield

        await components.aclose()
        logger.info("app_stopped")

    app = FastAPI(
        title="Render Cache",
        description="Rendering cache and asset delivery in front of a server-side renderer",
        version="0.1.0",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.components = components

    @app.exception_handler(RenderCacheError)
    async def render_cache_error_handler(request: Request, exc: RenderCacheError) -> PlainTextResponse:
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.get("/themas", response_model=list[ThemeItem])
    async def list_themes(handler: AdminDep) -> list[ThemeItem]:
        """List the themes discovered at startup."""
        return handler.list_themes()

    @app.post("/cache/clear", response_model=CacheClearResponse)
    async def clear_cache(
        handler: AdminDep,
        authorization: str | None = Header(None),
    ) -> CacheClearResponse:
        """Clear the page render cache."""
        handler.authorize(authorization)
        return handler.clear_cache()

    @app.get("/cache/stats", response_model=CacheStatsResponse)
    async def cache_stats(
        handler: AdminDep,
        authorization: str | None = Header(None),
    ) -> CacheStatsResponse:
        """Get page render cache statistics."""
        handler.authorize(authorization)
        return handler.get_stats()

    @app.post("/set-thema", response_class=PlainTextResponse)
    async def set_theme(
        request: Request,
        handler: AdminDep,
        authorization: str | None = Header(None),
    ) -> PlainTextResponse:
        """Switch the active theme and schedule a graceful restart."""
        handler.authorize(authorization)
        message = await handler.set_theme(await request.body())
        return PlainTextResponse(message)

    @app.api_route("/{path:path}", methods=["GET", "HEAD"], include_in_schema=False)
    async def page(request: Request, handler: PageDep) -> Response:
        """Serve static files and rendered pages."""
        return await handler.handle(request)

    return app
