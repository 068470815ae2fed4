"""Component wiring and dependency injection for the FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - ``build_components`` creates every per-bootstrap object
    - ``create_app`` stores them in app.state
    - Dependency functions retrieve from request.app.state
    - A restart builds a fresh set; nothing is shared across bootstraps
      except the settings store
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Annotated

from fastapi import Depends, Request

from render_cache.config import Settings
from render_cache.handlers import AdminHandler, PageHandler
from render_cache.protocols import RenderEngine, SettingsStore
from render_cache.repositories import SettingsApiClient
from render_cache.services import (
    Dispatcher,
    DocumentAssembler,
    PageCache,
    StaticFileCache,
    ThemeRegistry,
)


@dataclass
class Components:
    """Everything one bootstrap creates."""

    settings: Settings
    themes: ThemeRegistry
    static_files: StaticFileCache
    page_cache: PageCache
    engine: RenderEngine
    settings_api: SettingsApiClient
    dispatcher: Dispatcher
    admin_handler: AdminHandler
    page_handler: PageHandler

    async def aclose(self) -> None:
        """Release network clients held by the components."""
        await self.settings_api.close()


def build_components(
    settings: Settings,
    settings_store: SettingsStore,
    engine: RenderEngine,
    on_theme_change: Callable[[str], None] | None = None,
    clock: Callable[[], float] = time.time,
    settings_api: SettingsApiClient | None = None,
) -> Components:
    """Create the components for one server lifetime.

    Args:
        settings: Application settings
        settings_store: Process-wide settings store
        engine: Rendering engine bridge for the active theme
        on_theme_change: Called after a theme switch is persisted
        clock: Time source for the page cache
        settings_api: Settings backend client. Defaults to one for settings.api_url.

    Returns:
        Fresh components with empty caches
    """
    themes = ThemeRegistry.discover(settings.themes_dir, base_url=settings.website_url)
    static_files = StaticFileCache(max_age=settings.static_max_age)
    page_cache = PageCache(ttl=settings.page_cache_ttl, clock=clock)
    settings_api = settings_api or SettingsApiClient(settings.api_url)

    dispatcher = Dispatcher(
        static_files=static_files,
        page_cache=page_cache,
        engine=engine,
        assembler=DocumentAssembler(
            production=settings.is_production,
            state_global=settings.state_global,
            data_global=settings.data_global,
        ),
        dist_dir=settings.dist_dir,
        template_path=settings.template_path,
        page_max_age=settings.page_max_age,
    )
    admin_handler = AdminHandler(
        page_cache=page_cache,
        themes=themes,
        settings_api=settings_api,
        settings_store=settings_store,
        secret=settings.admin_signature,
        on_theme_change=on_theme_change,
    )

    return Components(
        settings=settings,
        themes=themes,
        static_files=static_files,
        page_cache=page_cache,
        engine=engine,
        settings_api=settings_api,
        dispatcher=dispatcher,
        admin_handler=admin_handler,
        page_handler=PageHandler(dispatcher),
    )


def get_components(request: Request) -> Components:
    """Dependency injection for Components from app.state.

    Raises:
        RuntimeError: If the app was created without components
    """
    components = getattr(request.app.state, "components", None)
    if components is None:
        raise RuntimeError("Components not initialized. Build the app with create_app().")
    return components


def get_admin_handler(request: Request) -> AdminHandler:
    """Dependency injection for AdminHandler from app.state."""
    return get_components(request).admin_handler


def get_page_handler(request: Request) -> PageHandler:
    """Dependency injection for PageHandler from app.state."""
    return get_components(request).page_handler


# Type aliases for cleaner dependency injection
AdminDep = Annotated[AdminHandler, Depends(get_admin_handler)]
PageDep = Annotated[PageHandler, Depends(get_page_handler)]
