"""Render Cache - rendering cache and asset delivery for server-side rendering.

This package sits in front of a server-side page renderer and decides, per
request, whether to replay a pre-compressed page from memory, serve a
static file with ETag support, or render the route and cache the result.

Layers:
    - protocols: Interface contracts (RenderEngine, SettingsStore, Listener)
    - repositories: Render bridges, settings API client, settings store
    - services: Compression, static files, page cache, themes, dispatch
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts, theme manifest)
    - entities: Domain models (internal)
    - api: FastAPI app factory and the restartable supervisor

Usage:
    ```python
    from render_cache.services import PageCache

    cache = PageCache(ttl=1800)
    cache.store("/:desktop", "<html></html>", {"Content-Type": "text/html"})
    ```

To run the server:
    ```
    python -m render_cache.api.supervisor
    ```
"""

from render_cache.config import Settings, get_settings
from render_cache.entities import PageCacheEntry, PageRequest, PageResponse, ThemeDescriptor
from render_cache.errors import (
    AuthError,
    ExternalServiceError,
    NotFoundError,
    RenderCacheError,
    RenderError,
    ValidationError,
)
from render_cache.protocols import Listener, RenderEngine, SettingsStore
from render_cache.services import Dispatcher, PageCache, StaticFileCache, ThemeRegistry

__all__ = [
    # Configuration
    "Settings",
    "get_settings",
    # Protocols (interfaces)
    "Listener",
    "RenderEngine",
    "SettingsStore",
    # Services
    "Dispatcher",
    "PageCache",
    "StaticFileCache",
    "ThemeRegistry",
    # Entities
    "PageCacheEntry",
    "PageRequest",
    "PageResponse",
    "ThemeDescriptor",
    # Errors
    "RenderCacheError",
    "ValidationError",
    "AuthError",
    "NotFoundError",
    "RenderError",
    "ExternalServiceError",
]
