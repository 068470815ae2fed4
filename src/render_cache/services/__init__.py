"""Service layer for caching, negotiation and dispatch logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable with fake engines and clocks.

Architecture:
    Handler -> Dispatcher -> PageCache / StaticFileCache -> RenderEngine
    (HTTP)  -> (Decision) -> (Caches)                   -> (Repository)
"""

from .dispatcher import Dispatcher
from .document import DocumentAssembler
from .page_cache import PageCache, cache_key, device_class
from .static_files import StaticFileCache
from .theme_registry import ThemeRegistry

__all__ = [
    "Dispatcher",
    "DocumentAssembler",
    "PageCache",
    "StaticFileCache",
    "ThemeRegistry",
    "cache_key",
    "device_class",
]
