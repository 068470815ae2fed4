"""Repository layer for external access.

This layer wraps everything outside the process behind small classes:
the rendering engine entry module, the settings backend API and the
settings store. Each satisfies a protocol from ``render_cache.protocols``
(structural typing, no inheritance needed).
"""

from render_cache.protocols import RenderEngine, SettingsStore

from .render_bridge import (
    DevelopmentRenderBridge,
    ModuleRenderBridge,
    ProductionRenderBridge,
    create_render_engine,
)
from .settings_api import SettingsApiClient
from .settings_store import THEME_KEY, InMemorySettingsStore

__all__ = [
    "RenderEngine",
    "SettingsStore",
    "DevelopmentRenderBridge",
    "ModuleRenderBridge",
    "ProductionRenderBridge",
    "create_render_engine",
    "SettingsApiClient",
    "InMemorySettingsStore",
    "THEME_KEY",
]
