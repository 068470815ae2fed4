"""Rendering engine bridges.

The rendering engine is a Python module exposing::

    async def render(url: str, theme: str | None) -> Mapping[str, Any]

The returned mapping carries ``markup``, ``head``, ``metadata``,
``redirect``, ``state``, ``settings``, ``entities`` and ``prefetch``.

Two bridges satisfy the RenderEngine protocol:
- ProductionRenderBridge imports the precompiled entry module once.
- DevelopmentRenderBridge re-imports the entry module whenever its source
  file changes, so edits show up without restarting the server.
"""

import asyncio
import importlib
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from types import ModuleType

from render_cache.config import Settings
from render_cache.entities import RenderResult
from render_cache.errors import RenderError
from render_cache.logging import get_logger

logger = get_logger(__name__)


class ModuleRenderBridge(ABC):
    """Calls ``render`` on an entry module; subclasses decide how it is loaded."""

    def __init__(
        self,
        module_name: str,
        theme: str | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the bridge.

        Args:
            module_name: Dotted path of the entry module.
            theme: Theme namespace passed to every render call.
            timeout: Seconds before a render is abandoned. None waits forever.
        """
        self._module_name = module_name
        self._theme = theme
        self._timeout = timeout
        self._module: ModuleType | None = None

    @property
    def theme(self) -> str | None:
        """Get the theme namespace this bridge renders with."""
        return self._theme

    @abstractmethod
    def load_module(self) -> ModuleType:
        """Return the entry module, importing it as needed."""

    async def render(self, url: str) -> RenderResult:
        """Render ``url`` through the entry module.

        Raises:
            RenderError: If the module cannot be loaded or the render fails.
                A timeout or a non-mapping result counts as a failure.
        """
        try:
            module = self.load_module()
        except Exception as e:
            raise RenderError(f"Cannot load render module {self._module_name}: {e}") from e

        render = getattr(module, "render", None)
        if render is None:
            raise RenderError(f"Render module {self._module_name} does not define render()")

        try:
            data = await asyncio.wait_for(render(url, self._theme), self._timeout)
        except asyncio.TimeoutError as e:
            raise RenderError(f"Render timed out after {self._timeout}s: {url}") from e
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(str(e) or type(e).__name__) from e

        if not isinstance(data, Mapping):
            raise RenderError(
                f"Render module {self._module_name} returned {type(data).__name__}, expected a mapping"
            )
        return RenderResult.from_mapping(data)


class ProductionRenderBridge(ModuleRenderBridge):
    """Bridge to a precompiled entry module, imported on first use."""

    def load_module(self) -> ModuleType:
        if self._module is None:
            self._module = importlib.import_module(self._module_name)
            logger.info("render_module_loaded", module=self._module_name)
        return self._module


class DevelopmentRenderBridge(ModuleRenderBridge):
    """Bridge that hot-reloads the entry module when its file changes."""

    def __init__(
        self,
        module_name: str,
        theme: str | None = None,
        timeout: float | None = None,
    ) -> None:
        super().__init__(module_name, theme=theme, timeout=timeout)
        self._mtime: int | None = None

    def _source_mtime(self, module: ModuleType) -> int | None:
        source = getattr(module, "__file__", None)
        if not source:
            return None
        try:
            return Path(source).stat().st_mtime_ns
        except OSError:
            return None

    def load_module(self) -> ModuleType:
        if self._module is None:
            self._module = importlib.import_module(self._module_name)
            self._mtime = self._source_mtime(self._module)
            return self._module

        mtime = self._source_mtime(self._module)
        if mtime != self._mtime:
            self._module = importlib.reload(self._module)
            self._mtime = mtime
            logger.info("render_module_reloaded", module=self._module_name)
        return self._module


def create_render_engine(settings: Settings, theme: str | None) -> ModuleRenderBridge:
    """Pick the bridge for the configured environment.

    Args:
        settings: Application settings
        theme: Active theme namespace

    Returns:
        ProductionRenderBridge in production, DevelopmentRenderBridge otherwise
    """
    bridge_class = ProductionRenderBridge if settings.is_production else DevelopmentRenderBridge
    return bridge_class(settings.render_module, theme=theme, timeout=settings.render_timeout)
