"""Rendering engine protocol.

Defines the single call the server makes into the server-side renderer.

Implementations can include:
- a precompiled entry module imported once (production)
- a source entry module re-imported when it changes (development)
- a fake engine in tests
"""

from typing import Protocol, runtime_checkable

from render_cache.entities import RenderResult


@runtime_checkable
class RenderEngine(Protocol):
    """Protocol for rendering engine bridges.

    Example:
        ```python
        engine: RenderEngine = ProductionRenderBridge("entry_server", theme="default")
        result = await engine.render("/about")
        ```
    """

    @property
    def theme(self) -> str | None:
        """Return the theme namespace the engine renders with."""
        ...

    async def render(self, url: str) -> RenderResult:
        """Render a route.

        Args:
            url: Request target (path plus optional query string)

        Returns:
            The markup, head payload, metadata and client data for the route
        """
        ...
