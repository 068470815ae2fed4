"""Server lifecycle and graceful in-process restart.

The supervisor owns component state; the listener owns the socket. A
restart closes the listener, rebuilds every component (theme discovery,
render bridge, empty caches) and opens a new listener. Only the settings
store survives, which is how a theme switch takes effect.
"""

import asyncio
from collections.abc import Callable

import uvicorn
from fastapi import FastAPI

from render_cache.api.app import create_app
from render_cache.api.dependencies import Components, build_components
from render_cache.config import Settings, get_settings
from render_cache.logging import configure_logging, get_logger
from render_cache.protocols import Listener, RenderEngine, SettingsStore
from render_cache.repositories import THEME_KEY, InMemorySettingsStore, create_render_engine

logger = get_logger(__name__)

EngineFactory = Callable[[Settings, str | None], RenderEngine]


class UvicornListener:
    """Serves an app with a programmatically controlled ``uvicorn.Server``."""

    def __init__(self, host: str, port: int, poll_interval: float = 0.05) -> None:
        self._host = host
        self._port = port
        self._poll_interval = poll_interval
        self._server: uvicorn.Server | None = None
        self._task: asyncio.Task | None = None

    async def start(self, app: FastAPI) -> None:
        config = uvicorn.Config(app, host=self._host, port=self._port, log_config=None)
        self._server = uvicorn.Server(config)
        self._task = asyncio.create_task(self._server.serve())

        while not self._server.started:
            if self._task.done():
                self._task.result()
                raise RuntimeError(f"Listener on {self._host}:{self._port} exited during startup")
            await asyncio.sleep(self._poll_interval)

        logger.info("listener_started", url=f"http://{self._host}:{self._port}")

    async def stop(self) -> None:
        if self._server is None or self._task is None:
            return
        self._server.should_exit = True
        await self._task
        self._server = None
        logger.info("listener_stopped", port=self._port)

    async def wait_closed(self) -> None:
        if self._task is not None:
            await self._task


class Supervisor:
    """Starts, stops and restarts the server in-process.

    Example:
        ```python
        supervisor = Supervisor(settings, UvicornListener(settings.host, settings.port))
        await supervisor.serve_forever()
        ```
    """

    def __init__(
        self,
        settings: Settings,
        listener: Listener,
        settings_store: SettingsStore | None = None,
        engine_factory: EngineFactory = create_render_engine,
    ) -> None:
        """Initialize the supervisor.

        Args:
            settings: Application settings.
            listener: Socket owner the app is served on.
            settings_store: Store shared by every bootstrap. Defaults to in-memory.
            engine_factory: Builds the render bridge for a theme.
        """
        self._settings = settings
        self._listener = listener
        self._settings_store = settings_store or InMemorySettingsStore()
        self._engine_factory = engine_factory
        self._components: Components | None = None
        self._app: FastAPI | None = None
        self._restart_task: asyncio.Task | None = None
        self.restarts = 0

    @property
    def components(self) -> Components | None:
        """Get the components of the running bootstrap."""
        return self._components

    @property
    def app(self) -> FastAPI | None:
        return self._app

    @property
    def active_theme(self) -> str:
        """Theme the next bootstrap will render with."""
        return self._settings_store.get(THEME_KEY) or self._settings.default_theme

    def bootstrap(self) -> Components:
        """Build a fresh set of components and the app serving them."""
        engine = self._engine_factory(self._settings, self.active_theme)
        components = build_components(
            self._settings,
            self._settings_store,
            engine=engine,
            on_theme_change=self.schedule_restart,
        )
        self._components = components
        self._app = create_app(components)
        return components

    async def start(self) -> None:
        """Bootstrap and open the listener."""
        self.bootstrap()
        await self._listener.start(self._app)

    async def stop(self) -> None:
        """Close the listener and drop the components."""
        await self._listener.stop()
        self._components = None
        self._app = None

    async def restart(self) -> None:
        """Close, rebuild and reopen; caches start empty afterwards."""
        logger.info("server_restarting", theme=self.active_theme)
        await self.stop()
        await self.start()
        self.restarts += 1
        logger.info("server_restarted", theme=self.active_theme, restarts=self.restarts)

    def schedule_restart(self, theme: str | None = None) -> asyncio.Task:
        """Restart after the configured delay without blocking the caller.

        A restart already pending absorbs later requests.
        """
        if self._restart_task is None or self._restart_task.done():
            self._restart_task = asyncio.get_running_loop().create_task(self._delayed_restart(theme))
        return self._restart_task

    async def _delayed_restart(self, theme: str | None) -> None:
        await asyncio.sleep(self._settings.restart_delay)
        logger.info("restart_scheduled_for_theme", theme=theme)
        await self.restart()

    async def serve_forever(self) -> None:
        """Serve until the listener closes without a restart pending."""
        if self._settings.startup_delay:
            await asyncio.sleep(self._settings.startup_delay)

        await self.start()
        while True:
            await self._listener.wait_closed()
            task = self._restart_task
            if task is None:
                break
            await task
            if self._restart_task is task:
                self._restart_task = None


def main() -> None:
    """Run the server with settings from the environment."""
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_json)
    supervisor = Supervisor(settings, UvicornListener(settings.host, settings.port))
    asyncio.run(supervisor.serve_forever())


if __name__ == "__main__":
    main()
