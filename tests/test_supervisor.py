"""
Tests for the server lifecycle and graceful restart.
"""

import asyncio
import socket
from dataclasses import replace

import httpx
import pytest
from fastapi import FastAPI

from render_cache.api.supervisor import Supervisor, UvicornListener
from render_cache.entities import RenderResult
from render_cache.repositories import THEME_KEY, InMemorySettingsStore

from conftest import FakeEngine


class FakeListener:
    """Listener recording starts and stops without opening a socket."""

    def __init__(self) -> None:
        self.apps: list[FastAPI] = []
        self.stops = 0
        self._closed = asyncio.Event()

    async def start(self, app: FastAPI) -> None:
        self.apps.append(app)
        self._closed = asyncio.Event()

    async def stop(self) -> None:
        self.stops += 1
        self._closed.set()

    async def wait_closed(self) -> None:
        await self._closed.wait()


class RecordingFactory:
    """Engine factory remembering the theme of every bootstrap."""

    def __init__(self) -> None:
        self.themes: list[str | None] = []

    def __call__(self, settings, theme):
        self.themes.append(theme)
        return FakeEngine(theme=theme)


@pytest.fixture
def listener() -> FakeListener:
    return FakeListener()


@pytest.fixture
def factory() -> RecordingFactory:
    return RecordingFactory()


@pytest.fixture
def supervisor(settings, listener, store, factory) -> Supervisor:
    return Supervisor(settings, listener, settings_store=store, engine_factory=factory)


@pytest.mark.asyncio
async def test_start_serves_fresh_components(supervisor, listener):
    await supervisor.start()

    assert listener.apps == [supervisor.app]
    assert len(supervisor.components.page_cache) == 0
    assert supervisor.components.engine.theme == "default"


@pytest.mark.asyncio
async def test_restart_rebuilds_components_with_empty_caches(supervisor, listener, settings):
    await supervisor.start()
    before = supervisor.components
    before.page_cache.store("/:desktop", "<html></html>", {"Content-Type": "text/html"})
    before.static_files.serve(settings.template_path)

    await supervisor.restart()

    after = supervisor.components
    assert after is not before
    assert len(after.page_cache) == 0
    assert len(after.static_files) == 0
    assert listener.stops == 1
    assert len(listener.apps) == 2
    assert supervisor.restarts == 1


@pytest.mark.asyncio
async def test_stored_theme_reaches_the_next_bootstrap(supervisor, store, factory):
    await supervisor.start()
    store.set_settings({THEME_KEY: "classic"})

    await supervisor.restart()

    assert factory.themes == ["default", "classic"]
    assert supervisor.components.engine.theme == "classic"
    assert supervisor.active_theme == "classic"


@pytest.mark.asyncio
async def test_initial_theme_comes_from_store(settings, listener, factory):
    store = InMemorySettingsStore({THEME_KEY: "classic"})
    supervisor = Supervisor(settings, listener, settings_store=store, engine_factory=factory)

    await supervisor.start()

    assert factory.themes == ["classic"]


@pytest.mark.asyncio
async def test_schedule_restart_runs_in_background(supervisor, listener):
    await supervisor.start()

    task = supervisor.schedule_restart("classic")
    assert supervisor.schedule_restart("classic") is task

    await task

    assert supervisor.restarts == 1
    assert len(listener.apps) == 2


@pytest.mark.asyncio
async def test_theme_switch_through_admin_handler_restarts(supervisor, store, factory, settings_api):
    await supervisor.start()
    components = supervisor.components
    components.admin_handler._settings_api = settings_api

    await components.admin_handler.set_theme(b'{"theme": "classic"}')
    await supervisor.schedule_restart()

    assert supervisor.restarts == 1
    assert factory.themes == ["default", "classic"]


@pytest.mark.asyncio
async def test_serve_forever_returns_after_plain_stop(supervisor, listener):
    serving = asyncio.create_task(supervisor.serve_forever())
    await asyncio.sleep(0)
    assert len(listener.apps) == 1

    await supervisor.stop()

    await asyncio.wait_for(serving, timeout=1)
    assert supervisor.components is None


@pytest.mark.asyncio
async def test_serve_forever_survives_restart(supervisor, listener):
    serving = asyncio.create_task(supervisor.serve_forever())
    await asyncio.sleep(0)

    await supervisor.schedule_restart("classic")
    await asyncio.sleep(0)

    assert not serving.done()
    assert len(listener.apps) == 2

    await supervisor.stop()
    await asyncio.wait_for(serving, timeout=1)
    assert supervisor.restarts == 1


def free_port() -> int:
    with socket.socket() as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]


def themed_engine(settings, theme):
    return FakeEngine(RenderResult(markup=f"<p>theme {theme}</p>"), theme=theme)


async def fetch(url: str) -> httpx.Response:
    async with httpx.AsyncClient(trust_env=False) as http:
        return await http.get(url)


@pytest.mark.asyncio
async def test_uvicorn_listener_reopens_same_port_after_restart(settings, store):
    port = free_port()
    url = f"http://127.0.0.1:{port}/"
    supervisor = Supervisor(
        replace(settings, host="127.0.0.1", port=port),
        UvicornListener("127.0.0.1", port),
        settings_store=store,
        engine_factory=themed_engine,
    )

    await supervisor.start()
    try:
        before = await fetch(url)
        store.set_settings({THEME_KEY: "classic"})
        await supervisor.restart()
        after = await fetch(url)
    finally:
        await supervisor.stop()

    assert before.status_code == 200
    assert "<p>theme default</p>" in before.text
    assert after.status_code == 200
    assert "<p>theme classic</p>" in after.text

    with pytest.raises(httpx.ConnectError):
        await fetch(url)
