"""
Shared fixtures for the render cache tests.
"""

import json
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from render_cache.api.app import create_app
from render_cache.api.dependencies import build_components
from render_cache.config import Settings
from render_cache.entities import RenderResult
from render_cache.errors import RenderError
from render_cache.repositories import InMemorySettingsStore, SettingsApiClient

SECRET = "s3cret"
AUTH = {"Authorization": f"Bearer {SECRET}"}

TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="UTF-8">
<title>{title}</title>
<analytics />
<custom-css />
<script type="module" src="/@vite/client"></script>
</head>
<body>
<div id="app"></div>
<custom-js />
</body>
</html>
"""


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeEngine:
    """Rendering engine returning a canned result and recording calls."""

    def __init__(
        self,
        result: RenderResult | None = None,
        error: RenderError | None = None,
        theme: str | None = "default",
    ) -> None:
        self.result = result or RenderResult(markup="<p>ok</p>")
        self.error = error
        self.calls: list[str] = []
        self._theme = theme

    @property
    def theme(self) -> str | None:
        return self._theme

    async def render(self, url: str) -> RenderResult:
        self.calls.append(url)
        if self.error is not None:
            raise self.error
        return self.result


def write_theme(root: Path, folder: str, manifest: str | dict | None) -> None:
    directory = root / folder
    directory.mkdir(parents=True)
    if manifest is None:
        return
    text = manifest if isinstance(manifest, str) else json.dumps(manifest)
    (directory / "theme.json").write_text(text)


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """A build output directory, a source template and a themes directory."""
    dist = tmp_path / "dist"
    (dist / "assets").mkdir(parents=True)
    (dist / "index.html").write_text(TEMPLATE)
    (dist / "assets" / "app.js").write_text("console.log('hello world');\n" * 100)
    (dist / "assets" / "logo.png").write_bytes(b"\x89PNG\r\n\x1a\n" + b"\x00" * 64)
    (dist / "robots.txt").write_text("User-agent: *\nAllow: /\n")
    (tmp_path / "index.html").write_text(TEMPLATE)

    themes = tmp_path / "src"
    write_theme(
        themes,
        "theme-classic",
        {
            "name": "Classic",
            "description": "The classic look",
            "author": "Blog Team",
            "version": "1.2.0",
            "preview": "/previews/classic.png",
        },
    )
    write_theme(themes, "theme-default", {"name": "Default"})
    write_theme(themes, "theme-broken", "{not json")
    write_theme(themes, "theme-empty", None)
    write_theme(themes, "components", {"name": "Not a theme"})
    return tmp_path


@pytest.fixture
def settings(site: Path) -> Settings:
    return Settings(
        website_url="https://blog.example",
        api_url="http://settings.test",
        admin_signature=SECRET,
        app_env="production",
        dist_dir=str(site / "dist"),
        source_template=str(site / "index.html"),
        themes_dir=str(site / "src"),
        render_timeout=None,
        restart_delay=0.0,
        startup_delay=0.0,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def render_result() -> RenderResult:
    return RenderResult(
        markup="<h1>Hello</h1>",
        head={"headTags": '<meta name="description" content="Home page">'},
        metadata={"title": "Home"},
        settings={
            "blog.analyticsCode": "<script>track()</script>",
            "blog.customCss": "<style>body{margin:0}</style>",
        },
        state={"user": None, "note": "</script>"},
        entities=[{"id": 1, "title": "First post"}],
        prefetch={"/api/posts": [1]},
    )


@pytest.fixture
def engine(render_result: RenderResult) -> FakeEngine:
    return FakeEngine(render_result)


@pytest.fixture
def settings_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def settings_api(settings_requests: list[httpx.Request]) -> SettingsApiClient:
    """Settings API client answered by an in-process mock transport."""

    def handler(request: httpx.Request) -> httpx.Response:
        settings_requests.append(request)
        return httpx.Response(200, json={"blog.title": "My Blog", "blog.theme": "default"})

    return SettingsApiClient("http://settings.test", transport=httpx.MockTransport(handler))


@pytest.fixture
def store() -> InMemorySettingsStore:
    return InMemorySettingsStore()


@pytest.fixture
def restarts() -> list[str]:
    return []


@pytest.fixture
def components(settings, store, engine, restarts, clock, settings_api):
    return build_components(
        settings,
        store,
        engine=engine,
        on_theme_change=restarts.append,
        clock=clock,
        settings_api=settings_api,
    )


@pytest.fixture
def client(components):
    """Create a test client."""
    with TestClient(create_app(components)) as client:
        yield client
