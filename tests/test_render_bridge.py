"""
Tests for the rendering engine bridges.
"""

import asyncio
import os
import sys
import uuid
from pathlib import Path

import pytest

from render_cache.config import Settings
from render_cache.errors import RenderError
from render_cache.repositories import (
    DevelopmentRenderBridge,
    ModuleRenderBridge,
    ProductionRenderBridge,
    create_render_engine,
)

ENTRY_V1 = '''
LOADS = []
LOADS.append(1)


async def render(url, theme):
    return {
        "markup": f"<p>v1 {url} {theme}</p>",
        "metadata": {"title": "One"},
        "redirect": "",
    }
'''

ENTRY_V2 = '''
async def render(url, theme):
    return {"markup": f"<p>v2 {url}</p>"}
'''

ENTRY_FAILING = '''
async def render(url, theme):
    raise LookupError("post not found")
'''

ENTRY_SLOW = '''
import asyncio


async def render(url, theme):
    await asyncio.sleep(5)
    return {}
'''

ENTRY_WITHOUT_RENDER = '''
VALUE = 1
'''

ENTRY_RETURNING_NONE = '''
async def render(url, theme):
    return None
'''


@pytest.fixture
def entry_module(tmp_path, monkeypatch):
    """Write an entry module to a fresh import path and return its name."""
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.setattr(sys, "dont_write_bytecode", True)
    names: list[str] = []

    def write(source: str) -> tuple[str, Path]:
        name = f"entry_{uuid.uuid4().hex}"
        path = tmp_path / f"{name}.py"
        path.write_text(source)
        names.append(name)
        return name, path

    yield write

    for name in names:
        sys.modules.pop(name, None)


@pytest.mark.asyncio
async def test_production_bridge_renders_with_theme(entry_module):
    name, _ = entry_module(ENTRY_V1)
    bridge = ProductionRenderBridge(name, theme="classic")

    result = await bridge.render("/about")

    assert result.markup == "<p>v1 /about classic</p>"
    assert result.metadata == {"title": "One"}
    assert result.redirect is None
    assert bridge.theme == "classic"


@pytest.mark.asyncio
async def test_production_bridge_imports_once(entry_module):
    name, _ = entry_module(ENTRY_V1)
    bridge = ProductionRenderBridge(name)

    await bridge.render("/")
    await bridge.render("/")

    assert sys.modules[name].LOADS == [1]


@pytest.mark.asyncio
async def test_development_bridge_reloads_changed_module(entry_module):
    name, path = entry_module(ENTRY_V1)
    bridge = DevelopmentRenderBridge(name)
    assert (await bridge.render("/")).markup == "<p>v1 / None</p>"

    path.write_text(ENTRY_V2)
    stat = path.stat()
    os.utime(path, ns=(stat.st_atime_ns, stat.st_mtime_ns + 2_000_000_000))

    assert (await bridge.render("/")).markup == "<p>v2 /</p>"


@pytest.mark.asyncio
async def test_development_bridge_keeps_unchanged_module(entry_module):
    name, _ = entry_module(ENTRY_V1)
    bridge = DevelopmentRenderBridge(name)

    first = bridge.load_module()
    second = bridge.load_module()

    assert first is second
    assert first.LOADS == [1]


@pytest.mark.asyncio
async def test_render_exception_becomes_render_error(entry_module):
    name, _ = entry_module(ENTRY_FAILING)
    bridge = ProductionRenderBridge(name)

    with pytest.raises(RenderError) as exc_info:
        await bridge.render("/post/404")

    assert exc_info.value.message == "post not found"
    assert isinstance(exc_info.value.__cause__, LookupError)


@pytest.mark.asyncio
async def test_render_timeout_becomes_render_error(entry_module):
    name, _ = entry_module(ENTRY_SLOW)
    bridge = ProductionRenderBridge(name, timeout=0.05)

    with pytest.raises(RenderError) as exc_info:
        await bridge.render("/slow")

    assert "timed out" in exc_info.value.message
    assert isinstance(exc_info.value.__cause__, asyncio.TimeoutError)


@pytest.mark.asyncio
async def test_missing_module_becomes_render_error():
    bridge = ProductionRenderBridge(f"entry_missing_{uuid.uuid4().hex}")

    with pytest.raises(RenderError, match="Cannot load render module"):
        await bridge.render("/")


@pytest.mark.asyncio
async def test_module_without_render_becomes_render_error(entry_module):
    name, _ = entry_module(ENTRY_WITHOUT_RENDER)

    with pytest.raises(RenderError, match="does not define render"):
        await ProductionRenderBridge(name).render("/")


@pytest.mark.parametrize(
    "app_env, bridge_class",
    [
        ("production", ProductionRenderBridge),
        ("development", DevelopmentRenderBridge),
    ],
)
def test_create_render_engine_picks_bridge_by_environment(app_env, bridge_class):
    settings = Settings(app_env=app_env, render_module="my_entry", render_timeout=3.0)

    engine = create_render_engine(settings, theme="classic")

    assert type(engine) is bridge_class
    assert engine.theme == "classic"


@pytest.mark.asyncio
async def test_non_mapping_result_becomes_render_error(entry_module):
    name, _ = entry_module(ENTRY_RETURNING_NONE)

    with pytest.raises(RenderError, match="returned NoneType, expected a mapping"):
        await ProductionRenderBridge(name).render("/x")


def test_base_bridge_cannot_be_instantiated():
    with pytest.raises(TypeError):
        ModuleRenderBridge("my_entry")
