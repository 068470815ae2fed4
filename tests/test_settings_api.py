"""
Tests for the settings backend client.
"""

import httpx
import pytest

from render_cache.errors import ExternalServiceError
from render_cache.repositories import SettingsApiClient


def client_for(handler) -> SettingsApiClient:
    return SettingsApiClient("http://settings.test/", transport=httpx.MockTransport(handler))


@pytest.mark.asyncio
async def test_fetch_settings_returns_backend_mapping():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"blog.title": "My Blog"})

    api = client_for(handler)
    try:
        assert await api.fetch_settings() == {"blog.title": "My Blog"}
    finally:
        await api.close()

    assert str(seen[0].url) == "http://settings.test/settings"
    assert seen[0].method == "GET"


@pytest.mark.asyncio
async def test_server_error_raises_external_service_error():
    api = client_for(lambda request: httpx.Response(500, text="boom"))

    with pytest.raises(ExternalServiceError):
        await api.fetch_settings()
    await api.close()


@pytest.mark.asyncio
async def test_invalid_json_raises_external_service_error():
    api = client_for(lambda request: httpx.Response(200, text="<html>"))

    with pytest.raises(ExternalServiceError):
        await api.fetch_settings()
    await api.close()


@pytest.mark.asyncio
async def test_non_object_payload_raises_external_service_error():
    api = client_for(lambda request: httpx.Response(200, json=["blog.theme"]))

    with pytest.raises(ExternalServiceError, match="Unexpected settings payload"):
        await api.fetch_settings()
    await api.close()


@pytest.mark.asyncio
async def test_connection_failure_raises_external_service_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    api = client_for(handler)

    with pytest.raises(ExternalServiceError) as exc_info:
        await api.fetch_settings()
    await api.close()

    assert exc_info.value.status_code == 502


@pytest.mark.asyncio
async def test_close_is_idempotent():
    api = client_for(lambda request: httpx.Response(200, json={}))
    await api.fetch_settings()

    await api.close()
    await api.close()
