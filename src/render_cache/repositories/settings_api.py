"""HTTP client for the content/settings backend."""

from typing import Any

import httpx

from render_cache.errors import ExternalServiceError


class SettingsApiClient:
    """Fetches site settings from ``{base_url}/settings``.

    Example:
        ```python
        client = SettingsApiClient("http://localhost:5000")
        settings = await client.fetch_settings()
        await client.close()
        ```
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the settings API client.

        Args:
            base_url: Settings API base URL.
            timeout: Request timeout in seconds.
            transport: Optional httpx transport (tests use MockTransport).
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self._timeout, transport=self._transport)
        return self._client

    async def fetch_settings(self) -> dict[str, Any]:
        """Get the current site settings.

        Returns:
            Settings mapping as returned by the backend

        Raises:
            ExternalServiceError: If the request fails or the payload is not an object
        """
        url = f"{self._base_url}/settings"
        try:
            response = await self.client.get(url)
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise ExternalServiceError(f"Settings API error: {e}") from e

        if not isinstance(data, dict):
            raise ExternalServiceError(f"Unexpected settings payload from {url}")
        return data

    async def close(self) -> None:
        """Close the async HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
