"""HTTP handlers for administrative operations.

Handlers convert between DTOs (API contracts) and service calls. They
raise errors from ``render_cache.errors``; the app's exception handler
turns those into status codes.
"""

import hmac
from collections.abc import Callable

import pydantic

from render_cache.dto import CacheClearResponse, CacheStatsResponse, SetThemeRequest, ThemeItem
from render_cache.errors import AuthError, NotFoundError, ValidationError
from render_cache.logging import get_logger
from render_cache.protocols import SettingsStore
from render_cache.repositories import THEME_KEY, SettingsApiClient
from render_cache.services import PageCache, ThemeRegistry

logger = get_logger(__name__)

THEME_SET_MESSAGE = "Theme set successfully. Server will restart to apply changes."


class AdminHandler:
    """HTTP handlers for cache control and theme switching.

    Example:
        ```python
        handler = AdminHandler(
            page_cache=page_cache,
            themes=registry,
            settings_api=SettingsApiClient(settings.api_url),
            settings_store=store,
            secret=settings.admin_signature,
            on_theme_change=supervisor.schedule_restart,
        )
        handler.authorize(request.headers.get("authorization"))
        ```
    """

    def __init__(
        self,
        page_cache: PageCache,
        themes: ThemeRegistry,
        settings_api: SettingsApiClient,
        settings_store: SettingsStore,
        secret: str | None,
        on_theme_change: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the admin handler.

        Args:
            page_cache: The page render cache.
            themes: Registry of discovered themes.
            settings_api: Client for the settings backend.
            settings_store: Store receiving the merged settings.
            secret: Shared bearer secret. None rejects every admin call.
            on_theme_change: Called with the new theme once it is persisted.
        """
        self._page_cache = page_cache
        self._themes = themes
        self._settings_api = settings_api
        self._settings_store = settings_store
        self._secret = secret
        self._on_theme_change = on_theme_change

    def authorize(self, authorization: str | None) -> None:
        """Check the ``Authorization`` header against the shared secret.

        Raises:
            AuthError: If no secret is configured or the header does not match
        """
        if not self._secret:
            raise AuthError()
        expected = f"Bearer {self._secret}"
        if not hmac.compare_digest((authorization or "").encode(), expected.encode()):
            raise AuthError()

    def list_themes(self) -> list[ThemeItem]:
        """Handle GET /themas requests."""
        return [
            ThemeItem(
                namespace=theme.namespace,
                name=theme.name,
                description=theme.description,
                author=theme.author,
                version=theme.version,
                preview=theme.preview,
            )
            for theme in self._themes.list()
        ]

    def clear_cache(self) -> CacheClearResponse:
        """Handle POST /cache/clear requests."""
        removed = self._page_cache.clear()
        return CacheClearResponse(
            success=True,
            message=f"Cache cleared successfully. Removed {removed} entries.",
            removed=removed,
        )

    def get_stats(self) -> CacheStatsResponse:
        """Handle GET /cache/stats requests."""
        stats = self._page_cache.stats()
        return CacheStatsResponse(total=stats.total, valid=stats.valid, expired=stats.expired)

    async def set_theme(self, body: bytes) -> str:
        """Handle POST /set-thema requests.

        Persists the new theme and asks for a restart; the registry itself
        is left untouched until the next bootstrap.

        Args:
            body: Raw JSON request body

        Returns:
            Plain-text confirmation

        Raises:
            ValidationError: If the body does not parse or lacks ``theme``
            NotFoundError: If the theme was not discovered
            ExternalServiceError: If the settings backend fails
        """
        try:
            request = SetThemeRequest.model_validate_json(body)
        except pydantic.ValidationError as e:
            raise ValidationError("Invalid request body") from e

        if not request.theme:
            raise ValidationError("Theme name is required")

        if not self._themes.exists(request.theme):
            raise NotFoundError("Theme not found")

        site_settings = await self._settings_api.fetch_settings()
        site_settings[THEME_KEY] = request.theme
        self._settings_store.set_settings(site_settings)
        logger.info("theme_set", theme=request.theme)

        if self._on_theme_change is not None:
            self._on_theme_change(request.theme)

        return THEME_SET_MESSAGE
