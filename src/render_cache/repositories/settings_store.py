"""In-memory settings store.

Satisfies the SettingsStore protocol. The supervisor creates one store per
process and hands it to every bootstrap, so the theme written before a
restart is the theme read after it.
"""

from typing import Any

THEME_KEY = "blog.theme"


class InMemorySettingsStore:
    """Holds the latest site settings for the lifetime of the process."""

    def __init__(self, initial: dict[str, Any] | None = None) -> None:
        self._settings: dict[str, Any] = dict(initial or {})

    def set_settings(self, settings: dict[str, Any]) -> None:
        self._settings = dict(settings)

    def get(self, key: str, default: Any = None) -> Any:
        return self._settings.get(key, default)
