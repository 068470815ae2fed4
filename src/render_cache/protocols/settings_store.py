"""Settings store protocol.

The settings store receives the merged site settings when the theme
changes. It outlives a graceful restart, so the next bootstrap reads the
new theme from it.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SettingsStore(Protocol):
    """Protocol for site settings persistence."""

    def set_settings(self, settings: dict[str, Any]) -> None:
        """Replace the stored settings.

        Args:
            settings: Full site settings mapping
        """
        ...

    def get(self, key: str, default: Any = None) -> Any:
        """Read one setting.

        Args:
            key: Setting name (e.g. ``"blog.theme"``)
            default: Value returned when the setting is absent

        Returns:
            The stored value or ``default``
        """
        ...
