import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _optional_float(name: str) -> float | None:
    value = os.getenv(name)
    return float(value) if value else None


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Site
    website_url: str = os.getenv("WEBSITE_URL", "")
    api_url: str = os.getenv("API_URL", "http://localhost:5000")
    admin_signature: str | None = os.getenv("ADMIN_SIGNATURE")

    # Listener
    host: str = os.getenv("SSR_HOST", "0.0.0.0")
    port: int = int(os.getenv("SSR_PORT", "5001"))
    app_env: str = os.getenv("APP_ENV", "development")

    # Files
    dist_dir: str = os.getenv("DIST_DIR", "dist")
    source_template: str = os.getenv("SOURCE_TEMPLATE", "index.html")
    themes_dir: str = os.getenv("THEMES_DIR", "src")
    default_theme: str = os.getenv("DEFAULT_THEME", "default")

    # Rendering engine
    render_module: str = os.getenv("RENDER_MODULE", "entry_server")
    # No timeout unless explicitly configured
    render_timeout: float | None = _optional_float("RENDER_TIMEOUT")
    state_global: str = os.getenv("STATE_GLOBAL", "__APP_STATE__")
    data_global: str = os.getenv("DATA_GLOBAL", "__APP_DATA__")

    # Cache
    page_cache_ttl: float = float(os.getenv("PAGE_CACHE_TTL", "1800"))  # 30 minutes
    page_max_age: int = int(os.getenv("PAGE_MAX_AGE", "900"))
    static_max_age: int = int(os.getenv("STATIC_MAX_AGE", "900"))

    # Lifecycle
    restart_delay: float = float(os.getenv("RESTART_DELAY", "0.5"))
    startup_delay: float = float(os.getenv("STARTUP_DELAY", "0"))

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "info")
    log_json: bool = os.getenv("LOG_JSON", "false").lower() == "true"

    @property
    def is_production(self) -> bool:
        """Check if the server runs against the production build."""
        return self.app_env.lower() == "production"

    @property
    def template_path(self) -> Path:
        """Base HTML document: build output in production, source template otherwise."""
        if self.is_production:
            return Path(self.dist_dir) / "index.html"
        return Path(self.source_template)

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.page_cache_ttl <= 0:
            raise ValueError("PAGE_CACHE_TTL must be a positive number of seconds")

        if not 0 < self.port < 65536:
            raise ValueError(f"SSR_PORT must be a valid TCP port, got {self.port}")

        if self.render_timeout is not None and self.render_timeout <= 0:
            raise ValueError("RENDER_TIMEOUT must be positive when set")

        if self.restart_delay < 0 or self.startup_delay < 0:
            raise ValueError("RESTART_DELAY and STARTUP_DELAY cannot be negative")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
