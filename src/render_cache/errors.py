"""
Error taxonomy for the render cache server.

Every error carries the HTTP status it maps to; the FastAPI exception
handler in ``render_cache.api.app`` turns them into plain-text responses.
"""

from typing import Any


class RenderCacheError(Exception):
    """Base exception for render cache errors."""

    status_code: int = 500

    def __init__(self, code: str, message: str, details: dict[str, Any] | None = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ValidationError(RenderCacheError):
    """Missing or invalid request body field."""

    status_code = 400

    def __init__(self, message: str = "Invalid request body", details: dict[str, Any] | None = None):
        super().__init__("VALIDATION_ERROR", message, details)


class AuthError(RenderCacheError):
    """Missing or incorrect bearer token."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized", details: dict[str, Any] | None = None):
        super().__init__("AUTH_ERROR", message, details)


class NotFoundError(RenderCacheError):
    """Unknown theme or absent file."""

    status_code = 404

    def __init__(self, message: str = "Not found", details: dict[str, Any] | None = None):
        super().__init__("NOT_FOUND", message, details)


class RenderError(RenderCacheError):
    """The rendering engine failed."""

    status_code = 500

    def __init__(self, message: str = "Render failed", details: dict[str, Any] | None = None):
        super().__init__("RENDER_ERROR", message, details)


class ExternalServiceError(RenderCacheError):
    """The settings backend could not be reached or answered with an error."""

    status_code = 502

    def __init__(self, message: str = "External service error", details: dict[str, Any] | None = None):
        super().__init__("EXTERNAL_SERVICE_ERROR", message, details)
