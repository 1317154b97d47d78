"""
kvcache — Core Error Types

Defines the exception hierarchy for the cache adapters and registry.
All exceptions inherit from KvCacheError for consistent error handling.
"""

from typing import Any


class KvCacheError(Exception):
    """Base exception for all kvcache errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a plain dictionary (for logs and API payloads)."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(KvCacheError):
    """
    Raised when configuration is invalid or missing.

    ``details`` lists offending option names under ``missing`` and ``invalid``
    so callers can enumerate every problem from a single error.
    """

    @property
    def missing(self) -> list[str]:
        return list(self.details.get("missing", []))

    @property
    def invalid(self) -> list[str]:
        return list(self.details.get("invalid", []))


class BackendNotFoundError(KvCacheError):
    """Raised when no adapter is registered under the requested name."""

    def __init__(self, name: str, available: list[str] | None = None):
        message = f"Unknown cache backend: {name}"
        super().__init__(message, {"backend": name, "available": available or []})
        self.name = name


class DependencyError(KvCacheError):
    """Raised when a backend's client library is missing or fails to load."""

    def __init__(
        self,
        package: str,
        feature: str | None = None,
        install_hint: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        if feature:
            message = f"Required dependency '{package}' is missing for {feature}"
        else:
            message = f"Required dependency '{package}' is missing"

        if install_hint:
            message += f". Install with: {install_hint}"

        error_details = details or {}
        error_details.update(
            {
                "package": package,
                "feature": feature,
                "install_hint": install_hint,
            }
        )

        super().__init__(message, error_details)


class CacheError(KvCacheError):
    """Base exception for cache-related errors."""


class CacheConnectionError(CacheError):
    """Raised when the cache backend cannot be reached."""

    def __init__(self, backend: str, details: dict[str, Any] | None = None):
        message = f"Failed to connect to cache backend: {backend}"
        super().__init__(message, details)
        self.backend = backend


class CacheOperationError(CacheError):
    """Raised when a cache write, counter or flush operation fails."""

    pass
