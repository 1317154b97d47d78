"""
kvcache — Adapter Registry

Maps backend names to adapter factories and turns a (name, config) pair into a
started cache.

Key points:
- ``CacheRegistry`` is a plain object; applications can build one at startup
  and pass it around instead of relying on process-wide state.
- Re-registering a name replaces the previous factory (last registration wins).
- ``new_cache`` never stores the instances it creates; an adapter that fails
  to start is dropped.
- The module-level ``register``/``new_cache`` helpers operate on a lazily built
  default registry preloaded with the built-in "memory" and "redis" adapters.

Examples:
    from kvcache.cache.registry import new_cache

    cache = new_cache("redis", '{"conn": "127.0.0.1:6379"}')

    # Or with an injected registry
    registry = build_registry()
    registry.register("custom", MyAdapter)
    cache = registry.new_cache("custom", {"opt": "1"})
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping
from typing import Any

from ..config.schemas import redact_conn
from ..errors import BackendNotFoundError, DependencyError
from .backends.memory import MemoryCache
from .interface import CacheInterface

logger = logging.getLogger(__name__)

CacheFactory = Callable[[], CacheInterface]


def _redis_factory() -> CacheInterface:
    """Construct a Redis adapter, importing the client library lazily."""
    try:
        from .backends.redis import RedisCache
    except ImportError as e:
        logger.error(
            "Redis backend selected but redis client is not installed",
            extra={"package": "redis>=5.0.0", "error": str(e)},
        )
        raise DependencyError(
            "redis",
            feature="the redis cache backend",
            install_hint="pip install 'redis>=5.0.0'",
            details={"error": str(e)},
        ) from e

    return RedisCache()


BUILTIN_BACKENDS: dict[str, CacheFactory] = {
    "memory": MemoryCache,
    "redis": _redis_factory,
}


def _loggable(config: Any) -> Any:
    """Summarize a payload for log records without leaking credentials."""
    if isinstance(config, Mapping):
        summary = dict(config)
        if "password" in summary:
            summary["password"] = "***"
        if isinstance(summary.get("conn"), str):
            summary["conn"] = redact_conn(summary["conn"])
        return summary
    return type(config).__name__


class CacheRegistry:
    """
    Name → factory mapping for cache adapters.

    A factory takes no arguments and returns an unstarted adapter.
    """

    def __init__(self, backends: Mapping[str, CacheFactory] | None = None) -> None:
        self._factories: dict[str, CacheFactory] = {}
        self._lock = threading.Lock()
        for name, factory in (backends or {}).items():
            self.register(name, factory)

    def register(self, name: str, factory: CacheFactory) -> None:
        """
        Make an adapter available by name.

        Registering an existing name silently replaces its factory.

        Raises:
            ValueError: If name is empty or factory is None
        """
        if not name:
            raise ValueError("cache: backend name must not be empty")
        if factory is None:
            raise ValueError(f"cache: register adapter '{name}' is None")

        with self._lock:
            replaced = name in self._factories
            self._factories[name] = factory

        logger.debug(
            "Registered cache backend '%s'%s",
            name,
            " (replaced previous factory)" if replaced else "",
            extra={"backend": name, "replaced": replaced},
        )

    def unregister(self, name: str) -> None:
        """Remove a backend; unknown names are ignored."""
        with self._lock:
            self._factories.pop(name, None)

    def names(self) -> list[str]:
        """List registered backend names."""
        with self._lock:
            return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._factories

    def new_cache(self, name: str, config: Any = None) -> CacheInterface:
        """
        Build and start a cache adapter.

        Args:
            name: Registered backend name
            config: Configuration payload passed to ``start_and_gc``

        Returns:
            Started adapter

        Raises:
            BackendNotFoundError: If no adapter is registered under ``name``
            ConfigurationError: If the adapter rejects ``config``
            CacheConnectionError: If the backend cannot be reached
        """
        with self._lock:
            factory = self._factories.get(name)
            available = sorted(self._factories)

        if factory is None:
            logger.error(
                "Unknown cache backend '%s'",
                name,
                extra={"backend": name, "available": available},
            )
            raise BackendNotFoundError(name, available)

        cache = factory()
        logger.info(
            "Starting cache backend '%s'",
            name,
            extra={"backend": name, "config": _loggable(config)},
        )

        try:
            cache.start_and_gc(config)
        except Exception as e:
            logger.error(
                "Failed to start cache backend '%s': %s",
                name,
                e,
                extra={"backend": name, "error": str(e)},
            )
            raise

        return cache


_default_registry: CacheRegistry | None = None
_default_lock = threading.Lock()


def build_registry() -> CacheRegistry:
    """Create a fresh registry preloaded with the built-in backends."""
    return CacheRegistry(BUILTIN_BACKENDS)


def default_registry() -> CacheRegistry:
    """Return the process-wide registry, creating it on first use."""
    global _default_registry

    with _default_lock:
        if _default_registry is None:
            _default_registry = build_registry()
        return _default_registry


def reset_default_registry() -> None:
    """
    Forget the process-wide registry so the next access rebuilds it.

    Warning: Only use this in testing contexts.
    """
    global _default_registry

    with _default_lock:
        _default_registry = None


def register(name: str, factory: CacheFactory) -> None:
    """Register an adapter factory on the default registry."""
    default_registry().register(name, factory)


def new_cache(name: str, config: Any = None) -> CacheInterface:
    """Build and start an adapter from the default registry."""
    return default_registry().new_cache(name, config)
