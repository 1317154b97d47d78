"""
kvcache — Cache Factory

Builds a started cache from typed configuration.

Select the backend with CACHE_BACKEND (defaults to memory) and pass its
payload through CACHE_CONFIG:

    CACHE_BACKEND=redis CACHE_CONFIG='{"conn": "127.0.0.1:6379"}' python app.py

Examples:
    from kvcache.cache.factory import create_cache

    # Uses env-configured backend
    cache = create_cache()

    # Or explicitly supply a CacheConfig (e.g., for tests)
    from kvcache.config import CacheConfig
    cache = create_cache(CacheConfig(backend="memory", options={"interval": "0"}))
"""

from __future__ import annotations

import logging

from ..config import CacheConfig, get_config
from .interface import CacheInterface
from .registry import CacheRegistry, default_registry

logger = logging.getLogger(__name__)


def create_cache(
    config: CacheConfig | None = None,
    registry: CacheRegistry | None = None,
) -> CacheInterface:
    """
    Create a started cache instance based on configuration.

    Args:
        config: Cache configuration (uses global config if not provided)
        registry: Registry to resolve the backend in (default registry if not provided)

    Returns:
        Started cache adapter

    Raises:
        BackendNotFoundError: If the configured backend is not registered
        ConfigurationError: If the backend options are invalid
        CacheConnectionError: If the backend cannot be reached
    """
    if config is None:
        config = get_config().cache
    if registry is None:
        registry = default_registry()

    logger.info(
        "Creating cache with backend: %s",
        config.backend,
        extra={"backend": config.backend},
    )
    return registry.new_cache(config.backend, config.options)
