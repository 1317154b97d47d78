"""
kvcache — Pluggable Cache Adapters

One capability interface, several backends, selected by name at startup.
"""

__version__ = "1.0.0"

from .cache import CacheInterface, CacheRegistry, create_cache, new_cache, register
from .errors import (
    BackendNotFoundError,
    CacheConnectionError,
    CacheError,
    CacheOperationError,
    ConfigurationError,
    DependencyError,
    KvCacheError,
)

__all__ = [
    "CacheInterface",
    "CacheRegistry",
    "create_cache",
    "new_cache",
    "register",
    "KvCacheError",
    "ConfigurationError",
    "BackendNotFoundError",
    "DependencyError",
    "CacheError",
    "CacheConnectionError",
    "CacheOperationError",
]
