"""
kvcache — Cache Module

Provides caching through pluggable adapters resolved by name.

- interface.py: Abstract cache interface all adapters must implement
- registry.py: Name → factory registry and new_cache()
- factory.py: create_cache() from typed configuration
- backends/: Adapter implementations (memory in core, redis loaded lazily)

Usage:
    from kvcache.cache import new_cache

    cache = new_cache("redis", '{"conn": "127.0.0.1:6379"}')
    cache.put("key", b"value", ttl=3600)
    value = cache.get("key")
"""

from .factory import create_cache
from .interface import CacheInterface, encode_value, ttl_milliseconds
from .registry import (
    CacheRegistry,
    build_registry,
    default_registry,
    new_cache,
    register,
    reset_default_registry,
)

__all__ = [
    # Registry
    "CacheRegistry",
    "build_registry",
    "default_registry",
    "register",
    "new_cache",
    "reset_default_registry",
    # Factory
    "create_cache",
    # Interface
    "CacheInterface",
    "encode_value",
    "ttl_milliseconds",
]
