"""
Cache Usage Example

Demonstrates how to use the pluggable cache adapters in kvcache.

This example shows:
- Resolving an adapter by name through a registry
- Registering a custom factory
- Counters, batch reads and TTLs
- Handling configuration and connection errors
"""

import logging
import time

from kvcache import BackendNotFoundError, CacheConnectionError, ConfigurationError
from kvcache.cache import build_registry
from kvcache.cache.backends import MemoryCache
from kvcache.logging_setup import configure_logging

configure_logging()
logger = logging.getLogger("kvcache.examples")


def example_memory_cache() -> None:
    """Example: In-process cache."""
    logger.info("=" * 60)
    logger.info("Example 1: Memory cache")
    logger.info("=" * 60)

    registry = build_registry()
    cache = registry.new_cache("memory", '{"interval": "1"}')

    cache.put("greeting", "hello")
    cache.put("short-lived", b"bye", ttl=0.5)
    cache.put("visits", 5)
    cache.incr("visits")

    logger.info(f"get_multi: {cache.get_multi(['greeting', 'missing', 'visits'])}")
    time.sleep(1.5)
    logger.info(f"short-lived after expiry: {cache.get('short-lived')}")

    cache.close()


def example_custom_backend() -> None:
    """Example: Registering a factory under another name."""
    logger.info("=" * 60)
    logger.info("Example 2: Custom registration")
    logger.info("=" * 60)

    registry = build_registry()
    registry.register("local", MemoryCache)
    cache = registry.new_cache("local", {"maxSize": "2", "interval": "0"})

    for key in ("a", "b", "c"):
        cache.put(key, key)
    logger.info(f"After bounded inserts: {cache.get_multi(['a', 'b', 'c'])}")


def example_errors() -> None:
    """Example: Errors surfaced by new_cache."""
    logger.info("=" * 60)
    logger.info("Example 3: Error handling")
    logger.info("=" * 60)

    registry = build_registry()

    try:
        registry.new_cache("memcache", "{}")
    except BackendNotFoundError as e:
        logger.info(f"Lookup error: {e.to_dict()}")

    try:
        registry.new_cache("redis", '{"dbNum": "1"}')
    except ConfigurationError as e:
        logger.info(f"Configuration error, missing options: {e.missing}")

    try:
        registry.new_cache("redis", '{"conn": "127.0.0.1:1"}')
    except CacheConnectionError as e:
        logger.info(f"Connection error: {e.message}")


if __name__ == "__main__":
    example_memory_cache()
    example_custom_backend()
    example_errors()
