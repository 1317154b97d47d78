"""
kvcache — Configuration Module

Provides typed configuration loading and validation.
"""

from .loader import get_config, load_config, reload_config, reset_config
from .schemas import (
    DEFAULT_REDIS_KEY,
    CacheConfig,
    KvCacheConfig,
    LogLevel,
    MemoryCacheOptions,
    RedisCacheOptions,
    decode_payload,
    parse_options,
    redact_conn,
)

__all__ = [
    # Loader functions
    "load_config",
    "get_config",
    "reload_config",
    "reset_config",
    # Main config
    "KvCacheConfig",
    "CacheConfig",
    # Enums
    "LogLevel",
    # Adapter options
    "RedisCacheOptions",
    "MemoryCacheOptions",
    "DEFAULT_REDIS_KEY",
    "decode_payload",
    "parse_options",
    "redact_conn",
]
