"""
kvcache — Configuration Loader

Loads and validates configuration from environment variables and .env files.
Provides a singleton configuration instance for the runtime.

Environment:
    LOG_LEVEL       DEBUG | INFO | WARNING | ERROR | CRITICAL
    CACHE_BACKEND   registered backend name (default: memory)
    CACHE_CONFIG    adapter payload as a JSON object,
                    e.g. {"conn": "127.0.0.1:6379", "dbNum": "0"}
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from ..errors import ConfigurationError
from .schemas import KvCacheConfig, decode_payload

logger = logging.getLogger(__name__)

_config_instance: KvCacheConfig | None = None


def load_config(
    env_file: str | None = None,
    reload: bool = False,
) -> KvCacheConfig:
    """
    Load configuration from environment variables and .env file.

    Args:
        env_file: Path to .env file (default: .env in the working directory)
        reload: Force reload even if config already loaded

    Returns:
        Validated KvCacheConfig instance

    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    env_path = Path(env_file) if env_file else Path.cwd() / ".env"

    if env_path.exists():
        logger.info(f"Loading environment from {env_path}")
        try:
            load_dotenv(env_path, override=True)
        except OSError as e:
            logger.error(
                f"Failed to load .env file from {env_path}: {e}",
                extra={"path": str(env_path), "error": str(e)},
                exc_info=True,
            )
            raise ConfigurationError(
                f"Failed to load environment file: {e}",
                details={"path": str(env_path), "error": str(e)},
            ) from e
    else:
        logger.debug("No .env file found, using environment variables only")

    config_dict = {
        "log_level": os.getenv("LOG_LEVEL", "INFO").upper(),
        "cache": {
            "backend": os.getenv("CACHE_BACKEND", "memory").strip().lower(),
            "options": decode_payload(os.getenv("CACHE_CONFIG")),
        },
    }

    try:
        _config_instance = KvCacheConfig(**config_dict)  # type: ignore[arg-type]
    except ValidationError as e:
        logger.error(
            f"Configuration validation failed: {e}",
            extra={"validation_errors": e.errors(include_url=False)},
        )
        raise ConfigurationError(
            "Configuration validation failed. Check your environment variables.",
            details={"validation_errors": e.errors(include_url=False)},
        ) from e

    logger.info(
        f"Configuration loaded successfully (cache backend: {_config_instance.cache.backend})",
        extra={"log_level": _config_instance.log_level, "cache_backend": _config_instance.cache.backend},
    )
    return _config_instance


def get_config() -> KvCacheConfig:
    """
    Get the current configuration instance, loading it on first access.
    """
    if _config_instance is None:
        return load_config()

    return _config_instance


def reload_config(env_file: str | None = None) -> KvCacheConfig:
    """Force reload configuration."""
    return load_config(env_file=env_file, reload=True)


def reset_config() -> None:
    """Drop the cached configuration instance. Used by tests."""
    global _config_instance
    _config_instance = None
