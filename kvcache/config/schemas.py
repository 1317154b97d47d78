"""
kvcache — Configuration Schemas

Defines typed configuration models using Pydantic for validation and type safety.

Adapter options arrive as a flat, string-valued payload (JSON object text or a
mapping). Each adapter validates its payload once, in ``start_and_gc``, through
the models below; numeric options given as strings are coerced.
"""

import json
from collections.abc import Mapping
from enum import Enum
from typing import Any, TypeVar
from urllib.parse import parse_qsl, urlencode, urlsplit

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..errors import ConfigurationError

DEFAULT_REDIS_KEY = "beecacheRedis"

OptionsT = TypeVar("OptionsT", bound=BaseModel)


class LogLevel(str, Enum):
    """Log levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class RedisCacheOptions(BaseModel):
    """Options for the Redis adapter."""

    key: str = Field(default=DEFAULT_REDIS_KEY, description="Namespace prefix for every cache key")
    conn: str = Field(min_length=1, description="host:port or redis:// / rediss:// / unix:// URL")
    db_num: int = Field(default=0, ge=0, alias="dbNum", description="Logical database index")
    password: str = Field(default="", description="AUTH password (empty = none)")

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


def redact_conn(conn: str) -> str:
    """
    Mask credentials in a connection string before it is logged.

    The userinfo part of a URL and any ``password`` query argument are
    replaced with ``***``. Plain ``host:port`` addresses carry no credentials
    and are returned unchanged.
    """
    try:
        parts = urlsplit(conn)
    except ValueError:
        return "***"
    redacted = conn
    if "@" in parts.netloc:
        redacted = redacted.replace(parts.netloc, "***@" + parts.netloc.rpartition("@")[2], 1)

    if parts.query:
        pairs = parse_qsl(parts.query, keep_blank_values=True)
        if any(name == "password" for name, _ in pairs):
            query = urlencode([(name, "***" if name == "password" else value) for name, value in pairs], safe="*")
            redacted = redacted.replace("?" + parts.query, "?" + query, 1)

    return redacted


class MemoryCacheOptions(BaseModel):
    """Options for the in-process adapter."""

    interval: int = Field(default=60, ge=0, description="Expiry sweep period in seconds (0 = no sweeper)")
    max_size: int = Field(
        default=0, ge=0, alias="maxSize", description="Max entries before LRU eviction (0 = unbounded)"
    )

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class CacheConfig(BaseModel):
    """Which backend to build and the payload to start it with."""

    backend: str = Field(default="memory", min_length=1, description="Registered backend name")
    options: dict[str, Any] = Field(default_factory=dict, description="Adapter configuration payload")


class KvCacheConfig(BaseModel):
    """Root configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Logging level")
    cache: CacheConfig = Field(default_factory=CacheConfig)

    model_config = ConfigDict(use_enum_values=True, validate_assignment=True)


def decode_payload(config: Any) -> dict[str, Any]:
    """
    Turn a configuration payload into a plain dict.

    Accepts JSON object text (str or UTF-8 bytes), any mapping, or None.

    Raises:
        ConfigurationError: If the payload is malformed or not an object
    """
    if config is None:
        return {}
    if isinstance(config, (bytes, bytearray)):
        try:
            config = config.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ConfigurationError(
                "Configuration payload is not valid UTF-8",
                details={"error": str(e)},
            ) from e
    if isinstance(config, str):
        if not config.strip():
            return {}
        try:
            config = json.loads(config)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Configuration payload is not valid JSON: {e.msg}",
                details={"error": str(e)},
            ) from e
    if not isinstance(config, Mapping):
        raise ConfigurationError(
            "Configuration payload must be a JSON object",
            details={"type": type(config).__name__},
        )
    return dict(config)


def parse_options(model: type[OptionsT], config: Any) -> OptionsT:
    """
    Validate a configuration payload against an options model.

    Args:
        model: Options model class
        config: Payload accepted by ``decode_payload``, or an instance of ``model``

    Returns:
        Validated options with defaults applied

    Raises:
        ConfigurationError: Listing every missing and invalid option
    """
    if isinstance(config, model):
        return config

    payload = decode_payload(config)
    try:
        return model.model_validate(payload)
    except ValidationError as e:
        missing: list[str] = []
        invalid: list[str] = []
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "<root>"
            (missing if err["type"] == "missing" else invalid).append(field)

        parts = []
        if missing:
            parts.append(f"missing {', '.join(missing)}")
        if invalid:
            parts.append(f"invalid {', '.join(invalid)}")
        raise ConfigurationError(
            f"Invalid {model.__name__}: {'; '.join(parts)}",
            details={"missing": missing, "invalid": invalid, "validation_errors": e.errors(include_url=False)},
        ) from e
