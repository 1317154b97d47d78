"""
kvcache — Redis Cache Adapter

Synchronous Redis adapter with:
- Namespace prefixing: every key is stored as "<key option>:<key>"
- Opaque byte payloads (no serialization layer)
- Per-key TTL via SET PX
- Single-call GET and MGET batch reads

Requires: redis>=5.0

Example:
    cache = RedisCache()
    cache.start_and_gc('{"conn": "127.0.0.1:6379", "dbNum": "0"}')
    cache.put("greeting", b"hello", ttl=60)
    cache.get("greeting")  # b"hello"
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from redis import Redis
from redis.exceptions import RedisError

from ...config.schemas import DEFAULT_REDIS_KEY, RedisCacheOptions, parse_options, redact_conn
from ...errors import CacheConnectionError, CacheError, CacheOperationError, ConfigurationError
from ..interface import TTL, CacheInterface, CacheValue, encode_value, ttl_milliseconds

logger = logging.getLogger(__name__)

DEFAULT_PORT = 6379
# Idle connections are health-checked (PING) before reuse after this many seconds.
IDLE_CHECK_SECONDS = 180
URL_SCHEMES = ("redis://", "rediss://", "unix://")


class RedisCache(CacheInterface):
    """
    Redis cache adapter.

    Notes:
    - Constructed unstarted; ``start_and_gc`` builds the client and PINGs it.
    - The client is owned by this instance and shared by all calling threads;
      redis-py pools connections internally.
    - ``clear_all`` issues FLUSHDB and wipes the whole logical database,
      including keys outside this adapter's namespace.
    """

    def __init__(self) -> None:
        self.key = DEFAULT_REDIS_KEY
        self.conn: str | None = None
        self.db_num = 0
        self.password = ""
        self._client: Redis | None = None

    # ------------ Helpers ------------

    def associate(self, key: str) -> str:
        """Create namespaced key."""
        return f"{self.key}:{key}"

    @property
    def client(self) -> Redis:
        if self._client is None:
            raise CacheError("Redis cache adapter is not started; call start_and_gc() first")
        return self._client

    @property
    def started(self) -> bool:
        return self._client is not None

    def _connect(self, options: RedisCacheOptions) -> Redis:
        """Build the client for the configured address. No I/O happens here."""
        password = options.password or None

        if options.conn.startswith(URL_SCHEMES):
            # A database in the URL path takes precedence over dbNum
            try:
                return Redis.from_url(
                    options.conn,
                    db=options.db_num,
                    password=password,
                    health_check_interval=IDLE_CHECK_SECONDS,
                )
            except ValueError as e:
                raise ConfigurationError(
                    f"Invalid conn URL: {e}",
                    details={"missing": [], "invalid": ["conn"], "conn": redact_conn(options.conn)},
                ) from e

        host, _, port_text = options.conn.rpartition(":")
        if not host or host.endswith(":"):
            # No port, or a bare IPv6 address such as ::1
            host, port_text = options.conn, ""
        try:
            port = int(port_text) if port_text else DEFAULT_PORT
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid conn address: {options.conn!r}",
                details={"missing": [], "invalid": ["conn"], "conn": options.conn},
            ) from e

        # [::1]:6379 -> ::1
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]

        return Redis(
            host=host,
            port=port,
            db=options.db_num,
            password=password,
            health_check_interval=IDLE_CHECK_SECONDS,
        )

    def _operation_error(self, operation: str, key: str | None, error: Exception) -> CacheOperationError:
        logger.error(
            f"Redis {operation} failed: {error}",
            extra={"operation": operation, "key": key, "namespace": self.key, "error": str(error)},
        )
        return CacheOperationError(
            f"Redis {operation} failed: {error}",
            details={"operation": operation, "key": key, "namespace": self.key, "error": str(error)},
        )

    # ------------ Lifecycle ------------

    def start_and_gc(self, config: Any) -> None:
        """
        Start the adapter.

        config is like {"key": "collection key", "conn": "127.0.0.1:6379", "dbNum": "0", "password": ""}.
        Items are stored without expiry unless a TTL is given, so there is no GC loop.
        """
        if self._client is not None:
            raise CacheError(
                "Redis cache adapter is already started",
                details={"conn": redact_conn(self.conn or "")},
            )

        options = parse_options(RedisCacheOptions, config)
        client = self._connect(options)
        safe_conn = redact_conn(options.conn)

        try:
            client.ping()
        except RedisError as e:
            client.close()
            logger.error(
                f"Redis liveness probe failed for {safe_conn}: {e}",
                extra={"conn": safe_conn, "db": options.db_num, "error": str(e)},
            )
            raise CacheConnectionError(
                "redis",
                details={"conn": safe_conn, "db": options.db_num, "error": str(e)},
            ) from e

        self.key = options.key
        self.conn = options.conn
        self.db_num = options.db_num
        self.password = options.password
        self._client = client

        logger.info(
            f"Redis cache adapter started (conn={safe_conn}, db={options.db_num}, namespace={options.key})",
            extra={"conn": safe_conn, "db": options.db_num, "namespace": options.key},
        )

    def close(self) -> None:
        """Close the client and release pooled connections. Not part of the cache contract."""
        if self._client is None:
            return
        try:
            self._client.close()
            logger.info(f"Closed Redis cache adapter for namespace '{self.key}'")
        finally:
            self._client = None

    # ------------ Core Interface ------------

    def get(self, key: str) -> bytes | None:
        """Retrieve a value by key."""
        client = self.client
        try:
            return client.get(self.associate(key))
        except RedisError as e:
            logger.warning(
                f"Failed to get key '{key}' from Redis: {e}",
                extra={"key": key, "namespace": self.key, "error": str(e)},
            )
            return None

    def get_multi(self, keys: Sequence[str]) -> list[bytes | None]:
        """Retrieve multiple values in one round-trip using MGET."""
        if not keys:
            return []

        client = self.client
        try:
            return list(client.mget([self.associate(k) for k in keys]))
        except RedisError as e:
            logger.warning(
                f"Failed to get multiple keys from Redis: {e}",
                extra={"key_count": len(keys), "namespace": self.key, "error": str(e)},
            )
            return []

    def put(self, key: str, value: CacheValue, ttl: TTL = None) -> None:
        """Store a value with optional TTL."""
        try:
            payload = encode_value(value)
            ttl_ms = ttl_milliseconds(ttl)
        except (TypeError, ValueError) as e:
            raise CacheOperationError(
                f"Invalid value or TTL for key '{key}': {e}",
                details={"key": key, "value_type": type(value).__name__, "ttl": repr(ttl)},
            ) from e

        client = self.client
        try:
            client.set(self.associate(key), payload, px=ttl_ms)
        except RedisError as e:
            raise self._operation_error("SET", key, e) from e

    def delete(self, key: str) -> None:
        """Delete a single key."""
        client = self.client
        try:
            client.delete(self.associate(key))
        except RedisError as e:
            raise self._operation_error("DEL", key, e) from e

    def is_exist(self, key: str) -> bool:
        """Check if a key exists."""
        client = self.client
        try:
            return client.exists(self.associate(key)) == 1
        except RedisError as e:
            logger.warning(
                f"Failed to check existence of key '{key}' in Redis: {e}",
                extra={"key": key, "namespace": self.key, "error": str(e)},
            )
            return False

    def incr(self, key: str) -> int:
        """Increase counter in Redis."""
        client = self.client
        try:
            return int(client.incr(self.associate(key)))
        except RedisError as e:
            raise self._operation_error("INCR", key, e) from e

    def decr(self, key: str) -> int:
        """Decrease counter in Redis."""
        client = self.client
        try:
            return int(client.decr(self.associate(key)))
        except RedisError as e:
            raise self._operation_error("DECR", key, e) from e

    def clear_all(self) -> None:
        """Flush the whole logical database, not only this namespace."""
        client = self.client
        try:
            client.flushdb()
        except RedisError as e:
            raise self._operation_error("FLUSHDB", None, e) from e
        logger.info(f"Flushed Redis database {self.db_num}", extra={"db": self.db_num, "namespace": self.key})
