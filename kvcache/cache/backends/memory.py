"""
kvcache — Memory Cache Adapter

In-process cache with per-key TTL, optional LRU bounding and a background
sweeper that drops expired entries. Thread-safe; suitable for single-process
deployments and tests.

config is like {"interval": "60", "maxSize": "0"}.
"""

import logging
import re
import threading
import time
from collections import OrderedDict
from collections.abc import Sequence
from typing import Any

from ...config.schemas import MemoryCacheOptions, parse_options
from ...errors import CacheError, CacheOperationError
from ..interface import TTL, CacheInterface, CacheValue, encode_value, ttl_milliseconds

logger = logging.getLogger(__name__)

# Counter payloads follow Redis: canonical decimal text within the signed 64-bit range
INTEGER_PAYLOAD = re.compile(rb"0|-?[1-9][0-9]*")
INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class MemoryCache(CacheInterface):
    """
    In-memory cache adapter.

    Features:
    - Per-key TTL, checked on access and by the sweeper thread
    - LRU eviction when ``maxSize`` is set
    - O(1) get/put/delete under a single lock

    Like the Redis adapter, operations raise ``CacheError`` until
    ``start_and_gc`` has been called. ``close`` only stops the sweeper; the
    stored entries stay readable.
    """

    def __init__(self) -> None:
        self.interval = 0
        self.max_size = 0

        # key -> (payload, expires_at monotonic seconds or None)
        self._cache: OrderedDict[str, tuple[bytes, float | None]] = OrderedDict()
        self._lock = threading.Lock()

        self._started = False
        self._stop = threading.Event()
        self._sweeper: threading.Thread | None = None

    @staticmethod
    def _is_expired(expiry: float | None, now: float | None = None) -> bool:
        if expiry is None:
            return False
        return (now if now is not None else time.monotonic()) >= expiry

    def _live_entry(self, key: str) -> bytes | None:
        """Return a live payload, dropping it if expired. Caller holds the lock."""
        entry = self._cache.get(key)
        if entry is None:
            return None

        value, expiry = entry
        if self._is_expired(expiry):
            del self._cache[key]
            return None

        self._cache.move_to_end(key)
        return value

    def _store(self, key: str, value: bytes, expiry: float | None) -> None:
        """Insert or replace an entry, evicting LRU entries if bounded. Caller holds the lock."""
        if self.max_size and key not in self._cache:
            while len(self._cache) >= self.max_size:
                evicted_key, _ = self._cache.popitem(last=False)
                logger.debug(f"Evicted key from memory cache: {evicted_key}")

        self._cache[key] = (value, expiry)
        self._cache.move_to_end(key)

    # ------------ Lifecycle ------------

    def start_and_gc(self, config: Any) -> None:
        """Apply options and start the expiry sweeper (unless interval is 0)."""
        if self._started:
            raise CacheError("Memory cache adapter is already started")

        options = parse_options(MemoryCacheOptions, config)
        self.interval = options.interval
        self.max_size = options.max_size
        self._started = True

        if self.interval > 0:
            self._sweeper = threading.Thread(
                target=self._sweep_loop,
                name="kvcache-memory-sweeper",
                daemon=True,
            )
            self._sweeper.start()

        logger.info(
            f"Memory cache adapter started (interval={self.interval}s, max_size={self.max_size or 'unbounded'})",
            extra={"interval": self.interval, "max_size": self.max_size},
        )

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.vacuum()

    def vacuum(self) -> int:
        """
        Remove every expired entry.

        Returns:
            Number of entries removed
        """
        now = time.monotonic()
        with self._lock:
            expired = [k for k, (_, expiry) in self._cache.items() if self._is_expired(expiry, now)]
            for key in expired:
                del self._cache[key]

        if expired:
            logger.debug(f"Swept {len(expired)} expired entries from memory cache")
        return len(expired)

    def close(self) -> None:
        """Stop the sweeper thread. Not part of the cache contract."""
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=1.0)
            self._sweeper = None

    def _check_started(self) -> None:
        if not self._started:
            raise CacheError("Memory cache adapter is not started; call start_and_gc() first")

    def __len__(self) -> int:
        with self._lock:
            return len(self._cache)

    # ------------ Core Interface ------------

    def get(self, key: str) -> bytes | None:
        """Retrieve value from cache."""
        self._check_started()
        with self._lock:
            return self._live_entry(key)

    def get_multi(self, keys: Sequence[str]) -> list[bytes | None]:
        """Retrieve multiple values under one lock acquisition."""
        self._check_started()
        with self._lock:
            return [self._live_entry(key) for key in keys]

    def put(self, key: str, value: CacheValue, ttl: TTL = None) -> None:
        """Store value in cache."""
        self._check_started()
        try:
            payload = encode_value(value)
            ttl_ms = ttl_milliseconds(ttl)
        except (TypeError, ValueError) as e:
            raise CacheOperationError(
                f"Invalid value or TTL for key '{key}': {e}",
                details={"key": key, "value_type": type(value).__name__, "ttl": repr(ttl)},
            ) from e

        expiry = time.monotonic() + ttl_ms / 1000 if ttl_ms is not None else None

        with self._lock:
            self._store(key, payload, expiry)

    def delete(self, key: str) -> None:
        """Delete key from cache."""
        self._check_started()
        with self._lock:
            self._cache.pop(key, None)

    def is_exist(self, key: str) -> bool:
        """Check if key exists and is not expired."""
        self._check_started()
        with self._lock:
            return self._live_entry(key) is not None

    def _add(self, key: str, delta: int) -> int:
        self._check_started()
        with self._lock:
            entry = self._cache.get(key)
            if entry is None or self._is_expired(entry[1]):
                current, expiry = 0, None
            else:
                raw, expiry = entry
                if not INTEGER_PAYLOAD.fullmatch(raw) or not INT64_MIN <= int(raw) <= INT64_MAX:
                    raise CacheOperationError(
                        f"Value for key '{key}' is not an integer or out of range",
                        details={"key": key},
                    )
                current = int(raw)

            result = current + delta
            if not INT64_MIN <= result <= INT64_MAX:
                raise CacheOperationError(
                    f"Increment or decrement of key '{key}' would overflow",
                    details={"key": key, "value": current, "delta": delta},
                )
            # Keeps the remaining TTL, like INCR/DECR on a volatile key
            self._store(key, str(result).encode("ascii"), expiry)
            return result

    def incr(self, key: str) -> int:
        """Increase counter in memory; a missing key counts as 0."""
        return self._add(key, 1)

    def decr(self, key: str) -> int:
        """Decrease counter in memory; a missing key counts as 0."""
        return self._add(key, -1)

    def clear_all(self) -> None:
        """Clear all entries from cache."""
        self._check_started()
        with self._lock:
            size = len(self._cache)
            self._cache.clear()
        logger.info(f"Cleared {size} entries from memory cache")
