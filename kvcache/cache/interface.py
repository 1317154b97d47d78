"""
kvcache — Cache Interface

Defines the abstract interface that all cache adapters must implement,
plus the value/TTL normalization shared by every adapter.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Sequence
from datetime import timedelta
from typing import Any, Optional, Union

# Values are opaque payloads; non-bytes inputs are encoded the way redis-py does.
CacheValue = Union[bytes, str, int, float]
TTL = Union[timedelta, int, float, None]


def encode_value(value: CacheValue) -> bytes:
    """
    Encode a value to its stored byte payload.

    Args:
        value: bytes (stored as-is), str (UTF-8) or a number (decimal text)

    Returns:
        Byte payload

    Raises:
        TypeError: For booleans and any other type
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        return value.encode("utf-8")
    # bool is an int subclass; reject it rather than store "True"
    if isinstance(value, bool):
        raise TypeError("Invalid value type bool; convert to bytes, str, int or float first")
    if isinstance(value, int):
        return str(value).encode("ascii")
    if isinstance(value, float):
        return repr(value).encode("ascii")
    raise TypeError(f"Invalid value type {type(value).__name__}; expected bytes, str, int or float")


def ttl_milliseconds(ttl: TTL) -> int | None:
    """
    Normalize TTL:
    - None, zero or negative -> no expiry (return None)
    - timedelta or seconds -> whole milliseconds (at least 1)

    Raises:
        ValueError: For NaN or infinite TTLs
    """
    if ttl is None:
        return None
    seconds = ttl.total_seconds() if isinstance(ttl, timedelta) else float(ttl)
    if not math.isfinite(seconds * 1000):
        raise ValueError(f"TTL must be a finite number of seconds, got {ttl!r}")
    if seconds <= 0:
        return None
    return max(1, int(round(seconds * 1000)))


class CacheInterface(ABC):
    """
    Abstract base class for cache adapters.

    An adapter is constructed unstarted, then started exactly once with
    ``start_and_gc(config)``. All operations block on the backend call.

    Failure policy:
    - ``get``, ``get_multi`` and ``is_exist`` never raise for backend errors;
      a miss and an error look the same to the caller.
    - ``put``, ``delete``, ``incr``, ``decr`` and ``clear_all`` raise
      ``CacheOperationError``.
    """

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """
        Retrieve a value from the cache.

        Args:
            key: Cache key

        Returns:
            Stored payload, or None if absent, expired or the backend failed
        """
        pass

    @abstractmethod
    def get_multi(self, keys: Sequence[str]) -> list[Optional[bytes]]:
        """
        Retrieve several values in one backend call.

        Args:
            keys: Cache keys

        Returns:
            Payloads in the order of ``keys`` (None for absent keys), or an
            empty list if the batch failed
        """
        pass

    @abstractmethod
    def put(self, key: str, value: CacheValue, ttl: TTL = None) -> None:
        """
        Store a value in the cache.

        Args:
            key: Cache key
            value: Payload (see ``encode_value``)
            ttl: timedelta or seconds; None, zero or negative = no expiry

        Raises:
            CacheOperationError: If the backend rejects the write or the value or TTL is invalid
        """
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        """
        Delete a key. Deleting a missing key is not an error.

        Raises:
            CacheOperationError: If the backend call fails
        """
        pass

    @abstractmethod
    def is_exist(self, key: str) -> bool:
        """
        Check if a key exists.

        Returns:
            True if present; False if absent or the backend failed
        """
        pass

    @abstractmethod
    def incr(self, key: str) -> int:
        """
        Atomically increment an integer value by one.

        Returns:
            The new value

        Raises:
            CacheOperationError: If the value is not an integer or the backend fails
        """
        pass

    @abstractmethod
    def decr(self, key: str) -> int:
        """
        Atomically decrement an integer value by one.

        Returns:
            The new value

        Raises:
            CacheOperationError: If the value is not an integer or the backend fails
        """
        pass

    @abstractmethod
    def clear_all(self) -> None:
        """
        Remove every key in the backend's current logical database.

        This is not scoped to the adapter's namespace prefix.

        Raises:
            CacheOperationError: If the backend call fails
        """
        pass

    @abstractmethod
    def start_and_gc(self, config: Any) -> None:
        """
        Validate configuration and bring the adapter up.

        Args:
            config: JSON object text, bytes, a mapping or a typed options model

        Raises:
            ConfigurationError: If required options are missing or invalid
            CacheConnectionError: If the backend cannot be reached
        """
        pass

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        """Fetch a value and decode it as UTF-8 text."""
        data = self.get(key)
        if data is None:
            return default
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return default

    def get_int(self, key: str, default: Optional[int] = None) -> Optional[int]:
        """Fetch a value and parse it as an integer."""
        data = self.get(key)
        if data is None:
            return default
        try:
            return int(data)
        except ValueError:
            return default

