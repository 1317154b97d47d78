"""
kvcache — Test Configuration and Shared Fixtures

Provides pytest configuration and shared fixtures for unit and integration tests.
"""

import os
from collections.abc import Generator

import pytest
from redis import Redis

# Test logging level, picked up by load_config
os.environ["LOG_LEVEL"] = "DEBUG"

TEST_REDIS_URL = os.environ.get("TEST_REDIS_URL", "redis://localhost:6379/15")


@pytest.fixture
def test_redis_url() -> str:
    """Redis URL for testing (database 15 for isolation)."""
    return TEST_REDIS_URL


@pytest.fixture
def redis_client(test_redis_url: str) -> Generator[Redis, None, None]:
    """
    Raw Redis client on the test database.

    Skips if Redis is not available. Flushes the database before and after each test.
    """
    client = Redis.from_url(test_redis_url)

    try:
        client.ping()
    except Exception as e:
        client.close()
        pytest.skip(f"Redis not available for testing: {e}")

    client.flushdb()
    yield client

    try:
        client.flushdb()
    finally:
        client.close()


@pytest.fixture(autouse=True)
def reset_registry() -> Generator[None, None, None]:
    """Reset the default registry and config after each test to prevent state leakage."""
    yield
    from kvcache.cache.registry import reset_default_registry
    from kvcache.config import reset_config

    reset_default_registry()
    reset_config()
