"""
Shared pytest fixtures for sessionkeeper tests.

This module provides common fixtures including:
- Redis mocks for store tests
- In-memory store, sealer and coordinator wiring
"""

import itertools
from unittest.mock import AsyncMock

import pytest

from sessionkeeper.modules.idgen import IdentifierGenerator
from sessionkeeper.modules.sealing import FernetSealer
from sessionkeeper.modules.session import CookieOptions, SessionCoordinator
from sessionkeeper.modules.store import MemoryStore

SECRET = "LymWKG0UvJFCiXLHdeYJTR1xaAcRvrf7"
BLOCK_SECRET = "NxyECgzxiYdMhMbsBrUcAAbyBuqKDrpp"
COOKIE_NAME = "sessionkeeper_test"


# =============================================================================
# Redis Mocking Infrastructure
# =============================================================================

@pytest.fixture
def mock_redis():
    """Create a mock Redis client for async operations."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.aclose = AsyncMock()
    return redis


@pytest.fixture
def mock_redis_with_data():
    """
    Redis mock with in-memory data storage for more realistic tests.

    This allows testing code that reads back what it writes.
    """
    storage = {}

    redis = AsyncMock()

    async def mock_set(key, value, *args, **kwargs):
        storage[key] = bytes(value)
        return True

    async def mock_get(key):
        return storage.get(key)

    async def mock_delete(*keys):
        count = 0
        for key in keys:
            if key in storage:
                del storage[key]
                count += 1
        return count

    redis.set = mock_set
    redis.get = mock_get
    redis.delete = mock_delete
    redis._storage = storage  # Expose for test assertions

    return redis


# =============================================================================
# Session Stack
# =============================================================================

@pytest.fixture
def memory_store():
    """Empty in-memory session store."""
    return MemoryStore()


@pytest.fixture
def sealer():
    """Fernet sealer with fixed test secrets."""
    return FernetSealer(SECRET, BLOCK_SECRET)


@pytest.fixture
def fake_clock():
    """Nanosecond clock advancing one microsecond per call."""
    counter = itertools.count(1_700_000_000_000_000_000, 1_000)
    return lambda: next(counter)


@pytest.fixture
def id_generator(fake_clock):
    """Deterministic-order identifier generator."""
    return IdentifierGenerator(clock=fake_clock)


@pytest.fixture
def coordinator(memory_store, sealer, id_generator):
    """Coordinator over an in-memory store."""
    return SessionCoordinator(
        memory_store,
        sealer,
        id_generator=id_generator,
        cookie=CookieOptions(name=COOKIE_NAME),
    )


# =============================================================================
# Test Markers Configuration
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: Integration tests requiring infrastructure"
    )
    config.addinivalue_line(
        "markers", "slow: Tests that take a long time to run"
    )
