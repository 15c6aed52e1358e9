"""
Store Module - Black Box Interface

Purpose: Persist session data between requests
Interface: get(), save(), destroy()
Hidden: Locking, redis specifics, connection pooling, serialization

Can be replaced with any backend implementing the Store protocol.
"""

from .interfaces import SessionData, SessionValue, Store
from .memory import MemoryStore
from .redis_store import DEFAULT_KEY_PREFIX, RedisStore, validate_redis_url

__all__ = [
    "DEFAULT_KEY_PREFIX",
    "MemoryStore",
    "RedisStore",
    "SessionData",
    "SessionValue",
    "Store",
    "validate_redis_url",
]
