"""
Redis-backed session store.

Records are kept under "<key_prefix><session_id>" so sessions can share a
keyspace with other data. Each command checks a connection out of a bounded
pool and returns it as soon as the command completes.
"""

import logging
from typing import Optional
from urllib.parse import urlsplit

import redis.asyncio as redis
from redis.asyncio.retry import Retry
from redis.backoff import NoBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import RedisError

from ...errors import (
    BackendError,
    ConfigError,
    DecodeError,
    EncodeError,
    SessionNotFoundError,
)
from .codec import decode_session, encode_session
from .interfaces import SessionData

logger = logging.getLogger(__name__)

# Default key prefix applied to ids in redis
DEFAULT_KEY_PREFIX = "SESS_"

REDIS_SCHEMES = ("redis", "rediss")

DEFAULT_POOL_SIZE = 10
DEFAULT_POOL_TIMEOUT = 5.0
DEFAULT_SOCKET_TIMEOUT = 5.0


def validate_redis_url(url: str) -> None:
    """
    Validate a redis connection URL without touching the network.

    Raises:
        ConfigError: "malformed-url" if the URL cannot be parsed or has no
            host, "invalid-scheme" if it is not a redis:// or rediss:// URL
    """
    if not isinstance(url, str) or not url.strip():
        raise ConfigError("malformed-url", "empty connection URL")

    try:
        parts = urlsplit(url)
        # Port parsing is lazy in urllib and raises on garbage
        parts.port
    except ValueError as e:
        raise ConfigError("malformed-url", str(e)) from e

    if not parts.scheme or not parts.netloc:
        raise ConfigError("malformed-url", f"cannot parse {url!r}")

    if parts.scheme not in REDIS_SCHEMES:
        raise ConfigError("invalid-scheme", f"expected redis:// or rediss://, got {parts.scheme}://")

    if not parts.hostname:
        raise ConfigError("malformed-url", "missing host")


class RedisStore:
    """Session store backed by a Redis server."""

    def __init__(
        self,
        client: redis.Redis,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        pool: Optional[redis.ConnectionPool] = None,
    ):
        """
        Initialize redis store.

        Args:
            client: Async Redis client. Must not decode responses.
            key_prefix: Prefix applied to session ids
            pool: Connection pool owned by this store, released on close()
        """
        self.redis = client
        self.key_prefix = key_prefix
        self._pool = pool

    @classmethod
    def from_url(
        cls,
        url: str,
        key_prefix: str = DEFAULT_KEY_PREFIX,
        pool_size: int = DEFAULT_POOL_SIZE,
        pool_timeout: float = DEFAULT_POOL_TIMEOUT,
        socket_timeout: float = DEFAULT_SOCKET_TIMEOUT,
        retries: int = 0,
    ) -> "RedisStore":
        """
        Create a store with its own connection pool for the supplied URL.

        No connection is opened here; an unreachable server surfaces as a
        BackendError on the first operation.

        Args:
            url: redis:// or rediss:// connection URL
            key_prefix: Prefix applied to session ids
            pool_size: Maximum open connections
            pool_timeout: Seconds to wait for a free connection before failing
            socket_timeout: Seconds before a connect or command times out
            retries: Immediate retries on connection errors

        Raises:
            ConfigError: Malformed URL or wrong scheme
        """
        validate_redis_url(url)
        if pool_size < 1:
            raise ConfigError("invalid-value", "pool_size must be at least 1")

        retry = Retry(NoBackoff(), retries)
        pool = redis.BlockingConnectionPool.from_url(
            url,
            max_connections=pool_size,
            timeout=pool_timeout,
            socket_timeout=socket_timeout,
            socket_connect_timeout=socket_timeout,
            retry=retry,
        )
        client = redis.Redis(connection_pool=pool, retry=retry)

        logger.info(f"Redis session store configured (pool_size={pool_size}, prefix={key_prefix!r})")
        return cls(client, key_prefix=key_prefix, pool=pool)

    def key(self, session_id: str) -> str:
        """Return the redis key for a session id."""
        return self.key_prefix + session_id

    async def get(self, session_id: str) -> SessionData:
        """Retrieve the session for the provided id from redis."""
        try:
            raw = await self.redis.get(self.key(session_id))
        except RedisError as e:
            raise self._backend_error("read", "GET", e) from e

        # nil reply
        if raw is None:
            raise SessionNotFoundError(session_id)

        try:
            return decode_session(raw)
        except (ValueError, RecursionError) as e:
            logger.error(f"Undecodable session record for key {self.key(session_id)}: {e}")
            raise DecodeError("decode", "GET", e) from e

    async def save(self, session_id: str, data: SessionData) -> None:
        """
        Save the session for the provided id in redis.

        If the provided id already exists in redis, then it will be overwritten.
        """
        try:
            payload = encode_session(data)
        except (TypeError, ValueError, RecursionError) as e:
            raise EncodeError("encode", "SET", e) from e

        try:
            await self.redis.set(self.key(session_id), payload)
        except RedisError as e:
            raise self._backend_error("write", "SET", e) from e

    async def destroy(self, session_id: str) -> None:
        """Permanently remove the session with the provided id from redis."""
        try:
            await self.redis.delete(self.key(session_id))
        except RedisError as e:
            raise self._backend_error("write", "DEL", e) from e

    async def close(self) -> None:
        """Close the client and release the pool if this store owns one."""
        await self.redis.aclose()
        if self._pool is not None:
            await self._pool.disconnect()
            self._pool = None

    async def __aenter__(self) -> "RedisStore":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    def _backend_error(self, op: str, cmd: str, err: RedisError) -> BackendError:
        # Refused connections and pool exhaustion both arrive as ConnectionError
        if isinstance(err, RedisConnectionError):
            op = "connect"
        logger.error(f"Redis {cmd} failed during {op}: {err}")
        return BackendError(op, cmd, err)


__all__ = ["DEFAULT_KEY_PREFIX", "RedisStore", "validate_redis_url"]
