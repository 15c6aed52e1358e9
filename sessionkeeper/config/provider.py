"""Configuration provider following Black Box Design principles."""
import os
from dataclasses import dataclass
from typing import Optional, Protocol

from ..errors import ConfigError


@dataclass
class CookieConfig:
    """Session cookie configuration."""
    name: str
    path: str
    domain: Optional[str]
    max_age: int
    secure: bool
    http_only: bool
    same_site: str


@dataclass
class StoreConfig:
    """Session store configuration."""
    backend: str
    redis_url: str
    key_prefix: str
    pool_size: int
    pool_timeout: float

    @property
    def is_remote(self) -> bool:
        """Check if sessions live in redis."""
        return self.backend == "redis"


@dataclass
class SessionConfig:
    """Session sealing configuration."""
    secret: str
    block_secret: str
    refresh_after: Optional[int]


class ConfigProvider(Protocol):
    """Protocol for configuration providers."""

    def get_session_config(self) -> SessionConfig:
        """Get session sealing configuration."""
        ...

    def get_cookie_config(self) -> CookieConfig:
        """Get cookie configuration."""
        ...

    def get_store_config(self) -> StoreConfig:
        """Get store configuration."""
        ...


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).lower() == "true"


def _env_int(name: str, default: Optional[str]) -> Optional[int]:
    value = os.getenv(name, default)
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        raise ConfigError("invalid-value", f"{name} must be an integer, got {value!r}") from None


def _env_float(name: str, default: str) -> float:
    value = os.getenv(name, default)
    try:
        return float(value)
    except ValueError:
        raise ConfigError("invalid-value", f"{name} must be a number, got {value!r}") from None


class EnvConfigProvider:
    """Environment-based configuration provider."""

    def get_session_config(self) -> SessionConfig:
        """Get session sealing configuration from environment variables."""
        # Secrets are required - no default for security
        secret = os.getenv("SESSION_SECRET")
        if not secret:
            raise ConfigError(
                "missing-secret",
                "SESSION_SECRET environment variable is required",
            )

        block_secret = os.getenv("SESSION_BLOCK_SECRET")
        if not block_secret:
            raise ConfigError(
                "missing-block-secret",
                "SESSION_BLOCK_SECRET environment variable is required",
            )

        return SessionConfig(
            secret=secret,
            block_secret=block_secret,
            refresh_after=_env_int("SESSION_REFRESH_AFTER", None),
        )

    def get_cookie_config(self) -> CookieConfig:
        """Get cookie configuration from environment variables."""
        return CookieConfig(
            name=os.getenv("SESSION_COOKIE_NAME", "SESSID"),
            path=os.getenv("SESSION_COOKIE_PATH", "/"),
            domain=os.getenv("SESSION_COOKIE_DOMAIN") or None,
            max_age=_env_int("SESSION_COOKIE_MAX_AGE", "0"),
            secure=_env_bool("SESSION_COOKIE_SECURE"),
            http_only=_env_bool("SESSION_COOKIE_HTTPONLY"),
            same_site=os.getenv("SESSION_COOKIE_SAMESITE", "lax").lower(),
        )

    def get_store_config(self) -> StoreConfig:
        """Get store configuration from environment variables."""
        return StoreConfig(
            backend=os.getenv("SESSION_STORE", "memory").lower(),
            redis_url=os.getenv("REDIS_URL", "redis://localhost:6379/0"),
            key_prefix=os.getenv("SESSION_KEY_PREFIX", "SESS_"),
            pool_size=_env_int("REDIS_POOL_SIZE", "10"),
            pool_timeout=_env_float("REDIS_POOL_TIMEOUT", "5.0"),
        )
