"""
Session Factory following Black Box Design principles.

This factory:
- Constructs the session stack based on configuration
- Wires dependencies together
- Returns only the coordinator (hiding the store and sealer)
"""

import logging
from typing import Optional

from ...config.provider import ConfigProvider, StoreConfig
from ...errors import ConfigError
from ..store import MemoryStore, RedisStore, Store
from .coordinator import CookieOptions, IDGenerator, SessionCoordinator

logger = logging.getLogger(__name__)


class SessionFactory:
    """
    Factory for building the session stack.

    This is the composition root that:
    - Creates the store and sealer
    - Wires them into a coordinator via dependency injection
    - Returns only the public interface
    """

    @staticmethod
    def build_store(store_config: StoreConfig) -> Store:
        """
        Build the configured session store.

        Raises:
            ConfigError: Unknown backend or bad redis URL
        """
        if store_config.backend == "memory":
            logger.info("Building in-memory session store")
            return MemoryStore()

        if store_config.is_remote:
            logger.info("Building redis session store")
            return RedisStore.from_url(
                store_config.redis_url,
                key_prefix=store_config.key_prefix,
                pool_size=store_config.pool_size,
                pool_timeout=store_config.pool_timeout,
            )

        raise ConfigError("unknown-store", f"unsupported session store {store_config.backend!r}")

    @staticmethod
    def build(
        config_provider: ConfigProvider,
        store: Optional[Store] = None,
        id_generator: Optional[IDGenerator] = None,
    ) -> SessionCoordinator:
        """
        Build the complete session stack.

        Args:
            config_provider: Configuration provider
            store: Optional pre-built store, overriding the configured backend
            id_generator: Optional session id factory

        Returns:
            SessionCoordinator ready to be handed to the middleware

        Raises:
            ConfigError: Missing secrets or invalid store configuration
        """
        session_config = config_provider.get_session_config()
        cookie_config = config_provider.get_cookie_config()

        if store is None:
            store = SessionFactory.build_store(config_provider.get_store_config())

        cookie = CookieOptions(
            name=cookie_config.name,
            path=cookie_config.path,
            domain=cookie_config.domain,
            max_age=cookie_config.max_age,
            secure=cookie_config.secure,
            http_only=cookie_config.http_only,
            same_site=cookie_config.same_site,
        )

        return SessionCoordinator.from_secrets(
            session_config.secret,
            session_config.block_secret,
            store,
            id_generator=id_generator,
            cookie=cookie,
            refresh_after=session_config.refresh_after,
        )
