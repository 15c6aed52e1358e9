"""
Session Module - Black Box Interface

Purpose: Manage the per-request session lifecycle
Interface: load(), cookie_for(), flush(), destroy(), Session accessors
Hidden: Cookie sealing, id generation, refresh policy, store access

Works with any Store implementation and any Sealer.
"""

from .coordinator import (
    DEFAULT_COOKIE_NAME,
    SENTINEL_VALUE,
    CookieOptions,
    CookieSpec,
    SessionCoordinator,
)
from .factory import SessionFactory
from .session import Session, SessionState

__all__ = [
    "DEFAULT_COOKIE_NAME",
    "SENTINEL_VALUE",
    "CookieOptions",
    "CookieSpec",
    "Session",
    "SessionCoordinator",
    "SessionFactory",
    "SessionState",
]
