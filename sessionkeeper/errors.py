"""
Error taxonomy shared by every sessionkeeper module.

Only NOT_FOUND is part of normal control flow (the coordinator falls back to
a fresh session). Every other kind propagates to the caller intact, carrying
the operation and backend command that failed.

Usage:
    try:
        data = await store.get(session_id)
    except SessionNotFoundError:
        data = {}
    except StoreError as e:
        logger.error(f"Session load failed ({e.kind.value}): {e}")
        raise
"""

from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Programmatic error categories."""

    NOT_FOUND = "not-found"
    BACKEND = "backend"
    ENCODE = "encode"
    DECODE = "decode"
    CONFIG = "config"


class SessionError(Exception):
    """Base class for all sessionkeeper errors."""

    kind: ErrorKind = ErrorKind.BACKEND


class SessionNotFoundError(SessionError):
    """Raised by stores when no record exists for an id."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__("session not found")


class StoreError(SessionError):
    """
    A store operation failed.

    Attributes:
        op: Logical operation (read, write, encode, decode, connect)
        cmd: Backend command issued during the operation (GET, SET, DEL)
        err: Underlying error, if any
    """

    def __init__(self, op: str, cmd: str, err: Optional[BaseException] = None):
        self.op = op
        self.cmd = cmd
        self.err = err
        super().__init__(str(self))

    def __str__(self) -> str:
        message = f"{self.op} {self.cmd}"
        if self.err is not None:
            message += f": {self.err}"
        return message


class BackendError(StoreError):
    """Transport or connection failure talking to the backend."""

    kind = ErrorKind.BACKEND


class EncodeError(StoreError):
    """Session data could not be serialized."""

    kind = ErrorKind.ENCODE


class DecodeError(StoreError):
    """Stored bytes could not be deserialized."""

    kind = ErrorKind.DECODE


class ConfigError(SessionError):
    """
    Construction-time misconfiguration. Fatal to startup, never per-request.

    Reasons: malformed-url, invalid-scheme, missing-secret,
    missing-block-secret, missing-store, unknown-store, invalid-value.
    """

    kind = ErrorKind.CONFIG

    def __init__(self, reason: str, detail: Optional[str] = None):
        self.reason = reason
        self.detail = detail
        message = f"Error: {reason}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


__all__ = [
    "ErrorKind",
    "SessionError",
    "SessionNotFoundError",
    "StoreError",
    "BackendError",
    "EncodeError",
    "DecodeError",
    "ConfigError",
]
