import base64
import json
import time
from typing import Dict, Mapping, Optional, Protocol

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from ...errors import ConfigError

# Fernet's signing and encryption halves are 16 bytes each
_KEY_HALF = 16


class SealError(Exception):
    """A token failed verification or decoding."""


class Sealer(Protocol):
    """Protocol for cookie sealing - allows swappable implementations."""

    def seal(self, name: str, values: Mapping[str, str]) -> str:
        """
        Sign (and encrypt) values into an opaque token bound to name.

        Args:
            name: Cookie name the token is issued for
            values: String values to carry

        Returns:
            URL-safe token
        """
        ...

    def open(self, name: str, token: str) -> Dict[str, str]:
        """
        Verify and decode a token produced by seal for the same name.

        Raises:
            SealError: Token is forged, expired, issued for another name,
                or malformed
        """
        ...


def _derive(secret: bytes, label: bytes) -> bytes:
    return HKDF(algorithm=hashes.SHA256(), length=_KEY_HALF, salt=None, info=label).derive(secret)


def _as_bytes(secret) -> bytes:
    if isinstance(secret, str):
        return secret.encode("utf-8")
    return bytes(secret)


class FernetSealer:
    """
    Sealer built on Fernet authenticated encryption.

    The hash secret keys the HMAC half of the Fernet key and the block secret
    keys the AES half. The cookie name is sealed inside the token, so a token
    issued for one cookie is rejected under another name. Fernet timestamps
    every token, which bounds token age when max_age is set and lets callers
    ask when a token was sealed.
    """

    def __init__(self, secret, block_secret, max_age: int = 0):
        """
        Initialize sealer.

        Args:
            secret: Signing secret (str or bytes)
            block_secret: Encryption secret (str or bytes)
            max_age: Maximum token age in seconds, 0 to disable the check

        Raises:
            ConfigError: Either secret is empty
        """
        if not secret:
            raise ConfigError("missing-secret", "session secret cannot be empty")
        if not block_secret:
            raise ConfigError("missing-block-secret", "session block secret cannot be empty")

        signing_key = _derive(_as_bytes(secret), b"sessionkeeper-sign")
        encryption_key = _derive(_as_bytes(block_secret), b"sessionkeeper-block")
        self._fernet = Fernet(base64.urlsafe_b64encode(signing_key + encryption_key))
        self.max_age = max_age

    def seal(self, name: str, values: Mapping[str, str]) -> str:
        payload = json.dumps({"n": name, "v": dict(values)}, separators=(",", ":"))
        token = self._fernet.encrypt(payload.encode("utf-8")).decode("ascii")
        # Padding would force the cookie value to be quoted
        return token.rstrip("=")

    def open(self, name: str, token: str) -> Dict[str, str]:
        raw = self._decrypt(token)
        try:
            payload = json.loads(raw)
        except ValueError as e:
            raise SealError("token payload is not JSON") from e

        if not isinstance(payload, dict) or payload.get("n") != name:
            raise SealError("token was not issued for this cookie")

        values = payload.get("v")
        if not isinstance(values, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in values.items()
        ):
            raise SealError("token values are malformed")
        return values

    def issued_at(self, token: str) -> Optional[int]:
        """Return the unix time a valid token was sealed, or None."""
        try:
            return self._fernet.extract_timestamp(self._pad(token))
        except (InvalidToken, ValueError):
            return None

    def _decrypt(self, token: str) -> bytes:
        if not token:
            raise SealError("empty token")
        try:
            return self._fernet.decrypt(self._pad(token), ttl=self.max_age or None)
        except (InvalidToken, ValueError) as e:
            raise SealError("token failed verification") from e

    @staticmethod
    def _pad(token: str) -> bytes:
        token = token.strip()
        return (token + "=" * (-len(token) % 4)).encode("ascii")


def seal_age(sealer: Sealer, token: str) -> Optional[float]:
    """Seconds since token was sealed, when the sealer can tell."""
    issued_at = getattr(sealer, "issued_at", None)
    if issued_at is None:
        return None
    sealed = issued_at(token)
    if sealed is None:
        return None
    return time.time() - sealed
