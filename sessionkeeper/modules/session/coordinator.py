"""
Session coordinator.

Resolves the session for an inbound request, decides which cookie the
response carries, and flushes or destroys the session when the handler is
done. Framework-agnostic: the middleware module adapts it to Starlette.

Per-request state machine:
    no cookie / invalid cookie      -> FRESH (new id, cookie issued)
    valid cookie, record found      -> LOADED
    valid cookie, record not found  -> FRESH (presented id reused, cookie issued)
    handler returned                -> FLUSHED
    session destroyed               -> DESTROYED (never flushed)
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Optional, Union

from ...errors import ConfigError, SessionNotFoundError
from ..idgen import default_id_generator
from ..sealing import FernetSealer, SealError, Sealer, seal_age
from ..store.interfaces import Store
from .session import Session, SessionState

logger = logging.getLogger(__name__)

DEFAULT_COOKIE_NAME = "SESSID"

SAME_SITE_VALUES = ("strict", "lax", "none")

# Cookie value that tells the client to discard its session cookie
SENTINEL_VALUE = "-"

IDGenerator = Callable[[], str]


@dataclass
class CookieOptions:
    """Session cookie attributes. Passed through to Set-Cookie untouched."""

    name: str = DEFAULT_COOKIE_NAME
    path: str = "/"
    domain: Optional[str] = None
    expires: Optional[datetime] = None
    max_age: int = 0  # seconds; 0 omits Max-Age and disables the token age check
    secure: bool = False
    http_only: bool = False
    same_site: str = "lax"

    def __post_init__(self):
        if not self.name:
            self.name = DEFAULT_COOKIE_NAME
        if self.max_age < 0:
            raise ConfigError("invalid-value", "cookie max_age cannot be negative")
        self.same_site = (self.same_site or "").lower()
        if self.same_site not in SAME_SITE_VALUES:
            raise ConfigError(
                "invalid-value", f"cookie same_site must be strict, lax or none, got {self.same_site!r}"
            )
        # Set-Cookie dates must be UTC
        if self.expires is not None:
            if self.expires.tzinfo is None:
                self.expires = self.expires.replace(tzinfo=timezone.utc)
            else:
                self.expires = self.expires.astimezone(timezone.utc)


@dataclass
class CookieSpec:
    """A cookie the response must carry."""

    name: str
    value: str
    path: str = "/"
    domain: Optional[str] = None
    expires: Optional[Union[datetime, int]] = None
    max_age: Optional[int] = None
    secure: bool = False
    http_only: bool = False
    same_site: str = "lax"

    @property
    def is_sentinel(self) -> bool:
        return self.value == SENTINEL_VALUE

    def apply(self, response) -> None:
        """Attach this cookie to a Starlette response."""
        response.set_cookie(
            key=self.name,
            value=self.value,
            max_age=self.max_age,
            expires=self.expires,
            path=self.path,
            domain=self.domain,
            secure=self.secure,
            httponly=self.http_only,
            samesite=self.same_site,
        )


class SessionCoordinator:
    """
    Per-request session orchestration.

    One coordinator serves every request of an application; the state of a
    single request lives on the Session it returns from load().
    """

    def __init__(
        self,
        store: Store,
        sealer: Sealer,
        id_generator: Optional[IDGenerator] = None,
        cookie: Optional[CookieOptions] = None,
        refresh_after: Optional[int] = None,
    ):
        """
        Initialize coordinator.

        Args:
            store: Backing session store
            sealer: Cookie sealing capability
            id_generator: Session id factory (defaults to the time-ordered generator)
            cookie: Cookie attributes
            refresh_after: Cookie reissue policy. None reissues only for new
                sessions, 0 on every request, N > 0 once the cookie is older
                than N seconds.

        Raises:
            ConfigError: Store or sealer missing, or negative refresh_after
        """
        if store is None:
            raise ConfigError("missing-store", "a session store must be provided")
        if sealer is None:
            raise ConfigError("missing-secret", "a cookie sealer must be provided")
        if refresh_after is not None and refresh_after < 0:
            raise ConfigError("invalid-value", "refresh_after cannot be negative")

        self._store = store
        self._sealer = sealer
        self._id_generator = id_generator or default_id_generator
        self.cookie = cookie or CookieOptions()
        self.refresh_after = refresh_after

    @classmethod
    def from_secrets(
        cls,
        secret,
        block_secret,
        store: Store,
        id_generator: Optional[IDGenerator] = None,
        cookie: Optional[CookieOptions] = None,
        refresh_after: Optional[int] = None,
    ) -> "SessionCoordinator":
        """
        Build a coordinator with the default Fernet sealer.

        Raises:
            ConfigError: Empty secret or block secret, or missing store
        """
        if store is None:
            raise ConfigError("missing-store", "a session store must be provided")
        cookie = cookie or CookieOptions()
        sealer = FernetSealer(secret, block_secret, max_age=cookie.max_age)
        return cls(
            store,
            sealer,
            id_generator=id_generator,
            cookie=cookie,
            refresh_after=refresh_after,
        )

    @property
    def store(self) -> Store:
        return self._store

    @property
    def cookie_name(self) -> str:
        return self.cookie.name

    def resolve_id(self, cookie_value: Optional[str]) -> Optional[str]:
        """
        Extract the session id from an inbound cookie value.

        Returns None for a missing, forged, expired or malformed cookie.
        """
        if not cookie_value or cookie_value == SENTINEL_VALUE:
            return None

        try:
            values = self._sealer.open(self.cookie.name, cookie_value)
        except SealError as e:
            logger.debug(f"Rejected session cookie: {e}")
            return None

        session_id = values.get("id")
        if not session_id:
            logger.debug("Session cookie carries no id")
            return None
        return session_id

    async def load(self, cookie_value: Optional[str]) -> Session:
        """
        Resolve the session for an inbound request.

        Args:
            cookie_value: Raw value of the session cookie, if presented

        Returns:
            Session bound to this coordinator

        Raises:
            BackendError, DecodeError: The store failed; no session is fabricated
        """
        session_id = self.resolve_id(cookie_value)

        if session_id is None:
            return self._fresh(self._id_generator())

        try:
            data = await self._store.get(session_id)
        except SessionNotFoundError:
            logger.debug(f"Session {session_id} not found in store, starting fresh")
            return self._fresh(session_id)

        return Session(
            session_id,
            data,
            state=SessionState.LOADED,
            needs_cookie=self._should_refresh(cookie_value),
            coordinator=self,
        )

    def issue_cookie(self, session: Session) -> CookieSpec:
        """Seal the session id into a cookie with the configured attributes."""
        value = self._sealer.seal(self.cookie.name, {"id": session.id})
        return CookieSpec(
            name=self.cookie.name,
            value=value,
            path=self.cookie.path,
            domain=self.cookie.domain,
            expires=self.cookie.expires,
            max_age=self.cookie.max_age or None,
            secure=self.cookie.secure,
            http_only=self.cookie.http_only,
            same_site=self.cookie.same_site,
        )

    def expired_cookie(self) -> CookieSpec:
        """Cookie instructing the client to discard its session cookie."""
        return CookieSpec(
            name=self.cookie.name,
            value=SENTINEL_VALUE,
            path=self.cookie.path,
            domain=self.cookie.domain,
            expires=0,
            max_age=-1,
            secure=self.cookie.secure,
            http_only=self.cookie.http_only,
            same_site=self.cookie.same_site,
        )

    def cookie_for(self, session: Session) -> Optional[CookieSpec]:
        """Return the cookie the response should carry, if any."""
        if session.destroyed:
            return None if session.sentinel_sent else self.expired_cookie()
        if session.needs_cookie:
            return self.issue_cookie(session)
        return None

    async def flush(self, session: Session) -> None:
        """
        Save the session, unless it was destroyed.

        Saves unconditionally, whether or not the handler changed anything.

        Raises:
            BackendError, EncodeError: The store failed
        """
        if session.destroyed:
            return
        await self._store.save(session.id, session.snapshot())
        session.state = SessionState.FLUSHED

    async def destroy(self, session: Session, response=None) -> None:
        """
        Destroy the session in the store.

        The response then carries the expired sentinel cookie and the session
        is never flushed. Data remains readable through the handle.

        Args:
            session: Session to destroy
            response: Optional Starlette response to attach the sentinel
                cookie to right away

        Raises:
            BackendError: The store failed
        """
        await self._store.destroy(session.id)
        session.state = SessionState.DESTROYED
        if response is not None:
            self.expired_cookie().apply(response)
            session.sentinel_sent = True
        logger.info(f"Session {session.id} destroyed")

    def _fresh(self, session_id: str) -> Session:
        return Session(
            session_id,
            {},
            state=SessionState.FRESH,
            needs_cookie=True,
            coordinator=self,
        )

    def _should_refresh(self, cookie_value: str) -> bool:
        if self.refresh_after is None:
            return False
        if self.refresh_after == 0:
            return True
        age = seal_age(self._sealer, cookie_value)
        return age is not None and age >= self.refresh_after
