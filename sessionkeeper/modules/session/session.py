import copy
from enum import Enum
from typing import TYPE_CHECKING, Any, Optional, Tuple

from ...rwlock import RWLock
from ..store.interfaces import SessionData, SessionValue

if TYPE_CHECKING:
    from .coordinator import SessionCoordinator


class SessionState(str, Enum):
    """Lifecycle of a session within one request."""

    FRESH = "fresh"
    LOADED = "loaded"
    FLUSHED = "flushed"
    DESTROYED = "destroyed"


class Session:
    """
    Session handle for one request.

    The data map is owned by the request that loaded it until the coordinator
    flushes it to the store. Accessors are synchronized so handler code on
    several threads can share the handle.
    """

    def __init__(
        self,
        session_id: str,
        data: Optional[SessionData] = None,
        state: SessionState = SessionState.FRESH,
        needs_cookie: bool = False,
        coordinator: Optional["SessionCoordinator"] = None,
    ):
        self._id = session_id
        self._data: SessionData = data if data is not None else {}
        self._lock = RWLock()
        self._coordinator = coordinator
        self.state = state
        self.needs_cookie = needs_cookie
        self.sentinel_sent = False

    @property
    def id(self) -> str:
        return self._id

    @property
    def is_new(self) -> bool:
        """True when the session started empty in this request."""
        return self.state == SessionState.FRESH

    @property
    def destroyed(self) -> bool:
        return self.state == SessionState.DESTROYED

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieve a session value, or default when unset."""
        with self._lock.read():
            return self._data.get(key, default)

    def lookup(self, key: str) -> Tuple[Any, bool]:
        """Retrieve a session value and whether it was set."""
        with self._lock.read():
            if key in self._data:
                return self._data[key], True
            return None, False

    def set(self, key: str, value: SessionValue) -> None:
        """
        Store a session value.

        Values are saved to the store after the handler has finished.
        """
        with self._lock.write():
            self._data[key] = value

    def delete(self, key: str) -> None:
        """Delete a session value. Unset keys are ignored."""
        with self._lock.write():
            self._data.pop(key, None)

    def snapshot(self) -> SessionData:
        """Return a deep copy of the current session data."""
        with self._lock.read():
            return copy.deepcopy(self._data)

    async def destroy(self, response=None) -> None:
        """
        Destroy this session in the underlying store.

        Values already set remain readable through this handle for the rest of
        the request; they are simply never saved.
        """
        if self._coordinator is None:
            raise RuntimeError("session is not bound to a coordinator")
        await self._coordinator.destroy(self, response)

    def __contains__(self, key: object) -> bool:
        with self._lock.read():
            return key in self._data

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)

    def __repr__(self) -> str:
        return f"Session(id={self._id!r}, state={self.state.value})"
