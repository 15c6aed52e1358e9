import copy
import logging
from typing import Dict

from ...errors import SessionNotFoundError
from ...rwlock import RWLock
from .interfaces import SessionData

logger = logging.getLogger(__name__)


class MemoryStore:
    """
    In-process session store.

    Records live in a single dict for the lifetime of the store; nothing
    survives a restart. Reads take the shared lock, writes the exclusive one.
    Records are copied in and out, so a handler mutating its session after a
    save cannot alter the stored record.
    """

    def __init__(self):
        self._lock = RWLock()
        self._data: Dict[str, SessionData] = {}

    async def get(self, session_id: str) -> SessionData:
        """Retrieve the session for the provided id from memory."""
        with self._lock.read():
            try:
                record = self._data[session_id]
            except KeyError:
                raise SessionNotFoundError(session_id) from None
            return copy.deepcopy(record)

    async def save(self, session_id: str, data: SessionData) -> None:
        """
        Save the session for the provided id in memory.

        If the provided id already exists, it is overwritten.
        """
        record = copy.deepcopy(data)
        with self._lock.write():
            self._data[session_id] = record

    async def destroy(self, session_id: str) -> None:
        """Permanently remove the session with the provided id from memory."""
        with self._lock.write():
            self._data.pop(session_id, None)

    def clear(self) -> None:
        """Drop every record."""
        with self._lock.write():
            self._data.clear()
        logger.debug("Memory session store cleared")

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._data)

    def __contains__(self, session_id: object) -> bool:
        with self._lock.read():
            return session_id in self._data
