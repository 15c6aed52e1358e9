"""Store interfaces following Black Box Design principles."""
from typing import Any, Dict, List, Protocol, Union

# Closed value space that every store must round-trip exactly
SessionValue = Union[str, int, float, bool, None, List[Any], Dict[str, Any]]
SessionData = Dict[str, SessionValue]


class Store(Protocol):
    """Protocol for session stores - allows swappable implementations."""

    async def get(self, session_id: str) -> SessionData:
        """
        Retrieve the session for the provided id.

        Args:
            session_id: Session identifier

        Returns:
            The exact data passed to the last completed save

        Raises:
            SessionNotFoundError: No record exists for session_id
            BackendError: Transport failure
            DecodeError: Stored record could not be deserialized
        """
        ...

    async def save(self, session_id: str, data: SessionData) -> None:
        """
        Save the session for the provided id.

        An existing record is replaced entirely.

        Raises:
            BackendError: Transport failure
            EncodeError: Data could not be serialized
        """
        ...

    async def destroy(self, session_id: str) -> None:
        """
        Permanently remove the session for the provided id.

        Removing an absent id is not an error.

        Raises:
            BackendError: Transport failure
        """
        ...
