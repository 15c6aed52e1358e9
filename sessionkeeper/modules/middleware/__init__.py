"""
Session Middleware Module - Black Box Interface

Purpose: Provide session middleware for FastAPI/Starlette applications
Interface: SessionMiddleware, create_session_middleware(), get_session()
Hidden: Cookie extraction, cookie attachment, flush ordering, error formatting

Handlers receive the session explicitly through Depends(get_session).
"""

import asyncio
import logging
from typing import Any, Dict

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse

from ...errors import StoreError
from ..session import Session, SessionCoordinator

logger = logging.getLogger(__name__)


class SessionMiddleware:
    """
    Session middleware for FastAPI applications.

    Loads the session before the handler runs, attaches the issued, refreshed
    or expired cookie to the response, and saves the session once the handler
    has returned.
    """

    def __init__(self, coordinator: SessionCoordinator):
        """
        Initialize session middleware.

        Args:
            coordinator: SessionCoordinator shared by every request
        """
        self.coordinator = coordinator

    def format_error(self, status_code: int, message: str) -> Dict[str, Any]:
        """Format error response."""
        return {
            "error": message,
            "status": status_code
        }

    async def __call__(self, request: Request, call_next):
        """Process the request through session middleware."""
        cookie_value = request.cookies.get(self.coordinator.cookie_name)

        try:
            session = await self.coordinator.load(cookie_value)
        except StoreError as e:
            # Never fall back to an empty session on an unexplained backend failure
            logger.error(f"Error loading session ({e.kind.value}): {e}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error while loading session")
            )

        request.state.session = session

        try:
            response = await call_next(request)
        except asyncio.CancelledError:
            if not session.destroyed:
                logger.warning(f"Request cancelled, saving session {session.id} anyway")
                await asyncio.shield(self._flush_after_cancel(session))
            raise

        try:
            # Seal before flushing; a sealer failure saves nothing
            cookie = self.coordinator.cookie_for(session)
        except Exception as e:
            logger.error(f"Error issuing cookie for session {session.id}: {e}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error while issuing session cookie")
            )

        try:
            await self.coordinator.flush(session)
        except StoreError as e:
            logger.error(f"Error saving session {session.id} ({e.kind.value}): {e}")
            return JSONResponse(
                status_code=500,
                content=self.format_error(500, "Internal error while saving session")
            )

        if cookie is not None:
            cookie.apply(response)

        return response

    async def _flush_after_cancel(self, session: Session) -> None:
        # Nobody is left to report the failure to
        try:
            await self.coordinator.flush(session)
        except StoreError as e:
            logger.error(f"Error saving session {session.id} after cancellation: {e}")


def create_session_middleware(coordinator: SessionCoordinator) -> SessionMiddleware:
    """
    Factory function to create session middleware.

    Args:
        coordinator: SessionCoordinator, usually from SessionFactory.build()

    Returns:
        Configured SessionMiddleware instance

    Usage:
        session_middleware = create_session_middleware(coordinator)

        @app.middleware("http")
        async def add_session(request: Request, call_next):
            return await session_middleware(request, call_next)
    """
    return SessionMiddleware(coordinator)


def get_session(request: Request) -> Session:
    """
    FastAPI dependency returning the active session.

    Usage:
        @app.get("/")
        def index(session: Session = Depends(get_session)):
            return {"name": session.get("name")}
    """
    session = getattr(request.state, "session", None)
    if session is None:
        raise HTTPException(500, "Session middleware not installed")
    return session


# Module interface - what this module provides
__all__ = [
    "SessionMiddleware",
    "create_session_middleware",
    "get_session"
]
