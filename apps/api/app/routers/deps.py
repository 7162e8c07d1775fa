"""Shared route dependencies."""

from fastapi import Depends, HTTPException

from app.services.sessions import (
    Session,
    SessionNotFoundError,
    SessionStore,
    get_session_store,
)


def get_session(
    session_id: str,
    store: SessionStore = Depends(get_session_store),
) -> Session:
    """Resolve the session named in the path."""
    try:
        return store.get(session_id)
    except SessionNotFoundError:
        raise HTTPException(status_code=404, detail="Session not found") from None
