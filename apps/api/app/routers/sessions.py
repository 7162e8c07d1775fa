"""Session lifecycle routes."""

from fastapi import APIRouter, Depends

from app.routers.deps import get_session
from app.schemas.api import SessionResponse
from app.services.sessions import (
    Session,
    SessionStore,
    get_session_store,
    log_stage,
)

router = APIRouter()


def session_response(session: Session) -> SessionResponse:
    return SessionResponse.from_snapshot(
        session.id, session.created_at, session.pipeline.snapshot()
    )


@router.post("/sessions", response_model=SessionResponse, status_code=201)
async def create_session(
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    """Start a new session with an empty pipeline."""
    return session_response(store.create())


@router.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session_state(
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Get the current pipeline state of a session."""
    return session_response(session)


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(
    session_id: str,
    session: Session = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> None:
    """Delete a session and everything it produced."""
    store.delete(session.id)


@router.post("/sessions/{session_id}/reset", response_model=SessionResponse)
async def reset_session(
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Discard all artifacts and return the pipeline to IDLE."""
    session.pipeline.reset()
    log_stage(session, "reset")
    return session_response(session)
