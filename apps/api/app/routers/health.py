from fastapi import APIRouter, Depends

from app.services.sessions import SessionStore, get_session_store
from app.settings import settings

router = APIRouter()


@router.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@router.get("/health/ready")
async def readiness_check(
    store: SessionStore = Depends(get_session_store),
) -> dict[str, str | int]:
    """Readiness check - reports gateway mode and session capacity."""
    demo = settings.demo_mode or not settings.google_api_key
    return {
        "status": "ready",
        "gateway": "demo" if demo else "google",
        "sessions": len(store),
        "max_sessions": store.max_sessions,
    }
