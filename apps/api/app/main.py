"""FastAPI application entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.routers import deck, document, health, sessions, sources
from app.services.sessions import get_session_store
from app.settings import settings

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Create the session store on startup and log shutdown."""
    # Startup
    store = get_session_store()
    logger.info(
        "api_started",
        demo_mode=settings.demo_mode or not settings.google_api_key,
        max_sessions=store.max_sessions,
    )
    yield
    # Shutdown
    logger.info("api_stopped", sessions=len(store))


app = FastAPI(
    title="CaseLens API",
    description="API for turning legal case material into dossiers and slide decks",
    version="0.1.0",
    lifespan=lifespan,
)

# CORS middleware - allow all origins in dev/Codespaces, restrict in production
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if settings.cors_allow_all else settings.cors_origins,
    allow_credentials=not settings.cors_allow_all,  # credentials require specific origins
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, prefix="/api/v1", tags=["health"])
app.include_router(sessions.router, prefix="/api/v1", tags=["sessions"])
app.include_router(sources.router, prefix="/api/v1", tags=["sources"])
app.include_router(document.router, prefix="/api/v1", tags=["document"])
app.include_router(deck.router, prefix="/api/v1", tags=["deck"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
    )
