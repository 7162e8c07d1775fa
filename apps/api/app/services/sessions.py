"""In-memory session store: one analysis pipeline per user session."""

import uuid
from collections import OrderedDict
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone

import structlog
from fastapi import HTTPException

from caselens_core.errors import (
    ArtifactNotFoundError,
    ExportError,
    InvalidTransitionError,
    NoSourcesError,
)
from caselens_core.model_adapters import BaseModelAdapter, DemoAdapter, GoogleAdapter
from caselens_core.pipeline import CasePipeline

from app.settings import Settings, settings

logger = structlog.get_logger()


@dataclass
class Session:
    """A user session and its pipeline."""

    id: str
    pipeline: CasePipeline
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class SessionNotFoundError(LookupError):
    """No session exists for the given id."""


def build_adapter(config: Settings) -> BaseModelAdapter:
    """Create the gateway adapter configured for new sessions."""
    if config.demo_mode:
        return DemoAdapter()
    if not config.google_api_key:
        logger.warning("google_api_key_missing", fallback="demo")
        return DemoAdapter()
    return GoogleAdapter(
        api_key=config.google_api_key,
        text_model=config.text_model,
        image_model=config.image_model,
        timeout=config.gateway_timeout,
        max_retries=config.gateway_max_retries,
    )


class SessionStore:
    """Bounded session registry; the oldest session is evicted when full."""

    def __init__(
        self,
        adapter_factory: Callable[[], BaseModelAdapter],
        max_sessions: int = 100,
    ):
        self.adapter_factory = adapter_factory
        self.max_sessions = max(1, max_sessions)
        self._sessions: OrderedDict[str, Session] = OrderedDict()

    def create(self) -> Session:
        while len(self._sessions) >= self.max_sessions:
            evicted_id, _ = self._sessions.popitem(last=False)
            logger.info("session_evicted", session_id=evicted_id)

        session = Session(id=uuid.uuid4().hex, pipeline=CasePipeline(self.adapter_factory()))
        self._sessions[session.id] = session
        logger.info("session_created", session_id=session.id)
        return session

    def get(self, session_id: str) -> Session:
        try:
            return self._sessions[session_id]
        except KeyError:
            raise SessionNotFoundError(session_id) from None

    def delete(self, session_id: str) -> None:
        session = self.get(session_id)
        session.pipeline.reset()
        del self._sessions[session_id]
        logger.info("session_deleted", session_id=session_id)

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._sessions


_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """FastAPI dependency returning the process-wide session store."""
    global _store
    if _store is None:
        _store = SessionStore(lambda: build_adapter(settings), settings.max_sessions)
    return _store


def log_stage(session: Session, operation: str) -> None:
    """Log the stage a session reached after an operation."""
    pipeline = session.pipeline
    if pipeline.error:
        logger.warning(
            "stage_changed",
            session_id=session.id,
            operation=operation,
            stage=pipeline.stage.value,
            error=pipeline.error,
        )
    else:
        logger.info(
            "stage_changed",
            session_id=session.id,
            operation=operation,
            stage=pipeline.stage.value,
        )


@contextmanager
def pipeline_errors() -> Iterator[None]:
    """Translate pipeline exceptions into HTTP errors."""
    try:
        yield
    except InvalidTransitionError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    except ArtifactNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except NoSourcesError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except ExportError as e:
        logger.error("export_failed", error=str(e))
        raise HTTPException(status_code=500, detail=str(e)) from e
    except ValueError as e:
        # Includes pydantic validation errors from style merges
        raise HTTPException(status_code=422, detail=str(e)) from e
