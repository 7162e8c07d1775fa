"""Analysis and dossier routes."""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response

from caselens_core.exporters import WORD_MIME_TYPE, export_word, word_filename
from caselens_core.schemas.document import DocumentSection

from app.routers.deps import get_session
from app.routers.sessions import session_response
from app.schemas.api import SectionUpdate, SessionResponse, TextUpdate
from app.services.sessions import Session, log_stage, pipeline_errors

logger = structlog.get_logger()

router = APIRouter()


@router.post("/sessions/{session_id}/analysis", response_model=SessionResponse)
async def start_analysis(
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Validate the submitted sources and extract their text."""
    with pipeline_errors():
        await session.pipeline.start_analysis()
    log_stage(session, "start_analysis")
    return session_response(session)


@router.put("/sessions/{session_id}/text", response_model=SessionResponse)
async def update_text(
    request: TextUpdate,
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Replace the extracted text before the dossier is written."""
    with pipeline_errors():
        session.pipeline.update_extracted_text(request.text)
    return session_response(session)


@router.post("/sessions/{session_id}/document", response_model=SessionResponse)
async def generate_document(
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Write the dossier from the reviewed text."""
    with pipeline_errors():
        await session.pipeline.proceed_to_analysis()
    log_stage(session, "proceed_to_analysis")
    return session_response(session)


@router.put(
    "/sessions/{session_id}/document/sections/{index}",
    response_model=DocumentSection,
)
async def edit_section(
    index: int,
    request: SectionUpdate,
    session: Session = Depends(get_session),
) -> DocumentSection:
    """Replace the body of one dossier section."""
    with pipeline_errors():
        return session.pipeline.edit_document_section(index, request.body)


@router.get("/sessions/{session_id}/document/export")
async def export_document(
    title: str | None = None,
    session: Session = Depends(get_session),
) -> Response:
    """Download the dossier as a Word document."""
    pipeline = session.pipeline
    if not pipeline.sections:
        raise HTTPException(status_code=409, detail="No dossier to export")

    resolved_title = title or (
        pipeline.deck.presentation_title if pipeline.deck else "Case Analysis"
    )
    with pipeline_errors():
        content = export_word(pipeline.sections, resolved_title)

    filename = word_filename(resolved_title)
    logger.info("export_generated", session_id=session.id, format="doc", size=len(content))
    return Response(
        content=content,
        media_type=WORD_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
