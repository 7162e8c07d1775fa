"""Slide deck routes."""

import asyncio

import structlog
from fastapi import APIRouter, Depends, HTTPException, Response

from caselens_core.exporters import PPTX_MIME_TYPE, export_pptx, pptx_filename
from caselens_core.pipeline import SlidePreview
from caselens_core.schemas.deck import SlideStyle

from app.routers.deps import get_session
from app.routers.sessions import session_response
from app.schemas.api import ImageResponse, SessionResponse, StylePatch
from app.services.sessions import Session, log_stage, pipeline_errors

logger = structlog.get_logger()

router = APIRouter()


@router.post("/sessions/{session_id}/deck", response_model=SessionResponse)
async def generate_deck(
    session: Session = Depends(get_session),
) -> SessionResponse:
    """Generate the slide deck from the dossier."""
    with pipeline_errors():
        await session.pipeline.generate_deck()
    log_stage(session, "generate_deck")
    return session_response(session)


@router.patch(
    "/sessions/{session_id}/deck/slides/{index}/style",
    response_model=SlideStyle,
)
async def update_slide_style(
    index: int,
    request: StylePatch,
    session: Session = Depends(get_session),
) -> SlideStyle:
    """Merge a partial style into one slide."""
    with pipeline_errors():
        return session.pipeline.update_slide_style(
            index, request.model_dump(exclude_none=True)
        )


@router.post(
    "/sessions/{session_id}/deck/slides/{index}/image",
    response_model=ImageResponse,
)
async def regenerate_slide_image(
    index: int,
    session: Session = Depends(get_session),
) -> ImageResponse:
    """Synthesize a new illustration for one slide."""
    with pipeline_errors():
        success = await session.pipeline.regenerate_slide_image(index)

    deck = session.pipeline.deck
    if deck is None or index >= len(deck.slides):
        raise HTTPException(status_code=409, detail="Session was reset")
    slide = deck.slides[index]
    return ImageResponse(slide_id=slide.id, success=success, image_url=slide.image_url)


@router.get(
    "/sessions/{session_id}/deck/slides/{index}/preview",
    response_model=SlidePreview,
)
async def preview_slide(
    index: int,
    session: Session = Depends(get_session),
) -> SlidePreview:
    """Get the font sizes and canvas boxes a slide is exported with."""
    with pipeline_errors():
        return session.pipeline.slide_preview(index)


@router.get("/sessions/{session_id}/deck/export")
async def export_deck(
    session: Session = Depends(get_session),
) -> Response:
    """Download the deck as a PowerPoint file."""
    deck = session.pipeline.deck
    if deck is None:
        raise HTTPException(status_code=409, detail="No deck to export")

    snapshot = deck.model_copy(deep=True)
    with pipeline_errors():
        # Remote logos are downloaded while exporting
        content = await asyncio.to_thread(export_pptx, snapshot)

    filename = pptx_filename(deck.presentation_title)
    logger.info("export_generated", session_id=session.id, format="pptx", size=len(content))
    return Response(
        content=content,
        media_type=PPTX_MIME_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
