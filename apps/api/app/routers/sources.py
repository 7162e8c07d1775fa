"""Source submission routes."""

import structlog
from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from caselens_core.schemas.sources import Source
from caselens_core.utils.pdf import PDFValidationError, get_pdf_version, validate_pdf

from app.routers.deps import get_session
from app.schemas.api import SourceCreatedResponse, UrlSourceCreate
from app.services.sessions import Session, pipeline_errors
from app.settings import settings

logger = structlog.get_logger()

router = APIRouter()


@router.post(
    "/sessions/{session_id}/sources/url",
    response_model=SourceCreatedResponse,
    status_code=201,
)
async def add_url_source(
    request: UrlSourceCreate,
    session: Session = Depends(get_session),
) -> SourceCreatedResponse:
    """Submit a URL as case evidence."""
    url = request.url.strip()
    if not url.startswith(("http://", "https://")):
        raise HTTPException(status_code=400, detail="Only http(s) URLs are allowed")

    with pipeline_errors():
        source = session.pipeline.add_source(
            Source.from_url(url, display_name=request.display_name)
        )
    return SourceCreatedResponse.build(session.id, source)


@router.post(
    "/sessions/{session_id}/sources/file",
    response_model=SourceCreatedResponse,
    status_code=201,
)
async def add_file_source(
    file: UploadFile = File(...),
    session: Session = Depends(get_session),
) -> SourceCreatedResponse:
    """Upload a file (PDF or text) as case evidence."""
    content = await file.read()
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    if len(content) > settings.max_upload_bytes:
        raise HTTPException(status_code=413, detail="Uploaded file is too large")

    filename = file.filename or "upload"
    pdf_version = None
    if filename.lower().endswith(".pdf") or file.content_type == "application/pdf":
        try:
            validate_pdf(content)
        except PDFValidationError as e:
            raise HTTPException(status_code=400, detail=str(e)) from e
        pdf_version = get_pdf_version(content)

    with pipeline_errors():
        source = session.pipeline.add_source(
            Source.from_file(filename, content, mime_type=file.content_type)
        )
    logger.info(
        "source_uploaded",
        session_id=session.id,
        source_id=source.id,
        size=len(content),
        pdf_version=pdf_version,
    )
    return SourceCreatedResponse.build(session.id, source, pdf_version=pdf_version)


@router.delete("/sessions/{session_id}/sources/{source_id}", status_code=204)
async def remove_source(
    source_id: str,
    session: Session = Depends(get_session),
) -> None:
    """Remove a source before analysis starts."""
    with pipeline_errors():
        session.pipeline.remove_source(source_id)
