"""Pydantic schemas for API request and response models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from caselens_core.pipeline import PipelineSnapshot, PipelineStage
from caselens_core.schemas.deck import Deck
from caselens_core.schemas.document import DocumentSection
from caselens_core.schemas.sources import Source, SourceKind


class SourceResponse(BaseModel):
    """Source metadata; the payload itself is never echoed back."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    kind: SourceKind
    display_name: str
    mime_type: str | None = None
    is_binary: bool = False


class SessionResponse(BaseModel):
    """Session state response payload."""

    session_id: str
    created_at: datetime
    stage: PipelineStage
    is_busy: bool
    sources: list[SourceResponse]
    extracted_text: str | None = None
    validation_reason: str | None = None
    sections: list[DocumentSection]
    deck: Deck | None = None
    error: str | None = None

    @classmethod
    def from_snapshot(
        cls,
        session_id: str,
        created_at: datetime,
        snapshot: PipelineSnapshot,
    ) -> "SessionResponse":
        return cls(
            session_id=session_id,
            created_at=created_at,
            stage=snapshot.stage,
            is_busy=snapshot.stage.is_busy,
            sources=[SourceResponse.model_validate(s) for s in snapshot.sources],
            extracted_text=snapshot.extracted_text,
            validation_reason=snapshot.validation_reason,
            sections=snapshot.sections,
            deck=snapshot.deck,
            error=snapshot.error,
        )


class UrlSourceCreate(BaseModel):
    """Payload for submitting a URL source."""

    url: str = Field(..., min_length=1)
    display_name: str | None = None


class SourceCreatedResponse(BaseModel):
    """Response returned after adding a source."""

    session_id: str
    source: SourceResponse
    pdf_version: str | None = Field(default=None, description="PDF header version for PDF uploads")

    @classmethod
    def build(
        cls, session_id: str, source: Source, pdf_version: str | None = None
    ) -> "SourceCreatedResponse":
        return cls(
            session_id=session_id,
            source=SourceResponse.model_validate(source),
            pdf_version=pdf_version,
        )


class TextUpdate(BaseModel):
    """Payload for replacing the extracted text."""

    text: str


class SectionUpdate(BaseModel):
    """Payload for replacing one dossier section body."""

    body: str


class StylePatch(BaseModel):
    """Partial slide style. Unknown fields are rejected."""

    model_config = ConfigDict(extra="forbid")

    background_color: str | None = None
    text_color: str | None = None
    accent_color: str | None = None
    title_font_size: float | None = None
    body_font_size: float | None = None
    title_y_pos: float | None = None
    title_x_pos: float | None = None
    body_y_pos: float | None = None
    body_x_pos: float | None = None
    image_x_pos: float | None = None
    image_y_pos: float | None = None
    image_scale: float | None = None
    line_spacing: float | None = None


class ImageResponse(BaseModel):
    """Result of an illustration request for one slide."""

    slide_id: str
    success: bool
    image_url: str | None = None
