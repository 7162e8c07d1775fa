"""Pipeline stages and read-only views of pipeline state."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from caselens_core.layout.geometry import SlideGeometry
from caselens_core.layout.sizing import RenderSizes
from caselens_core.schemas.deck import Deck
from caselens_core.schemas.document import DocumentSection
from caselens_core.schemas.sources import Source


class PipelineStage(str, Enum):
    """Stages of the case analysis pipeline."""

    IDLE = "IDLE"
    VALIDATING = "VALIDATING"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    EXTRACTING_TEXT = "EXTRACTING_TEXT"
    TEXT_READY = "TEXT_READY"
    ANALYZING_DOCUMENT = "ANALYZING_DOCUMENT"
    DOCUMENT_READY = "DOCUMENT_READY"
    GENERATING_DECK = "GENERATING_DECK"
    DECK_READY = "DECK_READY"
    ERROR = "ERROR"

    @property
    def is_busy(self) -> bool:
        """True while a gateway call for the stage is in flight."""
        return self in BUSY_STAGES


BUSY_STAGES = frozenset(
    {
        PipelineStage.VALIDATING,
        PipelineStage.EXTRACTING_TEXT,
        PipelineStage.ANALYZING_DOCUMENT,
        PipelineStage.GENERATING_DECK,
    }
)

# Forward transitions. ERROR is reachable from every stage and IDLE via reset.
TRANSITIONS: dict[PipelineStage, frozenset[PipelineStage]] = {
    PipelineStage.IDLE: frozenset({PipelineStage.VALIDATING}),
    PipelineStage.VALIDATING: frozenset(
        {PipelineStage.VALIDATION_FAILED, PipelineStage.EXTRACTING_TEXT}
    ),
    PipelineStage.VALIDATION_FAILED: frozenset(),
    PipelineStage.EXTRACTING_TEXT: frozenset({PipelineStage.TEXT_READY}),
    PipelineStage.TEXT_READY: frozenset({PipelineStage.ANALYZING_DOCUMENT}),
    PipelineStage.ANALYZING_DOCUMENT: frozenset({PipelineStage.DOCUMENT_READY}),
    PipelineStage.DOCUMENT_READY: frozenset({PipelineStage.GENERATING_DECK}),
    PipelineStage.GENERATING_DECK: frozenset({PipelineStage.DECK_READY}),
    PipelineStage.DECK_READY: frozenset(),
    PipelineStage.ERROR: frozenset(),
}


def can_transition(current: PipelineStage, target: PipelineStage) -> bool:
    """Check whether moving from ``current`` to ``target`` is allowed."""
    if target in (PipelineStage.ERROR, PipelineStage.IDLE):
        return True
    return target in TRANSITIONS[current]


class PipelineSnapshot(BaseModel):
    """Immutable copy of a pipeline's state at one point in time."""

    stage: PipelineStage
    sources: list[Source] = Field(default_factory=list)
    extracted_text: str | None = None
    validation_reason: str | None = None
    sections: list[DocumentSection] = Field(default_factory=list)
    deck: Deck | None = None
    error: str | None = None

    model_config = ConfigDict(frozen=True)


class SlidePreview(BaseModel):
    """Sizes and canvas geometry a slide is previewed and exported with."""

    slide_id: str
    title_size: float
    body_size: float
    geometry: dict

    @classmethod
    def build(
        cls, slide_id: str, sizes: RenderSizes, geometry: SlideGeometry
    ) -> "SlidePreview":
        from dataclasses import asdict

        return cls(
            slide_id=slide_id,
            title_size=sizes.title_size,
            body_size=sizes.body_size,
            geometry=asdict(geometry),
        )
