"""The case analysis pipeline: a forward-only state machine over stage graphs.

Stages advance strictly forward:

    IDLE -> VALIDATING -> (VALIDATION_FAILED | EXTRACTING_TEXT) -> TEXT_READY
         -> ANALYZING_DOCUMENT -> DOCUMENT_READY -> GENERATING_DECK -> DECK_READY

Any stage may fall into ERROR when a gateway call fails, and ``reset``
returns to IDLE from anywhere. Gateway calls of one pipeline never overlap.
A call still in flight when ``reset`` runs is abandoned: its result is
dropped when it eventually arrives.
"""

import asyncio
from typing import Any

from caselens_core.errors import (
    ArtifactNotFoundError,
    ImageSynthesisError,
    InvalidTransitionError,
    NoSourcesError,
)
from caselens_core.graph import (
    PipelineConfig,
    build_deck_graph,
    build_document_graph,
    build_intake_graph,
)
from caselens_core.graph.nodes.synthesize_image import synthesize_slide_image
from caselens_core.layout.geometry import compute_slide_geometry
from caselens_core.layout.sizing import compute_render_sizes
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.pipeline.registry import SourceRegistry
from caselens_core.pipeline.state import (
    PipelineSnapshot,
    PipelineStage,
    SlidePreview,
    can_transition,
)
from caselens_core.schemas.deck import Deck, Slide, SlideStyle, merge_style
from caselens_core.schemas.document import DocumentSection
from caselens_core.schemas.sources import Source
from caselens_core.utils.logging import get_logger
from caselens_core.utils.retry import format_exception

logger = get_logger(__name__)

# Stages in which dossier sections may be edited
_SECTION_EDIT_STAGES = (
    PipelineStage.DOCUMENT_READY,
    PipelineStage.GENERATING_DECK,
    PipelineStage.DECK_READY,
)


class _Abandoned(Exception):
    """Raised internally when a reset happened while a call was in flight."""


class CasePipeline:
    """One user session's analysis pipeline."""

    def __init__(
        self,
        adapter: BaseModelAdapter,
        config: PipelineConfig | None = None,
    ):
        """Initialize the pipeline.

        Args:
            adapter: Model adapter used for every gateway call
            config: Optional pipeline configuration
        """
        self.adapter = adapter
        self.config = config or PipelineConfig()
        self._intake_graph = build_intake_graph(adapter, self.config)
        self._document_graph = build_document_graph(adapter, self.config)
        self._deck_graph = build_deck_graph(adapter, self.config)

        self._lock = asyncio.Lock()
        self._epoch = 0
        self._registry = SourceRegistry()
        self._clear_artifacts()

    def _clear_artifacts(self) -> None:
        self._stage = PipelineStage.IDLE
        self._registry.clear()
        self._extracted_text: str | None = None
        self._validation_reason: str | None = None
        self._sections: list[DocumentSection] = []
        self._deck: Deck | None = None
        self._error: str | None = None

    # ------------------------------------------------------------------
    # Read access

    @property
    def stage(self) -> PipelineStage:
        return self._stage

    @property
    def sources(self) -> list[Source]:
        return self._registry.as_list()

    @property
    def extracted_text(self) -> str | None:
        return self._extracted_text

    @property
    def sections(self) -> list[DocumentSection]:
        return list(self._sections)

    @property
    def deck(self) -> Deck | None:
        return self._deck

    @property
    def error(self) -> str | None:
        return self._error

    def snapshot(self) -> PipelineSnapshot:
        """Return a deep copy of the current state."""
        return PipelineSnapshot(
            stage=self._stage,
            sources=self._registry.as_list(),
            extracted_text=self._extracted_text,
            validation_reason=self._validation_reason,
            sections=[s.model_copy(deep=True) for s in self._sections],
            deck=self._deck.model_copy(deep=True) if self._deck else None,
            error=self._error,
        )

    # ------------------------------------------------------------------
    # Internal helpers

    def _require(self, operation: str, *allowed: PipelineStage) -> None:
        if self._stage not in allowed:
            raise InvalidTransitionError(
                operation, self._stage.value, tuple(s.value for s in allowed)
            )

    def _transition(self, target: PipelineStage) -> None:
        if not can_transition(self._stage, target):
            raise InvalidTransitionError(f"transition to {target.value}", self._stage.value)
        logger.info(f"Pipeline stage {self._stage.value} -> {target.value}")
        self._stage = target

    def _check_epoch(self, epoch: int) -> None:
        if epoch != self._epoch:
            raise _Abandoned()

    def _fail(self, operation: str, error: Exception) -> None:
        message = format_exception(error)
        logger.error(f"{operation} failed: {message}")
        self._error = message
        self._transition(PipelineStage.ERROR)

    def _slide(self, index: int) -> Slide:
        if self._deck is None or not 0 <= index < len(self._deck.slides):
            raise ArtifactNotFoundError(f"No slide at index {index}")
        return self._deck.slides[index]

    # ------------------------------------------------------------------
    # Source submission

    def add_source(self, source: Source) -> Source:
        """Add one source. Only allowed before analysis starts."""
        self._require("add_source", PipelineStage.IDLE)
        logger.info(f"Adding {source.kind.value} source '{source.display_name}'")
        return self._registry.add(source)

    def submit_sources(self, sources: list[Source]) -> list[Source]:
        """Add a batch of sources. At least one source is required."""
        self._require("submit_sources", PipelineStage.IDLE)
        if not sources:
            raise NoSourcesError("At least one source is required")
        return [self.add_source(source) for source in sources]

    def remove_source(self, source_id: str) -> Source:
        """Remove a source by id. Only allowed before analysis starts."""
        self._require("remove_source", PipelineStage.IDLE)
        return self._registry.remove(source_id)

    # ------------------------------------------------------------------
    # Stages

    async def start_analysis(self) -> PipelineStage:
        """Validate the sources, then extract their text.

        Returns:
            The stage reached: TEXT_READY, VALIDATION_FAILED or ERROR
        """
        self._require("start_analysis", PipelineStage.IDLE)
        if not len(self._registry):
            raise NoSourcesError("At least one source is required")

        epoch = self._epoch
        self._transition(PipelineStage.VALIDATING)
        async with self._lock:
            try:
                self._check_epoch(epoch)
                inputs: dict[str, Any] = {"sources": self._registry.as_list()}
                async for update in self._intake_graph.astream(
                    inputs, stream_mode="updates"
                ):
                    self._check_epoch(epoch)
                    self._apply_intake_update(update)
            except _Abandoned:
                logger.info("Analysis abandoned by reset")
                return self._stage
            except Exception as e:
                if epoch == self._epoch:
                    self._fail("start_analysis", e)
                return self._stage

        if self._stage == PipelineStage.EXTRACTING_TEXT:
            # The graph ended without text; treat like any unusable response
            self._fail("start_analysis", RuntimeError("Text extraction produced no result"))
        return self._stage

    def _apply_intake_update(self, update: dict[str, Any]) -> None:
        """Advance the stage as intake graph nodes complete."""
        if "validate" in update:
            result = update["validate"]
            self._validation_reason = result.get("validation_reason")
            if result.get("is_valid"):
                self._transition(PipelineStage.EXTRACTING_TEXT)
            else:
                self._transition(PipelineStage.VALIDATION_FAILED)
        if "extract_text" in update:
            self._extracted_text = update["extract_text"]["extracted_text"]
            self._transition(PipelineStage.TEXT_READY)

    def update_extracted_text(self, text: str) -> None:
        """Replace the extracted text while it awaits review."""
        self._require("update_extracted_text", PipelineStage.TEXT_READY)
        if not text.strip():
            raise ValueError("Extracted text must not be empty")
        self._extracted_text = text

    async def proceed_to_analysis(self) -> PipelineStage:
        """Generate the dossier from the (possibly edited) extracted text."""
        self._require("proceed_to_analysis", PipelineStage.TEXT_READY)

        epoch = self._epoch
        self._transition(PipelineStage.ANALYZING_DOCUMENT)
        async with self._lock:
            try:
                self._check_epoch(epoch)
                result = await self._document_graph.ainvoke(
                    {"extracted_text": self._extracted_text or ""}
                )
                self._check_epoch(epoch)
            except _Abandoned:
                logger.info("Dossier generation abandoned by reset")
                return self._stage
            except Exception as e:
                if epoch == self._epoch:
                    self._fail("proceed_to_analysis", e)
                return self._stage

        self._sections = list(result["sections"])
        self._transition(PipelineStage.DOCUMENT_READY)
        return self._stage

    def edit_document_section(self, index: int, body: str) -> DocumentSection:
        """Replace the body of one dossier section in place."""
        self._require("edit_document_section", *_SECTION_EDIT_STAGES)
        if not 0 <= index < len(self._sections):
            raise ArtifactNotFoundError(f"No section at index {index}")
        section = self._sections[index]
        section.body = body
        return section

    async def generate_deck(self) -> PipelineStage:
        """Generate the slide deck from the dossier sections."""
        self._require("generate_deck", PipelineStage.DOCUMENT_READY)

        epoch = self._epoch
        self._transition(PipelineStage.GENERATING_DECK)
        sections = [s.model_copy(deep=True) for s in self._sections]
        async with self._lock:
            try:
                self._check_epoch(epoch)
                result = await self._deck_graph.ainvoke({"sections": sections})
                self._check_epoch(epoch)
            except _Abandoned:
                logger.info("Deck generation abandoned by reset")
                return self._stage
            except Exception as e:
                if epoch == self._epoch:
                    self._fail("generate_deck", e)
                return self._stage

        self._deck = result["deck"]
        self._transition(PipelineStage.DECK_READY)
        return self._stage

    # ------------------------------------------------------------------
    # Per-slide operations

    async def regenerate_slide_image(self, index: int) -> bool:
        """Synthesize a new illustration for one slide.

        Failures only affect that slide: its image stays unset and its
        loading flag is cleared. The pipeline stage never changes.

        Returns:
            True when the slide received a new image
        """
        self._require("regenerate_slide_image", PipelineStage.DECK_READY)
        slide = self._slide(index)

        epoch = self._epoch
        slide.image_loading = True
        try:
            async with self._lock:
                self._check_epoch(epoch)
                image_ref = await synthesize_slide_image(self.adapter, slide, self.config)
                self._check_epoch(epoch)
        except _Abandoned:
            logger.info(f"Image synthesis for slide {slide.id} abandoned by reset")
            return False
        except ImageSynthesisError as e:
            logger.warning(f"Image synthesis failed for slide {slide.id}: {e}")
            return False
        finally:
            slide.image_loading = False

        slide.image_url = image_ref
        return True

    def update_slide_style(self, index: int, partial: dict[str, Any]) -> SlideStyle:
        """Merge a partial style into one slide, clamping font sizes."""
        self._require("update_slide_style", PipelineStage.DECK_READY)
        slide = self._slide(index)
        slide.style = merge_style(slide.style, partial)
        return slide.style

    def slide_preview(self, index: int) -> SlidePreview:
        """Return the sizes and geometry the exporter will use for a slide."""
        self._require("slide_preview", PipelineStage.DECK_READY)
        slide = self._slide(index)
        return SlidePreview.build(
            slide.id, compute_render_sizes(slide), compute_slide_geometry(slide)
        )

    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Discard every artifact and return to IDLE.

        Calls still in flight are abandoned, not cancelled.
        """
        self._epoch += 1
        logger.info(f"Pipeline reset from {self._stage.value}")
        self._clear_artifacts()
