"""Tests for the case analysis pipeline state machine."""

import asyncio
import copy
from typing import Any

import pytest

from caselens_core.errors import (
    ArtifactNotFoundError,
    GatewayError,
    ImageSynthesisError,
    InvalidTransitionError,
    NoSourcesError,
)
from caselens_core.examples import EXAMPLE_DECK
from caselens_core.layout.sizing import compute_render_sizes
from caselens_core.model_adapters.base import BaseModelAdapter, ContentPart
from caselens_core.pipeline import CasePipeline, PipelineStage
from caselens_core.prompts import (
    DECK_MARKER,
    DOCUMENT_MARKER,
    EXTRACT_MARKER,
    VALIDATE_MARKER,
)
from caselens_core.schemas.sources import Source

SECTIONS = [
    {"title": f"{i}. Section {i}", "body": f"Body of section {i}"} for i in range(1, 6)
]


class FakeAdapter(BaseModelAdapter):
    """Deterministic adapter for pipeline tests."""

    def __init__(
        self,
        is_valid: bool = True,
        text: str = "Case text...",
        sections: list[dict[str, Any]] | None = None,
        deck: dict[str, Any] | None = None,
        failing_image_titles: tuple[str, ...] = (),
        failing_tasks: tuple[str, ...] = (),
    ):
        self.is_valid = is_valid
        self.text = text
        self.sections = sections if sections is not None else SECTIONS
        self.deck = deck if deck is not None else EXAMPLE_DECK
        self.failing_image_titles = failing_image_titles
        self.failing_tasks = failing_tasks
        self.calls: list[str] = []
        self.prompts: list[str] = []

    async def generate_structured(
        self,
        prompt: str,
        parts: list[ContentPart] | None = None,
        system_instruction: str | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Return structured JSON based on the prompt content."""
        self.prompts.append(prompt)
        if VALIDATE_MARKER in prompt:
            self.calls.append("validate")
            self._maybe_fail("validate")
            return {"is_case_decision": self.is_valid, "reason": "test"}
        if EXTRACT_MARKER in prompt:
            self.calls.append("extract_text")
            self._maybe_fail("extract_text")
            return {"text": self.text}
        if DOCUMENT_MARKER in prompt:
            self.calls.append("generate_document")
            self._maybe_fail("generate_document")
            return {"sections": copy.deepcopy(self.sections)}
        if DECK_MARKER in prompt:
            self.calls.append("generate_deck")
            self._maybe_fail("generate_deck")
            return copy.deepcopy(self.deck)
        return {}

    def _maybe_fail(self, task: str) -> None:
        if task in self.failing_tasks:
            raise GatewayError(f"Gemini request failed during {task}", operation=task)

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
    ) -> tuple[bytes, str]:
        """Return fake PNG bytes, or fail for configured slide titles."""
        self.calls.append("generate_image")
        if any(title in prompt for title in self.failing_image_titles):
            raise ImageSynthesisError("Visual generation failed")
        return b"\x89PNG fake", "image/png"


class BlockingAdapter(FakeAdapter):
    """Adapter whose structured calls wait until released."""

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self.entered = asyncio.Event()
        self.release = asyncio.Event()

    async def generate_structured(
        self,
        prompt: str,
        parts: list[ContentPart] | None = None,
        system_instruction: str | None = None,
    ) -> dict[str, Any] | list[Any]:
        self.entered.set()
        await self.release.wait()
        return await super().generate_structured(prompt, parts, system_instruction)


class CountingAdapter(FakeAdapter):
    """Adapter that records how many image calls run at the same time."""

    def __init__(self, **kwargs: Any):
        super().__init__(**kwargs)
        self.active = 0
        self.max_active = 0

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
    ) -> tuple[bytes, str]:
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        await asyncio.sleep(0.01)
        self.active -= 1
        return await super().generate_image(prompt, aspect_ratio)


def _pipeline(adapter: BaseModelAdapter | None = None) -> CasePipeline:
    pipeline = CasePipeline(adapter or FakeAdapter())
    pipeline.add_source(Source.from_url("https://example.org/decision"))
    return pipeline


async def _deck_ready(adapter: BaseModelAdapter | None = None) -> CasePipeline:
    pipeline = _pipeline(adapter)
    await pipeline.start_analysis()
    await pipeline.proceed_to_analysis()
    await pipeline.generate_deck()
    assert pipeline.stage == PipelineStage.DECK_READY
    return pipeline


class TestIntake:
    """Tests for source submission, validation and extraction."""

    @pytest.mark.asyncio
    async def test_accepted_sources_reach_text_ready(self) -> None:
        """Validation runs before extraction and the text is stored."""
        adapter = FakeAdapter()
        pipeline = _pipeline(adapter)

        stage = await pipeline.start_analysis()

        assert stage == PipelineStage.TEXT_READY
        assert pipeline.extracted_text == "Case text..."
        assert adapter.calls == ["validate", "extract_text"]

    @pytest.mark.asyncio
    async def test_rejected_sources_stop_before_extraction(self) -> None:
        """A negative verdict ends in VALIDATION_FAILED without text."""
        adapter = FakeAdapter(is_valid=False)
        pipeline = _pipeline(adapter)

        stage = await pipeline.start_analysis()

        assert stage == PipelineStage.VALIDATION_FAILED
        assert pipeline.extracted_text is None
        assert "extract_text" not in adapter.calls

    @pytest.mark.asyncio
    async def test_start_without_sources_raises(self) -> None:
        """Analysis needs at least one source."""
        pipeline = CasePipeline(FakeAdapter())

        with pytest.raises(NoSourcesError):
            await pipeline.start_analysis()
        assert pipeline.stage == PipelineStage.IDLE

    def test_submit_empty_batch_raises(self) -> None:
        """An empty submission is rejected."""
        with pytest.raises(NoSourcesError):
            CasePipeline(FakeAdapter()).submit_sources([])

    @pytest.mark.asyncio
    async def test_sources_locked_after_start(self) -> None:
        """Sources cannot be added once analysis started."""
        pipeline = _pipeline()
        await pipeline.start_analysis()

        with pytest.raises(InvalidTransitionError):
            pipeline.add_source(Source.from_url("https://example.org/other"))

    def test_remove_source(self) -> None:
        """Removing a source by id drops it from the pipeline."""
        pipeline = CasePipeline(FakeAdapter())
        first, second = pipeline.submit_sources(
            [
                Source.from_url("https://example.org/a"),
                Source.from_url("https://example.org/b"),
            ]
        )

        pipeline.remove_source(first.id)

        assert [s.id for s in pipeline.sources] == [second.id]
        with pytest.raises(ArtifactNotFoundError):
            pipeline.remove_source(first.id)

    @pytest.mark.asyncio
    async def test_empty_extraction_is_an_error(self) -> None:
        """Blank extracted text does not match the response schema."""
        pipeline = _pipeline(FakeAdapter(text="   "))

        stage = await pipeline.start_analysis()

        assert stage == PipelineStage.ERROR
        assert pipeline.error
        assert pipeline.extracted_text is None

    @pytest.mark.asyncio
    async def test_extracted_text_can_be_edited(self) -> None:
        """The edited text is what the dossier prompt receives."""
        adapter = FakeAdapter()
        pipeline = _pipeline(adapter)
        await pipeline.start_analysis()

        pipeline.update_extracted_text("Edited case text")
        await pipeline.proceed_to_analysis()

        assert pipeline.extracted_text == "Edited case text"
        assert "Edited case text" in adapter.prompts[-1]

    @pytest.mark.asyncio
    async def test_blank_text_edit_rejected(self) -> None:
        """Extracted text cannot be replaced by whitespace."""
        pipeline = _pipeline()
        await pipeline.start_analysis()

        with pytest.raises(ValueError):
            pipeline.update_extracted_text("  ")


class TestDocument:
    """Tests for dossier generation and editing."""

    @pytest.mark.asyncio
    async def test_dossier_keeps_section_order(self) -> None:
        """Five sections arrive in the order the model returned them."""
        pipeline = _pipeline()
        await pipeline.start_analysis()

        stage = await pipeline.proceed_to_analysis()

        assert stage == PipelineStage.DOCUMENT_READY
        assert [s.title for s in pipeline.sections] == [s["title"] for s in SECTIONS]

    @pytest.mark.asyncio
    async def test_unexpected_section_count_is_accepted(self) -> None:
        """A dossier with fewer sections is kept, only logged."""
        pipeline = _pipeline(FakeAdapter(sections=SECTIONS[:3]))
        await pipeline.start_analysis()

        await pipeline.proceed_to_analysis()

        assert len(pipeline.sections) == 3

    @pytest.mark.asyncio
    async def test_dossier_without_titled_sections_is_an_error(self) -> None:
        """Sections with blank titles cannot make up an empty dossier."""
        adapter = FakeAdapter(sections=[{"title": "  ", "body": "x"}])
        pipeline = _pipeline(adapter)
        await pipeline.start_analysis()

        stage = await pipeline.proceed_to_analysis()

        assert stage == PipelineStage.ERROR
        assert pipeline.sections == []
        assert "no well-formed sections" in pipeline.error
        with pytest.raises(InvalidTransitionError):
            await pipeline.generate_deck()
        assert "generate_deck" not in adapter.calls

    @pytest.mark.asyncio
    async def test_proceed_requires_text_ready(self) -> None:
        """Dossier generation cannot start from IDLE."""
        pipeline = _pipeline()

        with pytest.raises(InvalidTransitionError):
            await pipeline.proceed_to_analysis()

    @pytest.mark.asyncio
    async def test_edit_section(self) -> None:
        """Section bodies are replaced in place."""
        pipeline = _pipeline()
        await pipeline.start_analysis()
        await pipeline.proceed_to_analysis()

        pipeline.edit_document_section(1, "- New timeline")

        assert pipeline.sections[1].body == "- New timeline"
        assert pipeline.sections[1].title == SECTIONS[1]["title"]
        with pytest.raises(ArtifactNotFoundError):
            pipeline.edit_document_section(9, "nope")

    @pytest.mark.asyncio
    async def test_edit_section_before_dossier_rejected(self) -> None:
        """Sections are not editable while text awaits review."""
        pipeline = _pipeline()
        await pipeline.start_analysis()

        with pytest.raises(InvalidTransitionError):
            pipeline.edit_document_section(0, "body")


class TestDeck:
    """Tests for deck generation and per-slide operations."""

    @pytest.mark.asyncio
    async def test_deck_gets_unique_ids_and_default_styles(self) -> None:
        """Every slide has a distinct id and the default style."""
        pipeline = await _deck_ready()
        deck = pipeline.deck

        assert deck is not None
        assert len(deck.slides) == len(EXAMPLE_DECK["slides"])
        ids = [slide.id for slide in deck.slides]
        assert len(set(ids)) == len(ids)
        assert all(slide.style.title_font_size == 32 for slide in deck.slides)

    @pytest.mark.asyncio
    async def test_slide_ids_differ_across_regenerations(self) -> None:
        """A regenerated deck never reuses ids."""
        first = await _deck_ready()
        second = await _deck_ready()

        first_ids = {slide.id for slide in first.deck.slides}
        second_ids = {slide.id for slide in second.deck.slides}
        assert not first_ids & second_ids

    @pytest.mark.asyncio
    async def test_blank_points_are_dropped(self) -> None:
        """Whitespace-only points never reach the deck."""
        deck = copy.deepcopy(EXAMPLE_DECK)
        deck["slides"][3]["points"].append({"text": "   "})
        pipeline = await _deck_ready(FakeAdapter(deck=deck))

        for slide in pipeline.deck.slides:
            assert all(point.text.strip() for point in slide.points)
        assert len(pipeline.deck.slides[3].points) == 2

    @pytest.mark.asyncio
    async def test_malformed_deck_is_an_error(self) -> None:
        """A response without slides puts the pipeline in ERROR."""
        pipeline = _pipeline(FakeAdapter(deck={"presentation_title": "Broken"}))
        await pipeline.start_analysis()
        await pipeline.proceed_to_analysis()

        stage = await pipeline.generate_deck()

        assert stage == PipelineStage.ERROR
        assert pipeline.deck is None
        assert "generate_deck" in pipeline.error

    @pytest.mark.asyncio
    async def test_image_regeneration(self) -> None:
        """A synthesized image is stored as a data URL."""
        pipeline = await _deck_ready()

        assert await pipeline.regenerate_slide_image(3) is True

        slide = pipeline.deck.slides[3]
        assert slide.image_url.startswith("data:image/png;base64,")
        assert slide.image_loading is False

    @pytest.mark.asyncio
    async def test_failed_image_only_affects_that_slide(self) -> None:
        """Image failure leaves the slide unset and the stage untouched."""
        title = EXAMPLE_DECK["slides"][2]["title"]
        pipeline = await _deck_ready(FakeAdapter(failing_image_titles=(title,)))

        assert await pipeline.regenerate_slide_image(2) is False

        slide = pipeline.deck.slides[2]
        assert slide.image_url is None
        assert slide.image_loading is False
        assert pipeline.stage == PipelineStage.DECK_READY
        assert pipeline.error is None

    @pytest.mark.asyncio
    async def test_image_calls_do_not_overlap(self) -> None:
        """Concurrent regenerations are serialized."""
        adapter = CountingAdapter()
        pipeline = await _deck_ready(adapter)

        results = await asyncio.gather(
            pipeline.regenerate_slide_image(3),
            pipeline.regenerate_slide_image(4),
        )

        assert results == [True, True]
        assert adapter.max_active == 1

    @pytest.mark.asyncio
    async def test_unknown_slide_index(self) -> None:
        """Slide operations reject indices outside the deck."""
        pipeline = await _deck_ready()

        with pytest.raises(ArtifactNotFoundError):
            await pipeline.regenerate_slide_image(42)
        with pytest.raises(ArtifactNotFoundError):
            pipeline.update_slide_style(-1, {"image_scale": 2})

    @pytest.mark.asyncio
    async def test_style_update_clamps_font_sizes(self) -> None:
        """Font sizes above the maximum are clamped, and the update is idempotent."""
        pipeline = await _deck_ready()

        style = pipeline.update_slide_style(3, {"title_font_size": 50, "body_font_size": 40})
        again = pipeline.update_slide_style(3, {"title_font_size": 50, "body_font_size": 40})

        assert style.title_font_size == 32
        assert style.body_font_size == 20
        assert again == style

    @pytest.mark.asyncio
    async def test_style_update_rejects_unknown_fields(self) -> None:
        """Partial styles may only name known fields."""
        pipeline = await _deck_ready()

        with pytest.raises(ValueError, match="Unknown style fields"):
            pipeline.update_slide_style(3, {"font_family": "Comic Sans"})

    @pytest.mark.asyncio
    async def test_preview_matches_render_sizes(self) -> None:
        """The preview reports the sizes the exporter uses."""
        pipeline = await _deck_ready()
        slide = pipeline.deck.slides[3]

        preview = pipeline.slide_preview(3)
        sizes = compute_render_sizes(slide)

        assert preview.slide_id == slide.id
        assert preview.title_size == sizes.title_size
        assert preview.body_size == sizes.body_size
        assert preview.geometry["title"]["width"] == 12.0


GATEWAY_TASKS = ["validate", "extract_text", "generate_document", "generate_deck"]


async def _run_all_stages(pipeline: CasePipeline) -> PipelineStage:
    stage = await pipeline.start_analysis()
    if stage == PipelineStage.TEXT_READY:
        stage = await pipeline.proceed_to_analysis()
    if stage == PipelineStage.DOCUMENT_READY:
        stage = await pipeline.generate_deck()
    return stage


class TestGatewayFailures:
    """Tests for gateway calls that raise."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("task", GATEWAY_TASKS)
    async def test_failing_call_stops_in_error(self, task: str) -> None:
        """A raising call ends in ERROR and no later call is made."""
        adapter = FakeAdapter(failing_tasks=(task,))
        pipeline = _pipeline(adapter)

        stage = await _run_all_stages(pipeline)

        assert stage == PipelineStage.ERROR
        assert pipeline.stage == PipelineStage.ERROR
        assert pipeline.error
        assert adapter.calls == GATEWAY_TASKS[: GATEWAY_TASKS.index(task) + 1]

    @pytest.mark.asyncio
    async def test_failed_validation_leaves_no_artifacts(self) -> None:
        """A raising validation produces neither text nor a dossier."""
        pipeline = _pipeline(FakeAdapter(failing_tasks=("validate",)))

        await pipeline.start_analysis()

        assert pipeline.extracted_text is None
        assert pipeline.sections == []
        assert pipeline.deck is None


class TestReset:
    """Tests for reset and abandoned calls."""

    @pytest.mark.asyncio
    async def test_reset_clears_everything(self) -> None:
        """Reset from DECK_READY returns to an empty IDLE pipeline."""
        pipeline = await _deck_ready()

        pipeline.reset()

        snapshot = pipeline.snapshot()
        assert snapshot.stage == PipelineStage.IDLE
        assert snapshot.sources == []
        assert snapshot.extracted_text is None
        assert snapshot.sections == []
        assert snapshot.deck is None

    @pytest.mark.asyncio
    async def test_reset_after_error_allows_new_run(self) -> None:
        """ERROR is left only through reset."""
        pipeline = _pipeline(FakeAdapter(text=""))
        await pipeline.start_analysis()
        assert pipeline.stage == PipelineStage.ERROR

        with pytest.raises(InvalidTransitionError):
            await pipeline.proceed_to_analysis()

        pipeline.reset()
        pipeline.adapter.text = "Recovered text"
        pipeline.add_source(Source.from_url("https://example.org/decision"))
        assert await pipeline.start_analysis() == PipelineStage.TEXT_READY

    @pytest.mark.asyncio
    async def test_in_flight_result_discarded_after_reset(self) -> None:
        """A response arriving after reset does not touch the new state."""
        adapter = BlockingAdapter()
        pipeline = _pipeline(adapter)

        task = asyncio.create_task(pipeline.start_analysis())
        await adapter.entered.wait()
        pipeline.reset()
        adapter.release.set()
        stage = await task

        assert stage == PipelineStage.IDLE
        assert pipeline.stage == PipelineStage.IDLE
        assert pipeline.extracted_text is None
        assert pipeline.error is None

    @pytest.mark.asyncio
    async def test_snapshot_is_a_copy(self) -> None:
        """Mutating a snapshot does not change the pipeline."""
        pipeline = await _deck_ready()

        snapshot = pipeline.snapshot()
        snapshot.deck.slides[0].title = "Changed"

        assert pipeline.deck.slides[0].title != "Changed"
