"""Deck nodes: generate slides from the dossier and give them default styles."""

import uuid
from typing import Any, Callable

from caselens_core.graph.config import PipelineConfig
from caselens_core.graph.nodes.payloads import DeckPayload, parse_response
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.prompts import DECK_PROMPT, SYSTEM_INSTRUCTION
from caselens_core.schemas.deck import Deck, Slide, SlideStyle
from caselens_core.schemas.document import DocumentSection
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


def render_dossier(sections: list[DocumentSection]) -> str:
    """Render dossier sections as markdown for the deck prompt."""
    return "\n\n".join(f"## {s.title}\n{s.body.strip()}" for s in sections)


def new_slide_id(index: int) -> str:
    """Return a slide id that is unique within a deck and across regenerations."""
    return f"slide-{index}-{uuid.uuid4().hex[:12]}"


def create_generate_deck_node(
    adapter: BaseModelAdapter,
    config: PipelineConfig,
) -> Callable[[dict[str, Any]], Any]:
    """Create a deck generation node.

    Args:
        adapter: Model adapter for gateway calls
        config: Pipeline configuration

    Returns:
        Node function
    """

    async def generate_deck_node(state: dict[str, Any]) -> dict[str, Any]:
        """Ask the model for a deck and validate its shape."""
        sections: list[DocumentSection] = state.get("sections", [])
        response = await adapter.generate_structured(
            prompt=DECK_PROMPT.format(dossier=render_dossier(sections)),
            system_instruction=SYSTEM_INSTRUCTION,
        )
        payload = parse_response(DeckPayload, response, "generate_deck")

        slide_count = len(payload.slides)
        if not config.min_slides <= slide_count <= config.max_slides:
            logger.warning(
                f"Deck has {slide_count} slides, expected "
                f"{config.min_slides}-{config.max_slides}"
            )
        logger.info(f"Generated deck '{payload.presentation_title}' ({slide_count} slides)")

        return {
            "deck_payload": payload,
            "current_step": "generate_deck",
        }

    return generate_deck_node


def apply_default_style_node(state: dict[str, Any]) -> dict[str, Any]:
    """Assign fresh ids and a fresh default style to every slide.

    Args:
        state: Deck state with the validated deck payload

    Returns:
        Update with the finished deck
    """
    payload: DeckPayload = state["deck_payload"]
    slides = [
        Slide(
            id=new_slide_id(index),
            style=SlideStyle(),
            **slide.model_dump(),
        )
        for index, slide in enumerate(payload.slides)
    ]
    deck = Deck(
        presentation_title=payload.presentation_title,
        subtitle=payload.subtitle,
        slides=slides,
    )
    return {
        "deck": deck,
        "current_step": "apply_default_style",
    }
