"""Offline adapter that answers every request with the bundled example case."""

import copy
from io import BytesIO
from typing import Any

from caselens_core.examples import EXAMPLE_DECK, EXAMPLE_SECTIONS, EXAMPLE_TEXT
from caselens_core.model_adapters.base import BaseModelAdapter, ContentPart
from caselens_core.prompts import (
    DECK_MARKER,
    DOCUMENT_MARKER,
    EXTRACT_MARKER,
    VALIDATE_MARKER,
)
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


def _render_placeholder_png(width: int = 320, height: int = 180) -> bytes:
    """Render a small two-tone PNG used as the demo illustration."""
    from PIL import Image, ImageDraw

    image = Image.new("RGB", (width, height), (79, 70, 229))
    draw = ImageDraw.Draw(image)
    draw.rectangle((0, height // 2, width, height), fill=(30, 41, 59))
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


_TASK_MARKERS = (
    (VALIDATE_MARKER, "validate"),
    (EXTRACT_MARKER, "extract_text"),
    (DOCUMENT_MARKER, "generate_document"),
    (DECK_MARKER, "generate_deck"),
)


def task_for_prompt(prompt: str) -> str | None:
    """Return the task name whose marker line opens the prompt, if any."""
    for marker, task in _TASK_MARKERS:
        if marker in prompt:
            return task
    return None


class DemoAdapter(BaseModelAdapter):
    """Deterministic adapter that needs no API key."""

    def __init__(self, accept_sources: bool = True):
        self.accept_sources = accept_sources

    async def generate_structured(
        self,
        prompt: str,
        parts: list[ContentPart] | None = None,
        system_instruction: str | None = None,
    ) -> dict[str, Any] | list[Any]:
        """Return the example payload matching the prompt's task."""
        task = task_for_prompt(prompt)
        if task == "validate":
            return {"is_case_decision": self.accept_sources, "reason": "demo"}
        if task == "extract_text":
            return {"text": EXAMPLE_TEXT}
        if task == "generate_document":
            return {"sections": copy.deepcopy(EXAMPLE_SECTIONS)}
        if task == "generate_deck":
            return copy.deepcopy(EXAMPLE_DECK)
        logger.warning("Demo adapter received an unrecognized prompt")
        return {}

    async def generate_image(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
    ) -> tuple[bytes, str]:
        """Return a generated placeholder PNG."""
        return _render_placeholder_png(), "image/png"
