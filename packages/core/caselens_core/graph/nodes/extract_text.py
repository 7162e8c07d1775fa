"""Extract node: retrieve the verbatim text of the sources."""

from typing import Any, Callable

from caselens_core.graph.nodes.payloads import ExtractionPayload, parse_response
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.prompts import EXTRACT_PROMPT, SYSTEM_INSTRUCTION
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


def create_extract_text_node(
    adapter: BaseModelAdapter,
) -> Callable[[dict[str, Any]], Any]:
    """Create an extract node with the given model adapter."""

    async def extract_text_node(state: dict[str, Any]) -> dict[str, Any]:
        """Extract the text of the validated sources."""
        response = await adapter.generate_structured(
            prompt=EXTRACT_PROMPT.format(sources=state.get("source_text", "")),
            parts=state.get("source_parts") or None,
            system_instruction=SYSTEM_INSTRUCTION,
        )
        payload = parse_response(ExtractionPayload, response, "extract_text")
        logger.info(f"Extracted {len(payload.text)} characters of source text")
        return {
            "extracted_text": payload.text,
            "current_step": "extract_text",
        }

    return extract_text_node
