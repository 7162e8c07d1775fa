"""Document node: write the five-section expert dossier from extracted text."""

from typing import Any, Callable

from caselens_core.errors import GatewayError
from caselens_core.graph.config import PipelineConfig
from caselens_core.graph.nodes.payloads import DocumentPayload, parse_response
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.prompts import DOCUMENT_PROMPT, SYSTEM_INSTRUCTION
from caselens_core.schemas.document import DocumentSection
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


def create_generate_document_node(
    adapter: BaseModelAdapter,
    config: PipelineConfig,
) -> Callable[[dict[str, Any]], Any]:
    """Create a dossier generation node.

    Args:
        adapter: Model adapter for gateway calls
        config: Pipeline configuration

    Returns:
        Node function
    """

    async def generate_document_node(state: dict[str, Any]) -> dict[str, Any]:
        """Generate dossier sections, preserving the model's order."""
        text: str = state.get("extracted_text", "")
        if len(text) > config.source_char_limit:
            logger.warning(
                f"Extracted text truncated from {len(text)} to "
                f"{config.source_char_limit} characters"
            )
            text = text[: config.source_char_limit]

        response = await adapter.generate_structured(
            prompt=DOCUMENT_PROMPT.format(text=text),
            system_instruction=SYSTEM_INSTRUCTION,
        )
        payload = parse_response(DocumentPayload, response, "generate_document")

        sections = [
            DocumentSection(title=section.title, body=section.body)
            for section in payload.sections
            if section.title.strip()
        ]
        if not sections:
            raise GatewayError(
                "generate_document: no well-formed sections",
                operation="generate_document",
            )
        if len(sections) != config.expected_sections:
            logger.warning(
                f"Expected {config.expected_sections} dossier sections, got {len(sections)}"
            )
        logger.info(f"Generated dossier with {len(sections)} sections")

        return {
            "sections": sections,
            "current_step": "generate_document",
        }

    return generate_document_node
