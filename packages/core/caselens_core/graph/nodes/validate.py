"""Validate node: ask the model whether the sources concern a case decision."""

from typing import Any, Callable

from caselens_core.graph.nodes.payloads import ValidationVerdict, parse_response
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.prompts import SYSTEM_INSTRUCTION, VALIDATE_PROMPT
from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)


def create_validate_node(
    adapter: BaseModelAdapter,
) -> Callable[[dict[str, Any]], Any]:
    """Create a validate node with the given model adapter.

    Args:
        adapter: Model adapter for gateway calls

    Returns:
        Node function
    """

    async def validate_node(state: dict[str, Any]) -> dict[str, Any]:
        """Validate the submitted sources.

        Args:
            state: Intake state with source_text and source_parts

        Returns:
            Update with is_valid and validation_reason
        """
        response = await adapter.generate_structured(
            prompt=VALIDATE_PROMPT.format(sources=state.get("source_text", "")),
            parts=state.get("source_parts") or None,
            system_instruction=SYSTEM_INSTRUCTION,
        )
        verdict = parse_response(ValidationVerdict, response, "validate")
        logger.info(
            f"Validation verdict: {verdict.is_case_decision} ({verdict.reason or 'no reason given'})"
        )
        return {
            "is_valid": verdict.is_case_decision,
            "validation_reason": verdict.reason,
            "current_step": "validate",
        }

    return validate_node
