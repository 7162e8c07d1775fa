"""Build the intake graph: validate the sources, then extract their text."""

from typing import Any, TypedDict

from langgraph.graph import END, StateGraph

from caselens_core.graph.config import PipelineConfig
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.schemas.sources import Source


class IntakeState(TypedDict, total=False):
    """State passed through the intake graph."""

    # Input
    sources: list[Source]

    # Processing state
    source_text: str
    source_parts: list[Any]
    is_valid: bool
    validation_reason: str | None

    # Output
    extracted_text: str

    # Metadata
    current_step: str


def _route_after_validation(state: IntakeState) -> str:
    """Extract only when the sources were accepted."""
    return "extract_text" if state.get("is_valid") else END


def build_intake_graph(
    adapter: BaseModelAdapter,
    config: PipelineConfig | None = None,
) -> StateGraph:
    """Build the intake graph.

    Validation always runs before extraction; a rejected source set ends
    the graph without an extraction call.

    Args:
        adapter: Model adapter for gateway calls
        config: Optional pipeline configuration

    Returns:
        Compiled StateGraph ready for invocation
    """
    from caselens_core.graph.nodes import extract_text, ingest, validate

    resolved_config = config or PipelineConfig()

    graph = StateGraph(IntakeState)
    graph.add_node("ingest", ingest.create_ingest_node(resolved_config))
    graph.add_node("validate", validate.create_validate_node(adapter))
    graph.add_node("extract_text", extract_text.create_extract_text_node(adapter))

    graph.set_entry_point("ingest")
    graph.add_edge("ingest", "validate")
    graph.add_conditional_edges(
        "validate",
        _route_after_validation,
        {"extract_text": "extract_text", END: END},
    )
    graph.add_edge("extract_text", END)

    return graph.compile()
