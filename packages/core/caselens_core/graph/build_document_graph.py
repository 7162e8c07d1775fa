"""Build the dossier graph."""

from typing import TypedDict

from langgraph.graph import END, StateGraph

from caselens_core.graph.config import PipelineConfig
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.schemas.document import DocumentSection


class DocumentState(TypedDict, total=False):
    """State passed through the dossier graph."""

    extracted_text: str
    sections: list[DocumentSection]
    current_step: str


def build_document_graph(
    adapter: BaseModelAdapter,
    config: PipelineConfig | None = None,
) -> StateGraph:
    """Build a graph that turns extracted text into dossier sections.

    Args:
        adapter: Model adapter for gateway calls
        config: Optional pipeline configuration

    Returns:
        Compiled StateGraph ready for invocation
    """
    from caselens_core.graph.nodes import generate_document

    resolved_config = config or PipelineConfig()

    graph = StateGraph(DocumentState)
    graph.add_node(
        "generate_document",
        generate_document.create_generate_document_node(adapter, resolved_config),
    )
    graph.set_entry_point("generate_document")
    graph.add_edge("generate_document", END)

    return graph.compile()
