"""Build the deck graph."""

from typing import TypedDict

from langgraph.graph import END, StateGraph

from caselens_core.graph.config import PipelineConfig
from caselens_core.graph.nodes.payloads import DeckPayload
from caselens_core.model_adapters.base import BaseModelAdapter
from caselens_core.schemas.deck import Deck
from caselens_core.schemas.document import DocumentSection


class DeckState(TypedDict, total=False):
    """State passed through the deck graph."""

    sections: list[DocumentSection]
    deck_payload: DeckPayload
    deck: Deck
    current_step: str


def build_deck_graph(
    adapter: BaseModelAdapter,
    config: PipelineConfig | None = None,
) -> StateGraph:
    """Build a graph that turns dossier sections into a styled deck.

    Args:
        adapter: Model adapter for gateway calls
        config: Optional pipeline configuration

    Returns:
        Compiled StateGraph ready for invocation
    """
    from caselens_core.graph.nodes import generate_deck

    resolved_config = config or PipelineConfig()

    graph = StateGraph(DeckState)
    graph.add_node(
        "generate_deck",
        generate_deck.create_generate_deck_node(adapter, resolved_config),
    )
    graph.add_node("apply_default_style", generate_deck.apply_default_style_node)

    graph.set_entry_point("generate_deck")
    graph.add_edge("generate_deck", "apply_default_style")
    graph.add_edge("apply_default_style", END)

    return graph.compile()
