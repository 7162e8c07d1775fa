"""LangGraph stage graphs.

Each stage of the analysis that calls the model gateway is a small graph:

    - build_intake_graph: ingest -> validate -> extract_text (skipped on rejection)
    - build_document_graph: generate_document
    - build_deck_graph: generate_deck -> apply_default_style

The stage graphs are sequenced by :class:`caselens_core.pipeline.CasePipeline`,
which pauses between them for user review.
"""

from caselens_core.graph.build_deck_graph import DeckState, build_deck_graph
from caselens_core.graph.build_document_graph import (
    DocumentState,
    build_document_graph,
)
from caselens_core.graph.build_intake_graph import IntakeState, build_intake_graph
from caselens_core.graph.config import PipelineConfig

__all__ = [
    "PipelineConfig",
    "build_intake_graph",
    "build_document_graph",
    "build_deck_graph",
    "IntakeState",
    "DocumentState",
    "DeckState",
]
