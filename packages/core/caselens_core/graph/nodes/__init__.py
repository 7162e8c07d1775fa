"""Pipeline nodes.

    - ingest: render sources into prompt text and inline parts
    - validate: decide whether sources concern a case decision
    - extract_text: retrieve source text
    - generate_document: write the five-section dossier
    - generate_deck: design the slide deck and apply default styles
    - synthesize_image: illustrate one slide
"""

from caselens_core.graph.nodes import (
    extract_text,
    generate_deck,
    generate_document,
    ingest,
    payloads,
    synthesize_image,
    validate,
)

__all__ = [
    "extract_text",
    "generate_deck",
    "generate_document",
    "ingest",
    "payloads",
    "synthesize_image",
    "validate",
]
