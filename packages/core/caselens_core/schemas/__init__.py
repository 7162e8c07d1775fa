"""Data schemas for the pipeline.

Sources flow into extracted text, then into an ordered list of dossier
sections, and finally into a slide deck.
"""

from caselens_core.schemas.deck import (
    MAX_BODY_FONT_SIZE,
    MAX_TITLE_FONT_SIZE,
    MIN_BODY_FONT_SIZE,
    MIN_TITLE_FONT_SIZE,
    Deck,
    Slide,
    SlideKind,
    SlideStyle,
    StyledPoint,
    merge_style,
)
from caselens_core.schemas.document import DocumentSection
from caselens_core.schemas.sources import Source, SourceKind

__all__ = [
    # Sources
    "Source",
    "SourceKind",
    # Dossier
    "DocumentSection",
    # Deck
    "Deck",
    "Slide",
    "SlideKind",
    "SlideStyle",
    "StyledPoint",
    "merge_style",
    "MAX_TITLE_FONT_SIZE",
    "MAX_BODY_FONT_SIZE",
    "MIN_TITLE_FONT_SIZE",
    "MIN_BODY_FONT_SIZE",
]
