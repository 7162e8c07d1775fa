"""caselens-core: Pipeline for turning legal case material into briefings.

Sources (URLs or uploaded files) about a regulatory or court decision are
validated and their text extracted, then turned into a five-section
strategic dossier and finally into a styled slide deck:

    >>> from caselens_core import CasePipeline, Source
    >>> from caselens_core.model_adapters import DemoAdapter
    >>> pipeline = CasePipeline(DemoAdapter())
    >>> pipeline.add_source(Source.from_url("https://example.org/decision"))
    >>> await pipeline.start_analysis()
    >>> await pipeline.proceed_to_analysis()
    >>> await pipeline.generate_deck()

The dossier exports as a Word-compatible document and the deck as PPTX,
see the `exporters` subpackage.
"""

from caselens_core.errors import (
    ArtifactNotFoundError,
    CaseLensError,
    ExportError,
    GatewayError,
    ImageSynthesisError,
    InvalidTransitionError,
    NoSourcesError,
)
from caselens_core.graph import PipelineConfig
from caselens_core.pipeline import CasePipeline, PipelineSnapshot, PipelineStage
from caselens_core.schemas.deck import Deck, Slide, SlideStyle
from caselens_core.schemas.document import DocumentSection
from caselens_core.schemas.sources import Source, SourceKind

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "CasePipeline",
    "PipelineConfig",
    "PipelineSnapshot",
    "PipelineStage",
    # Schemas
    "Source",
    "SourceKind",
    "DocumentSection",
    "Deck",
    "Slide",
    "SlideStyle",
    # Errors
    "CaseLensError",
    "InvalidTransitionError",
    "ArtifactNotFoundError",
    "GatewayError",
    "ImageSynthesisError",
    "ExportError",
    "NoSourcesError",
]
