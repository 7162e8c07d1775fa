"""Case analysis pipeline state machine."""

from caselens_core.pipeline.machine import CasePipeline
from caselens_core.pipeline.registry import SourceRegistry
from caselens_core.pipeline.state import (
    PipelineSnapshot,
    PipelineStage,
    SlidePreview,
    can_transition,
)

__all__ = [
    "CasePipeline",
    "PipelineSnapshot",
    "PipelineStage",
    "SlidePreview",
    "SourceRegistry",
    "can_transition",
]
