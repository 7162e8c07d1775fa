"""Deterministic slide layout shared by preview and export."""

from caselens_core.layout.geometry import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    Box,
    SlideGeometry,
    compute_slide_geometry,
    percent_to_canvas,
)
from caselens_core.layout.sizing import RenderSizes, compute_render_sizes

__all__ = [
    "CANVAS_HEIGHT",
    "CANVAS_WIDTH",
    "Box",
    "SlideGeometry",
    "compute_slide_geometry",
    "percent_to_canvas",
    "RenderSizes",
    "compute_render_sizes",
]
