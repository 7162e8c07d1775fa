"""Volume based font sizing for slides.

Preview and export both call :func:`compute_render_sizes`, so a slide is
exported with exactly the sizes it was previewed with.
"""

from dataclasses import dataclass

from caselens_core.schemas.deck import (
    MAX_BODY_FONT_SIZE,
    MAX_TITLE_FONT_SIZE,
    Slide,
    SlideKind,
)

SUMMARY_MAX_TITLE = 28.0
SUMMARY_MAX_BODY = 18.0

# Heavy slides: shrink both title and body
HEAVY_CHARS = 600
HEAVY_POINTS = 7
HEAVY_BODY_FACTOR = 0.85
HEAVY_TITLE_FACTOR = 0.9
HEAVY_MIN_BODY = 14.0
HEAVY_MIN_TITLE = 24.0

# Dense slides: shrink the body only
DENSE_CHARS = 400
DENSE_POINTS = 5
DENSE_BODY_FACTOR = 0.9
DENSE_MIN_BODY = 16.0


@dataclass(frozen=True)
class RenderSizes:
    """Font sizes (points) a slide is rendered with."""

    title_size: float
    body_size: float


def content_volume(slide: Slide) -> tuple[int, int]:
    """Return ``(total trimmed characters, point count)`` for a slide."""
    total_chars = sum(len(point.text.strip()) for point in slide.points)
    return total_chars, len(slide.points)


def compute_render_sizes(slide: Slide) -> RenderSizes:
    """Compute title and body font sizes from style and content volume.

    Strategic summaries are capped at 28/18 and never shrink by volume.
    Other slides shrink when they carry more than 600 characters or 7
    points (body x0.85 floored at 14, title x0.9 floored at 24), or more
    than 400 characters or 5 points (body x0.9 floored at 16).
    """
    title_size = min(slide.style.title_font_size, MAX_TITLE_FONT_SIZE)
    body_size = min(slide.style.body_font_size, MAX_BODY_FONT_SIZE)

    if slide.kind == SlideKind.STRATEGIC_SUMMARY:
        return RenderSizes(
            title_size=min(title_size, SUMMARY_MAX_TITLE),
            body_size=min(body_size, SUMMARY_MAX_BODY),
        )

    total_chars, point_count = content_volume(slide)

    if total_chars > HEAVY_CHARS or point_count > HEAVY_POINTS:
        body_size = max(HEAVY_MIN_BODY, body_size * HEAVY_BODY_FACTOR)
        title_size = max(HEAVY_MIN_TITLE, title_size * HEAVY_TITLE_FACTOR)
    elif total_chars > DENSE_CHARS or point_count > DENSE_POINTS:
        body_size = max(DENSE_MIN_BODY, body_size * DENSE_BODY_FACTOR)

    return RenderSizes(title_size=title_size, body_size=body_size)
