"""PowerPoint export for the slide deck.

Sizes come from :func:`compute_render_sizes` and positions from
:func:`compute_slide_geometry`, the same functions the preview uses.
"""

from io import BytesIO
from pathlib import Path
from typing import Any

from caselens_core.errors import ExportError
from caselens_core.layout.geometry import (
    CANVAS_HEIGHT,
    CANVAS_WIDTH,
    Box,
    compute_slide_geometry,
    fit_contain,
)
from caselens_core.layout.sizing import RenderSizes, compute_render_sizes
from caselens_core.schemas.deck import Deck, Slide, SlideKind
from caselens_core.utils.images import ImageLoader, load_raster_image
from caselens_core.utils.logging import get_logger, log_exceptions

logger = get_logger(__name__)

FOOTER_TEXT = "CaseLens Pro | AI Strategic Synthesis"
SUMMARY_KEYWORDS = ("What happened?", "Why did it happen?", "How do we avoid this?")
BULLET = "• "

_BLANK_LAYOUT_INDEX = 6
_DEFAULT_TEXT_HEIGHT = 1.2


def _rgb(hex_color: str) -> Any:
    from pptx.dml.color import RGBColor

    return RGBColor.from_string(hex_color.lstrip("#").upper())


def _text_frame(pptx_slide: Any, box: Box, height: float | None = None) -> Any:
    """Add a word-wrapping, top-anchored text box and return its frame."""
    from pptx.enum.text import MSO_ANCHOR
    from pptx.util import Inches

    shape = pptx_slide.shapes.add_textbox(
        Inches(box.x),
        Inches(box.y),
        Inches(box.width),
        Inches(height or box.height or _DEFAULT_TEXT_HEIGHT),
    )
    frame = shape.text_frame
    frame.word_wrap = True
    frame.vertical_anchor = MSO_ANCHOR.TOP
    return frame


def _add_run(
    paragraph: Any,
    text: str,
    size: float,
    color: str,
    bold: bool = False,
    italic: bool = False,
) -> Any:
    from pptx.util import Pt

    run = paragraph.add_run()
    run.text = text
    run.font.size = Pt(size)
    run.font.bold = bold
    run.font.italic = italic
    run.font.color.rgb = _rgb(color)
    return run


def _next_paragraph(frame: Any, first: bool) -> Any:
    return frame.paragraphs[0] if first else frame.add_paragraph()


def _place_image(
    pptx_slide: Any,
    ref: str | None,
    box: Box,
    loader: ImageLoader | None,
) -> bool:
    """Place a raster image contained in ``box``; skip anything unresolvable."""
    from pptx.util import Inches

    image = load_raster_image(ref, loader)
    if image is None:
        return False
    fitted = fit_contain(box, image.aspect_ratio)
    try:
        pptx_slide.shapes.add_picture(
            BytesIO(image.data),
            Inches(fitted.x),
            Inches(fitted.y),
            Inches(fitted.width),
            Inches(fitted.height),
        )
    except Exception as e:
        logger.warning(f"Could not embed image: {e}")
        return False
    return True


def _render_title_slide(
    pptx_slide: Any,
    slide: Slide,
    deck: Deck,
    sizes: RenderSizes,
    loader: ImageLoader | None,
) -> None:
    geometry = compute_slide_geometry(slide)
    style = slide.style

    if geometry.company_logo:
        _place_image(pptx_slide, slide.company_logo_url, geometry.company_logo, loader)
    if geometry.authority_logo:
        _place_image(
            pptx_slide, slide.authority_logo_url, geometry.authority_logo, loader
        )

    frame = _text_frame(pptx_slide, geometry.title, height=1.5)
    paragraph = frame.paragraphs[0]
    headline_size = sizes.title_size + 10
    _add_run(paragraph, slide.company_name or "Organization", headline_size, style.text_color, bold=True)
    _add_run(paragraph, " vs ", headline_size, style.accent_color, italic=True)
    _add_run(paragraph, slide.authority_name or "Regulator", headline_size, style.text_color, bold=True)

    if geometry.subtitle and deck.subtitle:
        frame = _text_frame(pptx_slide, geometry.subtitle, height=1.0)
        _add_run(frame.paragraphs[0], deck.subtitle, 24, style.accent_color)


def _render_summary_slide(pptx_slide: Any, slide: Slide, sizes: RenderSizes) -> None:
    from pptx.enum.shapes import MSO_SHAPE
    from pptx.util import Inches, Pt

    geometry = compute_slide_geometry(slide)
    style = slide.style

    frame = _text_frame(pptx_slide, geometry.title)
    _add_run(frame.paragraphs[0], slide.title, sizes.title_size, style.text_color, bold=True)

    frame = _text_frame(pptx_slide, Box(0.5, 1.8, 7.0, 5.2))
    first = True
    for point in slide.points:
        keyword = next((k for k in SUMMARY_KEYWORDS if point.text.startswith(k)), None)
        if keyword:
            paragraph = _next_paragraph(frame, first)
            paragraph.line_spacing = style.line_spacing
            _add_run(paragraph, keyword, sizes.body_size + 4, "#2563EB", bold=True)
            first = False
            remainder = point.text[len(keyword):].strip()
            if not remainder:
                continue
            text = remainder
        else:
            text = point.text
        paragraph = _next_paragraph(frame, first)
        paragraph.line_spacing = style.line_spacing
        _add_run(paragraph, text, sizes.body_size, point.color or style.text_color, bold=point.bold)
        first = False

    panel = pptx_slide.shapes.add_shape(
        MSO_SHAPE.RECTANGLE, Inches(7.8), Inches(1.4), Inches(5.2), Inches(5.7)
    )
    panel.fill.solid()
    panel.fill.fore_color.rgb = _rgb("#EFF6FF")
    panel.line.color.rgb = _rgb("#DBEAFE")
    panel.line.width = Pt(1)

    frame = _text_frame(pptx_slide, Box(8.0, 1.6, 4.8, 0.5))
    _add_run(frame.paragraphs[0], "AUTHORITY OPINIONS", 16, "#1E40AF", bold=True)

    frame = _text_frame(pptx_slide, Box(8.0, 2.1, 4.8, 4.7))
    for i, opinion in enumerate(slide.authority_opinions):
        paragraph = _next_paragraph(frame, i == 0)
        paragraph.line_spacing = 1.2
        _add_run(paragraph, BULLET + opinion.strip(), sizes.body_size - 4, "#1E3A8A")


def _render_content_slide(
    pptx_slide: Any,
    slide: Slide,
    sizes: RenderSizes,
    loader: ImageLoader | None,
) -> None:
    geometry = compute_slide_geometry(slide)
    style = slide.style

    frame = _text_frame(pptx_slide, geometry.title)
    _add_run(frame.paragraphs[0], slide.title, sizes.title_size, style.text_color, bold=True)

    frame = _text_frame(pptx_slide, geometry.body)
    for i, point in enumerate(slide.points):
        paragraph = _next_paragraph(frame, i == 0)
        paragraph.line_spacing = style.line_spacing
        size = point.font_size or (
            sizes.body_size + 4 if point.is_heading else sizes.body_size
        )
        text = point.text if point.is_heading else BULLET + point.text
        _add_run(
            paragraph,
            text,
            size,
            point.color or style.text_color,
            bold=point.bold or point.is_heading,
        )

    if geometry.image:
        _place_image(pptx_slide, slide.image_url, geometry.image, loader)


def _render_slide(
    presentation: Any,
    slide: Slide,
    deck: Deck,
    loader: ImageLoader | None,
) -> None:
    pptx_slide = presentation.slides.add_slide(
        presentation.slide_layouts[_BLANK_LAYOUT_INDEX]
    )
    background = pptx_slide.background.fill
    background.solid()
    background.fore_color.rgb = _rgb(slide.style.background_color)

    sizes = compute_render_sizes(slide)
    if slide.kind == SlideKind.TITLE:
        _render_title_slide(pptx_slide, slide, deck, sizes, loader)
    elif slide.kind == SlideKind.STRATEGIC_SUMMARY:
        _render_summary_slide(pptx_slide, slide, sizes)
    else:
        _render_content_slide(pptx_slide, slide, sizes, loader)

    frame = _text_frame(pptx_slide, Box(0.5, 7.1, 4.0, 0.3))
    _add_run(frame.paragraphs[0], FOOTER_TEXT, 9, "#94A3B8")


@log_exceptions(logger)
def export_pptx(
    deck: Deck,
    output: str | Path | None = None,
    image_loader: ImageLoader | None = None,
) -> bytes:
    """Export the deck as a wide-layout PowerPoint file.

    Args:
        deck: Deck to export
        output: Optional output path
        image_loader: Optional callable resolving image references to bytes;
            defaults to decoding data URLs and downloading http(s) URLs

    Returns:
        PPTX file bytes

    Raises:
        ExportError: If the presentation cannot be built or written
    """
    from pptx import Presentation
    from pptx.util import Inches

    logger.info(
        f"Exporting deck '{deck.presentation_title}' ({len(deck.slides)} slides)"
    )
    try:
        presentation = Presentation()
        presentation.slide_width = Inches(CANVAS_WIDTH)
        presentation.slide_height = Inches(CANVAS_HEIGHT)

        for slide in deck.slides:
            _render_slide(presentation, slide, deck, image_loader)

        buffer = BytesIO()
        presentation.save(buffer)
        content = buffer.getvalue()
        if output:
            Path(output).write_bytes(content)
    except Exception as e:
        raise ExportError(f"PPTX export failed: {e}") from e

    logger.info(f"Created PPTX ({len(content)} bytes)")
    return content
