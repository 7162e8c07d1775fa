"""Canvas geometry for slides.

Style positions are percentages; the deck is laid out on a wide
13.33 x 7.5 inch canvas. All boxes are returned in inches.
"""

from dataclasses import dataclass

from caselens_core.schemas.deck import Slide, SlideKind

CANVAS_WIDTH = 13.33
CANVAS_HEIGHT = 7.5

TITLE_BOX_WIDTH = 12.0
BODY_BOX_HEIGHT = 5.5
BODY_IMAGE_GAP = 0.5
IMAGE_BASE_WIDTH = 5.0
IMAGE_BASE_HEIGHT = 4.0
LOGO_SIZE = 1.0
LOGO_OFFSET_Y = 12.0  # percent above the title
AUTHORITY_LOGO_OFFSET_X = 22.0  # percent right of the company logo
SUBTITLE_OFFSET_Y = 18.0  # percent below the title


@dataclass(frozen=True)
class Box:
    """A rectangle in canvas inches."""

    x: float
    y: float
    width: float
    height: float | None = None


@dataclass(frozen=True)
class SlideGeometry:
    """Resolved placement of the parts of one slide."""

    title: Box
    body: Box
    image: Box | None = None
    subtitle: Box | None = None
    company_logo: Box | None = None
    authority_logo: Box | None = None


def percent_to_canvas(percent: float, extent: float) -> float:
    """Convert a 0-100 percentage of a canvas extent to inches."""
    return (percent / 100.0) * extent


def compute_slide_geometry(slide: Slide) -> SlideGeometry:
    """Compute title, body, image and logo boxes for a slide."""
    style = slide.style
    title_x = percent_to_canvas(style.title_x_pos, CANVAS_WIDTH)
    title_y = percent_to_canvas(style.title_y_pos, CANVAS_HEIGHT)
    body_x = percent_to_canvas(style.body_x_pos, CANVAS_WIDTH)
    body_y = percent_to_canvas(style.body_y_pos, CANVAS_HEIGHT)
    title = Box(title_x, title_y, TITLE_BOX_WIDTH)

    if slide.kind == SlideKind.TITLE:
        logo_y = max(
            0.0, percent_to_canvas(style.title_y_pos - LOGO_OFFSET_Y, CANVAS_HEIGHT)
        )
        return SlideGeometry(
            title=title,
            body=Box(body_x, body_y, TITLE_BOX_WIDTH, BODY_BOX_HEIGHT),
            subtitle=Box(
                title_x,
                percent_to_canvas(style.title_y_pos + SUBTITLE_OFFSET_Y, CANVAS_HEIGHT),
                10.0,
            ),
            company_logo=Box(title_x, logo_y, LOGO_SIZE, LOGO_SIZE),
            authority_logo=Box(
                percent_to_canvas(
                    style.title_x_pos + AUTHORITY_LOGO_OFFSET_X, CANVAS_WIDTH
                ),
                logo_y,
                LOGO_SIZE,
                LOGO_SIZE,
            ),
        )

    image = None
    body_width = TITLE_BOX_WIDTH
    if slide.image_url:
        image_x = percent_to_canvas(style.image_x_pos, CANVAS_WIDTH)
        image = Box(
            image_x,
            percent_to_canvas(style.image_y_pos, CANVAS_HEIGHT),
            IMAGE_BASE_WIDTH * style.image_scale,
            IMAGE_BASE_HEIGHT * style.image_scale,
        )
        body_width = max(1.0, image_x - body_x - BODY_IMAGE_GAP)

    return SlideGeometry(
        title=title,
        body=Box(body_x, body_y, body_width, BODY_BOX_HEIGHT),
        image=image,
    )


def fit_contain(box: Box, aspect_ratio: float) -> Box:
    """Shrink a box to the given aspect ratio, centred, like CSS ``contain``."""
    height = box.height if box.height is not None else box.width / aspect_ratio
    if box.width / height > aspect_ratio:
        fitted_w, fitted_h = height * aspect_ratio, height
    else:
        fitted_w, fitted_h = box.width, box.width / aspect_ratio
    return Box(
        box.x + (box.width - fitted_w) / 2,
        box.y + (height - fitted_h) / 2,
        fitted_w,
        fitted_h,
    )
