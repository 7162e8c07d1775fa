"""Slide deck schemas."""

import re
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator

# Font size clamps applied whenever a style is set
MAX_TITLE_FONT_SIZE = 32.0
MAX_BODY_FONT_SIZE = 20.0
MIN_TITLE_FONT_SIZE = 24.0
MIN_BODY_FONT_SIZE = 14.0

_HEX_COLOR_RE = re.compile(r"^#?([0-9a-fA-F]{6})$")


def normalize_hex_color(value: str | None) -> str | None:
    """Return ``#RRGGBB`` in upper case, or None when value is not a hex colour."""
    if not value:
        return None
    match = _HEX_COLOR_RE.match(value.strip())
    if not match:
        return None
    return f"#{match.group(1).upper()}"


class SlideKind(str, Enum):
    """Narrative role of a slide."""

    TITLE = "title"
    TOC = "toc"
    STRATEGIC_SUMMARY = "strategic_summary"
    CONTENT = "content"
    DPO_TECHNICAL = "dpo_technical"
    PM_TAKEAWAY = "pm_takeaway"


class StyledPoint(BaseModel):
    """One bullet or paragraph of slide content."""

    text: str = Field(..., description="Point text, never blank")
    bold: bool = Field(False, description="Emphasize the whole point")
    color: str | None = Field(None, description="Highlight colour as #RRGGBB")
    font_size: float | None = Field(None, gt=0, description="Explicit font size")
    is_heading: bool = Field(False, description="Render as a heading, not a bullet")

    @field_validator("text")
    @classmethod
    def _text_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("point text must not be empty")
        return value

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, value: Any) -> str | None:
        if value is None or not isinstance(value, str):
            return None
        return normalize_hex_color(value)


class SlideStyle(BaseModel):
    """Placement and sizing parameters for one slide.

    Positions are percentages of the canvas, ``image_scale`` and
    ``line_spacing`` are multipliers. Font sizes are clamped to
    [24, 32] (title) and [14, 20] (body) on every assignment.
    """

    background_color: str = "#FFFFFF"
    text_color: str = "#1E293B"
    accent_color: str = "#4F46E5"
    title_font_size: float = Field(32.0, gt=0)
    body_font_size: float = Field(18.0, gt=0)
    title_y_pos: float = Field(10.0, ge=0, le=100)
    title_x_pos: float = Field(5.0, ge=0, le=100)
    body_y_pos: float = Field(25.0, ge=0, le=100)
    body_x_pos: float = Field(5.0, ge=0, le=100)
    image_x_pos: float = Field(65.0, ge=0, le=100)
    image_y_pos: float = Field(25.0, ge=0, le=100)
    image_scale: float = Field(1.0, gt=0, le=3.0)
    line_spacing: float = Field(1.5, gt=0, le=3.0)

    @field_validator("background_color", "text_color", "accent_color")
    @classmethod
    def _valid_color(cls, value: str) -> str:
        normalized = normalize_hex_color(value)
        if normalized is None:
            raise ValueError(f"invalid hex colour: {value!r}")
        return normalized

    @field_validator("title_font_size")
    @classmethod
    def _clamp_title(cls, value: float) -> float:
        return max(MIN_TITLE_FONT_SIZE, min(value, MAX_TITLE_FONT_SIZE))

    @field_validator("body_font_size")
    @classmethod
    def _clamp_body(cls, value: float) -> float:
        return max(MIN_BODY_FONT_SIZE, min(value, MAX_BODY_FONT_SIZE))


def merge_style(style: SlideStyle, partial: dict[str, Any]) -> SlideStyle:
    """Merge a partial update into a style, re-running validation and clamps.

    Raises:
        ValueError: If ``partial`` names a field SlideStyle does not have
        pydantic.ValidationError: If a merged value is out of range
    """
    unknown = set(partial) - set(SlideStyle.model_fields)
    if unknown:
        raise ValueError(f"Unknown style fields: {', '.join(sorted(unknown))}")
    return SlideStyle.model_validate({**style.model_dump(), **partial})


class Slide(BaseModel):
    """A generated slide."""

    id: str = Field(..., description="Identifier unique within the deck")
    title: str = Field(..., description="Slide title")
    kind: SlideKind = Field(SlideKind.CONTENT, description="Narrative role")
    points: list[StyledPoint] = Field(default_factory=list)
    style: SlideStyle = Field(default_factory=SlideStyle)
    image_url: str | None = Field(None, description="Illustration reference")
    image_loading: bool = Field(False, description="True while synthesizing")
    company_name: str | None = None
    authority_name: str | None = None
    company_logo_url: str | None = None
    authority_logo_url: str | None = None
    authority_opinions: list[str] = Field(default_factory=list)

    def content_text(self) -> str:
        """Join point texts, used as context for illustration prompts."""
        return ". ".join(point.text for point in self.points)


class Deck(BaseModel):
    """A generated presentation."""

    presentation_title: str
    subtitle: str = ""
    slides: list[Slide] = Field(default_factory=list)
