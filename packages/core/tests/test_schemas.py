"""Tests for source, dossier and deck schemas."""

import base64

import pytest
from pydantic import ValidationError

from caselens_core.schemas.deck import (
    SlideStyle,
    StyledPoint,
    merge_style,
    normalize_hex_color,
)
from caselens_core.schemas.document import DocumentSection
from caselens_core.schemas.sources import Source, SourceKind


class TestSource:
    """Tests for source creation."""

    def test_url_source(self) -> None:
        """URL sources keep the trimmed URL as payload and name."""
        source = Source.from_url("  https://example.org/ruling  ")

        assert source.kind == SourceKind.URL
        assert source.payload == "https://example.org/ruling"
        assert source.display_name == "https://example.org/ruling"
        assert not source.is_binary

    def test_pdf_file_is_base64(self) -> None:
        """PDF uploads are stored base64 encoded with their MIME type."""
        data = b"%PDF-1.7\nbinary\n%%EOF"
        source = Source.from_file("decision.pdf", data)

        assert source.is_binary
        assert source.mime_type == "application/pdf"
        assert base64.b64decode(source.payload) == data

    def test_text_file_keeps_text(self) -> None:
        """UTF-8 uploads keep their text."""
        source = Source.from_file("notes.txt", "Décision".encode("utf-8"))

        assert source.payload == "Décision"
        assert source.mime_type == "text/plain"
        assert not source.is_binary

    def test_undecodable_file_is_binary(self) -> None:
        """Non UTF-8 uploads fall back to base64."""
        source = Source.from_file("scan.bin", b"\xff\xfe\x00\x81")

        assert source.is_binary
        assert source.mime_type == "application/octet-stream"

    def test_ids_are_unique(self) -> None:
        """Each source gets its own id."""
        first = Source.from_url("https://example.org/a")
        second = Source.from_url("https://example.org/a")

        assert first.id != second.id

    def test_blank_payload_rejected(self) -> None:
        """Sources must carry content."""
        with pytest.raises(ValidationError):
            Source.from_url("   ")

    def test_sources_are_immutable(self) -> None:
        """Sources cannot change after creation."""
        source = Source.from_url("https://example.org/a")

        with pytest.raises(ValidationError):
            source.payload = "https://example.org/b"


class TestDocumentSection:
    """Tests for dossier sections."""

    def test_blank_title_rejected(self) -> None:
        """Section titles must not be empty."""
        with pytest.raises(ValidationError):
            DocumentSection(title="  ", body="text")

    def test_empty_body_allowed(self) -> None:
        """A section body may be cleared by an edit."""
        assert DocumentSection(title="Summary", body="").body == ""


class TestStyledPoint:
    """Tests for slide points."""

    def test_blank_text_rejected(self) -> None:
        """Whitespace-only points are invalid."""
        with pytest.raises(ValidationError):
            StyledPoint(text="   ")

    def test_color_normalized(self) -> None:
        """Hex colours are upper-cased with a leading hash."""
        assert StyledPoint(text="a", color="e11d48").color == "#E11D48"

    def test_invalid_color_dropped(self) -> None:
        """Anything that is not a hex colour is ignored."""
        assert StyledPoint(text="a", color="crimson").color is None


class TestSlideStyle:
    """Tests for slide styles."""

    def test_defaults(self) -> None:
        """Default style matches the deck template."""
        style = SlideStyle()

        assert style.background_color == "#FFFFFF"
        assert style.title_font_size == 32
        assert style.body_font_size == 18
        assert style.title_y_pos == 10
        assert style.image_x_pos == 65
        assert style.image_scale == 1.0
        assert style.line_spacing == 1.5

    def test_font_sizes_clamped(self) -> None:
        """Font sizes are clamped into their bounds."""
        style = SlideStyle(title_font_size=99, body_font_size=2)

        assert style.title_font_size == 32
        assert style.body_font_size == 14

    def test_positions_must_be_percentages(self) -> None:
        """Positions outside 0-100 are rejected."""
        with pytest.raises(ValidationError):
            SlideStyle(title_x_pos=120)

    def test_invalid_background_rejected(self) -> None:
        """Style colours must be hex colours."""
        with pytest.raises(ValidationError):
            SlideStyle(background_color="not-a-colour")

    def test_merge_keeps_other_fields(self) -> None:
        """Merging only replaces the named fields."""
        style = SlideStyle(accent_color="#000000")

        merged = merge_style(style, {"image_scale": 2.0})

        assert merged.image_scale == 2.0
        assert merged.accent_color == "#000000"
        assert style.image_scale == 1.0

    def test_merge_is_idempotent(self) -> None:
        """Applying the same partial twice gives the same style."""
        partial = {"body_font_size": 25, "body_y_pos": 30}

        once = merge_style(SlideStyle(), partial)
        twice = merge_style(once, partial)

        assert once == twice
        assert once.body_font_size == 20

    def test_merge_rejects_unknown_fields(self) -> None:
        """Unknown style keys are an error."""
        with pytest.raises(ValueError, match="Unknown style fields"):
            merge_style(SlideStyle(), {"shadow": True})


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("#4f46e5", "#4F46E5"),
        ("4F46E5", "#4F46E5"),
        ("#fff", None),
        ("", None),
        (None, None),
    ],
)
def test_normalize_hex_color(value: str | None, expected: str | None) -> None:
    """Only six digit hex colours are accepted."""
    assert normalize_hex_color(value) == expected
