"""Tests for image reference helpers."""

import base64
from io import BytesIO

from caselens_core.utils.images import (
    decode_data_url,
    is_raster_image_ref,
    load_raster_image,
    to_data_url,
)


def _png_bytes(width: int = 30, height: int = 10) -> bytes:
    from PIL import Image

    buffer = BytesIO()
    Image.new("RGB", (width, height)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestRasterReferences:
    """Tests for raster candidate detection."""

    def test_data_url_is_raster(self) -> None:
        assert is_raster_image_ref("data:image/png;base64,AAAA")

    def test_remote_url_is_raster(self) -> None:
        assert is_raster_image_ref("https://example.org/logo.png")

    def test_svg_is_never_raster(self) -> None:
        """Vector references are excluded inline and remote."""
        assert not is_raster_image_ref("data:image/svg+xml;base64,PHN2Zz4=")
        assert not is_raster_image_ref("https://example.org/logo.svg")

    def test_other_references_rejected(self) -> None:
        assert not is_raster_image_ref(None)
        assert not is_raster_image_ref("")
        assert not is_raster_image_ref("file:///tmp/logo.png")
        assert not is_raster_image_ref("data:text/plain;base64,AAAA")


class TestLoadRasterImage:
    """Tests for resolving references into images."""

    def test_round_trip_data_url(self) -> None:
        """A PNG data URL resolves to its size and bytes."""
        data = _png_bytes()
        ref = to_data_url(data)

        assert decode_data_url(ref) == data
        image = load_raster_image(ref)

        assert image is not None
        assert (image.width, image.height) == (30, 10)
        assert image.aspect_ratio == 3.0

    def test_custom_loader_used_for_remote(self) -> None:
        """Remote references go through the supplied loader."""
        requested: list[str] = []

        def loader(ref: str) -> bytes:
            requested.append(ref)
            return _png_bytes(10, 20)

        image = load_raster_image("https://example.org/a.png", loader)

        assert requested == ["https://example.org/a.png"]
        assert image is not None
        assert image.aspect_ratio == 0.5

    def test_unreadable_bytes_skipped(self) -> None:
        ref = "data:image/png;base64," + base64.b64encode(b"garbage").decode()

        assert load_raster_image(ref) is None

    def test_failed_load_skipped(self) -> None:
        assert load_raster_image("https://example.org/a.png", lambda ref: None) is None
