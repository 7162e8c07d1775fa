"""Image reference helpers shared by image synthesis and the deck exporter."""

import base64
import binascii
import re
from collections.abc import Callable
from dataclasses import dataclass
from io import BytesIO

import httpx

from caselens_core.utils.logging import get_logger

logger = get_logger(__name__)

_DATA_URL_RE = re.compile(
    r"^data:(?P<mime>image/[a-zA-Z0-9.+-]+)(?P<params>(;[^,;]+)*?);base64,(?P<data>.*)$",
    re.DOTALL,
)

# Default timeout for remote logo downloads (seconds)
DEFAULT_FETCH_TIMEOUT = 10.0

ImageLoader = Callable[[str], bytes | None]


@dataclass(frozen=True)
class RasterImage:
    """Decoded raster image ready for placement."""

    data: bytes
    width: int
    height: int

    @property
    def aspect_ratio(self) -> float:
        return self.width / self.height if self.height else 1.0


def to_data_url(data: bytes, mime_type: str = "image/png") -> str:
    """Encode image bytes as a ``data:`` URL."""
    return f"data:{mime_type};base64,{base64.b64encode(data).decode('ascii')}"


def is_vector_reference(ref: str) -> bool:
    """Return True for SVG references, inline or remote."""
    lowered = ref.lower()
    return lowered.startswith("data:image/svg") or ".svg" in lowered


def is_raster_image_ref(ref: str | None) -> bool:
    """Check whether an image reference can be resolved to raster bytes.

    Only ``data:image/...;base64`` URLs and ``http(s)`` URLs qualify, and
    vector images are always excluded.
    """
    if not ref:
        return False
    if is_vector_reference(ref):
        return False
    if ref.startswith("data:"):
        return _DATA_URL_RE.match(ref) is not None
    return ref.startswith("http://") or ref.startswith("https://")


def decode_data_url(ref: str) -> bytes | None:
    """Decode the payload of a base64 ``data:image`` URL."""
    match = _DATA_URL_RE.match(ref)
    if not match:
        return None
    try:
        return base64.b64decode(match.group("data"), validate=False)
    except (binascii.Error, ValueError) as e:
        logger.warning(f"Could not decode data URL: {e}")
        return None


def fetch_remote_image(url: str, timeout: float = DEFAULT_FETCH_TIMEOUT) -> bytes | None:
    """Download image bytes from an http(s) URL, returning None on failure."""
    try:
        response = httpx.get(url, timeout=timeout, follow_redirects=True)
        response.raise_for_status()
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch image {url[:120]}: {e}")
        return None

    content_type = response.headers.get("content-type", "")
    if "svg" in content_type:
        logger.info(f"Skipping vector image {url[:120]}")
        return None
    return response.content


def default_image_loader(ref: str) -> bytes | None:
    """Resolve an image reference to bytes (data URL or remote download)."""
    if ref.startswith("data:"):
        return decode_data_url(ref)
    return fetch_remote_image(ref)


def load_raster_image(
    ref: str | None,
    loader: ImageLoader | None = None,
) -> RasterImage | None:
    """Resolve an image reference into a raster image.

    References that are not raster candidates, that cannot be loaded, or
    whose bytes Pillow cannot open are skipped and yield None.

    Args:
        ref: Image reference (data URL or http(s) URL)
        loader: Optional callable resolving a reference to bytes

    Returns:
        RasterImage or None when the reference should be skipped
    """
    if not is_raster_image_ref(ref):
        if ref:
            logger.info(f"Skipping non-raster image reference: {ref[:60]}")
        return None

    data = (loader or default_image_loader)(ref)
    if not data:
        return None

    from PIL import Image, UnidentifiedImageError

    try:
        with Image.open(BytesIO(data)) as image:
            width, height = image.size
    except (UnidentifiedImageError, OSError) as e:
        logger.warning(f"Image reference is not a readable raster image: {e}")
        return None

    return RasterImage(data=data, width=width, height=height)
