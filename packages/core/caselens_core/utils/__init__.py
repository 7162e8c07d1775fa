"""Utility functions."""

from caselens_core.utils.images import (
    RasterImage,
    is_raster_image_ref,
    load_raster_image,
    to_data_url,
)
from caselens_core.utils.logging import get_logger, log_exceptions
from caselens_core.utils.pdf import PDFValidationError, is_pdf, validate_pdf
from caselens_core.utils.retry import RateLimitError, with_retry

__all__ = [
    "get_logger",
    "log_exceptions",
    "PDFValidationError",
    "is_pdf",
    "validate_pdf",
    "RasterImage",
    "is_raster_image_ref",
    "load_raster_image",
    "to_data_url",
    "RateLimitError",
    "with_retry",
]
